"""Result types for railway-oriented programming.

Engine and adapter operations that can fail return a Result instead of
raising. Callers branch on the variant, which keeps "access denied"
(``Success(value=False)``) visibly distinct from "the check could not be
decided" (``Failure(error=...)``).

Usage:
    result = await manager.check_permission("alice", "updateProfile")
    match result:
        case Success(value=True):
            ...  # allowed
        case Success(value=False):
            ...  # denied
        case Failure(error=error):
            ...  # undecidable (rule fault, backend down, cancelled)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
