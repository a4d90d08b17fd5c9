"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables with
the ``RBAC_`` prefix (e.g. ``RBAC_RULE_PATH_POLICY=target_only``).

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from rbac.core.config import get_settings

    settings = get_settings()
    if settings.hierarchy_cache_enabled:
        ...
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rbac.core.enums import Environment
from rbac.domain.enums import RulePathPolicy

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """
    Engine settings (flat structure).

    Configuration precedence:
        1. Environment variables (``RBAC_*``)
        2. Default values

    Returns:
        Settings: Engine configuration loaded from environment.
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Authorization semantics
    rule_path_policy: RulePathPolicy = Field(
        default=RulePathPolicy.ALL_ALONG_PATH,
        description="Which ruled items on a granting path must pass "
        "(all_along_path or target_only)",
    )
    check_timeout_seconds: float | None = Field(
        default=None,
        description="Default deadline for a single permission check. "
        "None means no engine-imposed deadline.",
    )

    # Optional hierarchy cache (Redis)
    hierarchy_cache_enabled: bool = Field(
        default=False,
        description="Cache child lists of the hierarchy in Redis",
    )
    hierarchy_cache_ttl_seconds: int = Field(
        default=300,
        description="TTL for cached child lists in seconds",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (e.g., redis://host:port/db)",
    )

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name (any case).

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not one of the standard five.
        """
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}"
            )
        return level

    @field_validator("check_timeout_seconds")
    @classmethod
    def validate_check_timeout(cls, v: float | None) -> float | None:
        """Reject non-positive deadlines."""
        if v is not None and v <= 0:
            raise ValueError("check_timeout_seconds must be greater than 0")
        return v

    @field_validator("hierarchy_cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        """Reject non-positive TTLs."""
        if v <= 0:
            raise ValueError("hierarchy_cache_ttl_seconds must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_cache_backend(self) -> "Settings":
        """Require a Redis URL when the hierarchy cache is enabled."""
        if self.hierarchy_cache_enabled and not self.redis_url:
            raise ValueError("redis_url is required when hierarchy_cache_enabled is true")
        return self

    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
