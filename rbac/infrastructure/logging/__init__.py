"""Logging adapters implementing LoggerProtocol."""

from rbac.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
