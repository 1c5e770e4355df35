"""Configuration exceptions."""

from typing import Any

from .base import CodeownerInsightError
from .taxonomy import ErrorCode


class ConfigurationError(CodeownerInsightError):
    """Base class for configuration-related errors."""

    code = ErrorCode.CI500


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    code = ErrorCode.CI501

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
