"""Custom exceptions for the I/O edges of the engine.

The pure calendar and eligibility components never raise; these are used by
the provider client and configuration loading, and are caught at the call
site so a scheduled batch keeps running.
"""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception with structured error details."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a log/JSON friendly dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }


class ExternalServiceError(AppException):
    """External service error."""

    error_code = "EXTERNAL_SERVICE_ERROR"
    message = "External service temporarily unavailable"


class ConfigurationError(AppException):
    """Missing or invalid configuration."""

    error_code = "CONFIGURATION_ERROR"
    message = "Invalid configuration"
