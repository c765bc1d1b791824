"""Application exception hierarchy for AuthBridge.

Every error the library raises on purpose (outside the provider HTTP
channel) derives from AuthBridgeException so callers can map it to a
response in one place.

Error codes follow pattern: [CATEGORY][NUMBER]
- OAU: OAuth client errors (100-199)
- SYS: System errors (400-499)
"""

from __future__ import annotations

from typing import Any


class AuthBridgeException(Exception):
    """Base exception for all AuthBridge application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with a message and metadata.

        Args:
            message: Human readable error message
            code: Unique error code (e.g., "OAU100")
            status_code: HTTP status code the caller should surface
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


# ============================================================================
# OAUTH ERRORS (OAU100-199)
# ============================================================================

class ProviderNotSupportedError(AuthBridgeException):
    """No OAuth adapter is registered under the requested name."""

    def __init__(self, provider: str):
        super().__init__(
            message=f"OAuth provider '{provider}' is not supported",
            code="OAU100",
            status_code=404,
            details={"provider": provider},
        )


# ============================================================================
# SYSTEM ERRORS (SYS400-499)
# ============================================================================

class ConfigurationError(AuthBridgeException):
    """Application configuration is invalid or missing."""

    def __init__(self, parameter: str):
        message = f"Configuration error: {parameter} is not configured properly"
        super().__init__(
            message=message,
            code="SYS401",
            status_code=500,
            details={"parameter": parameter},
        )
