"""OAuth service exceptions."""


class OAuthProviderError(Exception):
    """Raised when OAuth provider communication fails."""


class ProviderRequestError(OAuthProviderError):
    """Raised when a provider call fails at the HTTP or transport level.

    ``status_code`` is the provider's HTTP status (>= 400), or 0 when no
    response was received at all (DNS, TLS, connection reset, timeout).
    ``body`` is the raw response body and may be empty.
    """

    def __init__(self, body: str, status_code: int, message: str | None = None):
        self.body = body
        self.status_code = status_code
        super().__init__(message or f"Provider request failed with status {status_code}: {body}")


class OAuthTokenError(OAuthProviderError):
    """Raised when token exchange yields no usable token."""


class OAuthUserInfoError(OAuthProviderError):
    """Raised when the provider returns no usable identity."""
