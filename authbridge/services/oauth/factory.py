"""Factory functions for creating configured OAuth clients and services."""
import logging
from typing import Any, Iterable

from authbridge.core.config import settings
from authbridge.core.exceptions import ConfigurationError, ProviderNotSupportedError

from .providers import GitHubOAuth2Client, GoogleOAuth2Client, OAuth2Client
from .service import OAuthService

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[OAuth2Client]] = {
    "google": GoogleOAuth2Client,
    "github": GitHubOAuth2Client,
}


def _credentials(provider: str) -> tuple[str | None, str | None]:
    prefix = provider.upper()
    return (
        getattr(settings, f"{prefix}_CLIENT_ID", None),
        getattr(settings, f"{prefix}_CLIENT_SECRET", None),
    )


def callback_url(provider: str) -> str:
    return f"{settings.BACKEND_URL}/auth/oauth/{provider}/callback"


def available_providers() -> list[str]:
    """Names of registered providers whose credentials are configured."""
    return [name for name in PROVIDERS if all(_credentials(name))]


def create_oauth_client(
    provider: str,
    state: dict[str, Any] | None = None,
    scopes: Iterable[str] | None = None,
    **kwargs: Any,
) -> OAuth2Client:
    """
    Build a client for one authentication attempt.

    Args:
        provider: Provider identifier (e.g., "google")
        state: Caller context to round-trip through the redirect
        scopes: Scopes requested on top of the provider defaults
        **kwargs: Passed through to the client (e.g. ``transport``)

    Raises:
        ProviderNotSupportedError: If no adapter exists for ``provider``
        ConfigurationError: If the provider's credentials are missing
    """
    client_cls = PROVIDERS.get(provider)
    if client_cls is None:
        raise ProviderNotSupportedError(provider)

    client_id, client_secret = _credentials(provider)
    if not client_id or not client_secret:
        logger.warning(f"{provider} OAuth not configured (missing client ID/secret)")
        raise ConfigurationError(f"{provider.upper()}_CLIENT_ID/{provider.upper()}_CLIENT_SECRET")

    return client_cls(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=callback_url(provider),
        state=state,
        scopes=scopes,
        **kwargs,
    )


def create_oauth_service(state: dict[str, Any] | None = None, **kwargs: Any) -> OAuthService:
    """
    Factory function to create a configured OAuth service.

    Automatically registers every provider that has credentials.

    Args:
        state: Caller context shared by all registered clients
        **kwargs: Passed through to each client

    Returns:
        Configured OAuthService instance
    """
    service = OAuthService()
    for name in PROVIDERS:
        if name not in available_providers():
            logger.debug(f"{name} OAuth not configured, skipping")
            continue
        service.register_provider(name, create_oauth_client(name, state=state, **kwargs))
    return service
