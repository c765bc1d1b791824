"""OAuth 2.0 / OpenID Connect client module.

Provider-agnostic authorization code flow with one adapter per identity
provider.

Providers:
- Google (OAuth 2.0 + OpenID Connect)
- GitHub (OAuth App)
"""
from .exceptions import (
    OAuthProviderError,
    OAuthTokenError,
    OAuthUserInfoError,
    ProviderRequestError,
)
from .factory import available_providers, create_oauth_client, create_oauth_service
from .models import ClientConfig, OAuthIdentity, OAuthState, TokenSet
from .providers import (
    GitHubOAuth2Client,
    GoogleOAuth2Client,
    OAuth2Client,
)
from .service import OAuthService

__all__ = [
    # Exceptions
    "OAuthProviderError",
    "ProviderRequestError",
    "OAuthTokenError",
    "OAuthUserInfoError",
    # Models
    "ClientConfig",
    "TokenSet",
    "OAuthIdentity",
    "OAuthState",
    # Providers
    "OAuth2Client",
    "GoogleOAuth2Client",
    "GitHubOAuth2Client",
    # Service
    "OAuthService",
    # Factory
    "available_providers",
    "create_oauth_client",
    "create_oauth_service",
]
