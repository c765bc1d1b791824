"""OAuth Service coordinating one authentication attempt.

Responsibilities:
- Hold the clients available for this attempt
- Exchange the authorization code exactly once
- Collect identity claims from the provider
- Re-validate the state blob echoed back by the provider

Persistence of users and tokens is left to the caller.
"""
import logging
from urllib.parse import urlparse

from authbridge import metrics
from authbridge.core.config import settings
from authbridge.core.exceptions import ProviderNotSupportedError

from .exceptions import OAuthTokenError, OAuthUserInfoError
from .models import OAuthIdentity, OAuthState
from .providers import OAuth2Client

logger = logging.getLogger(__name__)


def _is_http_url(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class OAuthService:
    """
    OAuth service for a single SSO attempt.

    Clients are request scoped, so a service instance is too.
    """

    def __init__(self):
        self._providers: dict[str, OAuth2Client] = {}

    def register_provider(self, name: str, provider: OAuth2Client) -> None:
        """
        Register an OAuth client.

        Args:
            name: Provider identifier (e.g., "google")
            provider: OAuth2Client instance
        """
        self._providers[name] = provider
        logger.info(f"Registered OAuth provider: {name}")

    def get_provider(self, name: str) -> OAuth2Client:
        """
        Get registered OAuth client.

        Raises:
            ProviderNotSupportedError: If provider not registered
        """
        if name not in self._providers:
            raise ProviderNotSupportedError(name)
        return self._providers[name]

    @property
    def provider_names(self) -> list[str]:
        return list(self._providers)

    def get_login_url(self, provider_name: str) -> str:
        logger.info(f"Initiating OAuth login with {provider_name}")
        return self.get_provider(provider_name).get_login_url()

    def authenticate_with_code(self, provider_name: str, code: str) -> OAuthIdentity:
        """
        Turn an authorization code into an identity.

        Complete OAuth flow:
        1. Exchange code for tokens (one token-endpoint call)
        2. Fetch each identity claim from the provider

        Args:
            provider_name: OAuth provider identifier
            code: Authorization code from OAuth callback

        Returns:
            OAuthIdentity with claims and the token set

        Raises:
            ProviderRequestError: If any provider call fails
            OAuthTokenError: If the provider returned no access token
            OAuthUserInfoError: If the provider returned no user id
        """
        provider = self.get_provider(provider_name)

        tokens = provider.get_tokens(code)
        if not tokens.access_token:
            raise OAuthTokenError("No access token in response")
        if not tokens.refresh_token:
            logger.warning(f"No refresh token from {provider_name}")

        user_id = provider.get_user_id(tokens.access_token)
        if not user_id:
            raise OAuthUserInfoError("User id not provided by OAuth provider")

        identity = OAuthIdentity(
            provider=provider_name,
            user_id=user_id,
            email=provider.get_user_email(tokens.access_token),
            email_verified=provider.is_email_verified(tokens.access_token),
            name=provider.get_user_name(tokens.access_token),
            tokens=tokens,
        )
        metrics.oauth_login(provider_name)
        logger.info(f"User authenticated via {provider_name}: id={user_id}")
        return identity

    def read_state(self, provider_name: str, raw_state: str) -> OAuthState:
        """
        Decode and validate the state blob from a provider callback.

        Malformed state falls back to the configured redirect URLs rather
        than failing the login.
        """
        decoded = self.get_provider(provider_name).parse_state(raw_state) or {}

        project = decoded.get("project")
        success = decoded.get("success")
        failure = decoded.get("failure")

        if not _is_http_url(success):
            success = settings.OAUTH_DEFAULT_SUCCESS_URL
        if not _is_http_url(failure):
            failure = settings.OAUTH_DEFAULT_FAILURE_URL

        return OAuthState(
            project=project if isinstance(project, str) and project else None,
            success=success,
            failure=failure,
            raw=decoded,
        )
