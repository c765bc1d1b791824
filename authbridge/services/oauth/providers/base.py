"""Abstract base class for OAuth 2.0 clients.

Implements the pieces of the authorization code flow that do not depend on
the provider: scope bookkeeping, state decoding, the derived token accessors
and the single HTTP primitive every provider call goes through.
Subclasses supply endpoints and response-field mappings.
"""
import hashlib
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable
from urllib.parse import urlencode

import httpx

from authbridge import metrics
from authbridge.core.config import settings

from ..exceptions import ProviderRequestError
from ..models import ClientConfig, TokenSet

logger = logging.getLogger(__name__)


def fingerprint(value: str) -> str:
    """Short stable digest used to correlate secrets in logs without leaking them."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:12]


class OAuth2Client(ABC):
    """
    Abstract base class for OAuth 2.0 identity providers.

    One instance serves one authentication attempt: it owns its
    ClientConfig and is not meant to be shared between users or threads.

    Every network call made by a subclass must go through ``request`` so
    header policy and error classification stay identical across providers.
    """

    #: Scopes every login with this provider requests, before caller scopes.
    default_scopes: tuple[str, ...] = ()

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        state: dict[str, Any] | None = None,
        scopes: Iterable[str] | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize OAuth client.

        Args:
            client_id: OAuth client ID from provider
            client_secret: OAuth client secret from provider
            redirect_uri: Callback URL for OAuth flow
            state: Caller context round-tripped through the provider redirect
            scopes: Extra scopes requested on top of ``default_scopes``
            transport: Optional httpx transport, used to stub providers in tests
        """
        self.config = ClientConfig(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            state=dict(state or {}),
        )
        self._transport = transport
        for scope in self.default_scopes:
            self._add_scope(scope)
        for scope in scopes or ():
            self._add_scope(scope)

    @property
    def client_id(self) -> str:
        return self.config.client_id

    @property
    def client_secret(self) -> str:
        return self.config.client_secret

    @property
    def redirect_uri(self) -> str:
        return self.config.redirect_uri

    # ------------------------------------------------------------------
    # Provider contract
    # ------------------------------------------------------------------

    @abstractmethod
    def get_name(self) -> str:
        """Stable provider identifier, e.g. ``"google"``."""

    @abstractmethod
    def get_login_url(self) -> str:
        """Authorization URL carrying client id, redirect uri, scopes and state."""

    @abstractmethod
    def get_tokens(self, code: str) -> TokenSet:
        """
        Exchange an authorization code for tokens.

        Issues exactly one call to the provider's token endpoint.

        Raises:
            ProviderRequestError: If the provider call fails
        """

    @abstractmethod
    def refresh_tokens(self, refresh_token: str) -> TokenSet:
        """Exchange a refresh token for a new token set (one token-endpoint call)."""

    @abstractmethod
    def get_user_id(self, access_token: str) -> str:
        """Provider's canonical user identifier."""

    @abstractmethod
    def get_user_email(self, access_token: str) -> str:
        """User's email address, empty when the provider withholds it."""

    @abstractmethod
    def is_email_verified(self, access_token: str) -> bool:
        """Whether the provider vouches for the email address."""

    @abstractmethod
    def get_user_name(self, access_token: str) -> str:
        """User's display name."""

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def _add_scope(self, scope: str) -> "OAuth2Client":
        if scope not in self.config.scopes:
            self.config.scopes.append(scope)
        return self

    def get_scopes(self) -> list[str]:
        return list(self.config.scopes)

    # ------------------------------------------------------------------
    # Derived token accessors
    #
    # Each of these performs its own token exchange. Callers that need more
    # than one field should call get_tokens() once instead.
    # ------------------------------------------------------------------

    def get_access_token(self, code: str) -> str:
        return self.get_tokens(code).access_token

    def get_refresh_token(self, code: str) -> str:
        return self.get_tokens(code).refresh_token

    def get_access_token_expiry(self, code: str) -> int:
        return self.get_tokens(code).expires_in

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def parse_state(self, state: str) -> dict[str, Any] | None:
        """
        Decode the state blob echoed back by the provider.

        Returns None for anything that is not a JSON object. The result is
        untrusted input: callers must validate the fields they use.
        """
        try:
            decoded = json.loads(state)
        except (TypeError, ValueError, RecursionError):
            logger.debug("Discarding malformed OAuth state | provider=%s", self.get_name())
            return None
        if not isinstance(decoded, dict):
            return None
        return decoded

    def _serialize_state(self) -> str:
        return json.dumps(self.config.state)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _build_url(self, base_url: str, params: dict[str, Any]) -> str:
        return f"{base_url}?{urlencode(params)}"

    @staticmethod
    def _decode_json(body: str) -> dict[str, Any]:
        """Decode a provider body; anything but a JSON object becomes ``{}``."""
        try:
            decoded = json.loads(body)
        except (ValueError, RecursionError):
            return {}
        return decoded if isinstance(decoded, dict) else {}

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        payload: str = "",
    ) -> str:
        """
        Make an HTTP request to the OAuth provider.

        Args:
            method: HTTP method (GET, POST, ...)
            url: Absolute URL
            headers: Extra request headers
            payload: Request body, already encoded by the caller

        Returns:
            Response body text

        Raises:
            ProviderRequestError: On HTTP status >= 400 (status and body kept)
                or on any transport failure (status 0, empty body)
        """
        body = payload.encode("utf-8")
        request_headers = httpx.Headers(headers or {})
        request_headers["Content-Length"] = str(len(body))
        request_headers["User-Agent"] = settings.OAUTH_USER_AGENT
        provider = self.get_name()

        try:
            with httpx.Client(
                transport=self._transport,
                timeout=settings.OAUTH_HTTP_TIMEOUT,
            ) as client:
                response = client.request(method, url, headers=request_headers, content=body)
        except httpx.RequestError as e:
            metrics.oauth_provider_request(provider, "transport_error")
            logger.error(f"OAuth request failed | provider={provider} method={method} url={url} error={e}")
            raise ProviderRequestError("", 0, f"Failed to connect to OAuth provider: {e}") from e

        if response.status_code >= 400:
            metrics.oauth_provider_request(provider, "http_error")
            logger.error(
                f"OAuth request rejected | "
                f"provider={provider} "
                f"method={method} "
                f"url={url} "
                f"status={response.status_code}"
            )
            raise ProviderRequestError(response.text, response.status_code)

        metrics.oauth_provider_request(provider, "ok")
        return response.text
