"""Value types shared by OAuth clients and the flow service."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and request context for one authentication attempt.

    Only ``scopes`` changes after construction, and only while the owning
    client is being built (see ``OAuth2Client._add_scope``).
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    state: dict[str, Any] = field(default_factory=dict)
    scopes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TokenSet:
    """Tokens returned by a code or refresh-token exchange."""

    access_token: str = ""
    refresh_token: str = ""
    expires_in: int = 0

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> TokenSet:
        """
        Build a TokenSet from a decoded token-endpoint response.

        Missing fields degrade to empty string / zero rather than raising.
        """
        expires_in = payload.get("expires_in") or 0
        try:
            expires_in = int(expires_in)
        except (TypeError, ValueError):
            expires_in = 0
        return cls(
            access_token=str(payload.get("access_token") or ""),
            refresh_token=str(payload.get("refresh_token") or ""),
            expires_in=expires_in,
        )


@dataclass(frozen=True)
class OAuthIdentity:
    """Identity claims and tokens gathered by one completed login."""

    provider: str
    user_id: str
    email: str
    email_verified: bool
    name: str
    tokens: TokenSet


@dataclass(frozen=True)
class OAuthState:
    """Validated view of the state blob echoed back by the provider."""

    project: str | None
    success: str
    failure: str
    raw: dict[str, Any] = field(default_factory=dict)
