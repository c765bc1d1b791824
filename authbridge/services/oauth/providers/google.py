"""Google OAuth 2.0 / OpenID Connect implementation."""
import logging
from typing import Any
from urllib.parse import urlencode

from ..models import TokenSet
from .base import OAuth2Client, fingerprint

logger = logging.getLogger(__name__)


class GoogleOAuth2Client(OAuth2Client):
    """Google OAuth 2.0 / OpenID Connect implementation."""

    authorization_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    user_info_url = "https://www.googleapis.com/oauth2/v2/userinfo"

    default_scopes = (
        "https://www.googleapis.com/auth/userinfo.email",
        "https://www.googleapis.com/auth/userinfo.profile",
        "openid",
    )

    def get_name(self) -> str:
        return "google"

    def get_login_url(self) -> str:
        return self._build_url(
            self.authorization_url,
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "scope": " ".join(self.get_scopes()),
                "state": self._serialize_state(),
                "response_type": "code",
                "access_type": "offline",  # Request refresh token
                "prompt": "consent",  # Force consent to get refresh token
            },
        )

    def get_tokens(self, code: str) -> TokenSet:
        logger.info(
            f"Token exchange attempt | "
            f"provider=google "
            f"code_hash={fingerprint(code)} "
            f"client_id={self.client_id} "
            f"redirect_uri={self.redirect_uri}"
        )
        return self._token_request(
            {
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "scope": " ".join(self.get_scopes()),
                "grant_type": "authorization_code",
            }
        )

    def refresh_tokens(self, refresh_token: str) -> TokenSet:
        logger.info(f"Token refresh attempt | provider=google token_hash={fingerprint(refresh_token)}")
        tokens = self._token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            }
        )
        if not tokens.refresh_token:
            # Google only rotates refresh tokens occasionally; keep the one we have
            tokens = TokenSet(tokens.access_token, refresh_token, tokens.expires_in)
        return tokens

    def get_user_id(self, access_token: str) -> str:
        user_id = self._get_user(access_token).get("id")
        return "" if user_id is None else str(user_id)

    def get_user_email(self, access_token: str) -> str:
        return self._get_user(access_token).get("email") or ""

    def is_email_verified(self, access_token: str) -> bool:
        return bool(self._get_user(access_token).get("verified_email", False))

    def get_user_name(self, access_token: str) -> str:
        return self._get_user(access_token).get("name") or ""

    def _token_request(self, data: dict[str, str]) -> TokenSet:
        body = self.request(
            "POST",
            self.token_url,
            {"Content-Type": "application/x-www-form-urlencoded"},
            urlencode(data),
        )
        return TokenSet.from_response(self._decode_json(body))

    def _get_user(self, access_token: str) -> dict[str, Any]:
        body = self.request("GET", self.user_info_url, {"Authorization": f"Bearer {access_token}"})
        return self._decode_json(body)
