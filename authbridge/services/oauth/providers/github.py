"""GitHub OAuth 2.0 implementation.

GitHub has no OpenID userinfo endpoint: the profile comes from ``/user``
and email addresses (with their verification flags) from ``/user/emails``.
"""
import json
import logging
from typing import Any
from urllib.parse import urlencode

from ..models import TokenSet
from .base import OAuth2Client, fingerprint

logger = logging.getLogger(__name__)


class GitHubOAuth2Client(OAuth2Client):
    """GitHub OAuth App implementation."""

    authorization_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    user_url = "https://api.github.com/user"
    emails_url = "https://api.github.com/user/emails"

    default_scopes = ("user:email",)

    def get_name(self) -> str:
        return "github"

    def get_login_url(self) -> str:
        return self._build_url(
            self.authorization_url,
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "scope": " ".join(self.get_scopes()),
                "state": self._serialize_state(),
            },
        )

    def get_tokens(self, code: str) -> TokenSet:
        logger.info(
            f"Token exchange attempt | "
            f"provider=github "
            f"code_hash={fingerprint(code)} "
            f"client_id={self.client_id}"
        )
        return self._token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "code": code,
            }
        )

    def refresh_tokens(self, refresh_token: str) -> TokenSet:
        logger.info(f"Token refresh attempt | provider=github token_hash={fingerprint(refresh_token)}")
        return self._token_request(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            }
        )

    def get_user_id(self, access_token: str) -> str:
        user_id = self._get_user(access_token).get("id")
        return "" if user_id is None else str(user_id)

    def get_user_email(self, access_token: str) -> str:
        """
        Pick the address GitHub considers canonical.

        Preference: primary and verified, then any verified, then the
        public profile email (unverified).
        """
        emails = self._get_emails(access_token)
        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email") or ""
        for entry in emails:
            if entry.get("verified"):
                return entry.get("email") or ""
        return self._get_user(access_token).get("email") or ""

    def is_email_verified(self, access_token: str) -> bool:
        return any(entry.get("verified") for entry in self._get_emails(access_token))

    def get_user_name(self, access_token: str) -> str:
        user = self._get_user(access_token)
        return user.get("name") or user.get("login") or ""

    def _token_request(self, data: dict[str, str]) -> TokenSet:
        body = self.request(
            "POST",
            self.token_url,
            {
                "Accept": "application/json",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            urlencode(data),
        )
        return TokenSet.from_response(self._decode_json(body))

    def _api_headers(self, access_token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {access_token}",
            "Accept": "application/vnd.github+json",
        }

    def _get_user(self, access_token: str) -> dict[str, Any]:
        return self._decode_json(self.request("GET", self.user_url, self._api_headers(access_token)))

    def _get_emails(self, access_token: str) -> list[dict[str, Any]]:
        body = self.request("GET", self.emails_url, self._api_headers(access_token))
        try:
            decoded = json.loads(body)
        except (ValueError, RecursionError):
            return []
        if not isinstance(decoded, list):
            return []
        return [entry for entry in decoded if isinstance(entry, dict)]
