"""Tests for the provider-independent behaviour of OAuth2Client."""
import json
from urllib.parse import parse_qs, urlencode, urlparse

import httpx
import pytest

from authbridge.core.config import settings
from authbridge.services.oauth import OAuth2Client, ProviderRequestError, TokenSet

TOKEN_URL = "https://id.example.test/token"
USER_URL = "https://id.example.test/me"


class ExampleClient(OAuth2Client):
    """Minimal adapter used to exercise the shared base class."""

    def get_name(self) -> str:
        return "example"

    def get_login_url(self) -> str:
        return self._build_url(
            "https://id.example.test/authorize",
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "scope": " ".join(self.get_scopes()),
                "state": self._serialize_state(),
            },
        )

    def get_tokens(self, code: str) -> TokenSet:
        body = self.request("POST", TOKEN_URL, {}, urlencode({"code": code}))
        return TokenSet.from_response(self._decode_json(body))

    def refresh_tokens(self, refresh_token: str) -> TokenSet:
        body = self.request("POST", TOKEN_URL, {}, urlencode({"refresh_token": refresh_token}))
        return TokenSet.from_response(self._decode_json(body))

    def get_user_id(self, access_token: str) -> str:
        return str(self._me(access_token).get("sub", ""))

    def get_user_email(self, access_token: str) -> str:
        return self._me(access_token).get("email", "")

    def is_email_verified(self, access_token: str) -> bool:
        return bool(self._me(access_token).get("email_verified", False))

    def get_user_name(self, access_token: str) -> str:
        return self._me(access_token).get("name", "")

    def _me(self, access_token: str) -> dict:
        return self._decode_json(self.request("GET", USER_URL, {"Authorization": f"Bearer {access_token}"}))


def make_client(stub_provider=None, **kwargs) -> ExampleClient:
    return ExampleClient(
        "client-id",
        "client-secret",
        "https://app.example.test/callback",
        transport=stub_provider.transport if stub_provider else None,
        **kwargs,
    )


class TestScopes:
    def test_duplicates_are_dropped_in_first_seen_order(self):
        client = make_client(scopes=["email", "profile", "email"])
        assert client.get_scopes() == ["email", "profile"]

    def test_default_scopes_come_first(self):
        class WithDefaults(ExampleClient):
            default_scopes = ("openid", "email")

        client = WithDefaults("id", "secret", "https://cb", scopes=["profile", "openid"])
        assert client.get_scopes() == ["openid", "email", "profile"]

    def test_add_scope_is_idempotent(self):
        client = make_client(scopes=["email"])
        client._add_scope("email")._add_scope("profile")
        assert client.get_scopes() == ["email", "profile"]

    def test_get_scopes_returns_a_copy(self):
        client = make_client(scopes=["email"])
        client.get_scopes().append("admin")
        assert client.get_scopes() == ["email"]

    def test_login_url_embeds_requested_scope(self):
        client = make_client(scopes=["openid"])
        query = parse_qs(urlparse(client.get_login_url()).query)
        assert "openid" in query["scope"][0].split()


class TestParseState:
    def test_malformed_state_returns_none(self):
        assert make_client().parse_state("not-json") is None

    def test_non_object_state_returns_none(self):
        assert make_client().parse_state("[1, 2, 3]") is None
        assert make_client().parse_state("42") is None

    def test_deeply_nested_state_returns_none(self):
        assert make_client().parse_state("[" * 100000) is None
        assert make_client().parse_state('{"a":' * 100000) is None

    def test_object_state_is_returned(self):
        parsed = make_client().parse_state('{"project":"p1","success":"https://x"}')
        assert parsed == {"project": "p1", "success": "https://x"}

    def test_login_url_round_trips_state(self):
        client = make_client(state={"project": "p1", "failure": "https://x/fail"})
        query = parse_qs(urlparse(client.get_login_url()).query)
        assert client.parse_state(query["state"][0]) == {"project": "p1", "failure": "https://x/fail"}


class TestTokenAccessors:
    def test_get_tokens_returns_all_fields(self, stub_provider):
        stub_provider.add(
            "POST", TOKEN_URL, json_body={"access_token": "A", "refresh_token": "R", "expires_in": 3600}
        )
        client = make_client(stub_provider)

        assert client.get_tokens("code-1") == TokenSet(access_token="A", refresh_token="R", expires_in=3600)

    def test_each_derived_accessor_performs_its_own_exchange(self, stub_provider):
        stub_provider.add(
            "POST", TOKEN_URL, json_body={"access_token": "A", "refresh_token": "R", "expires_in": 3600}
        )
        client = make_client(stub_provider)

        assert client.get_access_token("code-1") == "A"
        assert client.get_refresh_token("code-1") == "R"
        assert client.get_access_token_expiry("code-1") == 3600
        assert len(stub_provider.calls_to(TOKEN_URL)) == 3

    def test_missing_access_token_is_empty_string(self, stub_provider):
        stub_provider.add("POST", TOKEN_URL, json_body={"token_type": "bearer"})
        assert make_client(stub_provider).get_access_token("code") == ""

    def test_missing_refresh_token_is_empty_string(self, stub_provider):
        stub_provider.add("POST", TOKEN_URL, json_body={"access_token": "A"})
        assert make_client(stub_provider).get_refresh_token("code") == ""

    def test_missing_expiry_is_zero(self, stub_provider):
        stub_provider.add("POST", TOKEN_URL, json_body={"access_token": "A"})
        assert make_client(stub_provider).get_access_token_expiry("code") == 0

    def test_deeply_nested_token_body_degrades_to_defaults(self, stub_provider):
        stub_provider.add("POST", TOKEN_URL, text="[" * 100000)
        assert make_client(stub_provider).get_tokens("code") == TokenSet()

    def test_non_json_token_body_degrades_to_defaults(self, stub_provider):
        stub_provider.add("POST", TOKEN_URL, text="access_token=A&scope=x")
        assert make_client(stub_provider).get_tokens("code") == TokenSet()


class TestTokenSet:
    def test_string_expiry_is_coerced(self):
        assert TokenSet.from_response({"expires_in": "120"}).expires_in == 120

    def test_garbage_expiry_is_zero(self):
        assert TokenSet.from_response({"expires_in": "soon"}).expires_in == 0


class TestRequest:
    def test_http_error_carries_status_and_body(self, stub_provider):
        stub_provider.add("GET", USER_URL, status=404, text="not found")
        client = make_client(stub_provider)

        with pytest.raises(ProviderRequestError) as exc_info:
            client.request("GET", USER_URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == "not found"

    def test_identity_accessors_propagate_provider_errors(self, stub_provider):
        stub_provider.add("GET", USER_URL, status=401, json_body={"error": "invalid_token"})
        client = make_client(stub_provider)

        with pytest.raises(ProviderRequestError) as exc_info:
            client.get_user_email("expired")

        assert exc_info.value.status_code == 401
        assert json.loads(exc_info.value.body) == {"error": "invalid_token"}

    def test_transport_failure_uses_status_zero(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ExampleClient("id", "secret", "https://cb", transport=httpx.MockTransport(refuse))

        with pytest.raises(ProviderRequestError) as exc_info:
            client.get_user_id("token")

        assert exc_info.value.status_code == 0
        assert exc_info.value.body == ""

    def test_returns_body_on_success(self, stub_provider):
        stub_provider.add("GET", USER_URL, json_body={"sub": "42"})
        assert make_client(stub_provider).get_user_id("token") == "42"

    def test_content_length_sent_for_empty_payload(self, stub_provider):
        stub_provider.add("GET", USER_URL, json_body={})
        make_client(stub_provider).request("GET", USER_URL)

        assert stub_provider.requests[-1].headers["Content-Length"] == "0"

    def test_content_length_counts_bytes(self, stub_provider):
        stub_provider.add("POST", TOKEN_URL, json_body={})
        make_client(stub_provider).request("POST", TOKEN_URL, {"content-length": "999"}, "name=Zoë")

        sent = stub_provider.requests[-1]
        assert sent.headers.get_list("Content-Length") == [str(len("name=Zoë".encode("utf-8")))]
        assert sent.content == "name=Zoë".encode("utf-8")

    def test_user_agent_is_fixed(self, stub_provider):
        stub_provider.add("GET", USER_URL, json_body={})
        make_client(stub_provider).request("GET", USER_URL, {"User-Agent": "curl/8"})

        assert stub_provider.requests[-1].headers["User-Agent"] == settings.OAUTH_USER_AGENT
