from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "AuthBridge"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"
    BACKEND_URL: str = "https://api.authbridge.dev"  # Used to build OAuth callback URLs
    FRONTEND_URL: str = "https://authbridge.dev"

    # Outbound OAuth HTTP policy
    OAUTH_USER_AGENT: str = "AuthBridge OAuth2"
    OAUTH_HTTP_TIMEOUT: float = 10.0

    # Where users land when the state blob carries no usable redirect
    OAUTH_DEFAULT_SUCCESS_URL: str | None = None
    OAUTH_DEFAULT_FAILURE_URL: str | None = None

    # OAuth 2.0 / SSO Configuration
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GITHUB_CLIENT_ID: str | None = None
    GITHUB_CLIENT_SECRET: str | None = None

    # Async certificate provisioning
    REDIS_URL: str = "redis://localhost:6379/0"
    CERTIFICATES_QUEUE_NAME: str = "v1-certificates"
    CERTIFICATES_CLASS_NAME: str = "CertificatesV1"

    @field_validator("OAUTH_HTTP_TIMEOUT")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("OAUTH_HTTP_TIMEOUT must be positive")
        return v

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        self.BACKEND_URL = self.BACKEND_URL.rstrip("/")
        if self.OAUTH_DEFAULT_SUCCESS_URL is None:
            self.OAUTH_DEFAULT_SUCCESS_URL = self.FRONTEND_URL
        if self.OAUTH_DEFAULT_FAILURE_URL is None:
            self.OAUTH_DEFAULT_FAILURE_URL = self.FRONTEND_URL

        if self.ENV.lower() == "prod":
            # A provider with only half of its credentials is a deployment mistake
            half_configured = [
                provider
                for provider, (client_id, secret) in {
                    "google": (self.GOOGLE_CLIENT_ID, self.GOOGLE_CLIENT_SECRET),
                    "github": (self.GITHUB_CLIENT_ID, self.GITHUB_CLIENT_SECRET),
                }.items()
                if bool(client_id) != bool(secret)
            ]
            if half_configured:
                raise ValueError(
                    "Incomplete OAuth credentials in production: " + ", ".join(half_configured)
                )
            if not self.REDIS_URL or "localhost" in self.REDIS_URL:
                raise ValueError("REDIS_URL must point at a real broker in production")
        return self


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    BACKEND_URL: str = "http://localhost:8000"
    FRONTEND_URL: str = "http://localhost:3000"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    BACKEND_URL: str = "http://testserver"
    FRONTEND_URL: str = "http://testserver/app"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
