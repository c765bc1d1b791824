"""Certificate event.

Asks the certificates worker to issue or renew the TLS certificate of a
project's custom domain.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from authbridge.core.config import settings

from .base import Event


class CertificateEvent(Event):
    def __init__(self):
        super().__init__(settings.CERTIFICATES_QUEUE_NAME, settings.CERTIFICATES_CLASS_NAME)
        self.domain: dict[str, Any] | None = None
        self.skip_renew_check = False

    def set_domain(self, domain: Mapping[str, Any] | None) -> CertificateEvent:
        """Domain document the certificate is for; None lets the worker decide."""
        if domain is not None and not isinstance(domain, Mapping):
            raise ValueError("domain must be a mapping or None")
        self.domain = dict(domain) if domain is not None else None
        return self

    def get_domain(self) -> dict[str, Any] | None:
        return self.domain

    def set_skip_renew_check(self, skip_renew_check: bool) -> CertificateEvent:
        """When True the worker re-issues even if the current certificate is still valid."""
        self.skip_renew_check = skip_renew_check
        return self

    def get_skip_renew_check(self) -> bool:
        return self.skip_renew_check

    def build_payload(self) -> dict[str, Any]:
        payload = super().build_payload()
        payload["domain"] = self.domain
        payload["skipRenewCheck"] = self.skip_renew_check
        return payload

    def reset(self) -> CertificateEvent:
        super().reset()
        self.domain = None
        self.skip_renew_check = False
        return self
