"""Queue events handed to external workers."""
from .base import Event
from .certificate import CertificateEvent

__all__ = ["Event", "CertificateEvent"]
