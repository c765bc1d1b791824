"""Metrics facade.

Service code should ONLY call the semantic helpers here so the Prometheus
metric names stay in one place.

Metrics:
- oauth_provider_requests_total      Outbound provider HTTP calls by outcome
- oauth_logins_total                 Completed code-for-identity exchanges
- queue_events_enqueued_total        Events (e.g. certificate jobs) handed to a worker queue
"""

from __future__ import annotations

import logging

from prometheus_client import Counter

logger = logging.getLogger("metrics")

_OAUTH_PROVIDER_REQUESTS = Counter(
    "oauth_provider_requests_total",
    "Outbound OAuth provider HTTP requests",
    ["provider", "outcome"],
)
_OAUTH_LOGINS = Counter("oauth_logins_total", "Successful OAuth code exchanges", ["provider"])
_QUEUE_EVENTS = Counter(
    "queue_events_enqueued_total",
    "Events handed to a worker queue",
    ["queue", "outcome"],
)


def oauth_provider_request(provider: str, outcome: str) -> None:
    """Record one provider call; outcome is ok, http_error or transport_error."""
    _OAUTH_PROVIDER_REQUESTS.labels(provider=provider, outcome=outcome).inc()


def oauth_login(provider: str) -> None:
    _OAUTH_LOGINS.labels(provider=provider).inc()
    logger.debug("oauth_login provider=%s", provider)


def queue_event(queue: str, outcome: str) -> None:
    """Record one enqueue attempt; outcome is queued or broker_error."""
    _QUEUE_EVENTS.labels(queue=queue, outcome=outcome).inc()
