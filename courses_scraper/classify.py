"""Turn a raw transport outcome into a :class:`Signal`."""

from __future__ import annotations

import logging
from typing import Optional

from .models import (
    NETWORK_ERROR,
    NOT_FOUND,
    RATE_LIMITED,
    SERVER_ERROR,
    FetchOutcome,
    Signal,
)

logger = logging.getLogger(__name__)


def classify(
    status_code: Optional[int], body: Optional[str], transport_error: bool
) -> Signal:
    """Classify a transport outcome.

    Rules are applied in priority order: transport failure, 404, 429, any
    5xx, then 2xx with a non-blank body. Everything else (a 2xx with an empty
    body, a missing status, an unexpected 1xx/3xx/4xx) is reported as a
    server error because the response cannot be trusted.

    This never retries; retry policy belongs to the caller.
    """
    if transport_error:
        return NETWORK_ERROR
    if status_code is None:
        return SERVER_ERROR
    if status_code == 404:
        return NOT_FOUND
    if status_code == 429:
        return RATE_LIMITED
    if status_code >= 500:
        return SERVER_ERROR
    if 200 <= status_code < 300 and body is not None and body.strip():
        return Signal.ok(body)
    return SERVER_ERROR


def classify_outcome(outcome: FetchOutcome) -> Signal:
    """Classify a :class:`FetchOutcome` produced by the fetcher."""
    signal = classify(outcome.status_code, outcome.body, outcome.transport_error)
    logger.info(
        "Classified %s (status=%s) as %s",
        outcome.url or "<response>",
        outcome.status_code,
        signal.kind.value,
    )
    return signal
