"""HTTP boundary: course URL construction and a single GET per course.

The fetcher never raises on request problems. Connection, DNS, TLS and
timeout failures, redirect loops and undecodable bodies are all reported as
``FetchOutcome(transport_error=True)`` and left to
:func:`courses_scraper.classify.classify` to interpret.
"""

from __future__ import annotations

import logging
import time
from typing import Optional
from urllib.parse import quote

import httpx

from .config import Settings, get_settings
from .models import FetchOutcome

logger = logging.getLogger(__name__)


def build_course_url(identifier: str, *, settings: Optional[Settings] = None) -> str:
    """Return the public listing URL for a course identifier (slug or id).

    Raises:
        ValueError: If the identifier is empty.
    """
    s = settings or get_settings()
    slug = identifier.strip().strip("/")
    if not slug:
        raise ValueError("course identifier must not be empty")
    return s.course_url_template.format(identifier=quote(slug, safe=""))


def _client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        timeout=settings.timeout_total,
        follow_redirects=True,
        headers={
            "user-agent": settings.user_agent,
            "accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
            "accept-language": settings.accept_language,
        },
    )


def fetch(
    identifier: str,
    *,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> FetchOutcome:
    """GET the course page for ``identifier``.

    Args:
        identifier: Course slug or id.
        settings: Scraper settings. Uses defaults if not provided.
        client: An existing httpx client to reuse. One is created otherwise.

    Returns:
        FetchOutcome with status code and text body, or with
        ``transport_error`` set when no response was received.
    """
    s = settings or get_settings()
    url = build_course_url(identifier, settings=s)

    time.sleep(max(0.0, s.min_delay_seconds))
    logger.info("Fetching: %s", url)

    try:
        if client is not None:
            resp = client.get(url)
        else:
            with _client(s) as own_client:
                resp = own_client.get(url)
    except httpx.RequestError as exc:
        logger.warning("Transport error for %s: %s", url, exc)
        return FetchOutcome(transport_error=True, url=url)

    logger.info("HTTP %d for %s (%d chars)", resp.status_code, url, len(resp.text))
    return FetchOutcome(
        status_code=resp.status_code,
        body=resp.text,
        transport_error=False,
        url=url,
    )
