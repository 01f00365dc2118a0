"""Single-course pipeline and batch driver.

identifier -> fetch -> classify -> parse -> extract. A non-OK signal raises
:class:`FetchError`; an unreadable body raises
:class:`~courses_scraper.document.ParseError`. Field-level problems never
surface here; they are absorbed by the extractors.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional

from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from .classify import classify_outcome
from .config import Settings, get_settings
from .course_author import DEFAULT_BASE_URL
from .course_data import extract_course
from .document import ParseError, parse
from .fetcher import fetch
from .models import CourseRecord, FetchOutcome, ScrapeResult, SignalKind

logger = logging.getLogger(__name__)

TRANSIENT_SIGNALS = frozenset({SignalKind.NETWORK_ERROR, SignalKind.SERVER_ERROR})

Fetcher = Callable[..., FetchOutcome]


class FetchError(RuntimeError):
    """The course page could not be retrieved; ``signal`` says why."""

    def __init__(self, identifier: str, signal: SignalKind) -> None:
        super().__init__(f"{signal.value} for course {identifier!r}")
        self.identifier = identifier
        self.signal = signal

    @property
    def is_transient(self) -> bool:
        return self.signal in TRANSIENT_SIGNALS


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, FetchError) and exc.is_transient


def _retry_decorator(settings: Settings):
    return retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(settings.max_attempts),
        wait=wait_exponential(
            multiplier=settings.backoff_multiplier,
            min=settings.backoff_min,
            max=settings.backoff_max,
        ),
        reraise=True,
    )


def extract(doc: Any, *, base_url: str = DEFAULT_BASE_URL) -> CourseRecord:
    """Extract the course record (authors included) from a parsed document."""
    return extract_course(doc, base_url=base_url)


def scrape_document(body: str, *, base_url: str = DEFAULT_BASE_URL) -> CourseRecord:
    """Parse a fetched body and extract its course record.

    Raises:
        ParseError: If the body holds no recognisable document.
    """
    return extract(parse(body), base_url=base_url)


def scrape_course(
    identifier: str,
    *,
    settings: Optional[Settings] = None,
    fetcher: Fetcher = fetch,
) -> CourseRecord:
    """Fetch, classify, parse and extract one course.

    Network and server errors are retried up to ``settings.max_attempts``
    times. Not-found and rate-limited responses are returned to the caller
    at once.

    Raises:
        FetchError: On any non-OK signal after retries.
        ParseError: If the body holds no recognisable document.
    """
    s = settings or get_settings()

    @_retry_decorator(s)
    def _fetch_body() -> str:
        signal = classify_outcome(fetcher(identifier, settings=s))
        if not signal.is_ok:
            raise FetchError(identifier, signal.kind)
        return signal.body

    body = _fetch_body()
    course = scrape_document(body, base_url=s.base_url)
    logger.info("Scraped course %s (category=%r)", identifier, course.category)
    return course


def _scrape_one(identifier: str, settings: Settings, fetcher: Fetcher) -> ScrapeResult:
    try:
        course = scrape_course(identifier, settings=settings, fetcher=fetcher)
    except FetchError as exc:
        logger.error("Failed to fetch %s: %s", identifier, exc)
        return ScrapeResult(identifier=identifier, signal=exc.signal.value, error=str(exc))
    except ParseError as exc:
        logger.error("Failed to parse %s: %s", identifier, exc.reason)
        return ScrapeResult(
            identifier=identifier,
            signal=SignalKind.OK.value,
            error=f"parse error: {exc.reason}",
        )
    return ScrapeResult(identifier=identifier, course=course, signal=SignalKind.OK.value)


def scrape_many(
    identifiers: Iterable[str],
    *,
    settings: Optional[Settings] = None,
    fetcher: Fetcher = fetch,
    workers: Optional[int] = None,
) -> List[ScrapeResult]:
    """Scrape several courses in parallel, one document per worker.

    Continues on failure; failed courses are returned with ``error`` set.
    Results keep the input order.
    """
    s = settings or get_settings()
    ids = list(identifiers)
    if not ids:
        return []

    max_workers = max(1, min(workers or s.workers, len(ids)))
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(pool.map(lambda i: _scrape_one(i, s, fetcher), ids))

    failed = sum(1 for r in results if not r.is_success)
    if failed:
        logger.warning("%d/%d courses failed", failed, len(results))
    return results
