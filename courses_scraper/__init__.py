"""courses-scraper: fetch a course listing page and extract structured records."""

from .classify import classify, classify_outcome
from .config import Settings, get_settings
from .course_author import extract_authors
from .course_data import COURSE_RULES, extract_course
from .document import ParseError, parse
from .fetcher import build_course_url, fetch
from .models import (
    AuthorRecord,
    CourseRecord,
    FetchOutcome,
    Price,
    ScrapeResult,
    Signal,
    SignalKind,
)
from .pipeline import FetchError, scrape_course, scrape_document, scrape_many
from .query import ABSENT, Index, Key, PathQuery, resolve

__all__ = [
    "ABSENT",
    "AuthorRecord",
    "COURSE_RULES",
    "CourseRecord",
    "FetchError",
    "FetchOutcome",
    "Index",
    "Key",
    "ParseError",
    "PathQuery",
    "Price",
    "ScrapeResult",
    "Settings",
    "Signal",
    "SignalKind",
    "build_course_url",
    "classify",
    "classify_outcome",
    "extract_authors",
    "extract_course",
    "fetch",
    "get_settings",
    "parse",
    "resolve",
    "scrape_course",
    "scrape_document",
    "scrape_many",
]
