"""Author extraction over the instructors sub-tree of a course document."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional
from urllib.parse import urljoin

from .models import AuthorRecord
from .query import ABSENT, PathQuery, resolve
from .rules import FieldRule, apply_rule, to_text

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.udemy.com"

AUTHORS = PathQuery.parse("course.instructors")

# first rule that yields a non-empty name wins
NAME_RULES = (
    FieldRule("name", PathQuery.of("display_name"), to_text, ""),
    FieldRule("name", PathQuery.of("name"), to_text, ""),
)
CONTACT_LINK = FieldRule("contact_link", PathQuery.of("url"), to_text, None)


def get_author_name(entry: Any) -> str:
    for rule in NAME_RULES:
        name = apply_rule(entry, rule)
        if name:
            return name
    return ""


def get_contact_link(entry: Any, base_url: str = DEFAULT_BASE_URL) -> Optional[str]:
    """Return the author's profile link, made absolute against ``base_url``."""
    link = apply_rule(entry, CONTACT_LINK)
    if not link:
        return None
    if link.startswith("/"):
        return urljoin(base_url, link)
    return link


def build_author(entry: Any, base_url: str = DEFAULT_BASE_URL) -> AuthorRecord:
    if not isinstance(entry, Mapping):
        return AuthorRecord()
    return AuthorRecord(
        name=get_author_name(entry),
        contact_link=get_contact_link(entry, base_url),
    )


def extract_authors(doc: Any, *, base_url: str = DEFAULT_BASE_URL) -> List[AuthorRecord]:
    """Return one :class:`AuthorRecord` per entry in the instructors list.

    An absent or non-sequence collection yields an empty list. Entries
    without a usable name are kept with ``name == ""`` so positions match
    the source list.
    """
    entries = resolve(doc, AUTHORS)
    if entries is ABSENT or not isinstance(entries, (list, tuple)):
        logger.debug("No author collection at %s", AUTHORS)
        return []
    return [build_author(entry, base_url) for entry in entries]
