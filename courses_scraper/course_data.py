"""Course field extraction driven by a declarative rule table.

Each field of :class:`CourseRecord` is described by a :class:`FieldRule`
in :data:`COURSE_RULES`. One generic routine applies every rule, so a missing
or malformed field only falls back to its default and never aborts the
record.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .course_author import DEFAULT_BASE_URL, extract_authors
from .models import CourseRecord, Price
from .query import ABSENT, PathQuery, resolve
from .rules import (
    CoercionError,
    FieldRule,
    apply_rule,
    clamp_rating,
    to_count,
    to_float,
    to_rating,
    to_text,
)

logger = logging.getLogger(__name__)

COURSE = PathQuery.of("course")
CATEGORY_DATA = COURSE / "category"
ENROLLED_DATA = COURSE / "stats"
RATING_ENTRIES = PathQuery.parse("course.ratings.entries")
ENTRY_RATING = PathQuery.of("rating")


def to_price(value: Any) -> Price:
    """Coerce a ``{amount, currency, is_free}`` mapping to a :class:`Price`.

    An explicit free flag wins over any amount present.
    """
    if not isinstance(value, Mapping):
        raise CoercionError(f"expected a price mapping, got {type(value).__name__}")

    if value.get("is_free") is True:
        return Price.free()

    amount = value.get("amount")
    if isinstance(amount, str) and amount.strip().lower() == "free":
        return Price.free()
    if amount is None:
        raise CoercionError("price has neither an amount nor a free flag")

    number = to_float(amount)
    if number < 0:
        raise CoercionError(f"negative price: {number}")

    currency = value.get("currency")
    if isinstance(currency, str) and currency.strip():
        currency = currency.strip().upper()
    else:
        currency = None
    return Price(amount=number, currency=currency)


def average_of_ratings(entries: Any) -> float:
    """Mean of every numeric ``rating`` in a collection, each clamped to [0, 5]."""
    if not isinstance(entries, (list, tuple)):
        raise CoercionError("rating entries are not a sequence")
    ratings = []
    for entry in entries:
        raw = resolve(entry, ENTRY_RATING)
        if raw is ABSENT:
            continue
        try:
            ratings.append(to_rating(raw))
        except CoercionError:
            continue
    if not ratings:
        raise CoercionError("no numeric ratings found")
    return clamp_rating(sum(ratings) / len(ratings))


CATEGORY = FieldRule("category", CATEGORY_DATA / "title", to_text, "")
SUBCATEGORY = FieldRule(
    "subcategory", CATEGORY_DATA / "subcategory" / "title", to_text, ""
)
TOPIC = FieldRule("topic", PathQuery.parse("course.topic.title"), to_text, None)
RATING = FieldRule("rating", ENROLLED_DATA / "rating", to_rating, None)
ENROLLED = FieldRule("enrolled", ENROLLED_DATA / "num_students", to_count, 0)
PRICE = FieldRule("price", COURSE / "price", to_price, None)
AVERAGE_RATING = FieldRule("average_rating", RATING_ENTRIES, average_of_ratings, None)

COURSE_RULES: Tuple[FieldRule, ...] = (
    CATEGORY,
    SUBCATEGORY,
    PRICE,
    RATING,
    AVERAGE_RATING,
    ENROLLED,
    TOPIC,
)


def get_category(doc: Any) -> str:
    return apply_rule(doc, CATEGORY)


def get_subcategory(doc: Any) -> str:
    return apply_rule(doc, SUBCATEGORY)


def get_topic(doc: Any) -> Optional[str]:
    return apply_rule(doc, TOPIC)


def get_rating(doc: Any) -> Optional[float]:
    return apply_rule(doc, RATING)


def get_average_rating(doc: Any) -> Optional[float]:
    return apply_rule(doc, AVERAGE_RATING)


def get_enrolled(doc: Any) -> int:
    return apply_rule(doc, ENROLLED)


def get_price(doc: Any) -> Optional[Price]:
    return apply_rule(doc, PRICE)


def extract_fields(doc: Any) -> Dict[str, Any]:
    """Apply every rule in :data:`COURSE_RULES` and return values by field name."""
    return {rule.name: apply_rule(doc, rule) for rule in COURSE_RULES}


def extract_course(doc: Any, *, base_url: str = DEFAULT_BASE_URL) -> CourseRecord:
    """Build a :class:`CourseRecord` from a parsed document.

    Never fails on missing or malformed fields; each one takes its default.
    Authors are extracted independently from the same document.
    """
    course = CourseRecord(
        **extract_fields(doc), authors=extract_authors(doc, base_url=base_url)
    )
    logger.debug(
        "Extracted course: category=%r rating=%s authors=%d",
        course.category,
        course.rating,
        len(course.authors),
    )
    return course
