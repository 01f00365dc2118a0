"""Shared machinery for rule-driven field extraction.

A :class:`FieldRule` names a field, the path it lives at, a coercion and the
default to use when the path is absent or the coercion fails.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable

from .query import ABSENT, PathQuery, resolve

logger = logging.getLogger(__name__)

RATING_MIN = 0.0
RATING_MAX = 5.0

# optional short currency prefix ("$", "USD ") before a plain decimal
_NUMBER_RE = re.compile(r"^[^\d+\-.]{0,3}\s*([+-]?\d+(?:\.\d+)?)\s*$")


class CoercionError(ValueError):
    """A resolved value has the wrong shape for its field."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_text(value: Any) -> str:
    """Coerce a scalar to stripped text."""
    if isinstance(value, str):
        return value.strip()
    if _is_number(value):
        return str(value)
    raise CoercionError(f"expected text, got {type(value).__name__}")


def to_float(value: Any) -> float:
    """Coerce a number or numeric string to a finite float."""
    if _is_number(value):
        try:
            number = float(value)
        except OverflowError:
            raise CoercionError(f"number out of range: {value!r}") from None
    elif isinstance(value, str):
        m = _NUMBER_RE.match(value.strip())
        if not m:
            raise CoercionError(f"not a number: {value!r}")
        number = float(m.group(1))
    else:
        raise CoercionError(f"expected a number, got {type(value).__name__}")
    if math.isnan(number) or math.isinf(number):
        raise CoercionError(f"not a finite number: {value!r}")
    return number


def clamp_rating(number: float) -> float:
    return min(RATING_MAX, max(RATING_MIN, number))


def to_rating(value: Any) -> float:
    """Coerce to a rating, clamped to [0.0, 5.0]."""
    return clamp_rating(to_float(value))


def to_count(value: Any) -> int:
    """Coerce to a non-negative integer; accepts ``"12,345"``."""
    if isinstance(value, bool):
        raise CoercionError("expected a count, got bool")
    if isinstance(value, int):
        count = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise CoercionError(f"count is not integral: {value!r}")
        count = int(value)
    elif isinstance(value, str):
        digits = value.strip().replace(",", "").replace("_", "")
        if not digits.isdigit():
            raise CoercionError(f"not a count: {value!r}")
        count = int(digits)
    else:
        raise CoercionError(f"expected a count, got {type(value).__name__}")
    if count < 0:
        raise CoercionError(f"negative count: {count}")
    return count


@dataclass(frozen=True)
class FieldRule:
    """How to extract one field: where it lives, how to read it, what if not."""

    name: str
    path: PathQuery
    coerce: Callable[[Any], Any]
    default: Any = None


def apply_rule(doc: Any, rule: FieldRule) -> Any:
    """Resolve and coerce one field, falling back to the rule's default."""
    raw = resolve(doc, rule.path)
    if raw is ABSENT:
        logger.debug("Field %s absent at %s", rule.name, rule.path)
        return rule.default
    try:
        return rule.coerce(raw)
    except CoercionError as exc:
        logger.debug("Field %s malformed at %s: %s", rule.name, rule.path, exc)
        return rule.default
