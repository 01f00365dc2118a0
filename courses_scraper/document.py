"""Decode a fetched body into a document tree.

A document is a tree of mappings, sequences and JSON scalars. Two raw shapes
are recognised: a body that is JSON on its own, and an HTML page carrying
the course data in an embedded block. Embedded content is only ever decoded
as JSON, never evaluated.
"""

from __future__ import annotations

import json
import logging
import re
from types import MappingProxyType
from typing import Any, Callable, Iterator, Optional, Tuple

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

NO_RECOGNIZABLE_DOCUMENT = "no_recognizable_document"

EMBEDDED_SCRIPT_IDS = ("__COURSE_DATA__", "course-data")
JSON_SCRIPT_TYPES = ("application/json", "application/ld+json")
MODULE_ARGS_ATTR = "data-module-args"
TEXT_MARKER_RE = re.compile(r"__COURSE_DATA__\s*=\s*")

_decoder = json.JSONDecoder()


class ParseError(ValueError):
    """The body could not be interpreted as a recognisable document."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _children(node: Any) -> Iterator[Any]:
    return iter(node.values() if isinstance(node, dict) else node)


def freeze(value: Any) -> Any:
    """Return a read-only copy of a decoded JSON value.

    Iterative, so any depth the JSON decoder accepts can be frozen.
    """
    if not _is_container(value):
        return value

    # pre-order walk; reversed, every child is frozen before its parent
    order = []
    pending = [value]
    while pending:
        node = pending.pop()
        order.append(node)
        pending.extend(c for c in _children(node) if _is_container(c))

    frozen = {}
    for node in reversed(order):
        if isinstance(node, dict):
            frozen[id(node)] = MappingProxyType(
                {k: frozen[id(v)] if _is_container(v) else v for k, v in node.items()}
            )
        else:
            frozen[id(node)] = tuple(
                frozen[id(v)] if _is_container(v) else v for v in node
            )
    return frozen[id(value)]


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _loads(text: str) -> Optional[Any]:
    """Decode ``text`` as JSON; return None unless the root is a container."""
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if _is_container(value) else None


def _parse_direct(body: str) -> Optional[Any]:
    return _loads(body.strip())


def _iter_embedded(body: str) -> Iterator[Tuple[str, Optional[Any]]]:
    """Yield ``(source, decoded value or None)`` for each embedded candidate."""
    soup = BeautifulSoup(body, "lxml")

    for script_id in EMBEDDED_SCRIPT_IDS:
        tag = soup.find("script", id=script_id)
        if tag is None:
            continue
        script_type = (tag.get("type") or "").lower()
        if script_type in JSON_SCRIPT_TYPES:
            yield f"script#{script_id}", _loads("".join(str(c) for c in tag.contents))

    for tag in soup.find_all(attrs={MODULE_ARGS_ATTR: True}):
        yield MODULE_ARGS_ATTR, _loads(tag[MODULE_ARGS_ATTR])

    for m in TEXT_MARKER_RE.finditer(body):
        try:
            value, _ = _decoder.raw_decode(body, m.end())
        except (ValueError, RecursionError):
            value = None
        yield "text marker", value if _is_container(value) else None


def _accept_embedded(source: str, value: Any) -> bool:
    # module-args blocks carry many unrelated widgets; only the course one counts
    if source == MODULE_ARGS_ATTR:
        return isinstance(value, dict) and "course" in value
    return True


def _parse_embedded(body: str) -> Optional[Any]:
    for source, value in _iter_embedded(body):
        if value is None or not _accept_embedded(source, value):
            logger.debug("Embedded candidate from %s rejected", source)
            continue
        logger.debug("Decoded embedded document from %s", source)
        return value
    return None


SUB_PARSERS: Tuple[Tuple[str, Callable[[str], Optional[Any]]], ...] = (
    ("direct", _parse_direct),
    ("embedded", _parse_embedded),
)


def parse(body: str) -> Any:
    """Decode ``body`` into a read-only document tree.

    Sub-parsers are tried in a fixed order: direct JSON first, then the
    embedded-data scan of an HTML page.

    Raises:
        ParseError: If no sub-parser recognises a document.
    """
    if not body or not body.strip():
        raise ParseError(NO_RECOGNIZABLE_DOCUMENT)

    for name, sub_parser in SUB_PARSERS:
        value = sub_parser(body)
        if value is not None:
            logger.debug("Parsed document with %s parser (%d chars)", name, len(body))
            return freeze(value)
        logger.debug("%s parser found no document", name)

    raise ParseError(NO_RECOGNIZABLE_DOCUMENT)
