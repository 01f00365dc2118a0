"""A small selector language for navigating parsed documents.

A :class:`PathQuery` is an ordered sequence of :class:`Key` and
:class:`Index` steps. Resolving it against a document either reaches a node
or yields :data:`ABSENT`. Missing keys, out-of-range indices and shape
mismatches all collapse into the same ``ABSENT`` result, so resolution never
raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Tuple, Union


class _Absent:
    """Sentinel for "missing or wrong shape". Distinct from JSON ``null``."""

    _instance = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class Key:
    """Look up ``name`` in a mapping."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    """Take element ``i`` of a sequence (0-based, no negative indexing)."""

    i: int

    def __str__(self) -> str:
        return f"[{self.i}]"


Step = Union[Key, Index]

_TOKEN_RE = re.compile(r"([^.\[\]]+)|\[(\d+)\]|(\.)")


def _is_sequence(node: Any) -> bool:
    return isinstance(node, (list, tuple))


def _step(node: Any, step: Step) -> Any:
    if isinstance(step, Key):
        if isinstance(node, Mapping) and step.name in node:
            return node[step.name]
        return ABSENT
    if _is_sequence(node) and 0 <= step.i < len(node):
        return node[step.i]
    return ABSENT


@dataclass(frozen=True)
class PathQuery:
    """An immutable, ordered sequence of steps."""

    steps: Tuple[Step, ...] = ()

    @classmethod
    def of(cls, *parts: Union[str, int, Step]) -> "PathQuery":
        """Build a query from keys (``str``) and indices (``int``)."""
        return cls(tuple(_to_step(p) for p in parts))

    @classmethod
    def parse(cls, selector: str) -> "PathQuery":
        """Parse a dotted selector such as ``course.instructors[0].name``.

        Raises:
            ValueError: If the selector is malformed.
        """
        steps = []
        pos = 0
        expect_key = True
        for m in _TOKEN_RE.finditer(selector):
            if m.start() != pos:
                break
            pos = m.end()
            key, index, dot = m.groups()
            if key is not None:
                if not expect_key:
                    raise ValueError(f"Missing '.' before {key!r} in selector {selector!r}")
                steps.append(Key(key))
                expect_key = False
            elif index is not None:
                if expect_key and steps:
                    raise ValueError(f"Empty key before index in selector {selector!r}")
                steps.append(Index(int(index)))
                expect_key = False
            else:
                if expect_key:
                    raise ValueError(f"Empty key in selector {selector!r}")
                expect_key = True
        if pos != len(selector):
            raise ValueError(f"Invalid selector {selector!r} at position {pos}")
        if expect_key and steps:
            raise ValueError(f"Selector {selector!r} ends with '.'")
        return cls(tuple(steps))

    def join(self, other: "PathQuery") -> "PathQuery":
        return PathQuery(self.steps + other.steps)

    def __truediv__(self, part: Union[str, int, Step, "PathQuery"]) -> "PathQuery":
        if isinstance(part, PathQuery):
            return self.join(part)
        return PathQuery(self.steps + (_to_step(part),))

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __str__(self) -> str:
        out = ""
        for step in self.steps:
            if isinstance(step, Key) and out:
                out += "."
            out += str(step)
        return out

    def resolve(self, doc: Any) -> Any:
        return resolve(doc, self)


def _to_step(part: Union[str, int, Step]) -> Step:
    if isinstance(part, (Key, Index)):
        return part
    # bool is an int subclass but never a valid index
    if isinstance(part, bool):
        raise TypeError(f"Cannot build a path step from {part!r}")
    if isinstance(part, int):
        return Index(part)
    if isinstance(part, str):
        return Key(part)
    raise TypeError(f"Cannot build a path step from {part!r}")


def resolve(doc: Any, path: PathQuery) -> Any:
    """Walk ``path`` from ``doc`` and return the node reached, or ``ABSENT``.

    Pure and total: the first step that does not apply stops the walk.
    """
    node = doc
    for step in path.steps:
        node = _step(node, step)
        if node is ABSENT:
            return ABSENT
    return node
