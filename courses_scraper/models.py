"""Models shared across the scraper: signals, fetch outcomes and records."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignalKind(str, enum.Enum):
    """Classification of a raw transport outcome."""

    OK = "ok"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class Signal:
    """A classified response. Only ``OK`` carries a body."""

    kind: SignalKind
    body: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is not SignalKind.OK and self.body is not None:
            raise ValueError(f"{self.kind.name} signal cannot carry a body")

    @classmethod
    def ok(cls, body: str) -> "Signal":
        return cls(SignalKind.OK, body)

    @property
    def is_ok(self) -> bool:
        return self.kind is SignalKind.OK


NOT_FOUND = Signal(SignalKind.NOT_FOUND)
RATE_LIMITED = Signal(SignalKind.RATE_LIMITED)
SERVER_ERROR = Signal(SignalKind.SERVER_ERROR)
NETWORK_ERROR = Signal(SignalKind.NETWORK_ERROR)


@dataclass(frozen=True)
class FetchOutcome:
    """What the transport reported for a single GET."""

    status_code: Optional[int] = None
    body: Optional[str] = None
    transport_error: bool = False
    url: Optional[str] = None


class Price(BaseModel):
    """Course price: an amount with an optional currency, or free."""

    model_config = ConfigDict(frozen=True)

    amount: Optional[float] = None
    currency: Optional[str] = None
    is_free: bool = False

    @classmethod
    def free(cls) -> "Price":
        return cls(is_free=True)


class AuthorRecord(BaseModel):
    """A single course author."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    contact_link: Optional[str] = None


class CourseRecord(BaseModel):
    """Structured data extracted from one course page."""

    model_config = ConfigDict(frozen=True)

    category: str = ""
    subcategory: str = ""
    price: Optional[Price] = None
    rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    average_rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    enrolled: int = Field(default=0, ge=0)
    topic: Optional[str] = None
    authors: List[AuthorRecord] = Field(default_factory=list)


class ScrapeResult(BaseModel):
    """Outcome of scraping one course in a batch."""

    identifier: str
    course: Optional[CourseRecord] = None
    signal: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Return True when a course record was produced."""
        return self.course is not None and self.error is None
