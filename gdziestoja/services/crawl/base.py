from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from gdziestoja.models.records import VenueCreate

UNKNOWN_AUTHOR = "Unknown"


class ExtractionError(RuntimeError):
    """A required field is missing from a page or cannot be converted."""


def format_utc(dt: datetime) -> str:
    """Render as 2024-05-01T10:00:00.000Z."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def to_iso_utc(value: Optional[str], *, field_name: str = "datetime") -> str:
    """Normalize a <time datetime="..."> value to an absolute UTC timestamp.

    Offsets are honoured; values without one are taken as UTC. Missing or
    malformed input raises ExtractionError.
    """
    raw = (value or "").strip()
    if not raw:
        raise ExtractionError(f"Missing {field_name}")
    if raw[-1] in "Zz":
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ExtractionError(f"Malformed {field_name}: {value!r}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_utc(dt)


def node_text(node) -> str:
    if node is None:
        return ""
    return (node.text() or "").strip()


def first_text(scope, selectors: Sequence[str], default: str = UNKNOWN_AUTHOR) -> str:
    """Try each selector in order under scope; first non-empty text wins, else default."""
    if scope is None:
        return default
    for sel in selectors:
        text = node_text(scope.css_first(sel))
        if text:
            return text
    return default


@dataclass
class VenueRecord:
    title: str
    lat: str
    lng: str
    description: str
    date_added: str  # ISO8601 UTC
    author: str
    rating: float
    pages_count: int
    source_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_create(self) -> VenueCreate:
        return VenueCreate(
            title=self.title,
            location=(self.lat, self.lng),
            description=self.description,
            date_added=self.date_added,
            author=self.author,
            rating=self.rating,
        )


@dataclass
class CommentRecord:
    text: str
    author: str
    score: str
    timestamp: str  # ISO8601 UTC
    # Nested under the reply-indentation container on the page
    is_reply: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Spider:
    """Minimal spider contract.

    Subclasses turn the raw markup of the pages they know into
    VenueRecord / CommentRecord dataclasses.
    """

    name: str = "base"

