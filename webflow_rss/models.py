"""Data models for the Webflow RSS feed."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from dateutil import parser as date_parser


@dataclass(frozen=True)
class ContentRecord:
    """One item of a Webflow CMS collection."""

    id: str
    created_on: datetime | None = None
    field_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: Any) -> "ContentRecord":
        """Build a record from one element of the API's ``items`` array.

        Missing or malformed attributes degrade to empty values.
        """
        if not isinstance(raw, Mapping):
            return cls(id="")

        field_data = raw.get("fieldData")
        if not isinstance(field_data, Mapping):
            field_data = {}

        return cls(
            id=str(raw.get("id") or ""),
            created_on=parse_timestamp(raw.get("createdOn")),
            field_data=dict(field_data),
        )


@dataclass
class FeedItem:
    """Represents a single rendered RSS item."""

    title: str
    link: str
    guid: str
    published: datetime
    summary: str
    body_html: str
    author: str = ""


@dataclass
class FeedDocument:
    """Represents the channel envelope of the feed."""

    title: str
    link: str
    description: str
    language: str
    last_build_date: datetime
    self_link: str
    items: list[str] = field(default_factory=list)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an API timestamp into an aware UTC datetime, or None."""
    if isinstance(value, datetime):
        published = value
    elif isinstance(value, str) and value.strip():
        try:
            published = date_parser.parse(value)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if published.tzinfo is None:
        return published.replace(tzinfo=UTC)
    try:
        return published.astimezone(UTC)
    except (ValueError, OverflowError):
        return None
