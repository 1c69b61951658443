"""RSS 2.0 rendering module for the Webflow RSS feed."""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from email.utils import format_datetime
from typing import Any

from .config import FeedConfig
from .content import extract_content
from .logging_config import create_execution_logger
from .models import ContentRecord, FeedDocument, FeedItem

CONTENT_NAMESPACE = "http://purl.org/rss/1.0/modules/content/"
ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"

UNTITLED = "Untitled Post"


class RenderError(ValueError):
    """Raised when a record field cannot be turned into text."""


def escape_xml(value: Any) -> str:
    """
    Escape the five reserved XML characters.

    Not idempotent: escaping ``&amp;`` again yields ``&amp;amp;``.

    Args:
        value: Anything; falsy values render as an empty string

    Returns:
        XML-escaped text
    """
    if not value:
        return ""

    text = str(value)
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    text = text.replace('"', "&quot;")
    text = text.replace("'", "&#39;")

    return text


def cdata(text: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded terminator."""
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def format_rfc1123(moment: datetime) -> str:
    """Format a datetime the way RSS expects, e.g. ``Mon, 01 Jan 2024 10:00:00 GMT``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return format_datetime(moment.astimezone(UTC), usegmt=True)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return str(value)
    except Exception as e:
        raise RenderError(f"Cannot render {type(value).__name__} as text") from e


def _first_text(fields: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = fields.get(name)
        if value:
            return _as_text(value)
    return ""


def build_feed_item(record: ContentRecord, site_url: str, now: datetime) -> FeedItem:
    """Map one content record to a FeedItem.

    Args:
        record: Record fetched from the collection
        site_url: Public base URL of the site, without trailing slash
        now: Fallback publication date shared by the whole response

    Returns:
        FeedItem with raw (unescaped) values

    Raises:
        RenderError: If a field value cannot be converted to text
    """
    fields = record.field_data if isinstance(record.field_data, Mapping) else {}

    slug = _first_text(fields, "slug") or _as_text(record.id or "")
    link = f"{site_url}/blog/{slug}"

    return FeedItem(
        title=_first_text(fields, "name", "title") or UNTITLED,
        link=link,
        guid=link,
        published=record.created_on or now,
        author=_first_text(fields, "author"),
        summary=_first_text(fields, "summary", "excerpt"),
        body_html=extract_content(fields),
    )


class FeedRenderer:
    """Renders Webflow records as an RSS 2.0 document."""

    def __init__(self, config: FeedConfig, execution_id: str | None = None):
        """Initialize FeedRenderer with channel metadata.

        Args:
            config: Channel-level feed configuration
            execution_id: Execution ID for logging context
        """
        self.config = config
        self.logger = create_execution_logger("feed_renderer", execution_id)

    def render_item(self, record: ContentRecord, now: datetime) -> str:
        """Render one record as an ``<item>`` fragment.

        A record whose fields cannot be rendered is emitted with the
        placeholder title and an empty body instead of failing the feed.
        """
        try:
            item = build_feed_item(record, self.config.site_url, now)
        except RenderError as e:
            self.logger.warning(
                f"Failed to render record {record.id!r}: {e}", error=str(e)
            )
            item = build_feed_item(
                ContentRecord(id=_safe_id(record)), self.config.site_url, now
            )

        return self.format_item(item)

    def format_item(self, item: FeedItem) -> str:
        """Serialize a FeedItem to XML."""
        author = escape_xml(item.author)
        author_line = f"\n      <author>{author}</author>" if author else ""

        # The description is escaped before CDATA wrapping on purpose
        description = cdata(escape_xml(item.summary))

        return f"""
    <item>
      <title>{escape_xml(item.title)}</title>
      <link>{item.link}</link>
      <guid isPermaLink="true">{item.guid}</guid>
      <pubDate>{format_rfc1123(item.published)}</pubDate>{author_line}
      <description>{description}</description>
      <content:encoded>{cdata(item.body_html)}</content:encoded>
    </item>"""

    def build_document(
        self, records: Iterable[ContentRecord], now: datetime | None = None
    ) -> FeedDocument:
        """Render every record and wrap the fragments in a FeedDocument."""
        now = now or datetime.now(UTC)
        items = [self.render_item(record, now) for record in records]

        return FeedDocument(
            title=self.config.title,
            link=self.config.site_url,
            description=self.config.description,
            language=self.config.language,
            last_build_date=now,
            self_link=self.config.feed_url,
            items=items,
        )

    def render_feed(
        self,
        records: Iterable[ContentRecord],
        now: datetime | None = None,
        limit: int | None = None,
    ) -> str:
        """
        Render a complete RSS document.

        Items keep the order of ``records``; nothing is sorted or deduplicated.

        Args:
            records: Records returned by the collection fetcher
            now: Build time, also the fallback pubDate for undated records
            limit: Render only the first ``limit`` records

        Returns:
            The XML document as a string
        """
        records = list(records)
        if limit is not None:
            records = records[:limit]

        document = self.build_document(records, now)
        self.logger.info(
            "Rendered feed",
            items_count=len(document.items),
            feed_url=document.self_link,
        )
        return self.format_document(document)

    def format_document(self, document: FeedDocument) -> str:
        """Serialize a FeedDocument to XML."""
        items = "".join(document.items)

        return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="{CONTENT_NAMESPACE}"
     xmlns:atom="{ATOM_NAMESPACE}">
  <channel>
    <title>{escape_xml(document.title)}</title>
    <link>{document.link}</link>
    <description>{escape_xml(document.description)}</description>
    <language>{document.language}</language>
    <lastBuildDate>{format_rfc1123(document.last_build_date)}</lastBuildDate>
    <atom:link href="{document.self_link}" rel="self" type="application/rss+xml" />{items}
  </channel>
</rss>"""


def _safe_id(record: ContentRecord) -> str:
    try:
        return _as_text(record.id or "")
    except RenderError:
        return ""
