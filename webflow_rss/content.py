"""Main-body extraction for Webflow CMS records."""

from collections.abc import Mapping
from typing import Any

# Field slugs commonly used for the post body, in priority order
CONTENT_FIELDS = (
    "content",
    "body",
    "post-body",
    "main-content",
    "rich-text",
    "blog-content",
)

# Only strings longer than this are considered by the fallback scan
MIN_CONTENT_LENGTH = 100
MIN_CONTENT_WORDS = 20

HTML_MARKERS = ("<p>", "<h", "<div")


def extract_content(fields: Mapping[str, Any] | None) -> str:
    """Pick the field holding the main body of a record and return it as HTML.

    The known content fields are probed first and the first non-empty one
    wins. When none is present, every long string value that looks like
    prose is concatenated, in mapping order.

    Args:
        fields: The record's ``fieldData`` mapping

    Returns:
        HTML body, or an empty string when nothing qualifies
    """
    if not isinstance(fields, Mapping):
        return ""

    content = ""
    for field_name in CONTENT_FIELDS:
        value = fields.get(field_name)
        if value:
            content = value if isinstance(value, str) else str(value)
            break

    if not content:
        for value in fields.values():
            if (
                isinstance(value, str)
                and len(value) > MIN_CONTENT_LENGTH
                and is_likely_content(value)
            ):
                content += value + "\n\n"

    if content:
        content = process_rich_text(content)

    return content


def is_likely_content(text: str) -> bool:
    """Tell prose or rich text apart from metadata such as emails or URLs."""
    if any(marker in text for marker in HTML_MARKERS):
        return True
    return (
        len(text.split(" ")) > MIN_CONTENT_WORDS
        and "@" not in text
        and "http" not in text
    )


def process_rich_text(content: str) -> str:
    """Return HTML unchanged, convert plain text line breaks to HTML."""
    if not content:
        return ""

    if "<" in content and ">" in content:
        return content

    return content.replace("\n\n", "</p><p>").replace("\n", "<br>")
