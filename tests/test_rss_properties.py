"""Property-based tests for RSS rendering."""

import html
import xml.etree.ElementTree as ET
from datetime import UTC, datetime

from hypothesis import given
from hypothesis import strategies as st

from webflow_rss.config import FeedConfig
from webflow_rss.models import ContentRecord
from webflow_rss.rss import FeedRenderer, escape_xml

NOW = datetime(2024, 3, 5, 8, 30, 0, tzinfo=UTC)

# Characters allowed in XML 1.0 text
xml_text = st.text(
    alphabet=st.characters(
        min_codepoint=0x20, max_codepoint=0xD7FF, exclude_categories=("Cs",)
    ),
    max_size=80,
)


class TestRssProperties:
    """Property-based tests for escaping and rendering."""

    @given(st.text())
    def test_escaped_text_has_no_reserved_characters(self, text):
        """Escaped output contains no raw markup characters and decodes back."""
        escaped = escape_xml(text)

        for char in "<>\"'":
            assert char not in escaped
        assert html.unescape(escaped) == text

    @given(
        st.lists(
            st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-", min_size=1),
            max_size=15,
        )
    )
    def test_item_order_matches_input(self, slugs):
        """Rendered items appear exactly in the order of the input records."""
        renderer = FeedRenderer(FeedConfig(site_url="https://s.example"), "test")
        records = [
            ContentRecord(id=str(i), field_data={"slug": slug})
            for i, slug in enumerate(slugs)
        ]

        xml = renderer.render_feed(records, now=NOW)
        channel = ET.fromstring(xml.encode("utf-8")).find("channel")
        links = [item.findtext("link") for item in channel.findall("item")]

        assert links == [f"https://s.example/blog/{slug}" for slug in slugs]

    @given(xml_text, xml_text, xml_text, xml_text)
    def test_document_is_well_formed(self, name, summary, author, body):
        """Arbitrary field text never breaks the XML document."""
        renderer = FeedRenderer(FeedConfig(title=name, description=summary), "test")
        record = ContentRecord(
            id="1",
            field_data={
                "name": name,
                "summary": summary,
                "author": author,
                "content": body,
            },
        )

        xml = renderer.render_feed([record], now=NOW)
        item = ET.fromstring(xml.encode("utf-8")).find("channel").find("item")

        assert item.findtext("title") == (name or "Untitled Post")
        assert item.findtext("description") == escape_xml(summary)
