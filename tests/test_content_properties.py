"""Property-based tests for the content extractor."""

from hypothesis import given
from hypothesis import strategies as st

from webflow_rss.content import CONTENT_FIELDS, extract_content, is_likely_content

plain_text = st.text(
    alphabet=st.characters(exclude_characters="<>\r", exclude_categories=("Cs",)),
    min_size=1,
    max_size=300,
)


class TestContentProperties:
    """Property-based tests for content extraction."""

    @given(st.text(max_size=200), st.sampled_from(["<p>", "<h", "<div"]))
    def test_html_marker_always_likely_content(self, text, marker):
        """Any text carrying a paragraph, heading or div marker is content."""
        assert is_likely_content(text + marker)

    @given(st.sampled_from(CONTENT_FIELDS), plain_text)
    def test_plain_text_conversion_removes_newlines(self, field_name, text):
        """Plain text candidates never keep raw newlines after conversion."""
        result = extract_content({field_name: text})

        assert "\n" not in result
        assert result.replace("</p><p>", "").replace("<br>", "") == text.replace(
            "\n", ""
        )

    @given(st.sampled_from(CONTENT_FIELDS), st.text(min_size=1, max_size=200))
    def test_html_candidate_is_untouched(self, field_name, text):
        """Candidates that already look like HTML are returned verbatim."""
        html = f"<section>{text}</section>"

        assert extract_content({field_name: html}) == html
