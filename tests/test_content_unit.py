"""Unit tests for the content extractor."""

from webflow_rss.content import (
    CONTENT_FIELDS,
    extract_content,
    is_likely_content,
    process_rich_text,
)

PROSE = "word " * 30  # 150 characters, 31 space-separated chunks


class TestExtractContentUnit:
    """Unit tests for extract_content."""

    def test_html_content_field_is_returned_unchanged(self):
        assert extract_content({"content": "<p>Hello</p>"}) == "<p>Hello</p>"

    def test_plain_text_body_is_converted_to_html(self):
        fields = {"body": "Line one\n\nLine two\nLine three"}

        assert extract_content(fields) == "Line one</p><p>Line two<br>Line three"

    def test_candidate_fields_are_probed_in_priority_order(self):
        fields = {
            "blog-content": "<p>last</p>",
            "post-body": "<p>third</p>",
            "body": "<p>second</p>",
        }

        assert extract_content(fields) == "<p>second</p>"

    def test_empty_candidate_is_skipped(self):
        fields = {"content": "", "body": None, "rich-text": "<p>Rich</p>"}

        assert extract_content(fields) == "<p>Rich</p>"

    def test_candidate_list_order(self):
        assert CONTENT_FIELDS == (
            "content",
            "body",
            "post-body",
            "main-content",
            "rich-text",
            "blog-content",
        )

    def test_heuristic_selects_long_prose_field(self):
        fields = {"slug": "my-post", "article-text": PROSE}

        assert extract_content(fields) == PROSE + "</p><p>"

    def test_heuristic_concatenates_matches_in_mapping_order(self):
        first = "<div>" + "a" * 120 + "</div>"
        second = "<p>" + "b" * 120 + "</p>"
        fields = {"intro": first, "email": "x" * 150 + "@example.com", "rest": second}

        assert extract_content(fields) == first + "\n\n" + second + "\n\n"

    def test_heuristic_ignores_short_and_non_string_values(self):
        fields = {
            "short": "<p>short</p>",
            "count": 12345,
            "image": {"url": "https://cdn.example.com/" + "x" * 200},
        }

        assert extract_content(fields) == ""

    def test_heuristic_rejects_links_and_emails(self):
        fields = {
            "links": "see http://example.com " + "word " * 30,
            "contact": "reach me at me@example.com " + "word " * 30,
        }

        assert extract_content(fields) == ""

    def test_no_content_returns_empty_string(self):
        assert extract_content({}) == ""
        assert extract_content(None) == ""

    def test_non_string_candidate_is_coerced(self):
        assert extract_content({"content": 42}) == "42"


class TestIsLikelyContentUnit:
    """Unit tests for the content heuristic."""

    def test_html_markers(self):
        assert is_likely_content("<p>short</p>")
        assert is_likely_content("<h2>Heading</h2>")
        assert is_likely_content('<div class="x">block</div>')

    def test_wordy_text_without_links(self):
        assert is_likely_content(PROSE)

    def test_wordy_text_with_link_or_email(self):
        assert not is_likely_content(PROSE + "https://example.com")
        assert not is_likely_content(PROSE + "someone@example.com")

    def test_few_words(self):
        assert not is_likely_content("just a few words here")

    def test_html_marker_wins_over_link(self):
        assert is_likely_content('<p><a href="https://example.com">x</a></p>')


class TestProcessRichTextUnit:
    """Unit tests for rich text normalization."""

    def test_html_passes_through(self):
        html = "<p>One</p>\n\n<p>Two</p>"
        assert process_rich_text(html) == html

    def test_plain_text_breaks(self):
        assert process_rich_text("a\n\nb\nc\n\n") == "a</p><p>b<br>c</p><p>"

    def test_single_angle_bracket_is_plain_text(self):
        assert process_rich_text("1 < 2\n3") == "1 < 2<br>3"

    def test_empty(self):
        assert process_rich_text("") == ""
