"""Tests for HTML extraction helpers."""

from regulatory_monitor.tools.extract_tool import content_hash, extract_page, normalize_url

PAGE_URL = "https://example.gov/licensees-and-businesses/lccp"

PAGE_HTML = """
<html>
<head>
  <title>LCCP update</title>
  <meta name="description" content=" Changes to conditions ">
  <script>var tracking = true;</script>
</head>
<body>
  <h1>Heading</h1>
  <div><p>First para.</p><p>Second
     para.</p></div>
  <ul><li>Item</li></ul>
  <table><tr><td>Cell</td></tr></table>
  <form action="/apply"></form>
  <a href="/docs/report.pdf">PDF</a>
  <a href="#top">Top</a>
  <a href="mailto:licensing@example.gov">Mail</a>
  <a href="https://example.gov/news/">News</a>
  <a href="https://example.gov/news#latest">Duplicate</a>
</body>
</html>
"""


class TestNormalizeUrl:
    def test_strips_fragment_and_trailing_slash(self):
        assert normalize_url("https://example.gov/news/#top") == "https://example.gov/news"

    def test_keeps_query(self):
        assert normalize_url("https://example.gov/search?q=fees") == "https://example.gov/search?q=fees"

    def test_resolves_relative_against_base(self):
        assert normalize_url("../guidance", "https://example.gov/a/page") == "https://example.gov/guidance"


class TestContentHash:
    def test_sha256_hex(self):
        assert content_hash("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    def test_changes_with_content(self):
        assert content_hash("v1") != content_hash("v2")


class TestExtractPage:
    """Single-parse extraction of text, structure and links."""

    def test_text_is_block_paragraphs(self):
        page = extract_page(PAGE_HTML, PAGE_URL)

        assert page.text == "Heading\n\nFirst para.\n\nSecond para.\n\nItem\n\nCell"
        assert "tracking" not in page.text

    def test_structure(self):
        page = extract_page(PAGE_HTML, PAGE_URL)

        assert page.title == "LCCP update"
        assert page.structure.title == "LCCP update"
        assert page.structure.meta_description == "Changes to conditions"
        assert page.structure.table_count == 1
        assert page.structure.form_count == 1
        assert page.structure.pdf_link_count == 1

    def test_links_are_resolved_and_deduplicated(self):
        page = extract_page(PAGE_HTML, PAGE_URL)

        assert page.links == ["https://example.gov/docs/report.pdf", "https://example.gov/news"]

    def test_title_falls_back_to_h1(self):
        page = extract_page("<html><body><h1>Fees guidance</h1></body></html>")

        assert page.title == "Fees guidance"

    def test_text_without_blocks_uses_body(self):
        page = extract_page("<html><body>Just text <b>bold</b></body></html>")

        assert page.text == "Just text bold"
        assert page.title is None

    def test_empty_html(self):
        page = extract_page("")

        assert page.text == ""
        assert page.links == []
        assert page.structure.table_count == 0
