"""Tests for newsverify.extract: URL fetch and HTML content isolation.

``requests.get`` is replaced by a stub, so nothing leaves the process.
"""

import pytest
import requests

from newsverify import extract
from newsverify.errors import ExtractionError
from newsverify.extract import NO_CONTENT, UNTITLED, ContentExtractor

LONG = "The harbour authority confirmed the dredging work will finish before the autumn storms arrive. " * 2


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def serve(monkeypatch):
    """Make ``requests.get`` return the given HTML; returns the list of calls."""
    calls = []

    def _serve(html, status_code=200):
        def fake_get(url, **kwargs):
            calls.append((url, kwargs))
            return FakeResponse(html, status_code)
        monkeypatch.setattr(extract.requests, "get", fake_get)
        return calls

    return _serve


class TestTitle:
    def test_title_tag(self, serve):
        serve(f"<html><head><title> Harbour news </title></head><body><article>{LONG}</article></body></html>")
        assert ContentExtractor().extract("https://example.com/a").title == "Harbour news"

    def test_h1_when_title_missing(self, serve):
        serve(f"<html><body><h1>Dredging update</h1><h1>Second</h1><p>{LONG}</p></body></html>")
        assert ContentExtractor().extract("https://example.com/a").title == "Dredging update"

    def test_og_title_when_no_title_or_h1(self, serve):
        serve(f'<html><head><meta property="og:title" content="OG headline"></head><body><p>{LONG}</p></body></html>')
        assert ContentExtractor().extract("https://example.com/a").title == "OG headline"

    def test_untitled_fallback(self, serve):
        serve(f"<html><body><p>{LONG}</p></body></html>")
        assert ContentExtractor().extract("https://example.com/a").title == UNTITLED


class TestContent:
    def test_article_element(self, serve):
        serve(f"<html><body><nav>Menu</nav><article><p>{LONG}</p></article><footer>x</footer></body></html>")
        article = ContentExtractor().extract("https://example.com/a")
        assert article.content == LONG.strip()
        assert article.source_url == "https://example.com/a"

    def test_short_candidate_is_skipped(self, serve):
        serve(f"<html><body><article>Too short</article><main>{LONG}</main></body></html>")
        assert ContentExtractor().extract("https://example.com/a").content == LONG.strip()

    def test_class_selector(self, serve):
        serve(f'<html><body><div class="entry-content">{LONG}</div></body></html>')
        assert ContentExtractor().extract("https://example.com/a").content == LONG.strip()

    def test_paragraph_fallback(self, serve):
        serve("<html><body><div><p>First paragraph.</p><p>Second paragraph.</p></div></body></html>")
        assert ContentExtractor().extract("https://example.com/a").content == "First paragraph. Second paragraph."

    def test_nothing_extractable(self, serve):
        serve("<html><body><div>   </div></body></html>")
        assert ContentExtractor().extract("https://example.com/a").content == NO_CONTENT


class TestFetch:
    def test_sends_timeout_and_user_agent(self, serve):
        calls = serve(f"<html><body><article>{LONG}</article></body></html>")
        ContentExtractor(timeout=10).extract("https://example.com/a")
        assert len(calls) == 1
        url, kwargs = calls[0]
        assert url == "https://example.com/a"
        assert kwargs["timeout"] == 10
        assert kwargs["headers"]["User-Agent"].startswith("Mozilla/5.0")

    def test_http_error_status(self, serve):
        calls = serve("<html>gone</html>", status_code=404)
        with pytest.raises(ExtractionError):
            ContentExtractor().extract("https://example.com/missing")
        assert len(calls) == 1  # no retry

    def test_network_failure(self, monkeypatch):
        def boom(url, **kwargs):
            raise requests.ConnectionError("connection refused")
        monkeypatch.setattr(extract.requests, "get", boom)
        with pytest.raises(ExtractionError, match="Unable to fetch content"):
            ContentExtractor().extract("https://example.com/a")

    def test_preview_truncates(self, serve):
        serve(f"<html><head><title>Harbour</title></head><body><article>{LONG * 5}</article></body></html>")
        preview = ContentExtractor().preview("https://example.com/a")
        assert preview.title == "Harbour"
        assert preview.content.endswith("...")
        assert len(preview.content) == 503
