import logging

import requests
from bs4 import BeautifulSoup

from .errors import ExtractionError
from .models import ArticleData, Preview

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

CONTENT_SELECTORS = (
    "article",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    "main",
    ".main-content",
)
MIN_CONTENT_CHARS = 100

UNTITLED = "Untitled Article"
NO_CONTENT = "Unable to extract content from this URL"


def _title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    h1 = soup.find("h1")
    if h1 and h1.get_text(strip=True):
        return h1.get_text(strip=True)
    og = soup.find("meta", attrs={"property": "og:title"})
    if og and (og.get("content") or "").strip():
        return og["content"].strip()
    return UNTITLED

def _content(soup: BeautifulSoup) -> str:
    for selector in CONTENT_SELECTORS:
        text = " ".join(el.get_text(" ", strip=True) for el in soup.select(selector)).strip()
        if len(text) > MIN_CONTENT_CHARS:
            return text
    return " ".join(p.get_text(" ", strip=True) for p in soup.find_all("p")).strip()


class ContentExtractor:
    """Turn a URL into ``ArticleData`` with one GET and no retries."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        try:
            resp = requests.get(url, timeout=self.timeout, headers={"User-Agent": USER_AGENT})
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            raise ExtractionError("Unable to fetch content from the provided URL") from e
        return resp.text

    def parse(self, html: str, url: str) -> ArticleData:
        try:
            soup = BeautifulSoup(html, "lxml")
            title = _title(soup)
            content = _content(soup)
        except Exception as e:
            logger.warning("Could not parse page %s: %s", url, e)
            raise ExtractionError("Unable to parse content from the provided URL") from e
        return ArticleData(title=title, content=content or NO_CONTENT, source_url=url)

    def extract(self, url: str) -> ArticleData:
        article = self.parse(self.fetch(url), url)
        logger.info("Extracted %d chars from %s", len(article.content), url)
        return article

    def preview(self, url: str) -> Preview:
        article = self.extract(url)
        return Preview(title=article.title, content=article.content[:500] + "...", url=url)
