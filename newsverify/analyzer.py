import logging
from typing import Optional

from .ai import AIAnalyzer
from .errors import ValidationError
from .extract import ContentExtractor
from .history import HistoryStore
from .models import TEXT_SOURCE, AnalysisResult, ArticleData, Preview

logger = logging.getLogger(__name__)


def text_title(content: str) -> str:
    for line in content.splitlines():
        line = line.strip()
        if line:
            return line if 10 < len(line) < 100 else TEXT_SOURCE
    return TEXT_SOURCE


class NewsAnalyzer:
    """URL or text in, ``AnalysisResult`` out, saved to the user's history.

    Built once at startup and shared by every request; holds no per-request
    state.
    """

    def __init__(self, extractor: ContentExtractor, ai: AIAnalyzer, store: Optional[HistoryStore] = None):
        self.extractor = extractor
        self.ai = ai
        self.store = store

    def build_article(self, url: Optional[str] = None, content: Optional[str] = None) -> ArticleData:
        url = (url or "").strip()
        if url:
            return self.extractor.extract(url)
        if content and content.strip():
            return ArticleData(title=text_title(content), content=content, source_url=TEXT_SOURCE)
        raise ValidationError("Either URL or content must be provided")

    def analyze(self, url: Optional[str] = None, content: Optional[str] = None,
                user_id: Optional[str] = None) -> AnalysisResult:
        article = self.build_article(url, content)
        result = self.ai.analyze(article)
        logger.info("Analysed %s for user %s: score=%d",
                    article.source_url, user_id or "anonymous", result.credibility_score)

        if user_id and self.store is not None:
            try:
                self.store.insert(user_id, result)
            except Exception:
                # the caller still gets the analysis; only the history entry is lost
                logger.exception("Failed to save analysis for user %s", user_id)
        return result

    def preview(self, url: Optional[str]) -> Preview:
        if not (url or "").strip():
            raise ValidationError("Please provide a URL to preview")
        return self.extractor.preview(url.strip())
