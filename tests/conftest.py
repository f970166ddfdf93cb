"""Shared test fixtures.

Settings are read at import time, so the environment is pinned before any
``newsverify`` module is imported: in-memory history, no Firebase, no
text-generation key, and no ``.env`` file.
"""

import os

os.environ["ENV_FILE"] = os.path.join(os.path.dirname(__file__), "no-such.env")
os.environ["HISTORY_BACKEND"] = "memory"
for _var in ("OPENAI_API_KEY", "FIREBASE_PROJECT_ID", "FIREBASE_CREDENTIALS"):
    os.environ.pop(_var, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from newsverify.ai import AIAnalyzer  # noqa: E402
from newsverify.analyzer import NewsAnalyzer  # noqa: E402
from newsverify.errors import AuthError, ExtractionError  # noqa: E402
from newsverify.firebase import AuthUser  # noqa: E402
from newsverify.history import InMemoryHistoryStore  # noqa: E402
from newsverify.main import create_app  # noqa: E402
from newsverify.models import ArticleData, Preview  # noqa: E402

ARTICLE_TEXT = (
    "According to officials, the new transit line will open next spring. "
    "A study found that commute times could fall by a fifth for most riders. "
    "Experts say the project stayed close to its original budget. "
    "The city reported that construction noise complaints dropped last year."
)


class FakeAuthenticator:
    users = {"token-alice": AuthUser(id="alice"), "token-bob": AuthUser(id="bob")}

    def get_user(self, token):
        try:
            return self.users[token]
        except KeyError:
            raise AuthError("Please provide a valid authentication token")


class FakeExtractor:
    """Serves canned pages by URL and records every call."""

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []

    def extract(self, url):
        self.calls.append(url)
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise ExtractionError("Unable to fetch content from the provided URL")
        return ArticleData(title=page[0], content=page[1], source_url=url)

    def preview(self, url):
        article = self.extract(url)
        return Preview(title=article.title, content=article.content[:500] + "...", url=url)


@pytest.fixture
def store():
    return InMemoryHistoryStore()


@pytest.fixture
def extractor():
    return FakeExtractor({
        "https://www.reuters.com/world/transit": ("Transit line opens", ARTICLE_TEXT),
        "https://broken.example.com/page": ExtractionError("Unable to fetch content from the provided URL"),
    })


@pytest.fixture
def analyzer(extractor, store):
    return NewsAnalyzer(extractor, AIAnalyzer(), store)


@pytest.fixture
def app(analyzer, store):
    return create_app(analyzer=analyzer, store=store, authenticator=FakeAuthenticator())


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def alice():
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob():
    return {"Authorization": "Bearer token-bob"}
