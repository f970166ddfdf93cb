# newsverify/scoring.py
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from .models import ArticleData

BASE_SCORE = 50

TRUSTED_DOMAINS = (
    "reuters.com", "apnews.com", "bbc.com", "bbc.co.uk", "npr.org",
    "cnn.com", "nytimes.com", "washingtonpost.com",
    "theguardian.com", "wsj.com", "nature.com",
    "science.org", "who.int", "cdc.gov", "nih.gov",
)

QUESTIONABLE_DOMAINS = (
    "infowars.com", "breitbart.com", "naturalnews.com",
)

# (name, phrases, delta): fires once if any phrase occurs in the lowercased text
PHRASE_RULES: Tuple[Tuple[str, Tuple[str, ...], int], ...] = (
    ("attribution", ("according to", "research shows"), 10),
    ("evidence", ("study", "data"), 5),
    ("authority", ("expert", "professor"), 5),
    ("sensational", ("shocking", "unbelievable"), -10),
    ("conspiratorial", ("they don't want you to know",), -15),
    ("miracle_or_secret", ("miracle cure", "secret"), -10),
)

SHORT_CONTENT_CHARS = 50


def _hostname(url: str) -> Optional[str]:
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host.lower() if host else None

def _domain_matches(host: str, domains) -> bool:
    return any(host == d or host.endswith("." + d) for d in domains)

def domain_adjustment(url: str) -> Tuple[Optional[str], int]:
    host = _hostname(url)
    if not host:
        return None, 0
    if _domain_matches(host, TRUSTED_DOMAINS):
        return "trusted_domain", 30
    if _domain_matches(host, QUESTIONABLE_DOMAINS):
        return "questionable_domain", -30
    return None, 0

def mean_sentence_length(text: str) -> Optional[float]:
    fragments = [s for s in text.split(".") if s.strip()]
    if not fragments:
        return None
    return sum(len(s) for s in fragments) / len(fragments)

def _sentence_adjustment(text: str) -> Tuple[Optional[str], int]:
    mean = mean_sentence_length(text)
    if mean is None:
        return None, 0
    if 20 < mean < 200:
        return "well_formed_prose", 5
    if mean < 10 or mean > 300:
        return "fragmentary_or_run_on", -10
    # 10-20 and 200-300 are left alone on purpose
    return None, 0


def score_breakdown(article: ArticleData) -> List[Tuple[str, int]]:
    """Return every rule that fired for ``article`` as ``(name, delta)`` pairs.

    The list starts with the base score, so ``sum`` of the deltas is the
    unclamped score.
    """
    fired: List[Tuple[str, int]] = [("base", BASE_SCORE)]

    if not article.is_text:
        name, delta = domain_adjustment(article.source_url)
        if name:
            fired.append((name, delta))

    text = article.content.lower()
    for name, phrases, delta in PHRASE_RULES:
        if any(p in text for p in phrases):
            fired.append((name, delta))

    name, delta = _sentence_adjustment(text)
    if name:
        fired.append((name, delta))

    if len(article.content.strip()) < SHORT_CONTENT_CHARS:
        fired.append(("short_content", -20))

    return fired

def clamp_score(value: float) -> int:
    return int(round(max(0, min(100, value))))

def score_article(article: ArticleData) -> int:
    return clamp_score(sum(delta for _, delta in score_breakdown(article)))


def credibility_band(score: int) -> str:
    """Single banding table used everywhere: credible / mixed / unreliable."""
    if score >= 70:
        return "credible"
    if score >= 40:
        return "mixed"
    return "unreliable"
