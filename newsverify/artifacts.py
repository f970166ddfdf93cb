# newsverify/artifacts.py
"""Derived artifacts for a scored article.

Everything here is a pure function of ``(content, score)``: summary, key
points, quotes, one annotated claim, verdict/explanation texts, and the red
flag / positive indicator lists.
"""
import re
from typing import List, NamedTuple

from .models import AnalysisResult, ArticleData, Claim, Verdict, VerificationSource
from .scoring import credibility_band, mean_sentence_length, score_article

KEY_POINT_INDICATORS = ("according to", "research shows", "study found", "data indicates", "experts say")
CLAIM_MARKERS = ("claim", "report", "according to")

QUOTE_RE = re.compile(r'"([^"]{20,200})"')
MAX_KEY_POINTS = 4
MAX_QUOTES = 2

VERIFICATION_SOURCES = (
    VerificationSource(name="Reuters Fact Check", url="https://reuters.com/fact-check"),
    VerificationSource(name="Associated Press", url="https://apnews.com"),
    VerificationSource(name="Snopes", url="https://snopes.com"),
    VerificationSource(name="PolitiFact", url="https://politifact.com"),
)

EXPLANATIONS = {
    "credible": (
        "Based on our analysis, this content appears to be from credible sources with factual "
        "information. The article demonstrates good journalistic standards and cites reliable sources."
    ),
    "mixed": (
        "This content contains some questionable claims that require further verification. While not "
        "entirely unreliable, readers should cross-reference with additional sources."
    ),
    "unreliable": (
        "This content shows signs of misinformation and should be treated with caution. The article "
        "lacks credible sources and may contain false or misleading information."
    ),
}

FINAL_VERDICTS = {
    "credible": (
        "VERIFIED - This content has been verified as accurate based on reliable sources and "
        "demonstrates good journalistic standards."
    ),
    "mixed": (
        "MIXED - This content contains both accurate and questionable information. Readers should "
        "verify claims independently."
    ),
    "unreliable": (
        "QUESTIONABLE - This content contains significant misinformation and should be verified "
        "before sharing."
    ),
}

CLAIM_VERDICTS = {
    "credible": Verdict.TRUE,
    "mixed": Verdict.MISLEADING,
    "unreliable": Verdict.FALSE,
}

CLAIM_EVIDENCE = {
    "credible": "Verified by multiple reliable sources and fact-checking organizations",
    "mixed": "Partially supported but lacks complete verification",
    "unreliable": "No credible evidence found to support this claim",
}


class Artifacts(NamedTuple):
    summary: str
    key_points: List[str]
    quotes: List[str]
    claims: List[Claim]
    explanation: str
    final_verdict: str
    red_flags: List[str]
    positive_indicators: List[str]


def _sentences(content: str, min_len: int) -> List[str]:
    return [s.strip() for s in content.split(".") if len(s.strip()) > min_len]


def summarize(content: str) -> str:
    sentences = _sentences(content, 20)
    summary = ". ".join(sentences[:3])
    return summary + ("." if len(sentences) > 3 else "")

def key_points(content: str) -> List[str]:
    sentences = _sentences(content, 20)
    points = [s for s in sentences if any(i in s.lower() for i in KEY_POINT_INDICATORS)][:MAX_KEY_POINTS]
    if len(points) < 3:
        for s in sentences:
            if len(points) >= MAX_KEY_POINTS:
                break
            if s not in points:
                points.append(s)
    return points

def extract_quotes(content: str) -> List[str]:
    # real quotes only; an article without quoted speech gets an empty list
    return [m.group(1) for m in QUOTE_RE.finditer(content)][:MAX_QUOTES]

def main_claim(content: str) -> str:
    sentences = _sentences(content, 30)
    for s in sentences:
        if any(marker in s.lower() for marker in CLAIM_MARKERS):
            return s
    if sentences:
        return sentences[0]
    fragments = _sentences(content, 0)
    if fragments:
        return fragments[0]
    return content.strip()

def analyze_claims(content: str, score: int) -> List[Claim]:
    if not content:
        return []
    band = credibility_band(score)
    return [Claim(claim=main_claim(content), verdict=CLAIM_VERDICTS[band], evidence=CLAIM_EVIDENCE[band])]


def red_flags(content: str) -> List[str]:
    lower = content.lower()
    flags = []
    if "shocking" in lower or "unbelievable" in lower:
        flags.append("Contains sensational language")
    if "secret" in lower or "they don't want you to know" in lower:
        flags.append("Uses conspiracy-style language")
    if len(content) < 100:
        flags.append("Very short content length")
    if len(content.split(".")) < 3:
        flags.append("Limited sentence structure")
    return flags

def positive_indicators(content: str) -> List[str]:
    lower = content.lower()
    found = []
    if "according to" in lower or "research shows" in lower:
        found.append("References external sources")
    if "study" in lower or "data" in lower:
        found.append("Mentions research or data")
    if "expert" in lower or "professor" in lower:
        found.append("Cites expert opinions")
    if 200 < len(content) < 3000:
        found.append("Appropriate content length")
    mean = mean_sentence_length(lower)
    if len(content.split(".")) > 5 and mean is not None and 20 < mean < 200:
        found.append("Well-structured content")
    return found


def generate_artifacts(content: str, score: int) -> Artifacts:
    band = credibility_band(score)
    return Artifacts(
        summary=summarize(content),
        key_points=key_points(content),
        quotes=extract_quotes(content),
        claims=analyze_claims(content, score),
        explanation=EXPLANATIONS[band],
        final_verdict=FINAL_VERDICTS[band],
        red_flags=red_flags(content),
        positive_indicators=positive_indicators(content),
    )


def rule_based_analysis(article: ArticleData) -> AnalysisResult:
    """Score ``article`` with the rule table and attach the derived artifacts."""
    score = score_article(article)
    parts = generate_artifacts(article.content, score)
    return AnalysisResult(
        url=article.source_url,
        title=article.title,
        content=article.content,
        credibility_score=score,
        explanation=parts.explanation,
        summary=parts.summary,
        key_points=parts.key_points,
        quotes=parts.quotes,
        claims=parts.claims,
        red_flags=parts.red_flags,
        positive_indicators=parts.positive_indicators,
        verification_sources=list(VERIFICATION_SOURCES),
        final_verdict=parts.final_verdict,
    )
