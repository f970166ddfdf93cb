# newsverify/ai.py
"""AI-assisted analysis with a rule-based safety net.

The text-generation service is asked for a JSON object describing the
article. Whatever comes back is validated field by field; anything that
cannot be used (service down, no API key, non-JSON answer) falls back to
``rule_based_analysis`` so callers always get a result.
"""
import json
import math
import logging
import re
from typing import Any, Callable, List, Optional, Protocol

from openai import OpenAI, OpenAIError

from .artifacts import CLAIM_VERDICTS, FINAL_VERDICTS, VERIFICATION_SOURCES, main_claim, rule_based_analysis
from .errors import ExternalServiceError
from .models import AnalysisResult, ArticleData, Claim, Verdict
from .scoring import clamp_score, credibility_band

logger = logging.getLogger(__name__)

PROMPT_CONTENT_CHARS = 12000
MAX_CLAIMS = 3
MAX_FLAGS = 5

DEFAULT_EXPLANATION = "Analysis completed using AI-powered fact-checking."
DEFAULT_SUMMARY = "Content analyzed for credibility and accuracy."
DEFAULT_KEY_POINTS = [
    "Content structure analyzed",
    "Source credibility assessed",
    "Factual claims verified",
    "Writing quality evaluated",
]
DEFAULT_EVIDENCE = "AI analysis of content credibility and factual accuracy"

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)

PROMPT_TEMPLATE = """You are an expert fact-checker and news analyst. Analyze the following news content for credibility, accuracy, and potential misinformation.

{url_line}Content: {content}

Respond with a single JSON object in exactly this format:

{{
  "credibilityScore": <number between 0 and 100>,
  "explanation": "<detailed explanation of the credibility assessment>",
  "summary": "<concise summary of the main points>",
  "keyPoints": ["<key point>", "... up to 4"],
  "quotes": ["<notable quote taken verbatim from the content>", "... up to 2"],
  "claims": [
    {{"claim": "<main claim from the article>", "verdict": "<TRUE|FALSE|MISLEADING|UNVERIFIED>", "evidence": "<evidence for this verdict>"}}
  ],
  "redFlags": ["<potential red flag>"],
  "positiveIndicators": ["<positive credibility indicator>"],
  "finalVerdict": "<overall assessment of the content's reliability>"
}}

Consider source credibility and reputation, citations and references, writing quality, emotional language versus factual reporting, consistency with known facts, potential bias, sensationalism or clickbait, and date relevance.

Provide only the JSON response without any additional text.
"""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


class OpenAITextGenerator:
    """``TextGenerator`` backed by the OpenAI chat completions API."""

    def __init__(self, api_key: str, model: str, timeout: float = 30.0, base_url: Optional[str] = None):
        self.model = model
        self._client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

    def generate(self, prompt: str) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.2,
            )
        except OpenAIError as e:
            raise ExternalServiceError(f"Text generation failed: {e.__class__.__name__}") from e
        text = response.choices[0].message.content
        if not text:
            raise ExternalServiceError("Text generation returned an empty response")
        return text


def build_prompt(article: ArticleData) -> str:
    url_line = "" if article.is_text else f"URL: {article.source_url}\n"
    return PROMPT_TEMPLATE.format(url_line=url_line, content=article.content[:PROMPT_CONTENT_CHARS])

def strip_code_fence(text: str) -> str:
    text = text.strip()
    m = _FENCE_RE.match(text)
    return m.group(1).strip() if m else text

def _str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default

def _str_list(value: Any, limit: int, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return list(default)
    return [v.strip() for v in value if isinstance(v, str) and v.strip()][:limit]

def _score(value: Any) -> int:
    if isinstance(value, bool):
        return 50
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 50
    if not math.isfinite(value):
        return 50
    return clamp_score(value)

def _verdict(value: Any) -> Verdict:
    try:
        return Verdict(str(value).strip().upper())
    except ValueError:
        return Verdict.UNVERIFIED

def _claims(value: Any, article: ArticleData, score: int) -> List[Claim]:
    claims = []
    if isinstance(value, list):
        for item in value:
            if not isinstance(item, dict) or not _str(item.get("claim"), ""):
                continue
            claims.append(Claim(
                claim=_str(item.get("claim"), ""),
                verdict=_verdict(item.get("verdict")),
                evidence=_str(item.get("evidence"), DEFAULT_EVIDENCE),
            ))
            if len(claims) >= MAX_CLAIMS:
                break
    if not claims and article.content:
        verdict = CLAIM_VERDICTS[credibility_band(score)]
        claims.append(Claim(claim=main_claim(article.content), verdict=verdict, evidence=DEFAULT_EVIDENCE))
    return claims


def parse_analysis(text: str, article: ArticleData) -> AnalysisResult:
    """Parse a generator response into an ``AnalysisResult``.

    Raises ``ValueError`` when the text is not a JSON object. Every field of a
    well-formed object is checked and replaced by a default when unusable.
    """
    data = json.loads(strip_code_fence(text))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    score = _score(data.get("credibilityScore", data.get("score", 50)))
    return AnalysisResult(
        url=article.source_url,
        title=article.title,
        content=article.content,
        credibility_score=score,
        explanation=_str(data.get("explanation"), DEFAULT_EXPLANATION),
        summary=_str(data.get("summary"), DEFAULT_SUMMARY),
        key_points=_str_list(data.get("keyPoints"), 4, DEFAULT_KEY_POINTS),
        quotes=_str_list(data.get("quotes"), 2, []),
        claims=_claims(data.get("claims"), article, score),
        red_flags=_str_list(data.get("redFlags"), MAX_FLAGS, []),
        positive_indicators=_str_list(data.get("positiveIndicators"), MAX_FLAGS, []),
        verification_sources=list(VERIFICATION_SOURCES),
        final_verdict=_str(data.get("finalVerdict"), FINAL_VERDICTS[credibility_band(score)]),
    )


class AIAnalyzer:
    def __init__(
        self,
        generator: Optional[TextGenerator] = None,
        fallback: Callable[[ArticleData], AnalysisResult] = rule_based_analysis,
    ):
        self.generator = generator
        self.fallback = fallback

    @property
    def enabled(self) -> bool:
        return self.generator is not None

    def analyze(self, article: ArticleData) -> AnalysisResult:
        if self.generator is None:
            logger.debug("No text generator configured, using rule-based analysis")
            return self.fallback(article)

        try:
            return parse_analysis(self.generator.generate(build_prompt(article)), article)
        except ExternalServiceError as e:
            logger.warning("AI analysis unavailable (%s), using rule-based analysis", e)
        except ValueError as e:
            logger.warning("Could not parse AI response (%s), using rule-based analysis", e)
        except Exception:
            logger.exception("AI analysis failed, using rule-based analysis")
        return self.fallback(article)


def analyzer_from_settings(settings) -> AIAnalyzer:
    if not settings.OPENAI_API_KEY:
        logger.info("OPENAI_API_KEY not set, AI-assisted analysis disabled")
        return AIAnalyzer()
    return AIAnalyzer(OpenAITextGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.LLM_MODEL,
        timeout=settings.LLM_TIMEOUT,
        base_url=settings.OPENAI_BASE_URL,
    ))
