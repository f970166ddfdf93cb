from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TEXT_SOURCE = "Text Analysis"
MAX_STORED_CONTENT = 1000


class CamelModel(BaseModel):
    # JSON is camelCase (credibilityScore, keyPoints, ...), attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Verdict(str, Enum):
    TRUE = "TRUE"
    MISLEADING = "MISLEADING"
    FALSE = "FALSE"
    UNVERIFIED = "UNVERIFIED"


class AnalyzeIn(BaseModel):
    url: Optional[str] = None      # exactly one of url / content
    content: Optional[str] = None


class ArticleData(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    source_url: str = TEXT_SOURCE

    @property
    def is_text(self) -> bool:
        return self.source_url == TEXT_SOURCE


class Claim(CamelModel):
    claim: str
    verdict: Verdict
    evidence: str


class VerificationSource(CamelModel):
    name: str
    url: str


class AnalysisResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    content: str
    credibility_score: int
    explanation: str
    summary: str
    key_points: List[str] = Field(default_factory=list, max_length=4)
    quotes: List[str] = Field(default_factory=list, max_length=2)
    claims: List[Claim] = Field(default_factory=list)
    red_flags: List[str] = Field(default_factory=list)
    positive_indicators: List[str] = Field(default_factory=list)
    verification_sources: List[VerificationSource] = Field(default_factory=list)
    final_verdict: str

    @field_validator("credibility_score", mode="before")
    @classmethod
    def _clamp_score(cls, v):
        return max(0, min(100, int(round(float(v)))))

    @field_validator("content")
    @classmethod
    def _truncate_content(cls, v: str) -> str:
        return v[:MAX_STORED_CONTENT]


class HistoryRecord(AnalysisResult):
    id: str
    user_id: str
    timestamp: datetime


class AnalyzeOut(BaseModel):
    message: str
    analysis: AnalysisResult


class Preview(BaseModel):
    title: str
    content: str
    url: str


class PreviewOut(BaseModel):
    message: str
    preview: Preview


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class HistoryPage(BaseModel):
    analyses: List[HistoryRecord]
    pagination: Pagination


class HistoryOut(BaseModel):
    message: str
    data: HistoryPage


class AnalysisOut(BaseModel):
    message: str
    analysis: HistoryRecord


class CredibilityDistribution(BaseModel):
    high: int = 0
    medium: int = 0
    low: int = 0


class AnalysisStats(CamelModel):
    total_analyses: int = 0
    credibility_distribution: CredibilityDistribution = Field(default_factory=CredibilityDistribution)
    average_credibility: int = 0


class StatsOut(BaseModel):
    message: str
    stats: AnalysisStats


class MessageOut(BaseModel):
    message: str
    deleted: Optional[int] = None
