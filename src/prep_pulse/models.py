# ABOUTME: Pydantic models for articles, analysis results, and query windows.
# ABOUTME: Defines the canonical Article shape every source adapter normalizes into.

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, model_validator


class Topic(str, Enum):
    """Study topics. ALL is a wildcard, never assigned to an article."""

    ALL = "all"
    ECONOMY = "economy"
    POLITY = "polity"
    ENVIRONMENT = "environment"
    INTERNATIONAL = "international"
    SCIENCE = "science"
    SOCIETY = "society"
    HISTORY = "history"
    GEOGRAPHY = "geography"


class Language(str, Enum):
    """Output languages supported by the summarizer."""

    EN = "en"
    HI = "hi"
    TA = "ta"
    BN = "bn"
    TE = "te"
    MR = "mr"
    GU = "gu"
    KN = "kn"
    ML = "ml"
    PA = "pa"
    UR = "ur"


class DateRangePreset(str, Enum):
    """Coarse time-range selector."""

    LAST_24H = "24h"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


class AnalysisDepth(str, Enum):
    BASIC = "basic"
    ADVANCED = "advanced"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class DateWindow(BaseModel):
    """Instant range a query is scoped to."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "DateWindow":
        if self.start > self.end:
            raise ValueError("window start must not be after its end")
        return self

    @property
    def days(self) -> float:
        """Window length in (fractional) days."""
        return (self.end - self.start).total_seconds() / 86400


class AnalysisResult(BaseModel):
    """Structured enrichment from the lightweight summarizer or the deep analyzer."""

    summary: str
    key_takeaways: list[str] = Field(default_factory=list)
    exam_relevance: str = ""
    important_facts: list[str] = Field(default_factory=list)
    potential_questions: list[str] = Field(default_factory=list)
    related_topics: list[str] = Field(default_factory=list)
    sentiment: Sentiment | None = None
    policy_implications: list[str] | None = None


class SummaryResult(BaseModel):
    """Output of the lightweight per-article summarizer."""

    summary: str
    key_takeaways: list[str] = Field(default_factory=list, max_length=3)
    origin: Literal["ai", "fallback"] = "ai"


class Article(BaseModel):
    """Canonical unit of retrieved news content."""

    id: str = Field(frozen=True)
    title: str = Field(min_length=1)
    content: str = ""
    summary: str | None = None
    source: str
    date: datetime
    topics: list[Topic] = Field(default_factory=list, max_length=2)
    language: Language
    url: str | None = None
    image_url: str | None = None
    analysis: AnalysisResult | None = None
    bookmarked: bool = False


class FetchProgress(BaseModel):
    """Status notification emitted while the orchestrator walks its sources."""

    stage: Literal["trying", "failed", "empty", "success"]
    source: str
    message: str
    count: int = 0


class PdfText(BaseModel):
    """Text extracted from a PDF file."""

    text: str
    page_count: int
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    keywords: str | None = None
    creation_date: datetime | None = None


class PdfStructure(BaseModel):
    """Shape statistics of extracted document text."""

    word_count: int
    has_structure: bool
    reading_minutes: int
    sections: list[str] = Field(default_factory=list)


class ProcessedPdf(BaseModel):
    """A successfully analyzed upload."""

    id: str
    name: str
    content: str
    upload_date: datetime
    page_count: int
    analysis: AnalysisResult
    structure: PdfStructure | None = None


class PdfOutcome(BaseModel):
    """Per-file result of a PDF batch; exactly one of document/error is set."""

    filename: str
    document: ProcessedPdf | None = None
    error_kind: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.document is not None
