# ABOUTME: JSON API routes for news retrieval, summary enrichment, and PDF analysis.
# ABOUTME: Maps source exhaustion to a short 502 message instead of provider payloads.

from datetime import datetime
from typing import Annotated

import structlog
from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from prep_pulse.errors import AllSourcesFailedError
from prep_pulse.models import (
    AnalysisDepth,
    Article,
    DateRangePreset,
    FetchProgress,
    Language,
    PdfOutcome,
    Topic,
)
from prep_pulse.pdf.processor import PdfUpload
from prep_pulse.web.dependencies import Collector, Enricher, PdfService

router = APIRouter(prefix="/api", tags=["api"])
log = structlog.get_logger()


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    version: str = "0.1.0"
    summaries_throttled: bool = False
    throttle_seconds: float = 0.0


class NewsRequest(BaseModel):
    """Request body for a news fetch."""

    topics: list[Topic] = Field(default_factory=lambda: [Topic.ALL])
    preset: DateRangePreset = DateRangePreset.WEEK
    start: datetime | None = None
    end: datetime | None = None
    language: Language = Language.EN
    summarize: bool = False


class NewsResponse(BaseModel):
    """Articles plus the source that served them."""

    articles: list[Article]
    source: str | None = None
    progress: list[FetchProgress] = Field(default_factory=list)


class SummariesRequest(BaseModel):
    """Request body for summarizing already-fetched articles."""

    articles: list[Article]
    language: Language = Language.EN


class SummariesResponse(BaseModel):
    articles: list[Article]


class PdfBatchResponse(BaseModel):
    outcomes: list[PdfOutcome]


@router.get("/health", response_model=HealthResponse)
async def health_check(enricher: Enricher):
    """Health check endpoint, including the summary throttle state."""
    waiting, remaining = enricher.summarizer.groq.rotator.throttle_status()
    return HealthResponse(
        status="healthy",
        summaries_throttled=waiting,
        throttle_seconds=round(remaining, 2),
    )


@router.post("/news", response_model=NewsResponse)
async def fetch_news(body: NewsRequest, collector: Collector):
    """Fetch a batch from the first source that yields articles."""
    progress: list[FetchProgress] = []
    custom = (body.start, body.end) if body.preset is DateRangePreset.CUSTOM else None

    log.info("api_news_start", topics=[t.value for t in body.topics], preset=body.preset.value)
    try:
        articles = await collector.collect(
            body.topics,
            preset=body.preset,
            language=body.language,
            custom=custom,
            summarize=body.summarize,
            on_progress=progress.append,
        )
    except AllSourcesFailedError as e:
        raise HTTPException(status_code=502, detail=e.user_message) from e

    source = next((p.source for p in progress if p.stage == "success"), None)
    return NewsResponse(articles=articles, source=source, progress=progress)


@router.post("/news/summaries", response_model=SummariesResponse)
async def summarize_news(body: SummariesRequest, enricher: Enricher):
    """Attach summaries to articles; failed articles come back unchanged."""
    articles = await enricher.enrich_batch(body.articles, body.language)
    return SummariesResponse(articles=articles)


@router.post("/pdf", response_model=PdfBatchResponse)
async def analyze_pdfs(
    files: Annotated[list[UploadFile], File()],
    processor: PdfService,
    depth: Annotated[AnalysisDepth, Form()] = AnalysisDepth.BASIC,
    language: Annotated[Language, Form()] = Language.EN,
):
    """Analyze uploaded PDFs, reporting failures per file."""
    uploads = [
        PdfUpload(
            filename=upload.filename or "upload.pdf",
            data=await upload.read(),
            content_type=upload.content_type,
        )
        for upload in files
    ]
    outcomes = await processor.process_batch(uploads, depth=depth, language=language)
    return PdfBatchResponse(outcomes=outcomes)
