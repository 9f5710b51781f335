# ABOUTME: FastAPI dependency injection for the services created in the app lifespan.
# ABOUTME: Provides reusable dependencies for route handlers.

from typing import Annotated

from fastapi import Depends, Request

from prep_pulse.ai.enricher import SummaryEnricher
from prep_pulse.collector import NewsCollector
from prep_pulse.pdf.processor import PdfProcessor


def get_collector(request: Request) -> NewsCollector:
    """Get the news collector from app state."""
    return request.app.state.collector


Collector = Annotated[NewsCollector, Depends(get_collector)]


def get_enricher(request: Request) -> SummaryEnricher:
    """Get the summary enricher from app state."""
    return request.app.state.enricher


Enricher = Annotated[SummaryEnricher, Depends(get_enricher)]


def get_pdf_processor(request: Request) -> PdfProcessor:
    """Get the PDF processor from app state."""
    return request.app.state.pdf_processor


PdfService = Annotated[PdfProcessor, Depends(get_pdf_processor)]
