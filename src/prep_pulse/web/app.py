# ABOUTME: FastAPI application factory with a service lifespan.
# ABOUTME: Main entry point for the PrepPulse JSON API.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from prep_pulse.ai.enricher import SummaryEnricher
from prep_pulse.collector import NewsCollector
from prep_pulse.config import get_settings
from prep_pulse.pdf.processor import PdfProcessor
from prep_pulse.web.routes import api

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create shared services on startup and close their HTTP clients on shutdown."""
    logger.info("app_startup")
    settings = get_settings()
    enricher = SummaryEnricher(settings)
    app.state.enricher = enricher
    app.state.collector = NewsCollector(settings, enricher=enricher)
    app.state.pdf_processor = PdfProcessor(settings)
    yield
    logger.info("app_shutdown")
    await app.state.collector.aclose()
    await app.state.pdf_processor.aclose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PrepPulse",
        description="Current-affairs news and document analysis for exam preparation",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(api.router)
    return app


# Application instance for uvicorn
app = create_app()
