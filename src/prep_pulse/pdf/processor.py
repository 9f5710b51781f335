# ABOUTME: Multi-file PDF pipeline: extract, inspect, and analyze each upload in order.
# ABOUTME: A failing file is reported in its outcome and never stops the batch.

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import NamedTuple

import structlog

from prep_pulse.ai.analyzer import ContentAnalyzer
from prep_pulse.config import Settings, get_settings
from prep_pulse.errors import PdfExtractionError
from prep_pulse.models import AnalysisDepth, Language, PdfOutcome, ProcessedPdf
from prep_pulse.pdf.extractor import PDF_MIME_TYPE, analyze_pdf_structure, extract_pdf_text

log = structlog.get_logger()


class PdfUpload(NamedTuple):
    """Raw uploaded file."""

    filename: str
    data: bytes
    content_type: str | None = PDF_MIME_TYPE


class PdfProcessor:
    """Turns uploaded PDFs into analyzed study documents."""

    def __init__(
        self,
        settings: Settings | None = None,
        analyzer: ContentAnalyzer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.analyzer = analyzer or ContentAnalyzer(self.settings)

    async def process_one(
        self,
        upload: PdfUpload,
        depth: AnalysisDepth = AnalysisDepth.BASIC,
        language: Language = Language.EN,
    ) -> ProcessedPdf:
        """Extract and analyze a single upload.

        Raises:
            PdfExtractionError: If the file cannot be turned into text.
        """
        extracted = extract_pdf_text(
            upload.data,
            upload.filename,
            upload.content_type,
            max_bytes=self.settings.pdf_max_bytes,
        )
        structure = analyze_pdf_structure(extracted.text)
        log.info(
            "pdf_analyzing",
            filename=upload.filename,
            pages=extracted.page_count,
            words=structure.word_count,
        )

        analysis = await self.analyzer.analyze(
            extracted.text, depth=depth, language=language, context="pdf"
        )
        return ProcessedPdf(
            id=uuid.uuid4().hex,
            name=upload.filename,
            content=extracted.text,
            upload_date=datetime.now(UTC),
            page_count=extracted.page_count,
            analysis=analysis,
            structure=structure,
        )

    async def process_batch(
        self,
        uploads: Sequence[PdfUpload],
        depth: AnalysisDepth = AnalysisDepth.BASIC,
        language: Language = Language.EN,
    ) -> list[PdfOutcome]:
        """Process uploads in order, one outcome per file."""
        outcomes: list[PdfOutcome] = []

        for upload in uploads:
            try:
                document = await self.process_one(upload, depth, language)
            except PdfExtractionError as e:
                log.warning(
                    "pdf_processing_failed",
                    filename=upload.filename,
                    kind=e.kind.value,
                    error=str(e),
                )
                outcomes.append(
                    PdfOutcome(filename=upload.filename, error_kind=e.kind.value, error=str(e))
                )
                continue

            outcomes.append(PdfOutcome(filename=upload.filename, document=document))

        log.info(
            "pdf_batch_complete",
            total=len(uploads),
            failed=sum(1 for outcome in outcomes if not outcome.ok),
        )
        return outcomes

    async def aclose(self) -> None:
        await self.analyzer.aclose()
