# ABOUTME: PDF text extraction with classified failures, backed by pypdf.
# ABOUTME: Also derives simple structure statistics from extracted text.

import contextlib
import io
import math
import re

import structlog
from pypdf import PdfReader
from pypdf.errors import FileNotDecryptedError, PyPdfError

from prep_pulse.errors import PdfErrorKind, PdfExtractionError
from prep_pulse.models import PdfStructure, PdfText

log = structlog.get_logger()

PDF_MIME_TYPE = "application/pdf"
# Browsers and curl send these for files they cannot classify.
GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

WORDS_PER_MINUTE = 200
MAX_SECTIONS = 10

_SECTION_PATTERNS = (
    re.compile(r"^(chapter|section|part)\s+\d+", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^(introduction|conclusion|abstract|summary)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^[A-Z\s]{10,}$", re.MULTILINE),
)


def _check_type(filename: str, content_type: str | None) -> None:
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime == PDF_MIME_TYPE:
        return
    if mime in GENERIC_MIME_TYPES and filename.lower().endswith(".pdf"):
        return
    raise PdfExtractionError(filename, PdfErrorKind.WRONG_TYPE, "is not a valid PDF file")


def _metadata_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_pdf_text(
    data: bytes,
    filename: str,
    content_type: str | None = PDF_MIME_TYPE,
    max_bytes: int | None = None,
) -> PdfText:
    """Extract the text and metadata of a PDF document.

    Pages are joined by blank lines.

    Raises:
        PdfExtractionError: With kind wrong_type, too_large, empty (no bytes
            or no extractable text), encrypted, or invalid.
    """
    _check_type(filename, content_type)

    if max_bytes is not None and len(data) > max_bytes:
        raise PdfExtractionError(
            filename,
            PdfErrorKind.TOO_LARGE,
            f"is too large. Maximum size is {max_bytes // (1024 * 1024)}MB",
        )
    if not data:
        raise PdfExtractionError(filename, PdfErrorKind.EMPTY, "file is empty")

    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted and not reader.decrypt(""):
            raise PdfExtractionError(
                filename, PdfErrorKind.ENCRYPTED, "file is password-protected"
            )
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except PdfExtractionError:
        raise
    except FileNotDecryptedError as e:
        raise PdfExtractionError(
            filename, PdfErrorKind.ENCRYPTED, "file is password-protected"
        ) from e
    except (PyPdfError, ValueError, KeyError, TypeError, OSError) as e:
        log.warning("pdf_parse_failed", filename=filename, error=str(e))
        raise PdfExtractionError(
            filename,
            PdfErrorKind.INVALID,
            "Failed to parse PDF file. Please ensure the file is a valid PDF.",
        ) from e

    text = "\n\n".join(page for page in pages if page).strip()
    if not text:
        raise PdfExtractionError(filename, PdfErrorKind.EMPTY, "no extractable text")

    meta = reader.metadata
    creation_date = None
    if meta is not None:
        with contextlib.suppress(ValueError, TypeError):
            creation_date = meta.creation_date

    log.debug("pdf_extracted", filename=filename, pages=len(pages), chars=len(text))
    return PdfText(
        text=text,
        page_count=len(pages),
        title=_metadata_text(meta.title) if meta else None,
        author=_metadata_text(meta.author) if meta else None,
        subject=_metadata_text(meta.subject) if meta else None,
        keywords=_metadata_text(meta.get("/Keywords")) if meta else None,
        creation_date=creation_date,
    )


def analyze_pdf_structure(text: str) -> PdfStructure:
    """Word count, reading time and candidate section headings of document text."""
    word_count = len(text.split())
    sections = [
        line.strip()
        for line in text.splitlines()
        if 5 < len(line.strip()) < 100 and line.strip()[0].isupper()
    ]
    return PdfStructure(
        word_count=word_count,
        has_structure=any(pattern.search(text) for pattern in _SECTION_PATTERNS),
        reading_minutes=math.ceil(word_count / WORDS_PER_MINUTE),
        sections=sections[:MAX_SECTIONS],
    )
