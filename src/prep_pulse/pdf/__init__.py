# ABOUTME: PDF upload handling: text extraction and per-file analysis.
# ABOUTME: Exports the extractor functions and the batch processor.

from prep_pulse.pdf.extractor import analyze_pdf_structure, extract_pdf_text
from prep_pulse.pdf.processor import PdfProcessor, PdfUpload

__all__ = ["PdfProcessor", "PdfUpload", "analyze_pdf_structure", "extract_pdf_text"]
