# ABOUTME: AI integration: Groq summaries with key rotation and Gemini deep analysis.
# ABOUTME: Provides the summarizer, the batch enricher, and the analysis cascade.

from prep_pulse.ai.analyzer import ContentAnalyzer
from prep_pulse.ai.enricher import SummaryEnricher
from prep_pulse.ai.rotation import KeyRotator, get_rotator, reset_rotators
from prep_pulse.ai.service import GeminiService
from prep_pulse.ai.summarizer import Summarizer

__all__ = [
    "ContentAnalyzer",
    "GeminiService",
    "KeyRotator",
    "Summarizer",
    "SummaryEnricher",
    "get_rotator",
    "reset_rotators",
]
