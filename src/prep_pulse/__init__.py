# ABOUTME: Main package for PrepPulse current-affairs retrieval and study analysis.
# ABOUTME: Exports settings, canonical models, and the news collector.

from prep_pulse.collector import NewsCollector
from prep_pulse.config import get_settings
from prep_pulse.models import AnalysisResult, Article, DateWindow, Language, Topic

__all__ = [
    "get_settings",
    "AnalysisResult",
    "Article",
    "DateWindow",
    "Language",
    "NewsCollector",
    "Topic",
]
