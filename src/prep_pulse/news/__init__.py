# ABOUTME: News retrieval building blocks: windows, topic keywords, and source adapters.
# ABOUTME: Orchestration across sources lives in prep_pulse.collector.

from prep_pulse.news.topics import detect_topics, to_keywords
from prep_pulse.news.window import resolve_window

__all__ = ["detect_topics", "resolve_window", "to_keywords"]
