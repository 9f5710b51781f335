# ABOUTME: Feed-based news source reached through CORS proxies.
# ABOUTME: Handles downloading, parsing, and normalizing syndication items.

from prep_pulse.feeds.fetcher import FeedFetcher

__all__ = ["FeedFetcher"]
