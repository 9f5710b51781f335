# ABOUTME: News provider adapters normalizing JSON API responses into Articles.
# ABOUTME: One adapter per provider; the feed adapter lives in prep_pulse.feeds.

from prep_pulse.news.sources.base import NewsSource, SourceRole
from prep_pulse.news.sources.gnews import GNewsSource
from prep_pulse.news.sources.newsdata import NewsDataSource
from prep_pulse.news.sources.worldnews import WorldNewsSource

__all__ = ["GNewsSource", "NewsDataSource", "NewsSource", "SourceRole", "WorldNewsSource"]
