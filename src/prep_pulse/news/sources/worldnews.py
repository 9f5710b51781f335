# ABOUTME: WorldNewsAPI adapter, the recency-oriented source sorted by publish time.
# ABOUTME: Normalizes the provider's "news" items into canonical Articles.

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict

from prep_pulse.models import Article, DateWindow, Language, Topic
from prep_pulse.news.sources.base import NewsSource, SourceRole, parse_published
from prep_pulse.news.topics import detect_topics, to_keywords
from prep_pulse.utils.hashing import generate_article_id

log = structlog.get_logger()

WORLDNEWS_URL = "https://api.worldnewsapi.com/search-news"


class WorldNewsItem(BaseModel):
    """Item shape returned by WorldNewsAPI."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    title: str | None = None
    text: str | None = None
    summary: str | None = None
    url: str | None = None
    image: str | None = None
    publish_date: str | float | None = None
    source: dict[str, Any] | str | None = None
    author: str | None = None


class WorldNewsSource(NewsSource):
    """Search endpoint with day-granular publish-date filters."""

    name = "worldnews"
    role = SourceRole.RECENCY

    async def fetch(
        self,
        topics: list[Topic],
        window: DateWindow,
        language: Language,
    ) -> list[Article]:
        api_key = self._require_key(self.settings.worldnews_api_key)
        params = {
            "api-key": api_key,
            "text": to_keywords(topics, self.settings.max_query_keywords),
            "source-countries": self.settings.news_country,
            # Queries always run in English; see to_keywords.
            "language": "en",
            "earliest-publish-date": window.start.date().isoformat(),
            "latest-publish-date": window.end.date().isoformat(),
            "sort": "publish-time",
            "sort-direction": "DESC",
            "number": str(self.settings.news_page_size),
        }

        data = await self._get_json(WORLDNEWS_URL, params)
        items = self._parse_items(data.get("news"), WorldNewsItem)
        log.debug("worldnews_results", count=len(items))
        return [self._to_article(item, index, topics, language) for index, item in enumerate(items)]

    def _to_article(
        self,
        item: WorldNewsItem,
        index: int,
        topics: list[Topic],
        language: Language,
    ) -> Article:
        if isinstance(item.source, dict):
            source_name = item.source.get("name") or "News Source"
        else:
            source_name = item.source or "News Source"
        title = item.title or "Untitled"
        article_id = (
            f"worldnews-{item.id}"
            if item.id is not None
            else f"worldnews-{generate_article_id(self.name, item.url or title)}-{index}"
        )

        return Article(
            id=article_id,
            title=title,
            content=item.text or item.summary or "",
            summary=item.summary or None,
            source=source_name,
            date=parse_published(item.publish_date),
            topics=detect_topics(f"{title} {item.text or ''}", topics),
            language=language,
            url=item.url,
            image_url=item.image,
        )
