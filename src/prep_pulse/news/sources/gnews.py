# ABOUTME: GNews adapter, the long-history source with instant-granular from/to filters.
# ABOUTME: Items carry no provider id, so ids are synthesized from the URL and position.

from datetime import UTC, datetime

import structlog
from pydantic import BaseModel, ConfigDict

from prep_pulse.errors import SourceError
from prep_pulse.models import Article, DateWindow, Language, Topic
from prep_pulse.news.sources.base import NewsSource, SourceRole, parse_published
from prep_pulse.news.topics import detect_topics, to_keywords
from prep_pulse.utils.hashing import generate_article_id

log = structlog.get_logger()

GNEWS_URL = "https://gnews.io/api/v4/search"


class GNewsSourceInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    url: str | None = None


class GNewsItem(BaseModel):
    """Item shape returned by GNews."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    content: str | None = None
    url: str | None = None
    image: str | None = None
    publishedAt: str | float | None = None  # noqa: N815 - provider field name
    source: GNewsSourceInfo | None = None


def _iso(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class GNewsSource(NewsSource):
    """Search endpoint with roughly a month of history."""

    name = "gnews"
    role = SourceRole.HISTORY

    async def fetch(
        self,
        topics: list[Topic],
        window: DateWindow,
        language: Language,
    ) -> list[Article]:
        api_key = self._require_key(self.settings.gnews_api_key)
        params = {
            "apikey": api_key,
            "q": to_keywords(topics, self.settings.max_query_keywords),
            "country": self.settings.news_country,
            "lang": "en",
            "max": str(self.settings.news_page_size),
            "from": _iso(window.start),
            "to": _iso(window.end),
        }

        data = await self._get_json(GNEWS_URL, params)
        errors = data.get("errors")
        if errors:
            if isinstance(errors, list):
                first = errors[0]
            elif isinstance(errors, dict):
                first = next(iter(errors.values()), errors)
            else:
                first = errors
            raise SourceError(self.name, str(first))

        items = self._parse_items(data.get("articles"), GNewsItem)
        log.debug("gnews_results", count=len(items))
        return [self._to_article(item, index, topics, language) for index, item in enumerate(items)]

    def _to_article(
        self,
        item: GNewsItem,
        index: int,
        topics: list[Topic],
        language: Language,
    ) -> Article:
        title = item.title or "Untitled"
        return Article(
            id=f"gnews-{generate_article_id(self.name, item.url or title)}-{index}",
            title=title,
            content=item.content or item.description or "",
            summary=item.description or None,
            source=(item.source.name if item.source else None) or "Unknown",
            date=parse_published(item.publishedAt),
            topics=detect_topics(f"{title} {item.content or ''}", topics),
            language=language,
            url=item.url,
            image_url=item.image,
        )
