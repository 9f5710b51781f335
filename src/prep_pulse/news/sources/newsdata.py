# ABOUTME: NewsData.io adapter, the broad keyword-search source.
# ABOUTME: Treats a non-"success" status payload as a provider failure.

import structlog
from pydantic import BaseModel, ConfigDict

from prep_pulse.errors import SourceError
from prep_pulse.models import Article, DateWindow, Language, Topic
from prep_pulse.news.sources.base import NewsSource, SourceRole, parse_published
from prep_pulse.news.topics import detect_topics, to_keywords
from prep_pulse.utils.hashing import generate_article_id

log = structlog.get_logger()

NEWSDATA_URL = "https://newsdata.io/api/1/news"


class NewsDataItem(BaseModel):
    """Item shape returned by NewsData.io."""

    model_config = ConfigDict(extra="ignore")

    article_id: str | None = None
    title: str | None = None
    content: str | None = None
    description: str | None = None
    source_id: str | None = None
    pubDate: str | float | None = None  # noqa: N815 - provider field name
    link: str | None = None
    image_url: str | None = None


class NewsDataSource(NewsSource):
    """Latest-news endpoint; the provider ignores windows on the free tier."""

    name = "newsdata"
    role = SourceRole.BROAD

    async def fetch(
        self,
        topics: list[Topic],
        window: DateWindow,
        language: Language,
    ) -> list[Article]:
        api_key = self._require_key(self.settings.newsdata_api_key)
        params = {
            "apikey": api_key,
            "q": to_keywords(topics, self.settings.max_query_keywords),
            "country": self.settings.news_country,
            "language": "en",
            "size": str(self.settings.news_page_size),
        }

        data = await self._get_json(NEWSDATA_URL, params)
        if data.get("status") != "success":
            message = data.get("message") or "request failed"
            if isinstance(message, dict):
                message = message.get("message") or str(message)
            raise SourceError(self.name, str(message))

        items = self._parse_items(data.get("results"), NewsDataItem)
        log.debug("newsdata_results", count=len(items))
        return [self._to_article(item, index, topics, language) for index, item in enumerate(items)]

    def _to_article(
        self,
        item: NewsDataItem,
        index: int,
        topics: list[Topic],
        language: Language,
    ) -> Article:
        title = item.title or "Untitled"
        article_id = item.article_id or generate_article_id(self.name, item.link or title)

        return Article(
            id=f"newsdata-{article_id}-{index}",
            title=title,
            content=item.content or item.description or "",
            summary=item.description or None,
            source=item.source_id or "Unknown",
            date=parse_published(item.pubDate),
            topics=detect_topics(f"{title} {item.content or ''}", topics),
            language=language,
            url=item.link,
            image_url=item.image_url,
        )
