# ABOUTME: RSS feed source reached through an ordered chain of CORS proxies.
# ABOUTME: Uses httpx for transport, feedparser for parsing, and BeautifulSoup to strip markup.

import asyncio
import calendar
import contextlib
from datetime import UTC, datetime, timedelta
from urllib.parse import quote

import feedparser
import httpx
import structlog
from bs4 import BeautifulSoup

from prep_pulse.config import FeedSource
from prep_pulse.models import Article, DateWindow, Language, Topic
from prep_pulse.news.sources.base import NewsSource, SourceRole
from prep_pulse.news.topics import detect_topics, is_latin_text

log = structlog.get_logger()

SUMMARY_PREVIEW_CHARS = 200
OPEN_WINDOW_SLACK = timedelta(minutes=5)
PLACEHOLDER_CONTENT = (
    "{title}. Request a summary for AI analysis or open the article link for the full text."
)
PLACEHOLDER_SUMMARY = "Request a summary for AI-powered analysis"


def strip_markup(html: str) -> str:
    """Reduce an HTML fragment to whitespace-normalized text."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(separator=" ")
    return " ".join(text.split())


def _published_at(entry: feedparser.FeedParserDict) -> datetime | None:
    for field in ("published_parsed", "updated_parsed"):
        parsed = entry.get(field)
        if parsed:
            with contextlib.suppress(ValueError, TypeError, OverflowError):
                return datetime.fromtimestamp(calendar.timegm(parsed), UTC)
    return None


class FeedFetcher(NewsSource):
    """Fetches syndication feeds; free, unthrottled, but shallow in history."""

    name = "rss"
    role = SourceRole.FEED

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.feed_timeout,
                headers={
                    "User-Agent": self.settings.feed_user_agent,
                    "Accept": "application/xml, text/xml",
                },
                follow_redirects=True,
            )
        return self._client

    async def fetch(
        self,
        topics: list[Topic],
        window: DateWindow,
        language: Language,
    ) -> list[Article]:
        """Fetch every configured feed and keep articles inside the window.

        A feed that fails through all proxies is logged and skipped.

        Returns:
            Articles sorted newest first.
        """
        articles: list[Article] = []
        started = datetime.now(UTC)

        for feed in self.settings.feed_sources:
            entries = await self._fetch_entries(feed)
            if entries is None:
                log.error("feed_all_proxies_failed", feed=feed.tag)
                continue
            articles.extend(self._entries_to_articles(entries, feed, topics, language))

        # Undated items carry the retrieval time, later than a window that ends "now".
        upper = window.end
        if started - window.end <= OPEN_WINDOW_SLACK:
            upper = max(window.end, datetime.now(UTC))
        in_window = [a for a in articles if window.start <= a.date <= upper]
        log.info(
            "feeds_fetched",
            fetched=len(articles),
            in_window=len(in_window),
            feeds=len(self.settings.feed_sources),
        )
        return sorted(in_window, key=lambda a: a.date, reverse=True)

    async def _fetch_entries(self, feed: FeedSource) -> list | None:
        """Try each proxy in order until one yields a feed with items.

        Returns:
            Parsed feed entries, or None if every proxy failed.
        """
        for proxy in self.settings.feed_proxies:
            proxied_url = proxy + quote(feed.url, safe="")
            try:
                # Bounds the whole exchange; httpx timeouts only bound each read.
                async with asyncio.timeout(self.settings.feed_timeout):
                    response = await self.client.get(proxied_url)
            except TimeoutError:
                log.warning("feed_proxy_timeout", feed=feed.tag, proxy=proxy)
                continue
            except httpx.HTTPError as e:
                log.warning("feed_proxy_failed", feed=feed.tag, proxy=proxy, error=str(e))
                continue

            if not response.is_success:
                log.warning(
                    "feed_proxy_bad_status",
                    feed=feed.tag,
                    proxy=proxy,
                    status=response.status_code,
                )
                continue

            parsed = feedparser.parse(response.text)
            if not parsed.entries:
                log.warning("feed_proxy_no_items", feed=feed.tag, proxy=proxy)
                continue

            log.info("feed_fetched", feed=feed.tag, proxy=proxy, items=len(parsed.entries))
            return parsed.entries

        return None

    def _entries_to_articles(
        self,
        entries: list,
        feed: FeedSource,
        topics: list[Topic],
        language: Language,
    ) -> list[Article]:
        """Convert feedparser entries, skipping items in a script unlike the language."""
        articles: list[Article] = []
        fetched_at = datetime.now(UTC)

        for index, entry in enumerate(entries):
            title = (entry.get("title") or "").strip() or "Untitled"
            description = entry.get("summary") or entry.get("description") or ""
            rich_content = ""
            if entry.get("content"):
                rich_content = entry.content[0].get("value", "")
            content = strip_markup(rich_content or description or title)

            if language is Language.EN and not is_latin_text(f"{title} {content}"):
                log.debug("feed_item_skipped_script", feed=feed.tag, title=title[:40])
                continue

            link = (entry.get("link") or "").strip()
            guid = (entry.get("id") or "").strip()
            published = _published_at(entry) or fetched_at
            has_body = len(content) > len(title)

            if has_body:
                summary = content[:SUMMARY_PREVIEW_CHARS]
                if len(content) > SUMMARY_PREVIEW_CHARS:
                    summary += "..."
            else:
                summary = PLACEHOLDER_SUMMARY

            item_key = guid or link or str(int(fetched_at.timestamp() * 1000))
            articles.append(
                Article(
                    id=f"rss-{feed.tag}-{item_key}-{index}",
                    title=title,
                    content=content if has_body else PLACEHOLDER_CONTENT.format(title=title),
                    summary=summary,
                    source=feed.name,
                    date=published,
                    topics=detect_topics(f"{title} {content}", topics),
                    language=language,
                    url=link or None,
                )
            )

        return articles
