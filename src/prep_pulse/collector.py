# ABOUTME: News collector orchestrating sources with first-success-wins fallback.
# ABOUTME: Orders sources by window length and optionally enriches the batch with summaries.

import asyncio
import inspect
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime

import structlog

from prep_pulse.ai.enricher import SummaryEnricher
from prep_pulse.config import Settings, get_settings
from prep_pulse.errors import AllSourcesFailedError, SourceError
from prep_pulse.feeds.fetcher import FeedFetcher
from prep_pulse.models import (
    Article,
    DateRangePreset,
    DateWindow,
    FetchProgress,
    Language,
    Topic,
)
from prep_pulse.news.sources import GNewsSource, NewsDataSource, NewsSource, WorldNewsSource
from prep_pulse.news.sources.base import SourceRole
from prep_pulse.news.window import resolve_window

log = structlog.get_logger()

ProgressCallback = Callable[[FetchProgress], object]

SHORT_WINDOW_ORDER = (SourceRole.RECENCY, SourceRole.BROAD, SourceRole.HISTORY)
LONG_WINDOW_ORDER = (SourceRole.HISTORY, SourceRole.RECENCY, SourceRole.BROAD)


def merge_new(existing: Iterable[Article], fetched: Iterable[Article]) -> list[Article]:
    """Return fetched articles whose id is not already present in existing."""
    seen = {article.id for article in existing}
    fresh: list[Article] = []
    for article in fetched:
        if article.id not in seen:
            seen.add(article.id)
            fresh.append(article)
    return fresh


class NewsCollector:
    """Fetches a batch of articles from the first source that yields any."""

    def __init__(
        self,
        settings: Settings | None = None,
        sources: Sequence[NewsSource] | None = None,
        feed: NewsSource | None = None,
        enricher: SummaryEnricher | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.feed = feed or FeedFetcher(self.settings)
        if sources is None:
            sources = [
                WorldNewsSource(self.settings),
                NewsDataSource(self.settings),
                GNewsSource(self.settings),
            ]
        self.sources = list(sources)
        self._enricher = enricher
        self._background: set[asyncio.Task] = set()

    @property
    def enricher(self) -> SummaryEnricher:
        """Lazy-initialized summary enricher."""
        if self._enricher is None:
            self._enricher = SummaryEnricher(self.settings)
        return self._enricher

    def candidate_sources(self, window: DateWindow) -> list[NewsSource]:
        """Sources to try for a window, in order.

        The feed only carries recent items, so it leads short windows and is
        dropped for long ones. Long windows put the deep-history API first.
        """
        days = window.days
        order = LONG_WINDOW_ORDER if days > self.settings.long_window_days else SHORT_WINDOW_ORDER
        rank = {role: index for index, role in enumerate(order)}
        ranked = sorted(self.sources, key=lambda source: rank.get(source.role, len(rank)))

        if days <= self.settings.feed_window_days:
            return [self.feed, *ranked]
        return ranked

    def _notify(self, on_progress: ProgressCallback | None, progress: FetchProgress) -> None:
        """Fire a progress notification without waiting on it."""
        if on_progress is None:
            return
        try:
            result = on_progress(progress)
        except Exception:
            log.exception("progress_callback_failed", stage=progress.stage)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._background.add(task)
            task.add_done_callback(self._background.discard)

    async def fetch_with_fallback(
        self,
        topics: list[Topic],
        window: DateWindow,
        language: Language = Language.EN,
        on_progress: ProgressCallback | None = None,
    ) -> list[Article]:
        """Try candidate sources in sequence and return the first non-empty batch.

        Args:
            topics: Requested topics; may contain the ALL wildcard.
            window: Publication window to query.
            language: Requested article language.
            on_progress: Optional status callback, never awaited.

        Returns:
            Articles from the first source that produced any.

        Raises:
            AllSourcesFailedError: If every candidate failed or returned nothing.
        """
        candidates = self.candidate_sources(window)
        log.info(
            "fetch_started",
            window_days=round(window.days, 2),
            sources=[source.name for source in candidates],
        )

        tried: list[str] = []
        for source in candidates:
            tried.append(source.name)
            self._notify(
                on_progress,
                FetchProgress(
                    stage="trying", source=source.name, message=f"Trying {source.name}..."
                ),
            )

            try:
                articles = await source.fetch(topics, window, language)
            except SourceError as e:
                log.warning("source_failed", source=source.name, error=str(e))
                self._notify(
                    on_progress,
                    FetchProgress(
                        stage="failed",
                        source=source.name,
                        message=f"{source.name} failed, trying next source...",
                    ),
                )
                continue

            if not articles:
                log.info("source_empty", source=source.name)
                self._notify(
                    on_progress,
                    FetchProgress(
                        stage="empty",
                        source=source.name,
                        message=f"{source.name} returned no articles, trying next source...",
                    ),
                )
                continue

            log.info("source_success", source=source.name, count=len(articles))
            self._notify(
                on_progress,
                FetchProgress(
                    stage="success",
                    source=source.name,
                    message=f"Success! Loaded {len(articles)} articles from {source.name}",
                    count=len(articles),
                ),
            )
            return articles

        log.error("all_sources_failed", tried=tried)
        raise AllSourcesFailedError(tried)

    async def collect(
        self,
        topics: list[Topic],
        preset: DateRangePreset = DateRangePreset.WEEK,
        language: Language = Language.EN,
        custom: tuple[datetime | None, datetime | None] | None = None,
        summarize: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> list[Article]:
        """Resolve the window, fetch a batch, and optionally summarize it."""
        window = resolve_window(preset, custom)
        articles = await self.fetch_with_fallback(topics, window, language, on_progress)
        if summarize:
            articles = await self.enricher.enrich_batch(articles, language)
        return articles

    async def aclose(self) -> None:
        """Close every source client and the enricher."""
        for source in [self.feed, *self.sources]:
            await source.aclose()
        if self._enricher is not None:
            await self._enricher.aclose()

    async def __aenter__(self) -> "NewsCollector":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
