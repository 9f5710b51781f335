# ABOUTME: Tests for the summary enrichment pass over fetched articles.
# ABOUTME: Verifies per-article failure isolation and progress callbacks.

from unittest.mock import AsyncMock, MagicMock

import pytest

from prep_pulse.ai.enricher import SummaryEnricher
from prep_pulse.config import Settings
from prep_pulse.models import Article, Language, SummaryResult


def _result(text: str = "A generated summary of the article.") -> SummaryResult:
    return SummaryResult(summary=text, key_takeaways=["One", "Two", "Three"])


@pytest.fixture
def summarizer() -> MagicMock:
    mock = MagicMock()
    mock.summarize = AsyncMock(return_value=_result())
    mock.aclose = AsyncMock()
    return mock


@pytest.fixture
def enricher(mock_settings: Settings, summarizer: MagicMock) -> SummaryEnricher:
    return SummaryEnricher(mock_settings, summarizer=summarizer)


class TestEnrichOne:
    """Tests for single-article enrichment."""

    async def test_sets_summary_and_analysis(
        self, enricher: SummaryEnricher, sample_article: Article
    ) -> None:
        result = await enricher.enrich_one(sample_article, Language.EN)

        assert result is not sample_article
        assert result.id == sample_article.id
        assert result.summary == "A generated summary of the article."
        assert result.analysis is not None
        assert result.analysis.key_takeaways == ["One", "Two", "Three"]
        assert result.analysis.related_topics == ["economy"]
        assert sample_article.analysis is None

    async def test_passes_article_fields(
        self, enricher: SummaryEnricher, summarizer: MagicMock, sample_article: Article
    ) -> None:
        await enricher.enrich_one(sample_article, Language.HI)

        summarizer.summarize.assert_awaited_once_with(
            sample_article.title,
            sample_article.content,
            sample_article.summary,
            Language.HI,
        )

    async def test_failure_returns_original(
        self, enricher: SummaryEnricher, summarizer: MagicMock, sample_article: Article
    ) -> None:
        summarizer.summarize.side_effect = RuntimeError("provider down")

        result = await enricher.enrich_one(sample_article, Language.EN)

        assert result is sample_article

    async def test_empty_summary_returns_original(
        self, enricher: SummaryEnricher, summarizer: MagicMock, sample_article: Article
    ) -> None:
        summarizer.summarize.return_value = _result("   ")

        result = await enricher.enrich_one(sample_article, Language.EN)

        assert result is sample_article


class TestEnrichBatch:
    """Tests for sequential batch enrichment."""

    async def test_one_failure_does_not_abort_batch(
        self,
        enricher: SummaryEnricher,
        summarizer: MagicMock,
        sample_articles: list[Article],
    ) -> None:
        """The third article fails; the other four are still enriched."""
        summarizer.summarize.side_effect = [
            _result(),
            _result(),
            TimeoutError("request timed out"),
            _result(),
            _result(),
        ]
        done: list[Article] = []

        results = await enricher.enrich_batch(
            sample_articles, Language.EN, on_item_done=done.append
        )

        assert len(results) == 5
        assert len(done) == 5
        assert results[2] is sample_articles[2]
        assert results[2].analysis is None
        for index in (0, 1, 3, 4):
            assert results[index].analysis is not None
        assert [article.id for article in results] == [a.id for a in sample_articles]

    async def test_callbacks_fire_in_order(
        self, enricher: SummaryEnricher, sample_articles: list[Article]
    ) -> None:
        events: list[tuple[str, str]] = []

        await enricher.enrich_batch(
            sample_articles[:2],
            Language.EN,
            on_item_start=lambda a: events.append(("start", a.id)),
            on_item_done=lambda a: events.append(("done", a.id)),
        )

        assert events == [
            ("start", "test-1"),
            ("done", "test-1"),
            ("start", "test-2"),
            ("done", "test-2"),
        ]

    async def test_callback_errors_are_contained(
        self, enricher: SummaryEnricher, sample_articles: list[Article]
    ) -> None:
        """A raising callback never interrupts the batch."""

        def explode(article: Article) -> None:
            raise RuntimeError("ui went away")

        results = await enricher.enrich_batch(
            sample_articles, Language.EN, on_item_done=explode
        )

        assert all(article.analysis is not None for article in results)

    async def test_empty_batch(self, enricher: SummaryEnricher) -> None:
        assert await enricher.enrich_batch([], Language.EN) == []

    async def test_processes_sequentially(
        self, enricher: SummaryEnricher, summarizer: MagicMock, sample_articles: list[Article]
    ) -> None:
        """Only one summary request is in flight at a time."""
        in_flight = 0
        peak = 0

        async def summarize(*args) -> SummaryResult:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            in_flight -= 1
            return _result()

        summarizer.summarize.side_effect = summarize

        await enricher.enrich_batch(sample_articles, Language.EN)

        assert peak == 1
        assert summarizer.summarize.await_count == 5
