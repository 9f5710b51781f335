# ABOUTME: Second-phase pipeline attaching AI summaries to already-fetched articles.
# ABOUTME: Processes one article at a time; a failing article never aborts the batch.

from collections.abc import Callable, Sequence

import structlog

from prep_pulse.ai.summarizer import Summarizer
from prep_pulse.config import Settings, get_settings
from prep_pulse.models import AnalysisResult, Article, Language

log = structlog.get_logger()

ItemCallback = Callable[[Article], None]


class SummaryEnricher:
    """Enriches articles with a short summary and key takeaways."""

    def __init__(
        self,
        settings: Settings | None = None,
        summarizer: Summarizer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.summarizer = summarizer or Summarizer(self.settings)

    async def enrich_one(self, article: Article, language: Language) -> Article:
        """Return a copy of the article with summary and analysis set.

        Never raises: on any failure the original article is returned unchanged.
        """
        try:
            result = await self.summarizer.summarize(
                article.title,
                article.content,
                article.summary or "",
                language,
            )
        except Exception as e:
            # If enrichment fails for any reason (API error, parsing, etc.), keep the article
            log.warning(
                "article_enrichment_failed",
                article_id=article.id,
                title=article.title[:30],
                error_type=type(e).__name__,
                error=str(e)[:100],
            )
            return article

        if not result.summary.strip():
            log.warning("article_enrichment_empty", article_id=article.id)
            return article

        analysis = AnalysisResult(
            summary=result.summary,
            key_takeaways=result.key_takeaways,
            related_topics=[topic.value for topic in article.topics],
        )
        return article.model_copy(update={"summary": result.summary, "analysis": analysis})

    async def enrich_batch(
        self,
        articles: Sequence[Article],
        language: Language,
        on_item_start: ItemCallback | None = None,
        on_item_done: ItemCallback | None = None,
    ) -> list[Article]:
        """Enrich articles strictly in sequence.

        The summarizer is throttled upstream, so parallel dispatch would only
        add contention.

        Args:
            articles: Batch to enrich; order is preserved.
            language: Output language for summaries.
            on_item_start: Called with each article before it is summarized.
            on_item_done: Called with each resulting article, enriched or not.

        Returns:
            The batch with enriched copies in place of successful articles.
        """
        log.info("enriching_articles", count=len(articles))

        enriched: list[Article] = []
        failed_count = 0

        for article in articles:
            _notify(on_item_start, article)
            result = await self.enrich_one(article, language)
            if result is article:
                failed_count += 1
            enriched.append(result)
            _notify(on_item_done, result)

        if failed_count > 0:
            log.warning(
                "enrichment_completed_with_failures", failed=failed_count, total=len(articles)
            )
        else:
            log.info("enrichment_complete", total=len(articles))

        return enriched

    async def aclose(self) -> None:
        await self.summarizer.aclose()


def _notify(callback: ItemCallback | None, article: Article) -> None:
    if callback is None:
        return
    try:
        callback(article)
    except Exception:
        log.exception("enrichment_callback_failed", article_id=article.id)
