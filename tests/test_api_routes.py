# ABOUTME: Tests for the JSON API routes.
# ABOUTME: Services are replaced through dependency overrides; the lifespan is not run.

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from prep_pulse.errors import AllSourcesFailedError
from prep_pulse.models import (
    AnalysisDepth,
    DateRangePreset,
    FetchProgress,
    Language,
    PdfOutcome,
    Topic,
)
from prep_pulse.pdf.processor import PdfUpload


@pytest.fixture
def mock_collector():
    """Create a mock NewsCollector."""
    collector = MagicMock()
    collector.collect = AsyncMock(return_value=[])
    return collector


@pytest.fixture
def mock_enricher():
    """Create a mock SummaryEnricher with an idle throttle."""
    enricher = MagicMock()
    enricher.summarizer.groq.rotator.throttle_status.return_value = (False, 0.0)
    enricher.enrich_batch = AsyncMock(return_value=[])
    return enricher


@pytest.fixture
def mock_processor():
    """Create a mock PdfProcessor."""
    processor = MagicMock()
    processor.process_batch = AsyncMock(return_value=[])
    return processor


@pytest.fixture
def client(mock_collector, mock_enricher, mock_processor):
    """Create a test client with mocked dependencies."""
    from prep_pulse.web.app import create_app
    from prep_pulse.web.dependencies import get_collector, get_enricher, get_pdf_processor

    app = create_app()
    app.dependency_overrides[get_collector] = lambda: mock_collector
    app.dependency_overrides[get_enricher] = lambda: mock_enricher
    app.dependency_overrides[get_pdf_processor] = lambda: mock_processor

    return TestClient(app, raise_server_exceptions=False)


class TestHealth:
    """Tests for GET /api/health."""

    def test_healthy(self, client):
        """Should report status and an idle throttle."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["summaries_throttled"] is False

    def test_reports_throttle(self, client, mock_enricher):
        """Should expose the remaining wait of the summary throttle."""
        mock_enricher.summarizer.groq.rotator.throttle_status.return_value = (True, 1.2345)

        data = client.get("/api/health").json()

        assert data["summaries_throttled"] is True
        assert data["throttle_seconds"] == 1.23


class TestNews:
    """Tests for POST /api/news."""

    def test_returns_articles_and_source(self, client, mock_collector, article_factory):
        """Should return the batch and name the source that served it."""

        async def collect(topics, **kwargs):
            on_progress = kwargs["on_progress"]
            on_progress(FetchProgress(stage="trying", source="worldnews", message="Trying..."))
            on_progress(
                FetchProgress(stage="success", source="worldnews", message="Success!", count=1)
            )
            return [article_factory()]

        mock_collector.collect.side_effect = collect

        response = client.post("/api/news", json={"topics": ["economy"], "preset": "today"})

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "worldnews"
        assert [article["id"] for article in data["articles"]] == ["test-1"]
        assert [event["stage"] for event in data["progress"]] == ["trying", "success"]

        args, kwargs = mock_collector.collect.call_args
        assert args[0] == [Topic.ECONOMY]
        assert kwargs["preset"] == DateRangePreset.TODAY
        assert kwargs["custom"] is None
        assert kwargs["summarize"] is False

    def test_defaults(self, client, mock_collector):
        """An empty body searches all topics over the last week in English."""
        client.post("/api/news", json={})

        args, kwargs = mock_collector.collect.call_args
        assert args[0] == [Topic.ALL]
        assert kwargs["preset"] == DateRangePreset.WEEK
        assert kwargs["language"] == Language.EN

    def test_custom_range_is_forwarded(self, client, mock_collector):
        """Explicit bounds are passed on only for the custom preset."""
        client.post(
            "/api/news",
            json={
                "preset": "custom",
                "start": "2026-03-01T00:00:00Z",
                "end": "2026-03-05T00:00:00Z",
            },
        )

        custom = mock_collector.collect.call_args.kwargs["custom"]
        assert custom == (
            datetime(2026, 3, 1, tzinfo=UTC),
            datetime(2026, 3, 5, tzinfo=UTC),
        )

    def test_bounds_ignored_without_custom_preset(self, client, mock_collector):
        client.post("/api/news", json={"preset": "month", "start": "2026-03-01T00:00:00Z"})

        assert mock_collector.collect.call_args.kwargs["custom"] is None

    def test_all_sources_failed(self, client, mock_collector):
        """Should answer 502 with the user-facing message only."""
        mock_collector.collect.side_effect = AllSourcesFailedError(["worldnews", "newsdata"])

        response = client.post("/api/news", json={})

        assert response.status_code == 502
        assert response.json()["detail"] == AllSourcesFailedError.user_message

    def test_unknown_topic_rejected(self, client, mock_collector):
        response = client.post("/api/news", json={"topics": ["astrology"]})

        assert response.status_code == 422
        mock_collector.collect.assert_not_called()


class TestSummaries:
    """Tests for POST /api/news/summaries."""

    def test_enriches_articles(self, client, mock_enricher, article_factory):
        """Should pass articles and language to the enricher."""
        articles = [article_factory(1), article_factory(2)]
        mock_enricher.enrich_batch.return_value = articles

        response = client.post(
            "/api/news/summaries",
            json={
                "articles": [article.model_dump(mode="json") for article in articles],
                "language": "hi",
            },
        )

        assert response.status_code == 200
        assert len(response.json()["articles"]) == 2
        sent, language = mock_enricher.enrich_batch.call_args.args
        assert [article.id for article in sent] == ["test-1", "test-2"]
        assert language == Language.HI


class TestPdf:
    """Tests for POST /api/pdf."""

    def test_uploads_are_forwarded(self, client, mock_processor):
        """Should hand every upload to the processor with the form options."""
        mock_processor.process_batch.return_value = [
            PdfOutcome(filename="notes.pdf", error_kind="invalid", error="notes.pdf: bad"),
        ]

        response = client.post(
            "/api/pdf",
            files=[
                ("files", ("notes.pdf", b"%PDF-1.7", "application/pdf")),
                ("files", ("scan.pdf", b"%PDF-1.4", "application/pdf")),
            ],
            data={"depth": "advanced", "language": "ta"},
        )

        assert response.status_code == 200
        outcome = response.json()["outcomes"][0]
        assert outcome["filename"] == "notes.pdf"
        assert outcome["error_kind"] == "invalid"

        uploads = mock_processor.process_batch.call_args.args[0]
        kwargs = mock_processor.process_batch.call_args.kwargs
        assert uploads == [
            PdfUpload("notes.pdf", b"%PDF-1.7", "application/pdf"),
            PdfUpload("scan.pdf", b"%PDF-1.4", "application/pdf"),
        ]
        assert kwargs["depth"] == AnalysisDepth.ADVANCED
        assert kwargs["language"] == Language.TA

    def test_requires_files(self, client, mock_processor):
        response = client.post("/api/pdf", data={"depth": "basic"})

        assert response.status_code == 422
        mock_processor.process_batch.assert_not_called()
