# ABOUTME: Pytest fixtures and configuration for PrepPulse tests.
# ABOUTME: Provides mock settings, sample articles, and rotator isolation.

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import SecretStr

from prep_pulse.ai.rotation import reset_rotators
from prep_pulse.config import FeedSource, Settings
from prep_pulse.models import Article, Language, Topic


@pytest.fixture(autouse=True)
def isolated_rotators() -> Iterator[None]:
    """Give every test a fresh process-wide rotator registry."""
    reset_rotators()
    yield
    reset_rotators()


@pytest.fixture
def mock_settings() -> Settings:
    """Create mock settings for testing, with throttling disabled."""
    return Settings(
        _env_file=None,
        worldnews_api_key=SecretStr("test-worldnews-key"),
        newsdata_api_key=SecretStr("test-newsdata-key"),
        gnews_api_key=SecretStr("test-gnews-key"),
        groq_api_keys=[SecretStr("gsk-key-one"), SecretStr("gsk-key-two")],
        gemini_api_key=None,
        groq_min_interval=0,
        groq_rate_limit_cooldown=0,
        groq_retry_delay=0,
        feed_sources=[
            FeedSource(tag="alpha", name="Alpha Times", url="https://alpha.example.com/rss"),
            FeedSource(tag="beta", name="Beta Herald", url="https://beta.example.com/rss"),
        ],
        feed_proxies=["https://proxy-one.test/?url=", "https://proxy-two.test/?url="],
        log_level="DEBUG",
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings with every credential missing or left as a template placeholder."""
    return Settings(
        _env_file=None,
        worldnews_api_key=SecretStr("YOUR_WORLDNEWS_API_KEY_HERE"),
        newsdata_api_key=None,
        gnews_api_key=SecretStr(""),
        groq_api_keys=[SecretStr("YOUR_GROQ_API_KEY_1_HERE")],
        gemini_api_key=None,
        groq_min_interval=0,
        groq_rate_limit_cooldown=0,
        groq_retry_delay=0,
    )


def make_article(index: int = 1, **overrides) -> Article:
    """Build a canonical article for tests."""
    values = {
        "id": f"test-{index}",
        "title": f"RBI holds repo rate steady in policy review {index}",
        "content": (
            "The Reserve Bank of India kept the repo rate unchanged at 6.5%. "
            "The economy grew 7.2% last quarter. Inflation remains a concern."
        ),
        "summary": "The RBI kept rates unchanged.",
        "source": "Test Source",
        "date": datetime.now(UTC) - timedelta(hours=index),
        "topics": [Topic.ECONOMY],
        "language": Language.EN,
        "url": f"https://example.com/article-{index}",
    }
    values.update(overrides)
    return Article(**values)


@pytest.fixture
def sample_article() -> Article:
    """Create a sample Article for testing."""
    return make_article()


@pytest.fixture
def sample_articles() -> list[Article]:
    """Create five sample articles."""
    return [make_article(i) for i in range(1, 6)]


@pytest.fixture
def article_factory():
    """Factory building articles with per-test overrides."""
    return make_article
