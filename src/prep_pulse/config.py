# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads provider credentials, feed sources, and throttle settings from the environment.

from functools import lru_cache

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSource(BaseModel):
    """A syndication feed reachable through the proxy chain."""

    tag: str
    name: str
    url: str


DEFAULT_FEED_SOURCES = [
    FeedSource(
        tag="toi",
        name="Times of India",
        url="https://timesofindia.indiatimes.com/rssfeedstopstories.cms",
    ),
    FeedSource(
        tag="hindu",
        name="The Hindu",
        url="https://www.thehindu.com/news/national/feeder/default.rss",
    ),
    FeedSource(tag="indianexpress", name="Indian Express", url="https://indianexpress.com/feed/"),
    FeedSource(
        tag="hindustantimes",
        name="Hindustan Times",
        url="https://www.hindustantimes.com/feeds/rss/india-news/rssfeed.xml",
    ),
    FeedSource(tag="ndtv", name="NDTV", url="https://feeds.feedburner.com/ndtvnews-top-stories"),
    FeedSource(tag="livemint", name="Mint", url="https://www.livemint.com/rss/news"),
    FeedSource(tag="wire", name="The Wire", url="https://thewire.in/feed"),
    FeedSource(tag="indiatoday", name="India Today", url="https://www.indiatoday.in/rss/home"),
]

DEFAULT_FEED_PROXIES = [
    "https://corsproxy.io/?",
    "https://api.allorigins.win/raw?url=",
    "https://cors-anywhere.herokuapp.com/",
]


def is_placeholder(value: str | SecretStr | None) -> bool:
    """Return True for missing credentials or template values like YOUR_X_HERE."""
    if value is None:
        return True
    raw = value.get_secret_value() if isinstance(value, SecretStr) else value
    raw = raw.strip()
    return not raw or (raw.startswith("YOUR_") and raw.endswith("_HERE"))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # News providers (optional - an unconfigured provider is skipped by the orchestrator)
    worldnews_api_key: SecretStr | None = None
    newsdata_api_key: SecretStr | None = None
    gnews_api_key: SecretStr | None = None
    news_country: str = "in"
    news_page_size: int = 30
    news_timeout: float = 15.0
    max_query_keywords: int = 5

    # Source ordering thresholds (days)
    feed_window_days: float = 7.5
    long_window_days: float = 7.0

    # Feeds
    feed_sources: list[FeedSource] = DEFAULT_FEED_SOURCES
    feed_proxies: list[str] = DEFAULT_FEED_PROXIES
    feed_timeout: float = 5.0  # per feed, per proxy
    feed_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.3 Safari/605.1.15"
    )

    # Lightweight summaries (Groq, OpenAI-compatible endpoint)
    groq_api_keys: list[SecretStr] = []
    groq_base_url: str = "https://api.groq.com/openai/v1/chat/completions"
    groq_model: str = "llama-3.3-70b-versatile"
    groq_timeout: float = 30.0
    groq_min_interval: float = 3.0
    groq_rate_limit_cooldown: float = 3.0
    groq_retry_delay: float = 1.0
    summary_max_tokens: int = 400
    summary_input_chars: int = 2000

    # Deep analysis (Gemini)
    gemini_api_key: SecretStr | None = None
    gemini_model: str = "gemini-2.5-flash"
    ai_temperature: float = 0.7
    ai_top_p: float = 0.95
    analysis_input_chars: int = 4000

    # PDF uploads
    pdf_max_bytes: int = 50 * 1024 * 1024

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    @property
    def usable_groq_keys(self) -> list[str]:
        """Groq keys with placeholders and blanks removed."""
        return [
            key.get_secret_value().strip() for key in self.groq_api_keys if not is_placeholder(key)
        ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables and .env file.
    Every credential is optional; missing ones degrade the matching provider.
    """
    return Settings()
