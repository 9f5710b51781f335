# ABOUTME: Base class for news source adapters.
# ABOUTME: Owns the lazy HTTP client and turns transport and status failures into SourceError.

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TypeVar

import httpx
import structlog
from dateutil import parser as dateparser
from pydantic import BaseModel, SecretStr, ValidationError

from prep_pulse.config import Settings, get_settings, is_placeholder
from prep_pulse.errors import SourceError
from prep_pulse.models import Article, DateWindow, Language, Topic

log = structlog.get_logger()

ItemT = TypeVar("ItemT", bound=BaseModel)


class SourceRole(str, Enum):
    """What a source is good at; drives fallback ordering."""

    FEED = "feed"
    RECENCY = "recency"
    BROAD = "broad"
    HISTORY = "history"


def parse_published(value: str | float | None) -> datetime:
    """Parse a provider timestamp, defaulting to now.

    Naive values are taken as UTC; numbers are epoch seconds.
    """
    if isinstance(value, int | float):
        try:
            return datetime.fromtimestamp(value, UTC)
        except (ValueError, OverflowError, OSError):
            return datetime.now(UTC)
    if value:
        try:
            parsed = dateparser.parse(value)
        except (ValueError, OverflowError):
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(UTC)


class NewsSource(ABC):
    """A single news provider normalized into canonical Articles."""

    name: str = "source"
    role: SourceRole = SourceRole.BROAD

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.news_timeout,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "NewsSource":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    @abstractmethod
    async def fetch(
        self,
        topics: list[Topic],
        window: DateWindow,
        language: Language,
    ) -> list[Article]:
        """Fetch articles for the topics and window.

        Returns an empty list when the provider has no results.

        Raises:
            SourceError: If the provider is unconfigured, unreachable, or
                answers with a non-success status.
        """

    def _require_key(self, key: SecretStr | None) -> str:
        if is_placeholder(key):
            raise SourceError(self.name, "API key not configured")
        return key.get_secret_value()

    async def _get_json(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        """GET a JSON document, mapping every failure to SourceError."""
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            log.warning("source_transport_error", source=self.name, error=str(e))
            raise SourceError(self.name, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise SourceError(self.name, "request failed", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise SourceError(self.name, "response is not JSON") from e

        if not isinstance(data, dict):
            raise SourceError(self.name, "response is not a JSON object")
        return data

    def _parse_items(self, raw_items: Any, model: type[ItemT]) -> list[ItemT]:
        """Validate provider items, skipping any that do not fit the expected shape.

        Raises:
            SourceError: If the item collection itself is not a list.
        """
        if not raw_items:
            return []
        if not isinstance(raw_items, list):
            raise SourceError(self.name, "unexpected response shape")

        items: list[ItemT] = []
        for raw in raw_items:
            try:
                items.append(model.model_validate(raw))
            except ValidationError as e:
                log.warning("source_item_skipped", source=self.name, errors=e.error_count())
        return items
