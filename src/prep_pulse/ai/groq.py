# ABOUTME: Groq chat-completions client (OpenAI-compatible) over the shared key rotator.
# ABOUTME: One rotator per process throttles summaries and deep analyses together.

import httpx
import structlog

from prep_pulse.ai.rotation import KeyRotator, get_rotator
from prep_pulse.config import Settings, get_settings

log = structlog.get_logger()

PROVIDER = "groq"


class GroqClient:
    """Sends chat completions through the process-wide Groq rotator."""

    def __init__(
        self,
        settings: Settings | None = None,
        rotator: KeyRotator | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rotator = rotator or get_rotator(
            PROVIDER,
            self.settings.groq_api_keys,
            min_interval=self.settings.groq_min_interval,
            rate_limit_cooldown=self.settings.groq_rate_limit_cooldown,
            retry_delay=self.settings.groq_retry_delay,
        )
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.groq_timeout)
        return self._client

    @property
    def has_credentials(self) -> bool:
        return self.rotator.has_credentials

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def complete(
        self,
        system_prompt: str,
        prompt: str,
        temperature: float = 0.5,
        max_tokens: int = 400,
    ) -> str:
        """Return the assistant message for a single-turn chat.

        Raises:
            NoCredentialsError: If no Groq key is configured.
            ExhaustedError: If every attempt across the key pool failed.
            ValueError: If the provider answered with an unexpected payload.
        """
        payload = {
            "model": self.settings.groq_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": 1,
        }

        async def send(api_key: str) -> httpx.Response:
            return await self.client.post(
                self.settings.groq_base_url,
                headers={"Authorization": f"Bearer {api_key}"},
                json=payload,
            )

        log.debug("groq_completion", model=self.settings.groq_model, prompt_length=len(prompt))
        response = await self.rotator.with_rotation(send)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ValueError("Groq returned an unexpected completion payload") from e

        if not isinstance(content, str):
            raise ValueError("Groq returned an empty completion")
        return content
