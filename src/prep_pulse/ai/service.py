# ABOUTME: Google Gemini client used as the second stage of deep analysis.
# ABOUTME: Async generation with tenacity retries on transient failures.

import structlog
from google import genai
from google.genai import types
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from prep_pulse.config import Settings, get_settings, is_placeholder

log = structlog.get_logger()


class GeminiService:
    """Service for interacting with Google Gemini AI."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._client: genai.Client | None = None

    @property
    def has_credentials(self) -> bool:
        return not is_placeholder(self.settings.gemini_api_key)

    @property
    def client(self) -> genai.Client:
        """Lazy-initialized Gemini client."""
        if self._client is None:
            if not self.has_credentials:
                raise ValueError("GEMINI_API_KEY is required")
            self._client = genai.Client(
                api_key=self.settings.gemini_api_key.get_secret_value(),
            )
        return self._client

    def _generate_content_config(
        self,
        system_prompt: str,
        max_output_tokens: int,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.settings.ai_temperature,
            top_p=self.settings.ai_top_p,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json",
            system_instruction=[types.Part.from_text(text=system_prompt)],
        )

    @retry(
        retry=retry_if_exception_type(Exception),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        before_sleep=lambda retry_state: log.warning(
            "gemini_retry",
            attempt=retry_state.attempt_number,
            wait=retry_state.next_action.sleep,
        ),
        reraise=True,
    )
    async def generate(
        self,
        prompt: str,
        system_prompt: str,
        max_output_tokens: int = 2000,
        model: str | None = None,
    ) -> str:
        """Generate a JSON response from Gemini.

        Args:
            prompt: User prompt to send.
            system_prompt: System instructions.
            max_output_tokens: Response length cap.
            model: Model name override. Defaults to settings value.

        Returns:
            Generated text response (may be empty if the model returned nothing).
        """
        model = model or self.settings.gemini_model
        log.debug("gemini_generating", model=model, prompt_length=len(prompt))

        response = await self.client.aio.models.generate_content(
            model=model,
            contents=[
                types.Content(role="user", parts=[types.Part.from_text(text=prompt)]),
            ],
            config=self._generate_content_config(system_prompt, max_output_tokens),
        )
        result = response.text or ""

        if not result.strip():
            log.warning("gemini_empty_result", model=model)
        return result
