# ABOUTME: Tests for the Groq-backed summarizer and its local fallback.
# ABOUTME: Uses httpx.MockTransport in place of the chat completions endpoint.

import json

import httpx
import pytest

from prep_pulse.ai.groq import GroqClient
from prep_pulse.ai.summarizer import FALLBACK_TAKEAWAYS, Summarizer, local_summary
from prep_pulse.config import Settings
from prep_pulse.models import Language


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _summarizer(settings: Settings, handler) -> Summarizer:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Summarizer(settings, groq=GroqClient(settings, client=client))


class TestLocalSummary:
    """Tests for provider-free summaries."""

    def test_first_sentences(self) -> None:
        description = "One happened. Two followed! Was three next? Four closed. Five is cut."
        result = local_summary(description, "", Language.EN)

        assert result.summary == "One happened. Two followed! Was three next? Four closed."
        assert result.origin == "fallback"
        assert result.key_takeaways == list(FALLBACK_TAKEAWAYS[Language.EN])

    def test_uses_content_without_description(self) -> None:
        result = local_summary("", "Content only sentence.", Language.EN)
        assert result.summary == "Content only sentence."

    def test_text_without_sentence_marks(self) -> None:
        """Unpunctuated text is cut to a fixed length."""
        result = local_summary("word " * 200, "", Language.EN)
        assert len(result.summary) == 500

    @pytest.mark.parametrize("language", list(Language))
    def test_takeaways_are_translated(self, language: Language) -> None:
        """Every supported language has its own three takeaways."""
        result = local_summary("A sentence.", "", language)
        assert len(result.key_takeaways) == 3
        assert result.key_takeaways == list(FALLBACK_TAKEAWAYS[language])


class TestSummarizer:
    """Tests for Summarizer.summarize."""

    async def test_without_credentials_uses_fallback(
        self, unconfigured_settings: Settings
    ) -> None:
        """No usable key means no request at all."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("must not be called")

        summarizer = _summarizer(unconfigured_settings, handler)
        result = await summarizer.summarize("Title", "Body text.", "A description.", Language.HI)

        assert result.origin == "fallback"
        assert result.summary == "A description."
        assert result.key_takeaways == list(FALLBACK_TAKEAWAYS[Language.HI])

    async def test_parses_provider_json(self, mock_settings: Settings) -> None:
        """The assistant message is parsed into a summary."""
        requests: list[httpx.Request] = []
        content = json.dumps(
            {
                "summary": "The cabinet approved a new solar manufacturing scheme.",
                "keyTakeaways": ["PLI extension", "Solar capacity", "Import reduction"],
            }
        )

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_completion(content))

        summarizer = _summarizer(mock_settings, handler)
        result = await summarizer.summarize(
            "Solar scheme", "Long body", "Cabinet approves scheme", Language.TA
        )

        assert result.origin == "ai"
        assert result.summary.startswith("The cabinet approved")
        assert len(result.key_takeaways) == 3

        body = json.loads(requests[0].content)
        assert requests[0].headers["Authorization"] == "Bearer gsk-key-one"
        assert body["model"] == mock_settings.groq_model
        assert body["max_tokens"] == 400
        assert "Tamil" in body["messages"][0]["content"]
        assert "Cabinet approves scheme" in body["messages"][1]["content"]

    async def test_content_used_when_no_description(self, mock_settings: Settings) -> None:
        """Content is truncated into the prompt when description is empty."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_completion('{"summary": "A long enough summary."}'))

        summarizer = _summarizer(mock_settings, handler)
        await summarizer.summarize("T", "x" * 5000, "", Language.EN)

        prompt = json.loads(requests[0].content)["messages"][1]["content"]
        assert "x" * 2000 in prompt
        assert "x" * 2001 not in prompt

    async def test_exhausted_keys_degrade_to_fallback(self, mock_settings: Settings) -> None:
        """Rate limits on every key produce a local summary, not an error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429)

        summarizer = _summarizer(mock_settings, handler)
        result = await summarizer.summarize("Title", "", "Fallback sentence here.", Language.EN)

        assert result.origin == "fallback"
        assert result.summary == "Fallback sentence here."

    async def test_unexpected_payload_propagates(self, mock_settings: Settings) -> None:
        """A malformed success payload is an error for the caller to handle."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": []})

        summarizer = _summarizer(mock_settings, handler)
        with pytest.raises(ValueError):
            await summarizer.summarize("Title", "Body", "Desc", Language.EN)
