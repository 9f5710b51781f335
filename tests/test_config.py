# ABOUTME: Tests for configuration loading and placeholder credential detection.
# ABOUTME: Validates defaults, environment parsing, and key pool filtering.

import pytest
from pydantic import SecretStr

from prep_pulse.config import DEFAULT_FEED_SOURCES, Settings, is_placeholder


class TestIsPlaceholder:
    """Tests for placeholder credential detection."""

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "YOUR_GROQ_API_KEY_HERE", "YOUR_GROQ_API_KEY_2_HERE"],
    )
    def test_unusable_values(self, value) -> None:
        """Missing, blank, and template values are placeholders."""
        assert is_placeholder(value)

    def test_secret_placeholder(self) -> None:
        """SecretStr values are unwrapped before checking."""
        assert is_placeholder(SecretStr("YOUR_GNEWS_API_KEY_HERE"))

    def test_real_key(self) -> None:
        """A real-looking key is usable."""
        assert not is_placeholder(SecretStr("gsk_abc123"))
        assert not is_placeholder("YOUR_KEY")


class TestSettings:
    """Tests for Settings defaults and environment loading."""

    def test_defaults(self) -> None:
        """Defaults match the documented limits."""
        settings = Settings(_env_file=None)
        assert settings.news_page_size == 30
        assert settings.feed_window_days == 7.5
        assert settings.long_window_days == 7.0
        assert settings.feed_timeout == 5.0
        assert settings.groq_min_interval == 3.0
        assert settings.analysis_input_chars == 4000
        assert settings.pdf_max_bytes == 50 * 1024 * 1024
        assert len(settings.feed_sources) == len(DEFAULT_FEED_SOURCES)
        assert len(settings.feed_proxies) == 3

    def test_groq_keys_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The key pool is read as a JSON list."""
        monkeypatch.setenv("GROQ_API_KEYS", '["gsk-a", "YOUR_GROQ_API_KEY_2_HERE", "gsk-c"]')
        settings = Settings(_env_file=None)

        assert len(settings.groq_api_keys) == 3
        assert settings.usable_groq_keys == ["gsk-a", "gsk-c"]

    def test_secret_not_in_repr(self) -> None:
        """Credentials do not leak through repr."""
        settings = Settings(_env_file=None, gnews_api_key=SecretStr("super-secret"))
        assert "super-secret" not in repr(settings)
