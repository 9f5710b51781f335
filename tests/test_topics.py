# ABOUTME: Tests for topic keyword mapping and topic detection.
# ABOUTME: Covers wildcard substitution, script filtering, ranking, and fallbacks.

from prep_pulse.models import Topic
from prep_pulse.news.topics import (
    TOPIC_KEYWORDS,
    detect_topics,
    is_latin_text,
    latin_ratio,
    to_keywords,
)


class TestToKeywords:
    """Tests for provider query construction."""

    def test_wildcard_uses_default_subset(self) -> None:
        """ALL expands to a short default subset, capped at five keywords."""
        query = to_keywords([Topic.ALL])
        assert query == "economy OR GDP OR RBI OR budget OR government"

    def test_single_topic(self) -> None:
        """Only the requested topic's Latin keywords are used."""
        assert to_keywords([Topic.ENVIRONMENT]) == "environment OR climate OR pollution"

    def test_non_latin_keywords_are_dropped(self) -> None:
        """Devanagari keywords never reach a provider query."""
        query = to_keywords(list(TOPIC_KEYWORDS), limit=50)
        assert latin_ratio(query) == 1.0
        assert "सरकार" not in query

    def test_empty_selection_behaves_like_wildcard(self) -> None:
        """No topics at all falls back to the default subset."""
        assert to_keywords([]) == to_keywords([Topic.ALL])

    def test_limit(self) -> None:
        """The keyword count is capped."""
        assert len(to_keywords([Topic.ECONOMY, Topic.POLITY], limit=2).split(" OR ")) == 2


class TestDetectTopics:
    """Tests for topic assignment from content."""

    def test_ranks_by_occurrences(self) -> None:
        """The topic with more keyword hits comes first."""
        text = "The government tabled the budget in Parliament on Monday."
        assert detect_topics(text, [Topic.ALL]) == [Topic.POLITY, Topic.ECONOMY]

    def test_at_most_two(self) -> None:
        """No more than two topics are assigned."""
        text = "economy government climate science history education"
        assert len(detect_topics(text, [Topic.ALL])) == 2

    def test_ties_keep_table_order(self) -> None:
        """Equal scores resolve in table order."""
        assert detect_topics("climate and science", [Topic.ALL]) == [
            Topic.ENVIRONMENT,
            Topic.SCIENCE,
        ]

    def test_deterministic(self) -> None:
        """Same input, same output."""
        text = "ISRO launched a satellite while RBI reviewed GDP data."
        first = detect_topics(text, [Topic.SCIENCE])
        assert all(detect_topics(text, [Topic.SCIENCE]) == first for _ in range(5))

    def test_case_insensitive(self) -> None:
        """Matching ignores case."""
        assert detect_topics("CLIMATE POLLUTION", [Topic.ALL]) == [Topic.ENVIRONMENT]

    def test_matches_devanagari(self) -> None:
        """Non-Latin keywords still count for detection."""
        assert detect_topics("पर्यावरण पर नई रिपोर्ट", [Topic.ALL]) == [Topic.ENVIRONMENT]

    def test_falls_back_to_requested(self) -> None:
        """With no hits, requested topics minus the wildcard are returned."""
        assert detect_topics("Cricket match report", [Topic.ALL, Topic.HISTORY]) == [
            Topic.HISTORY
        ]

    def test_wildcard_only_yields_nothing(self) -> None:
        """The wildcard is never assigned."""
        result = detect_topics("Cricket match report", [Topic.ALL])
        assert result == []
        assert Topic.ALL not in detect_topics("economy", [Topic.ALL])


class TestScriptDetection:
    """Tests for Latin-script detection."""

    def test_latin(self) -> None:
        assert is_latin_text("India signs trade pact")

    def test_devanagari(self) -> None:
        assert not is_latin_text("भारत सरकार ने नई नीति घोषित की")

    def test_no_letters(self) -> None:
        """Digits and punctuation alone count as Latin."""
        assert is_latin_text("2026 - 42%")
