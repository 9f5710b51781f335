# ABOUTME: Maps study topics to provider search keywords and re-detects topics in content.
# ABOUTME: Providers return no reliable taxonomy, so topics are assigned by keyword scoring.

import unicodedata
from collections.abc import Iterable

from prep_pulse.models import Topic

TOPIC_KEYWORDS: dict[Topic, list[str]] = {
    Topic.ECONOMY: ["economy", "GDP", "RBI", "budget", "अर्थव्यवस्था"],
    Topic.POLITY: ["government", "parliament", "politics", "सरकार", "राजनीति"],
    Topic.ENVIRONMENT: ["environment", "climate", "pollution", "पर्यावरण"],
    Topic.INTERNATIONAL: ["foreign policy", "international", "विदेश नीति"],
    Topic.SCIENCE: ["technology", "science", "ISRO", "विज्ञान"],
    Topic.SOCIETY: ["education", "health", "society", "समाज", "शिक्षा"],
    Topic.HISTORY: ["history", "heritage", "इतिहास"],
    Topic.GEOGRAPHY: ["geography", "भूगोल", "natural resources"],
}

# Queried in place of the wildcard; kept short because providers cap query length.
DEFAULT_TOPICS = [Topic.ECONOMY, Topic.POLITY, Topic.ENVIRONMENT, Topic.SCIENCE]

MAX_DETECTED_TOPICS = 2


def _is_latin_letter(char: str) -> bool:
    return unicodedata.name(char, "").startswith("LATIN")


def latin_ratio(text: str) -> float:
    """Share of alphabetic characters that are Latin script (1.0 for no letters)."""
    letters = [char for char in text if char.isalpha()]
    if not letters:
        return 1.0
    return sum(1 for char in letters if _is_latin_letter(char)) / len(letters)


def is_latin_text(text: str, threshold: float = 0.8) -> bool:
    """Judge whether text is written predominantly in Latin script."""
    return latin_ratio(text) >= threshold


def concrete_topics(topics: Iterable[Topic]) -> list[Topic]:
    """Drop the wildcard and duplicates, keeping the caller's order."""
    seen: list[Topic] = []
    for topic in topics:
        topic = Topic(topic)
        if topic is not Topic.ALL and topic not in seen:
            seen.append(topic)
    return seen


def to_keywords(topics: Iterable[Topic], limit: int = 5) -> str:
    """Build a provider query string from requested topics.

    Only Latin-script keywords are used; providers' query-language parameters
    are unreliable for transliterated terms.
    """
    topics = list(topics)
    active = DEFAULT_TOPICS if Topic.ALL in topics or not topics else concrete_topics(topics)

    keywords: list[str] = []
    for topic in active:
        for keyword in TOPIC_KEYWORDS[topic]:
            if latin_ratio(keyword) == 1.0 and keyword not in keywords:
                keywords.append(keyword)

    return " OR ".join(keywords[:limit])


def detect_topics(text: str, requested: Iterable[Topic]) -> list[Topic]:
    """Assign up to two topics to text by keyword occurrence counts.

    Ties keep table order, so the result is deterministic. With no match the
    requested topics (minus the wildcard) are returned; that may be empty.
    """
    lowered = text.lower()
    scores = {
        topic: sum(lowered.count(keyword.lower()) for keyword in keywords)
        for topic, keywords in TOPIC_KEYWORDS.items()
    }
    ranked = sorted(
        (topic for topic, score in scores.items() if score > 0), key=lambda t: -scores[t]
    )
    if ranked:
        return ranked[:MAX_DETECTED_TOPICS]
    return concrete_topics(requested)[:MAX_DETECTED_TOPICS]
