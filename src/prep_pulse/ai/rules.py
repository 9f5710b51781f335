# ABOUTME: Deterministic rule-based analysis used when no AI provider answers.
# ABOUTME: Derives summary, takeaways, facts and questions from simple text statistics.

import re
from collections import Counter

from prep_pulse.models import AnalysisDepth, AnalysisResult, Sentiment, Topic

STOP_WORDS = frozenset(
    {"about", "which", "there", "their", "these", "those", "would", "could", "should"}
)

POSITIVE_WORDS = (
    "growth",
    "increase",
    "improve",
    "success",
    "achieve",
    "progress",
    "benefit",
    "positive",
    "enhanced",
    "strong",
)
NEGATIVE_WORDS = (
    "decline",
    "decrease",
    "crisis",
    "concern",
    "challenge",
    "problem",
    "fail",
    "negative",
    "weak",
    "poor",
)

# Broader than the search keyword table: scored against word frequencies, not substrings.
ANALYSIS_TOPIC_WORDS: dict[Topic, tuple[str, ...]] = {
    Topic.ECONOMY: (
        "economy", "gdp", "inflation", "growth", "fiscal",
        "monetary", "trade", "finance", "market", "investment",
    ),
    Topic.POLITY: (
        "government", "parliament", "constitution", "policy", "legislation",
        "election", "democracy", "judicial", "executive",
    ),
    Topic.ENVIRONMENT: (
        "environment", "climate", "pollution", "carbon", "renewable",
        "energy", "conservation", "biodiversity", "forest",
    ),
    Topic.INTERNATIONAL: (
        "international", "global", "foreign", "diplomatic",
        "treaty", "bilateral", "relations", "geopolitical",
    ),
    Topic.SCIENCE: (
        "science", "technology", "research", "innovation", "space",
        "satellite", "digital", "artificial", "quantum",
    ),
    Topic.SOCIETY: (
        "education", "health", "social", "welfare", "poverty",
        "literacy", "unemployment", "development", "rural",
    ),
    Topic.HISTORY: (
        "history", "ancient", "heritage", "culture",
        "archaeological", "tradition", "civilization", "historical",
    ),
    Topic.GEOGRAPHY: (
        "geography", "river", "mountain", "climate", "mineral",
        "agriculture", "irrigation", "drought", "flood",
    ),
}  # fmt: skip

POLICY_IMPLICATIONS = [
    "Requires multi-stakeholder coordination and collaboration",
    "Necessitates adequate resource allocation and capacity building",
    "Demands robust monitoring and evaluation frameworks",
    "Calls for evidence-based policy making and adaptive implementation",
    "Requires public awareness and participatory governance approaches",
]

_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?%?")
_DATE_PATTERN = re.compile(r"\d{4}|\d{1,2}/\d{1,2}/\d{2,4}")
_SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")
_FACT_VERBS = re.compile(r"announced|launched|implemented|established", re.IGNORECASE)


def count_keywords(words: list[str]) -> Counter[str]:
    """Frequency of words longer than four characters, minus stop words."""
    return Counter(word for word in words if len(word) > 4 and word not in STOP_WORDS)


def detect_sentiment(content: str) -> Sentiment:
    """Lexicon sentiment: one side must outweigh the other by half again."""
    lowered = content.lower()
    positive = sum(lowered.count(word) for word in POSITIVE_WORDS)
    negative = sum(lowered.count(word) for word in NEGATIVE_WORDS)

    if positive > negative * 1.5:
        return Sentiment.POSITIVE
    if negative > positive * 1.5:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def score_topics(keyword_counts: Counter[str], limit: int = 3) -> list[Topic]:
    scores = {
        topic: sum(keyword_counts[word] for word in words)
        for topic, words in ANALYSIS_TOPIC_WORDS.items()
    }
    ranked = sorted(
        (topic for topic, score in scores.items() if score > 0),
        key=lambda topic: scores[topic],
        reverse=True,
    )
    return ranked[:limit]


def _sentences(content: str) -> list[str]:
    return _SENTENCE_PATTERN.findall(content)


def _summary(content: str, advanced: bool) -> str:
    sentences = _sentences(content) or [content]
    joined = " ".join(sentences[: 3 if advanced else 2])
    return joined[: 500 if advanced else 250]


def _takeaways(keyword_counts: Counter[str], advanced: bool, has_data: bool) -> list[str]:
    if not advanced:
        top = [word for word, _ in keyword_counts.most_common(3)]
        return [
            f"Key focus areas: {', '.join(top)}",
            "Contains important data and statistics for exam preparation",
            "Relevant for current affairs and contemporary issues",
        ]

    top = [word for word, _ in keyword_counts.most_common(6)]
    return [
        f"Primary themes: {', '.join(top[:3])}",
        (
            "Contains quantitative data and statistical evidence"
            if has_data
            else "Provides qualitative analysis and insights"
        ),
        "Multi-dimensional perspective on contemporary issues",
        "Relevant for policy analysis and governance discussions",
        "Connects to broader developmental and strategic objectives",
        f"Related concepts: {', '.join(top[3:6])}",
    ]


def _exam_relevance(topics: list[Topic], advanced: bool) -> str:
    if not topics:
        return "Relevant for general awareness and current affairs preparation."

    names = ", ".join(topic.value.capitalize() for topic in topics)
    if not advanced:
        return f"Relevant for {names} sections. Important for both Prelims and Mains preparation."
    return (
        f"Highly relevant for competitive exam preparation. Topics covered: {names}. "
        "Useful for Prelims (current affairs, factual questions), Mains (analytical answers, "
        "essay writing), and Interview (demonstrating awareness and critical thinking). "
        "Can be linked to multiple GS papers and integrated with other topics for "
        "comprehensive understanding."
    )


def _facts(content: str, numbers: list[str], dates: list[str], advanced: bool) -> list[str]:
    facts: list[str] = []
    if numbers:
        facts.append(f"Key statistics: {', '.join(numbers[: 5 if advanced else 3])}")
    if dates:
        facts.append(f"Important dates: {', '.join(dates[: 3 if advanced else 2])}")

    factual = [
        sentence
        for sentence in _sentences(content)
        if re.search(r"\d+", sentence) or _FACT_VERBS.search(sentence)
    ]
    facts.extend(factual[: 4 if advanced else 2])
    return facts[: 7 if advanced else 4]


def _questions(topics: list[Topic], advanced: bool) -> list[str]:
    if not topics:
        return ["Discuss the significance of recent developments mentioned in the content."]

    topic = topics[0].value
    if not advanced:
        return [
            f"What are the key developments in {topic}?",
            f"Explain the significance of recent {topic} initiatives.",
        ]
    return [
        f"Critically analyze the recent developments in {topic}. What are the implications "
        "for India's development trajectory? (250 words)",
        f"Discuss the challenges and opportunities in the {topic} sector. "
        "Suggest policy measures for improvement. (200 words)",
        f"Compare India's approach to {topic} with international best practices. (150 words)",
        f"Examine the role of various stakeholders in addressing {topic} issues. (150 words)",
    ]


def analyze_rule_based(content: str, depth: AnalysisDepth) -> AnalysisResult:
    """Build an analysis from text statistics alone. Never calls a provider."""
    advanced = AnalysisDepth(depth) is AnalysisDepth.ADVANCED

    numbers = _NUMBER_PATTERN.findall(content)
    dates = _DATE_PATTERN.findall(content)
    keyword_counts = count_keywords(content.lower().split())
    topics = score_topics(keyword_counts)

    return AnalysisResult(
        summary=_summary(content, advanced),
        key_takeaways=_takeaways(keyword_counts, advanced, has_data=bool(numbers)),
        exam_relevance=_exam_relevance(topics, advanced),
        important_facts=_facts(content, numbers, dates, advanced),
        potential_questions=_questions(topics, advanced),
        related_topics=[topic.value for topic in topics],
        sentiment=detect_sentiment(content),
        policy_implications=list(POLICY_IMPLICATIONS) if advanced else None,
    )
