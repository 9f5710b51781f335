# ABOUTME: Tolerant parsing of LLM responses into summaries and analyses.
# ABOUTME: Tries strict JSON, fenced blocks, embedded objects, line heuristics, then fixed text.

import html
import json
import re
from typing import Any

import structlog

from prep_pulse.models import AnalysisResult, Sentiment, SummaryResult

log = structlog.get_logger()

MAX_LIGHT_TAKEAWAYS = 3
MIN_SUMMARY_LINE = 20

SUMMARY_UNAVAILABLE = "Summary not available"
GENERIC_TAKEAWAYS = (
    "Key information available",
    "Relevant for current affairs",
    "Important for exam preparation",
)

GENERIC_ANALYSIS_SUMMARY = "Analysis completed. Review the content for key insights."
GENERIC_ANALYSIS = {
    "key_takeaways": [
        "Key information extracted from content",
        "Relevant for exam preparation",
        "Review full content for details",
    ],
    "exam_relevance": "Relevant for competitive exam preparation.",
    "important_facts": ["See content for specific facts and data"],
    "potential_questions": [
        "What are the key points discussed?",
        "How is this relevant to current affairs?",
    ],
}

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_BULLET_PATTERN = re.compile(r"^\s*(?:[-•*]|\d+[.)])\s+")


def strip_markdown_fences(text: str) -> str | None:
    """Return the body of the first fenced code block, if any."""
    match = _FENCE_PATTERN.search(text)
    return match.group(1).strip() if match else None


def fix_json_trailing_commas(text: str) -> str:
    """Remove trailing commas before } or ] (common LLM error)."""
    text = re.sub(r",\s*}", "}", text)
    return re.sub(r",\s*]", "]", text)


def unescape_html_entities(data: Any) -> Any:
    """Recursively unescape HTML entities in parsed JSON data."""
    if isinstance(data, str):
        return html.unescape(data)
    if isinstance(data, dict):
        return {k: unescape_html_entities(v) for k, v in data.items()}
    if isinstance(data, list):
        return [unescape_html_entities(item) for item in data]
    return data


def _json_candidates(text: str) -> list[str]:
    candidates = [text.strip()]
    fenced = strip_markdown_fences(text)
    if fenced:
        candidates.append(fenced)
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start : end + 1])
    return candidates


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Find the first JSON object in text using progressively looser strategies."""
    if not text or not text.strip():
        return None
    for candidate in _json_candidates(text):
        try:
            data = json.loads(fix_json_trailing_commas(candidate), strict=False)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return unescape_html_entities(data)
    return None


def _pick(data: dict[str, Any], *names: str) -> Any:
    for name in names:
        value = data.get(name)
        if value not in (None, "", [], {}):
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(_as_list(value))
    if isinstance(value, dict):
        return " ".join(_as_list(list(value.values())))
    return str(value).strip()


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, dict):
        value = list(value.values())
    if not isinstance(value, list):
        value = [value]
    return [text for text in (str(item).strip() for item in value) if text]


def split_lines(text: str) -> tuple[str, list[str]]:
    """Heuristic split of prose: first plain line as summary, bullet lines as takeaways."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    summary = next(
        (
            line
            for line in lines
            if not _BULLET_PATTERN.match(line) and len(line) > MIN_SUMMARY_LINE
        ),
        "",
    )
    takeaways = [
        _BULLET_PATTERN.sub("", line).strip() for line in lines if _BULLET_PATTERN.match(line)
    ]
    return summary, [t for t in takeaways if t][:MAX_LIGHT_TAKEAWAYS]


def parse_summary_response(text: str) -> SummaryResult:
    """Parse a lightweight summary response. Never raises.

    Accepts clean JSON, fenced JSON, snake_case keys, or free text.
    """
    data = extract_json_object(text)
    if data is not None:
        summary = _as_text(_pick(data, "summary", "brief_summary"))
        takeaways = _as_list(_pick(data, "keyTakeaways", "key_takeaways"))[:MAX_LIGHT_TAKEAWAYS]
        if summary:
            return SummaryResult(
                summary=summary, key_takeaways=takeaways or list(GENERIC_TAKEAWAYS)
            )
        log.debug("summary_json_without_summary", keys=list(data)[:10])

    summary, takeaways = split_lines(text or "")
    if not summary:
        log.warning("summary_parse_fallback", response_preview=(text or "")[:200])
    return SummaryResult(
        summary=summary or SUMMARY_UNAVAILABLE,
        key_takeaways=takeaways or list(GENERIC_TAKEAWAYS),
    )


def _parse_sentiment(value: Any) -> Sentiment:
    try:
        return Sentiment(str(value).strip().lower())
    except ValueError:
        return Sentiment.NEUTRAL


def parse_analysis_response(text: str) -> AnalysisResult:
    """Parse a deep analysis response. Never raises.

    Unparseable output becomes a generic analysis quoting the start of the text.
    """
    data = extract_json_object(text)
    if data is not None:
        summary = _as_text(_pick(data, "summary", "brief_summary"))
        if summary:
            policy = _pick(data, "policyImplications", "policy_implications")
            return AnalysisResult(
                summary=summary,
                key_takeaways=_as_list(_pick(data, "keyTakeaways", "key_takeaways")),
                exam_relevance=_as_text(_pick(data, "examRelevance", "exam_relevance")),
                important_facts=_as_list(
                    _pick(
                        data,
                        "importantFacts",
                        "important_facts",
                        "important_facts_and_data_points",
                    )
                ),
                potential_questions=_as_list(
                    _pick(
                        data,
                        "potentialQuestions",
                        "potential_questions",
                        "potential_exam_questions",
                    )
                ),
                related_topics=_as_list(_pick(data, "relatedTopics", "related_topics")),
                sentiment=_parse_sentiment(data.get("sentiment", "neutral")),
                policy_implications=_as_list(policy) if policy is not None else None,
            )

    log.warning("analysis_parse_fallback", response_preview=(text or "")[:200])
    return AnalysisResult(
        summary=(text or "").strip()[:200] or GENERIC_ANALYSIS_SUMMARY,
        sentiment=Sentiment.NEUTRAL,
        **GENERIC_ANALYSIS,
    )
