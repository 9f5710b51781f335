# ABOUTME: Prompt templates for summary and analysis requests.
# ABOUTME: Contains language directives for all eleven supported output languages.

from prep_pulse.models import AnalysisDepth, Language

LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.HI: "Hindi",
    Language.TA: "Tamil",
    Language.BN: "Bengali",
    Language.TE: "Telugu",
    Language.MR: "Marathi",
    Language.GU: "Gujarati",
    Language.KN: "Kannada",
    Language.ML: "Malayalam",
    Language.PA: "Punjabi",
    Language.UR: "Urdu",
}


def language_directive(language: Language) -> str:
    """Instruction pinning the response language."""
    name = LANGUAGE_NAMES.get(Language(language), "English")
    return f"You MUST respond ONLY in {name}."


SUMMARY_SYSTEM_PROMPT = "You are a concise news summarizer. {directive}"

SUMMARY_PROMPT = """{directive}

Summarize this news for exam prep.

Title: {title}
Content: {text}

Return ONLY valid JSON (no extra text):
{{"summary":"3-4 complete sentences covering all key points","keyTakeaways":["point 1","point 2","point 3"]}}"""

_ANALYSIS_BASE = (
    "You are an expert analyst specializing in competitive exam preparation, "
    "particularly for civil services examinations. Your task is to analyze {subject} "
    "and provide structured insights."
)

ADVANCED_ANALYSIS_PROMPT = (
    _ANALYSIS_BASE
    + """

Provide comprehensive analysis with:
- Detailed summary highlighting key developments and implications
- 6-8 key takeaways with actionable insights
- Exam relevance across multiple papers (Prelims, Mains, Interview)
- Important facts with specific data, statistics, and dates
- 4-5 potential exam questions with varying difficulty levels
- Policy implications and multi-stakeholder perspectives
- Sentiment analysis and related topics

Format your response as JSON with this structure:
{{
  "summary": "detailed summary",
  "keyTakeaways": ["point 1", "point 2"],
  "examRelevance": "detailed relevance",
  "importantFacts": ["fact 1", "fact 2"],
  "potentialQuestions": ["question 1", "question 2"],
  "policyImplications": ["implication 1", "implication 2"],
  "sentiment": "positive|neutral|negative",
  "relatedTopics": ["topic1", "topic2"]
}}"""
)

BASIC_ANALYSIS_PROMPT = (
    _ANALYSIS_BASE
    + """

Provide concise analysis with:
- Brief summary of main points
- 3-4 key takeaways
- Basic exam relevance
- Important facts and data points
- 2-3 potential exam questions

Format your response as JSON with the keys summary, keyTakeaways, examRelevance,
importantFacts, potentialQuestions, relatedTopics and sentiment."""
)

ANALYSIS_USER_PROMPT = """Analyze the following content for competitive exam preparation. Provide insights in {language_name}.

Content:
{content}

Provide structured analysis in JSON format."""


def analysis_system_prompt(depth: AnalysisDepth, context: str) -> str:
    subject = "news articles" if context == "news" else "documents"
    template = (
        ADVANCED_ANALYSIS_PROMPT if depth is AnalysisDepth.ADVANCED else BASIC_ANALYSIS_PROMPT
    )
    return template.format(subject=subject)
