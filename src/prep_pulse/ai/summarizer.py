# ABOUTME: Lightweight per-article summarizer backed by Groq.
# ABOUTME: Degrades to local sentence extraction when no key works.

import re

import structlog

from prep_pulse.ai.groq import GroqClient
from prep_pulse.ai.parsing import parse_summary_response
from prep_pulse.ai.prompts import SUMMARY_PROMPT, SUMMARY_SYSTEM_PROMPT, language_directive
from prep_pulse.config import Settings, get_settings
from prep_pulse.errors import RotationError
from prep_pulse.models import Language, SummaryResult

log = structlog.get_logger()

FALLBACK_SENTENCES = 4
FALLBACK_CHARS = 500

_SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")

FALLBACK_TAKEAWAYS: dict[Language, tuple[str, str, str]] = {
    Language.EN: (
        "Important for current affairs",
        "Relevant for competitive exams",
        "Key development in the sector",
    ),
    Language.HI: (
        "करंट अफेयर्स के लिए महत्वपूर्ण",
        "प्रतियोगी परीक्षाओं के लिए प्रासंगिक",
        "क्षेत्र में प्रमुख विकास",
    ),
    Language.TA: (
        "நடப்பு விவகாரங்களுக்கு முக்கியம்",
        "போட்டித் தேர்வுகளுக்கு பொருத்தமானது",
        "துறையில் முக்கிய வளர்ச்சி",
    ),
    Language.BN: (
        "কারেন্ট অ্যাফেয়ার্সের জন্য গুরুত্বপূর্ণ",
        "প্রতিযোগিতামূলক পরীক্ষার জন্য প্রাসঙ্গিক",
        "সেক্টরে প্রধান উন্নয়ন",
    ),
    Language.TE: (
        "కరెంట్ అఫైర్స్ కోసం ముఖ్యమైనది",
        "పోటీ పరీక్షలకు సంబంధించినది",
        "రంగంలో కీలక అభివృద్ధి",
    ),
    Language.MR: (
        "चालू घडामोडींसाठी महत्त्वाचे",
        "स्पर्धा परीक्षांसाठी संबंधित",
        "क्षेत्रात प्रमुख विकास",
    ),
    Language.GU: (
        "વર્તમાન બાબતો માટે મહત્વપૂર્ણ",
        "સ્પર્ધાત્મક પરીક્ષાઓ માટે સંબંધિત",
        "ક્ષેત્રમાં મુખ્ય વિકાસ",
    ),
    Language.KN: (
        "ಕರೆಂಟ್ ಅಫೇರ್ಸ್ ಗೆ ಮುಖ್ಯ",
        "ಸ್ಪರ್ಧಾತ್ಮಕ ಪರೀಕ್ಷೆಗಳಿಗೆ ಸಂಬಂಧಿತ",
        "ವಲಯದಲ್ಲಿ ಪ್ರಮುಖ ಅಭಿವೃದ್ಧಿ",
    ),
    Language.ML: (
        "കറന്റ് അഫയേഴ്സിന് പ്രധാനം",
        "മത്സര പരീക്ഷകൾക്ക് പ്രസക്തം",
        "മേഖലയിൽ പ്രധാന വികസനം",
    ),
    Language.PA: (
        "ਕਰੰਟ ਅਫੇਅਰਜ਼ ਲਈ ਮਹੱਤਵਪੂਰਨ",
        "ਪ੍ਰਤੀਯੋਗੀ ਪ੍ਰੀਖਿਆਵਾਂ ਲਈ ਸੰਬੰਧਿਤ",
        "ਸੈਕਟਰ ਵਿੱਚ ਮੁੱਖ ਵਿਕਾਸ",
    ),
    Language.UR: (
        "کرنٹ افیئرز کے لیے اہم",
        "مسابقتی امتحانات کے لیے متعلقہ",
        "شعبے میں اہم ترقی",
    ),
}


def local_summary(description: str, content: str, language: Language) -> SummaryResult:
    """Summarize without a provider: first sentences plus translated generic takeaways."""
    text = (description or content or "").strip()
    sentences = [s.strip() for s in _SENTENCE_PATTERN.findall(text)]
    summary = " ".join(sentences[:FALLBACK_SENTENCES]) if sentences else text[:FALLBACK_CHARS]

    return SummaryResult(
        summary=summary,
        key_takeaways=list(FALLBACK_TAKEAWAYS[Language(language)]),
        origin="fallback",
    )


class Summarizer:
    """Produces a short summary and up to three takeaways per article."""

    def __init__(self, settings: Settings | None = None, groq: GroqClient | None = None) -> None:
        self.settings = settings or get_settings()
        self.groq = groq or GroqClient(self.settings)

    async def summarize(
        self,
        title: str,
        content: str,
        description: str,
        language: Language,
    ) -> SummaryResult:
        """Summarize one article.

        Missing or exhausted credentials fall back to local extraction; other
        errors propagate to the caller.
        """
        if not self.groq.has_credentials:
            log.warning("summarizer_unconfigured_using_fallback")
            return local_summary(description, content, language)

        directive = language_directive(language)
        prompt = SUMMARY_PROMPT.format(
            directive=directive,
            title=title,
            text=description or content[: self.settings.summary_input_chars],
        )

        try:
            response = await self.groq.complete(
                system_prompt=SUMMARY_SYSTEM_PROMPT.format(directive=directive),
                prompt=prompt,
                temperature=0.5,
                max_tokens=self.settings.summary_max_tokens,
            )
        except RotationError as e:
            log.warning("summarizer_degraded_to_fallback", error=str(e))
            return local_summary(description, content, language)

        return parse_summary_response(response)

    async def aclose(self) -> None:
        await self.groq.aclose()
