# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: KeywordExtractor.py
# -----------------------------------------------------------------------------
import json
import logging
import re
from collections import Counter
from typing import Any, List, Optional

from chat.OpenAIChat import OpenAIChat
from utility.logging_utils import get_class_logger

MAX_KEYWORDS = 15
MAX_PHRASES = 5

STOP_WORDS = frozenset("""
the a an and or but in on at to for of with by
is are was were be been being have has had do does did
will would should could may might must can this that these those
i you he she it we they me him her us them
his its our their my your
very really quite just only also too so as than more most
from into onto upon about above below between among through during
before after while when where why how what which who whom
not no yes all each every some any many much few little
one two three first second last next previous other another
well good bad better best worse worst big small large
new old young same different long short high low early late
today yesterday tomorrow now then here there everywhere somewhere
up down out off over under again further once
said says say get got go went come came see saw know knew
think thought take took make made give gave find found tell told
ask asked work worked try tried use used need needed want wanted
like liked help helped show showed move moved live lived believe believed
""".split())

SYSTEM_PROMPT = (
    "You are an expert at analyzing caregiver notes and extracting relevant keywords, "
    "concepts, and themes that relate to life skills, activities, and program areas for "
    "individuals with disabilities.\n\n"
    "Extract keywords that would help match this note to relevant programs. Focus on:\n"
    "- Life skills mentioned (e.g., cooking, hygiene, communication, social interaction)\n"
    "- Activities described (e.g., meal preparation, group activities, exercise)\n"
    "- Skills being worked on (e.g., following directions, turn-taking, independence)\n"
    "- Areas of need or interest (e.g., daily living, social skills, communication)\n"
    "- Specific behaviors or goals mentioned\n\n"
    'Return a JSON object with a "keywords" array containing 5-15 relevant keywords/phrases.'
)


def _user_prompt(note_text: str) -> str:
    return (
        "Extract keywords from this caregiver note that would help match it to relevant programs:\n\n"
        f"{note_text}\n\n"
        "Return JSON in this format:\n"
        '{\n  "keywords": ["keyword1", "keyword2", "keyword3", ...]\n}\n\n'
        "Include both specific terms and broader concepts. Focus on actionable skills and life domains."
    )


def _dedupe(items: List[str]) -> List[str]:
    # preserves order while de-duplicating
    return list(dict.fromkeys(items))


def extract_keywords_fallback(note_text: str) -> List[str]:
    """
    Frequency-based extraction. Deterministic: ties keep first-appearance
    order (Counter.most_common is insertion-stable).
    """
    words = [
        w for w in re.sub(r"[^\w\s]", " ", (note_text or "").lower()).split()
        if len(w) > 2 and w not in STOP_WORDS
    ]

    word_freq = Counter(words)
    keywords = [
        word for word, freq in word_freq.most_common()
        if freq >= 2 or len(word) > 5
    ][:MAX_KEYWORDS]

    phrases = [
        f"{a} {b}" for a, b in zip(words, words[1:])
        if len(f"{a} {b}") > 5
    ]
    phrase_freq = Counter(phrases)
    top_phrases = [p for p, freq in phrase_freq.most_common() if freq >= 2][:MAX_PHRASES]

    return _dedupe(keywords + top_phrases)[:MAX_KEYWORDS]


class KeywordExtractor:
    """
    Note text -> 5..15 search keywords. Uses the chat model when available
    and falls back to local frequency extraction otherwise.
    """

    def __init__(
        self,
        *,
        chat_client: Optional[OpenAIChat] = None,
        temperature: float = 0.3,
        logger: logging.Logger | None = None,
    ) -> None:
        self.chat_client = chat_client
        self.temperature = temperature
        self.logger = logger or get_class_logger(self.__class__)

    def extract(self, note_text: str) -> List[str]:
        text = (note_text or "").strip()
        if not text:
            return []

        if self.chat_client is None:
            self.logger.info("extract: no chat client configured, using fallback extractor")
            return extract_keywords_fallback(text)

        try:
            keywords = self._extract_with_llm(text)
        except Exception as e:
            self.logger.warning("extract: LLM keyword extraction failed, using fallback: %s", e)
            return extract_keywords_fallback(text)

        if not keywords:
            self.logger.info("extract: LLM returned no usable keywords, using fallback")
            return extract_keywords_fallback(text)

        self.logger.info("extract: %d keywords from LLM", len(keywords))
        return keywords

    def _extract_with_llm(self, text: str) -> List[str]:
        resp = self.chat_client.simple_chat(
            _user_prompt(text),
            system_text=SYSTEM_PROMPT,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )
        return self._parse_keywords(resp.get("answer") or "")

    @staticmethod
    def _parse_keywords(raw: str) -> List[str]:
        raw = raw.strip()
        start, end = raw.find("{"), raw.rfind("}")
        if start == -1 or end <= start:
            return []
        parsed: Any = json.loads(raw[start:end + 1])

        values = parsed.get("keywords") if isinstance(parsed, dict) else None
        if not isinstance(values, list):
            return []

        cleaned = [str(v).strip() for v in values if isinstance(v, str) and v.strip()]
        return _dedupe(cleaned)[:MAX_KEYWORDS]
