# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: RecommendationComposer.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

import settings
from chat.OpenAIChat import OpenAIChat
from embedding.NoteEmbedding import NoteEmbedding
from program.Program import ProgramMatch
from recommendation.RecommendationRecord import RecommendationRecord
from services.HistoryAggregator import TrendSummary
from store.RecommendationStore import RecommendationStore
from utility.logging_utils import get_class_logger

FALLBACK_RATIONALE = (
    "Based on recent notes, the recommended programs above align with current "
    "progress and focus areas."
)

MAX_PROMPT_ACTIVITIES = 5
MAX_PROMPT_PROGRAMS = 5


@dataclass(frozen=True)
class PersistResult:
    record_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record_id is not None and self.error is None


class RecommendationComposer:
    """
    Rationale text for a set of matches, and persistence of recommendation
    snapshots. Neither operation raises: the rationale degrades to a fixed
    sentence and persistence failures come back in PersistResult.error.
    """

    system_prompt: str = (
        "You are a helpful assistant that provides clear, actionable recommendations "
        "for disability services program selection."
    )

    def __init__(
        self,
        *,
        recommendation_store: RecommendationStore,
        chat_client: Optional[OpenAIChat] = None,
        temperature: float = settings.RATIONALE_TEMPERATURE,
        max_tokens: int = settings.RATIONALE_MAX_TOKENS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.recommendation_store = recommendation_store
        self.chat_client = chat_client
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logger or get_class_logger(self.__class__)

    def compose(
            self,
            member_id: str,
            matches: Sequence[ProgramMatch],
            trend_summary: TrendSummary,
            recent_notes: Sequence[NoteEmbedding],
    ) -> str:
        if self.chat_client is None:
            self.logger.info("compose: no chat client configured, using fallback rationale")
            return FALLBACK_RATIONALE

        prompt = self._build_prompt(matches, trend_summary, recent_notes)
        self.logger.info(
            "compose: member='%s' programs=%d recent_notes=%d (start)",
            member_id,
            len(matches),
            len(recent_notes),
        )

        try:
            resp = self.chat_client.simple_chat(
                prompt,
                system_text=self.system_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            self.logger.error("compose: rationale generation failed: %s", e, exc_info=True)
            return FALLBACK_RATIONALE

        text = (resp.get("answer") or "").strip()
        if not text:
            self.logger.warning("compose: blank rationale from model, using fallback")
            return FALLBACK_RATIONALE

        self.logger.info("compose: rationale_chars=%d (done)", len(text))
        return text

    @staticmethod
    def _build_prompt(
            matches: Sequence[ProgramMatch],
            trend_summary: TrendSummary,
            recent_notes: Sequence[NoteEmbedding],
    ) -> str:
        activities = [
            n.activity_type for n in list(recent_notes)[-MAX_PROMPT_ACTIVITIES:]
            if n.activity_type
        ]
        programs = [m.program.name for m in list(matches)[:MAX_PROMPT_PROGRAMS]]

        return (
            "You are an AI assistant helping caregivers choose appropriate programs for "
            "disability services participants.\n\n"
            "Based on the following analysis:\n"
            f"- Recent activities: {', '.join(activities) or 'Various activities'}\n"
            f"- Trend direction: {trend_summary.direction}\n"
            f"- Average mood score: {trend_summary.avg_mood:.1f} (scale: -2 to 2)\n"
            f"- Average participation score: {trend_summary.avg_participation:.1f} (scale: 1 to 3)\n"
            f"- Top recommended programs: {', '.join(programs)}\n\n"
            "Generate a brief, actionable recommendation (2-3 sentences) that:\n"
            "1. Acknowledges the current progress/trend\n"
            "2. Suggests which programs to focus on next\n"
            "3. Provides context on why these programs are recommended\n\n"
            "Be encouraging, specific, and professional."
        )

    def persist(
            self,
            member_id: str,
            matches: Sequence[ProgramMatch],
            keywords: Sequence[str],
            note_id: Optional[str] = None,
            session_date: Optional[str] = None,
    ) -> PersistResult:
        record = RecommendationRecord(
            member_id=member_id,
            note_id=note_id or None,
            session_date=session_date or datetime.now(timezone.utc).isoformat(),
            programs=[m.to_snapshot() for m in matches],
            keywords=list(keywords),
        )

        try:
            record_id = self.recommendation_store.insert(record)
        except Exception as e:
            self.logger.error("persist: failed to save recommendations for member '%s': %s", member_id, e)
            return PersistResult(error=str(e))

        return PersistResult(record_id=record_id)
