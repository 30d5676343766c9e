# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: NoteVectorizer.py
# -----------------------------------------------------------------------------
import logging
from datetime import datetime, timezone
from typing import Dict, List

from embedding.EmbeddingProvider import EmbeddingProvider
from embedding.NoteEmbedding import NoteEmbedding, TrendScores
from note.StructuredNote import StructuredNote
from utility.logging_utils import get_class_logger

# Categorical observation -> small integer. Keys are lower-case.
MOOD_SCORES: Dict[str, int] = {
    "engaged": 2,
    "happy": 2,
    "calm": 1,
    "neutral": 0,
    "anxious": -1,
    "frustrated": -1,
    "agitated": -2,
    "withdrawn": -2,
}
PROMPT_SCORES: Dict[str, int] = {
    "none": 0,
    "minimal": 1,
    "moderate": 2,
    "max": 3,
    "maximum": 3,
}
PARTICIPATION_SCORES: Dict[str, int] = {
    "high": 3,
    "medium": 2,
    "moderate": 2,
    "low": 1,
}

# Missing/unrecognised values assume roughly neutral engagement
DEFAULT_MOOD_SCORE = 0
DEFAULT_PROMPT_SCORE = 1
DEFAULT_PARTICIPATION_SCORE = 2


def _lookup(table: Dict[str, int], value: str | None, default: int) -> int:
    key = (value or "").strip().lower()
    return table.get(key, default)


def score_mood(value: str | None) -> int:
    return _lookup(MOOD_SCORES, value, DEFAULT_MOOD_SCORE)


def score_prompts(value: str | None) -> int:
    return _lookup(PROMPT_SCORES, value, DEFAULT_PROMPT_SCORE)


def score_participation(value: str | None) -> int:
    return _lookup(PARTICIPATION_SCORES, value, DEFAULT_PARTICIPATION_SCORE)


def calculate_trend_scores(note: StructuredNote) -> TrendScores:
    return TrendScores(
        mood=score_mood(note.mood),
        prompt=score_prompts(note.prompts_required),
        participation=score_participation(note.participation_level),
    )


def build_embedding_text(note: StructuredNote) -> str:
    """
    Activity tag first, then the summary (the richest signal), then the
    categorical labels, follow-ups and medication names.
    """
    parts: List[str] = []

    if note.activity_type:
        parts.append(f"Activity: {note.activity_type}")
    if note.summary:
        parts.append(note.summary)
    if note.mood:
        parts.append(f"Mood: {note.mood}")
    if note.participation_level:
        parts.append(f"Participation: {note.participation_level}")
    if note.prompts_required:
        parts.append(f"Prompts required: {note.prompts_required}")
    if note.follow_ups:
        parts.append(f"Follow-ups: {', '.join(note.follow_ups)}")

    med_names = note.medication_names()
    if med_names:
        parts.append(f"Medications: {', '.join(med_names)}")

    return ". ".join(parts)


class NoteVectorizer:
    """
    StructuredNote -> NoteEmbedding (vector + trend scores).
    Provider errors propagate to the caller.
    """

    def __init__(
        self,
        *,
        embedder: EmbeddingProvider,
        logger: logging.Logger | None = None,
    ) -> None:
        self.embedder = embedder
        self.logger = logger or get_class_logger(self.__class__)

    def vectorize(self, note: StructuredNote) -> NoteEmbedding:
        if not note.summary.strip():
            raise ValueError(f"Note {note.note_id!r} has an empty summary and cannot be embedded")

        text = build_embedding_text(note)
        self.logger.debug("Embedding text for note %s (%d chars)", note.note_id, len(text))

        vector = self.embedder.embed(text)
        if len(vector) != self.embedder.dimension:
            raise ValueError(
                f"Embedding for note {note.note_id!r} has dimension {len(vector)}, "
                f"expected {self.embedder.dimension}"
            )

        return NoteEmbedding(
            note_id=note.note_id,
            member_id=note.member_id,
            vector=[float(v) for v in vector],
            trend_scores=calculate_trend_scores(note),
            created_at=datetime.now(timezone.utc),
            session_timestamp=note.session_timestamp,
            activity_type=note.activity_type,
            mood=note.mood,
            participation=note.participation_level,
            summary=note.summary,
        )
