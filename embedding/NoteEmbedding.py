# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: NoteEmbedding
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from note.StructuredNote import parse_timestamp


@dataclass(frozen=True)
class TrendScores:
    mood: float
    prompt: float
    participation: float


@dataclass(frozen=True)
class NoteEmbedding:
    """Cached embedding of one note + the trend scores computed alongside it."""
    note_id: str
    member_id: str
    vector: List[float]
    trend_scores: TrendScores
    created_at: datetime

    # Display context for rationale prompts
    session_timestamp: Optional[datetime] = None
    activity_type: str = ""
    mood: str = ""
    participation: str = ""
    summary: str = ""

    def to_metadata(self) -> Dict[str, Any]:
        """
        Flat metadata payload for the note-embedding collection.
        Chroma metadata values must be scalars, so timestamps go in as ISO
        strings and epoch millis.
        """
        session_iso = self.session_timestamp.isoformat() if self.session_timestamp else ""
        return {
            "type": "note",
            "note_id": self.note_id,
            "member_id": self.member_id,
            "session_date": session_iso,
            "activity_type": self.activity_type,
            "mood": self.mood,
            "participation": self.participation,
            "summary": self.summary,
            "mood_score": float(self.trend_scores.mood),
            "prompt_score": float(self.trend_scores.prompt),
            "participation_score": float(self.trend_scores.participation),
            "created_at": int(self.created_at.timestamp() * 1000),
        }

    @classmethod
    def from_index(
            cls,
            note_id: str,
            vector: Sequence[float],
            metadata: Dict[str, Any],
    ) -> "NoteEmbedding":
        md = metadata or {}
        # A cached entry without scores cannot stand in for a recomputation
        missing = [k for k in ("mood_score", "prompt_score", "participation_score") if md.get(k) is None]
        if missing:
            raise ValueError(f"Cached embedding for note {note_id!r} is missing {missing}")

        created = parse_timestamp(md.get("created_at")) or datetime.now(timezone.utc)
        return cls(
            note_id=str(md.get("note_id") or note_id),
            member_id=str(md.get("member_id") or ""),
            vector=[float(v) for v in vector],
            trend_scores=TrendScores(
                mood=float(md["mood_score"]),
                prompt=float(md["prompt_score"]),
                participation=float(md["participation_score"]),
            ),
            created_at=created,
            session_timestamp=parse_timestamp(md.get("session_date")),
            activity_type=str(md.get("activity_type") or ""),
            mood=str(md.get("mood") or ""),
            participation=str(md.get("participation") or ""),
            summary=str(md.get("summary") or ""),
        )
