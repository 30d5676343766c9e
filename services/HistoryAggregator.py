# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: HistoryAggregator.py
# -----------------------------------------------------------------------------
import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from embedding.NoteEmbedding import NoteEmbedding, TrendScores
from note.StructuredNote import StructuredNote
from services.NoteVectorizer import NoteVectorizer
from store.NoteStore import NoteStore
from utility.logging_utils import get_class_logger

IMPROVING = "improving"
STABLE = "stable"
DECLINING = "declining"

# Upper bound on the "recent" half used for trend direction
MAX_RECENT_NOTES = 7

_EMBED_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="note-embed")


class _DeadlineExceeded(Exception):
    """Aggregation budget used up before the next note finished."""


@dataclass(frozen=True)
class TrendSummary:
    avg_mood: float
    avg_prompt: float
    avg_participation: float
    direction: str = STABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction,
            "avg_mood": self.avg_mood,
            "avg_participation": self.avg_participation,
            "avg_prompt": self.avg_prompt,
        }


@dataclass
class AggregateResult:
    progress_vector: List[float]
    trend_summary: TrendSummary
    notes_considered: int
    notes_skipped: int = 0
    partial: bool = False
    embeddings: List[NoteEmbedding] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def has_signal(self) -> bool:
        """An all-zero progress vector means "no signal", never a valid query."""
        return self.notes_considered > 0 and any(v != 0.0 for v in self.progress_vector)


def average_vectors(vectors: Sequence[Sequence[float]], dimension: int) -> List[float]:
    if not vectors:
        return [0.0] * dimension
    arr = np.asarray(vectors, dtype=np.float64)
    return arr.mean(axis=0).tolist()


def classify_direction(scores: Sequence[TrendScores]) -> str:
    """
    Split chronologically ordered scores into older/recent halves
    (recent = min(7, n // 2)). Improving/declining only when mood and
    participation agree; anything else is stable.
    """
    count = len(scores)
    recent_count = min(MAX_RECENT_NOTES, count // 2)
    older_count = count - recent_count
    if count < 2 or recent_count == 0 or older_count == 0:
        return STABLE

    recent = scores[-recent_count:]
    older = scores[:older_count]

    recent_mood = sum(s.mood for s in recent) / recent_count
    older_mood = sum(s.mood for s in older) / older_count
    recent_part = sum(s.participation for s in recent) / recent_count
    older_part = sum(s.participation for s in older) / older_count

    if recent_mood > older_mood and recent_part > older_part:
        return IMPROVING
    if recent_mood < older_mood and recent_part < older_part:
        return DECLINING
    return STABLE


def average_trend_scores(scores: Sequence[TrendScores]) -> TrendSummary:
    if not scores:
        return TrendSummary(avg_mood=0.0, avg_prompt=0.0, avg_participation=0.0, direction=STABLE)

    count = float(len(scores))
    return TrendSummary(
        avg_mood=sum(s.mood for s in scores) / count,
        avg_prompt=sum(s.prompt for s in scores) / count,
        avg_participation=sum(s.participation for s in scores) / count,
        direction=classify_direction(scores),
    )


class HistoryAggregator:
    """
    Member history -> progress vector + trend summary.

    Per-note failures are skipped and counted rather than failing the whole
    aggregation; a timeout returns the notes completed so far, flagged partial.
    """

    def __init__(
        self,
        *,
        note_store: NoteStore,
        vectorizer: NoteVectorizer,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.note_store = note_store
        self.vectorizer = vectorizer
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger or get_class_logger(self.__class__)

    @property
    def dimension(self) -> int:
        return self.vectorizer.embedder.dimension

    def aggregate(
            self,
            member_id: str,
            window_days: int,
            *,
            timeout_seconds: Optional[float] = None,
    ) -> AggregateResult:
        member_id = (member_id or "").strip()
        if not member_id:
            raise ValueError("member_id must not be empty")
        if window_days is None or int(window_days) < 1:
            raise ValueError("window_days must be >= 1")

        since = self.clock() - timedelta(days=int(window_days))
        self.logger.info(
            "aggregate: member='%s' window_days=%d since=%s timeout=%s (start)",
            member_id,
            window_days,
            since.isoformat(),
            timeout_seconds,
        )

        try:
            notes = self.note_store.list_notes(member_id, since)
        except Exception as e:
            self.logger.error("aggregate: note store unavailable for member '%s': %s", member_id, e, exc_info=True)
            return self._result([], skipped=0, partial=False, error=f"Note store unavailable: {e}")

        # Trend split depends on chronological order
        notes = sorted(notes, key=lambda n: n.session_timestamp)

        deadline = (time.monotonic() + timeout_seconds) if timeout_seconds else None
        embeddings: List[NoteEmbedding] = []
        skipped = 0
        partial = False

        for note in notes:
            try:
                embedding = self._embed_before(note, deadline)
            except _DeadlineExceeded:
                partial = True
                self.logger.warning(
                    "aggregate: timeout after %d/%d notes for member '%s'; returning partial aggregate",
                    len(embeddings),
                    len(notes),
                    member_id,
                )
                break
            except Exception as e:
                skipped += 1
                self.logger.error("aggregate: skipping note %s: %s", note.note_id, e)
                continue

            if len(embedding.vector) != self.dimension:
                skipped += 1
                self.logger.error(
                    "aggregate: skipping note %s (dimension %d != %d)",
                    note.note_id,
                    len(embedding.vector),
                    self.dimension,
                )
                continue

            embeddings.append(embedding)

        result = self._result(embeddings, skipped=skipped, partial=partial)
        self.logger.info(
            "aggregate: member='%s' notes=%d considered=%d skipped=%d partial=%s direction=%s (done)",
            member_id,
            len(notes),
            result.notes_considered,
            skipped,
            partial,
            result.trend_summary.direction,
        )
        return result

    def _embed_before(self, note: StructuredNote, deadline: Optional[float]) -> NoteEmbedding:
        """
        Embed one note, waiting at most until `deadline` (monotonic clock).

        A call still running at the deadline is abandoned, not interrupted: the
        worker finishes on its own (bounded by the provider's request timeout)
        and may still write its result to the embedding cache.
        """
        if deadline is None:
            return self._embed_note(note)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise _DeadlineExceeded()

        future = _EMBED_EXECUTOR.submit(self._embed_note, note)
        try:
            return future.result(timeout=remaining)
        except FutureTimeoutError:
            # A TimeoutError raised by the provider itself is a per-note failure
            if future.done():
                raise
            future.cancel()
            raise _DeadlineExceeded()

    def _embed_note(self, note: StructuredNote) -> NoteEmbedding:
        try:
            cached = self.note_store.get_cached_embedding(note.note_id)
        except Exception as e:
            self.logger.warning("Cache read failed for note %s, recomputing: %s", note.note_id, e)
            cached = None

        if cached is not None:
            self.logger.debug("Using cached embedding for note %s", note.note_id)
            return cached

        embedding = self.vectorizer.vectorize(note)

        try:
            if not self.note_store.put_cached_embedding(embedding):
                self.logger.debug("Embedding cache write not acknowledged for note %s", note.note_id)
        except Exception as e:
            self.logger.warning("Embedding cache write failed for note %s: %s", note.note_id, e)

        return embedding

    def _result(
            self,
            embeddings: List[NoteEmbedding],
            *,
            skipped: int,
            partial: bool,
            error: Optional[str] = None,
    ) -> AggregateResult:
        return AggregateResult(
            progress_vector=average_vectors([e.vector for e in embeddings], self.dimension),
            trend_summary=average_trend_scores([e.trend_scores for e in embeddings]),
            notes_considered=len(embeddings),
            notes_skipped=skipped,
            partial=partial,
            embeddings=embeddings,
            error=error,
        )
