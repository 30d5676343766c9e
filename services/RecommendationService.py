# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: RecommendationService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional, Sequence

import settings
from recommendation.RecommendationRecord import RecommendationRecord
from services.HistoryAggregator import HistoryAggregator, STABLE
from services.KeywordExtractor import KeywordExtractor
from services.ProgramMatcher import ProgramMatcher
from services.RecommendationComposer import RecommendationComposer
from store.RecommendationStore import RecommendationStore
from utility.logging_utils import get_class_logger

NOT_ENOUGH_HISTORY = (
    "Not enough historical data available. Add more notes to get personalized recommendations."
)
SAVE_WARNING = "Recommendations were generated but could not be saved."

MAX_FOCUS_AREAS = 5


def _require_member(member_id: Optional[str]) -> str:
    member_id = (member_id or "").strip()
    if not member_id:
        raise ValueError("member_id must not be empty")
    return member_id


def _require_positive(name: str, value: Optional[int]) -> int:
    if value is None or int(value) < 1:
        raise ValueError(f"{name} must be >= 1")
    return int(value)


def flatten_programs(records: Sequence[RecommendationRecord]) -> List[Dict[str, Any]]:
    """
    Unique programs across records, first occurrence wins. Records are
    expected newest first, so each program keeps its most recent snapshot.
    """
    seen: set[str] = set()
    programs: List[Dict[str, Any]] = []
    for record in records:
        for p in record.programs:
            pid = str(p.get("id") or "")
            if not pid or pid in seen:
                continue
            seen.add(pid)
            programs.append(dict(p))
    return programs


def focus_areas(snapshots: Sequence[Dict[str, Any]], limit: int = MAX_FOCUS_AREAS) -> List[str]:
    areas: List[str] = []
    for p in snapshots:
        category = p.get("category")
        if category and category not in areas:
            areas.append(category)
    return areas[:limit]


class RecommendationService:
    """
    Recommendation operations exposed to the API layer:
      - adaptive recommendations from a member's recent note history
      - note-level suggestions from a single note's text
      - stored recommendation retrieval

    Input errors raise ValueError before any work. Upstream failures are
    reported in the returned dict's `error` / `save_error` fields.
    """

    def __init__(
        self,
        *,
        aggregator: HistoryAggregator,
        matcher: ProgramMatcher,
        keyword_extractor: KeywordExtractor,
        composer: RecommendationComposer,
        recommendation_store: RecommendationStore,
        use_embeddings: bool = settings.USE_EMBEDDINGS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.matcher = matcher
        self.keyword_extractor = keyword_extractor
        self.composer = composer
        self.recommendation_store = recommendation_store
        self.use_embeddings = use_embeddings
        self.logger = logger or get_class_logger(self.__class__)

    # -------------------------------------------------------------------------
    # Adaptive
    # -------------------------------------------------------------------------
    def get_adaptive_recommendations(
            self,
            member_id: str,
            window_days: int = settings.DEFAULT_WINDOW_DAYS,
            top_k: int = settings.DEFAULT_TOP_K,
            timeout_seconds: Optional[float] = None,
    ) -> Dict[str, Any]:
        member_id = _require_member(member_id)
        window_days = _require_positive("window_days", window_days)
        top_k = _require_positive("top_k", top_k)
        if timeout_seconds is None and settings.AGGREGATION_TIMEOUT_SECONDS > 0:
            timeout_seconds = settings.AGGREGATION_TIMEOUT_SECONDS

        self.logger.info(
            "adaptive: member='%s' window_days=%d top_k=%d (start)",
            member_id,
            window_days,
            top_k,
        )

        agg = self.aggregator.aggregate(member_id, window_days, timeout_seconds=timeout_seconds)

        out: Dict[str, Any] = {
            "recommendations": [],
            "trend": agg.trend_summary.to_dict(),
            "focus_areas": [],
            "rationale": NOT_ENOUGH_HISTORY,
            "notes_considered": agg.notes_considered,
            "notes_skipped": agg.notes_skipped,
            "partial": agg.partial,
            "window_days": window_days,
            "error": agg.error,
            "save_error": None,
            "warning": None,
        }

        if not agg.has_signal:
            out["trend"]["direction"] = STABLE
            self.logger.info(
                "adaptive: member='%s' no usable history (considered=%d skipped=%d), skipping index query",
                member_id,
                agg.notes_considered,
                agg.notes_skipped,
            )
            return out

        result = self.matcher.match_vector(agg.progress_vector, top_k)
        if result.error:
            out["error"] = result.error

        snapshots = result.to_snapshots()
        out["recommendations"] = snapshots
        out["focus_areas"] = focus_areas(snapshots)
        out["rationale"] = self.composer.compose(
            member_id,
            result.matches,
            agg.trend_summary,
            agg.embeddings,
        )

        if result.matches:
            saved = self.composer.persist(
                member_id,
                result.matches,
                [f"adaptive:{window_days}d"],
                note_id=None,
            )
            if saved.error:
                out["save_error"] = saved.error
                out["warning"] = SAVE_WARNING

        self.logger.info(
            "adaptive: member='%s' recommendations=%d direction=%s partial=%s (done)",
            member_id,
            len(snapshots),
            out["trend"]["direction"],
            agg.partial,
        )
        return out

    # -------------------------------------------------------------------------
    # Note-level
    # -------------------------------------------------------------------------
    def get_note_level_suggestions(
            self,
            note_text: str,
            summary_text: Optional[str] = None,
            member_id: Optional[str] = None,
            note_id: Optional[str] = None,
            session_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        text = (note_text or "").strip()
        if not text:
            raise ValueError("note text must not be empty")

        summary = (summary_text or "").strip()
        full_text = f"{text}\n\nSummary: {summary}" if summary else text

        out: Dict[str, Any] = {
            "programs": [],
            "keywords": [],
            "recommendation_id": None,
            "error": None,
            "save_error": None,
            "warning": None,
        }

        keywords = self.keyword_extractor.extract(full_text)
        out["keywords"] = keywords
        self.logger.info("suggest: keywords=%d member=%s note=%s", len(keywords), member_id, note_id)

        if not keywords:
            self.logger.warning("suggest: no keywords extracted, returning empty suggestions")
            return out

        result = self.matcher.match_keywords(
            keywords,
            settings.SUGGEST_SEARCH_TOP_K,
            use_embeddings=self.use_embeddings,
        )
        if result.error:
            out["error"] = result.error
            return out

        matches = result.matches[:settings.SUGGEST_TOP_K]
        out["programs"] = [m.to_snapshot() for m in matches]

        member_id = (member_id or "").strip()
        if member_id and matches:
            saved = self.composer.persist(
                member_id,
                matches,
                keywords,
                note_id=note_id,
                session_date=session_date,
            )
            out["recommendation_id"] = saved.record_id
            if saved.error:
                out["save_error"] = saved.error
                out["warning"] = SAVE_WARNING

        self.logger.info(
            "suggest: programs=%d recommendation_id=%s (done)",
            len(matches),
            out["recommendation_id"],
        )
        return out

    # -------------------------------------------------------------------------
    # Stored
    # -------------------------------------------------------------------------
    def get_stored_recommendations(
            self,
            member_id: str,
            note_id: Optional[str] = None,
            start_date: Optional[str] = None,
            end_date: Optional[str] = None,
            limit: int = settings.STORED_LIMIT,
    ) -> Dict[str, Any]:
        member_id = _require_member(member_id)
        limit = _require_positive("limit", limit)

        try:
            records = self.recommendation_store.list_records(
                member_id,
                note_id=note_id,
                start_date=start_date,
                end_date=end_date,
                limit=limit,
            )
        except Exception as e:
            self.logger.error("stored: failed to fetch recommendations for member '%s': %s", member_id, e)
            return {
                "records": [],
                "flattened_programs": [],
                "count": 0,
                "error": f"Failed to fetch recommendations: {e}",
            }

        return {
            "records": [r.to_dict() for r in records],
            "flattened_programs": flatten_programs(records),
            "count": len(records),
            "error": None,
        }
