# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: ProgramMatcher.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from embedding.EmbeddingProvider import EmbeddingProvider
from program.Program import Program, ProgramMatch
from vectorstore.VectorIndex import IndexCandidate, VectorIndex
from utility.logging_utils import get_class_logger

# Floor for keyword-filter scores so a weak textual hit still ranks above nothing
MIN_KEYWORD_SCORE = 0.1

# Vector queries over-fetch to leave room for dedup and filtering
CANDIDATE_MULTIPLIER = 2
SCAN_MULTIPLIER = 3


@dataclass
class MatchResult:
    matches: List[ProgramMatch] = field(default_factory=list)
    error: Optional[str] = None
    skipped: int = 0

    def to_snapshots(self) -> List[dict]:
        return [m.to_snapshot() for m in self.matches]


def clamp_score(score: Optional[float]) -> float:
    if score is None:
        return 0.0
    return max(0.0, min(1.0, float(score)))


def rank_matches(
        scored: Iterable[Tuple[Program, float]],
        top_k: int,
        exclude_below: float = 0.0,
) -> Tuple[List[ProgramMatch], int]:
    """
    Drop nameless programs (counted as skipped) and those under
    `exclude_below`, keep the first occurrence of each id, then sort by
    score descending (stable) and truncate. Returns (matches, skipped).
    """
    skipped = 0
    seen: set[str] = set()
    kept: List[ProgramMatch] = []

    for program, score in scored:
        if not program.id or not program.name:
            skipped += 1
            continue
        score = clamp_score(score)
        if score < exclude_below:
            continue
        if program.id in seen:
            continue
        seen.add(program.id)
        kept.append(ProgramMatch(program=program, similarity_score=score))

    kept.sort(key=lambda m: m.similarity_score, reverse=True)
    return kept[:top_k], skipped


class ProgramMatcher:
    """
    Query vector or keyword list -> ranked, de-duplicated ProgramMatch list.

    Index failures never raise out of the matcher: they come back as an empty
    MatchResult with `error` set.
    """

    def __init__(
        self,
        *,
        index: VectorIndex,
        embedder: Optional[EmbeddingProvider] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.index = index
        self.embedder = embedder
        self.logger = logger or get_class_logger(self.__class__)

    def match_vector(
            self,
            query_vector: Sequence[float],
            top_k: int,
            exclude_below: float = 0.0,
    ) -> MatchResult:
        if top_k < 1:
            raise ValueError("top_k must be >= 1")

        if not query_vector or not any(float(v) != 0.0 for v in query_vector):
            self.logger.warning("match_vector: empty or zero query vector (no signal)")
            return MatchResult(error="No signal: query vector is empty or all zeros")

        try:
            candidates = self.index.query(query_vector, top_k=top_k * CANDIDATE_MULTIPLIER)
        except Exception as e:
            self.logger.error("match_vector: index query failed: %s", e, exc_info=True)
            return MatchResult(error=f"Program index query failed: {e}")

        result = self._rank_candidates(candidates, top_k, exclude_below)
        self.logger.info(
            "match_vector: candidates=%d matches=%d skipped=%d",
            len(candidates),
            len(result.matches),
            result.skipped,
        )
        return result

    def match_keywords(
            self,
            keywords: Sequence[str],
            top_k: int,
            use_embeddings: bool = True,
    ) -> MatchResult:
        if top_k < 1:
            raise ValueError("top_k must be >= 1")

        terms = [k.strip() for k in keywords or [] if k and k.strip()]
        if not terms:
            return MatchResult(error="No keywords to search with")

        if not use_embeddings or self.embedder is None:
            return self.keyword_filter_match(terms, top_k)

        try:
            query_vector = self.embedder.embed(" ".join(terms))
        except Exception as e:
            self.logger.warning("match_keywords: embedding failed, using keyword filter: %s", e)
            return self.keyword_filter_match(terms, top_k)

        return self.match_vector(query_vector, top_k)

    def keyword_filter_match(self, keywords: Sequence[str], top_k: int) -> MatchResult:
        terms = [k.strip().lower() for k in keywords if k and k.strip()]
        if not terms:
            return MatchResult(error="No keywords to search with")

        limit = top_k * SCAN_MULTIPLIER
        scored: List[Tuple[Program, float]] = []
        candidates: List[IndexCandidate] = []
        try:
            candidates = self.index.scan_documents(terms, limit=limit)
            scored = self._score_by_overlap(candidates, terms)
        except Exception as e:
            self.logger.warning("keyword_filter_match: filtered scan failed, scanning unfiltered: %s", e)

        # Document filters are case-sensitive and only see the stored document,
        # so an empty filtered result is rescored from an unfiltered scan.
        if not scored:
            try:
                candidates = self.index.scan_documents(None, limit=limit)
            except Exception as e:
                self.logger.error("keyword_filter_match: index scan failed: %s", e, exc_info=True)
                return MatchResult(error=f"Program index scan failed: {e}")
            scored = self._score_by_overlap(candidates, terms)

        matches, skipped = rank_matches(scored, top_k)
        self.logger.info(
            "keyword_filter_match: terms=%d candidates=%d matches=%d",
            len(terms),
            len(candidates),
            len(matches),
        )
        return MatchResult(matches=matches, skipped=skipped)

    @staticmethod
    def _score_by_overlap(candidates: List[IndexCandidate], terms: List[str]) -> List[Tuple[Program, float]]:
        scored: List[Tuple[Program, float]] = []
        for c in candidates:
            program = Program.from_metadata(c.id, c.metadata)
            text = " ".join([program.searchable_text(), (c.document or "").lower()])
            matched = sum(1 for term in terms if term in text)
            if matched == 0:
                continue
            scored.append((program, max(MIN_KEYWORD_SCORE, matched / len(terms))))
        return scored

    def _rank_candidates(
            self,
            candidates: List[IndexCandidate],
            top_k: int,
            exclude_below: float,
    ) -> MatchResult:
        scored = [(Program.from_metadata(c.id, c.metadata), c.score) for c in candidates]
        matches, skipped = rank_matches(scored, top_k, exclude_below)
        if skipped:
            self.logger.debug("Skipped %d nameless program candidates", skipped)
        return MatchResult(matches=matches, skipped=skipped)
