# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-02-04
# Description: VectorIndex
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class IndexCandidate:
    """
    One row returned by the index. `score` is a similarity (higher is
    better) for vector queries and None for fetch/scan results.
    """
    id: str
    score: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    vector: Optional[List[float]] = None
    document: Optional[str] = None


@dataclass(frozen=True)
class IndexStats:
    dimension: int
    count: int


@runtime_checkable
class VectorIndex(Protocol):
    def test_connection(self) -> bool:
        ...

    def upsert(
            self,
            item_id: str,
            vector: Sequence[float],
            metadata: Dict[str, Any],
            document: Optional[str] = None,
    ) -> None:
        ...

    def query(
            self,
            vector: Sequence[float],
            top_k: int = 10,
            where: Dict[str, Any] | None = None,
    ) -> List[IndexCandidate]:
        ...

    def fetch(self, ids: Sequence[str]) -> List[IndexCandidate]:
        ...

    def scan_documents(
            self,
            terms: Sequence[str] | None = None,
            limit: int = 30,
    ) -> List[IndexCandidate]:
        ...

    def describe_stats(self) -> IndexStats:
        ...
