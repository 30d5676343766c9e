# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: RecommendationStore
# -----------------------------------------------------------------------------
from typing import List, Optional, Protocol, runtime_checkable

from recommendation.RecommendationRecord import RecommendationRecord


@runtime_checkable
class RecommendationStore(Protocol):
    def test_connection(self) -> bool:
        ...

    def insert(self, record: RecommendationRecord) -> str:
        """Persist one record and return its id. Raises on failure."""
        ...

    def list_records(
            self,
            member_id: str,
            *,
            note_id: Optional[str] = None,
            start_date: Optional[str] = None,
            end_date: Optional[str] = None,
            limit: int = 50,
    ) -> List[RecommendationRecord]:
        """Newest first; start/end are inclusive bounds on session_date."""
        ...
