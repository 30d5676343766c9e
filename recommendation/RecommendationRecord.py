# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: RecommendationRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RecommendationRecord:
    """
    One persisted recommendation run.

    `programs` holds snapshot dicts (ProgramMatch.to_snapshot), so later
    catalog edits never change what a stored record shows.
    """
    member_id: str
    session_date: str
    programs: List[Dict[str, Any]]
    keywords: List[str] = field(default_factory=list)
    note_id: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        """Insert payload for the program_recommendations table."""
        return {
            "member_id": self.member_id,
            "note_id": self.note_id or None,
            "session_date": self.session_date,
            "programs": [dict(p) for p in self.programs],
            "keywords": list(self.keywords),
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "RecommendationRecord":
        programs = row.get("programs")
        keywords = row.get("keywords")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            member_id=str(row.get("member_id") or ""),
            note_id=row.get("note_id") or None,
            session_date=str(row.get("session_date") or ""),
            programs=[p for p in programs if isinstance(p, dict)] if isinstance(programs, list) else [],
            keywords=[str(k) for k in keywords] if isinstance(keywords, list) else [],
            created_at=str(row["created_at"]) if row.get("created_at") is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "member_id": self.member_id,
            "note_id": self.note_id,
            "session_date": self.session_date,
            "programs": [dict(p) for p in self.programs],
            "keywords": list(self.keywords),
            "created_at": self.created_at,
        }
