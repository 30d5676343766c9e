# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: Program
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List


def _as_list(value: Any) -> List[str]:
    """Catalog metadata stores lists either as arrays or comma-joined strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


@dataclass(frozen=True)
class Program:
    """Catalog entry as stored in the program index metadata."""
    id: str
    name: str
    category: str = "Other"
    description: str = ""
    link: str = ""
    keywords: List[str] = field(default_factory=list)
    life_skills: List[str] = field(default_factory=list)

    @classmethod
    def from_metadata(cls, program_id: Any, metadata: Dict[str, Any] | None) -> "Program":
        md = metadata or {}
        pid = str(program_id or md.get("id") or "").strip()
        name = str(md.get("name") or md.get("title") or "").strip()
        return cls(
            id=pid,
            name=name,
            category=str(md.get("category") or "Other").strip() or "Other",
            description=str(md.get("description") or md.get("desc") or "").strip(),
            link=str(md.get("link") or md.get("url") or f"/programs/{pid}").strip(),
            keywords=_as_list(md.get("keywords")),
            life_skills=_as_list(md.get("lifeSkills") or md.get("life_skills")),
        )

    def searchable_text(self) -> str:
        return " ".join(
            [self.name, self.description, *self.keywords, *self.life_skills]
        ).lower()


@dataclass(frozen=True)
class ProgramMatch:
    program: Program
    similarity_score: float

    @property
    def program_id(self) -> str:
        return self.program.id

    def to_snapshot(self) -> Dict[str, Any]:
        """JSON shape persisted with recommendation records and returned to callers."""
        p = self.program
        return {
            "id": p.id,
            "category": p.category,
            "name": p.name,
            "description": p.description or None,
            "similarity": float(self.similarity_score),
            "link": p.link or None,
            "lifeSkills": list(p.life_skills) or None,
        }
