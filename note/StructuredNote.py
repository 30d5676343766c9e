# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: StructuredNote
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (Supabase timestamptz), epoch millis or datetime.
    Naive values are treated as UTC so comparisons never mix aware/naive.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
    else:
        raw = str(value).strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _clean_str(value: Any) -> str:
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class MedicationEntry:
    name: Optional[str] = None
    dose: Optional[str] = None
    route: Optional[str] = None
    time: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "MedicationEntry":
        return cls(
            name=_clean_str(raw.get("name")) or None,
            dose=_clean_str(raw.get("dose")) or None,
            route=_clean_str(raw.get("route")) or None,
            time=_clean_str(raw.get("time")) or None,
            status=_clean_str(raw.get("status")) or None,
        )


@dataclass
class StructuredNote:
    """
    One observation of a care session, normalised from the note workflow's
    structured JSON. Categorical fields stay as free strings here; scoring
    maps them to numbers later.
    """

    note_id: str
    member_id: str
    session_timestamp: datetime

    activity_type: str = ""
    mood: str = ""
    participation_level: str = ""
    prompts_required: str = ""
    summary: str = ""
    follow_ups: List[str] = field(default_factory=list)
    medications: List[MedicationEntry] = field(default_factory=list)

    created_at: Optional[datetime] = None
    summary_so_far: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "StructuredNote":
        """
        Build a note from a `notes` table row:
          id, member_id, session_date, structured_json, created_at
        """
        structured = row.get("structured_json") or {}
        if not isinstance(structured, dict):
            structured = {}

        created_at = parse_timestamp(row.get("created_at"))
        session_ts = (
            parse_timestamp(row.get("session_date"))
            or parse_timestamp(structured.get("sessionDate"))
            or created_at
        )
        if session_ts is None:
            raise ValueError(f"Note {row.get('id')!r} has no session timestamp")

        follow_ups_raw = structured.get("followUps") or []
        follow_ups = [
            _clean_str(f) for f in follow_ups_raw
            if isinstance(follow_ups_raw, list) and _clean_str(f)
        ]

        meds_raw = structured.get("medications") or []
        medications = [
            MedicationEntry.from_dict(m) for m in meds_raw
            if isinstance(meds_raw, list) and isinstance(m, dict)
        ]

        return cls(
            note_id=_clean_str(row.get("id")),
            member_id=_clean_str(row.get("member_id")),
            session_timestamp=session_ts,
            activity_type=_clean_str(structured.get("activityType")),
            mood=_clean_str(structured.get("mood")),
            participation_level=_clean_str(
                structured.get("participation") or structured.get("participationLevel")
            ),
            prompts_required=_clean_str(structured.get("promptsRequired")),
            summary=_clean_str(structured.get("summary")),
            follow_ups=follow_ups,
            medications=medications,
            created_at=created_at,
            summary_so_far=_clean_str(structured.get("summarySoFar")) or None,
        )

    def medication_names(self) -> List[str]:
        return [m.name for m in self.medications if m.name]
