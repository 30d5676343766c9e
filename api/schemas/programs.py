# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: programs.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel, Field


class ProgramSnapshot(BaseModel):
    # stored snapshots may predate the current shape
    id: Optional[str] = None
    category: Optional[str] = "Other"
    name: Optional[str] = None
    description: Optional[str] = None
    similarity: Optional[float] = None
    link: Optional[str] = None
    lifeSkills: Optional[List[str]] = None


class TrendInfo(BaseModel):
    direction: str
    avg_mood: float
    avg_participation: float
    avg_prompt: float


class AdaptiveResponse(BaseModel):
    member_id: str
    recommendations: List[ProgramSnapshot]
    trend: TrendInfo
    focus_areas: List[str]
    rationale: str
    notes_considered: int
    notes_skipped: int = 0
    partial: bool = False
    window_days: int
    error: Optional[str] = None
    save_error: Optional[str] = None
    warning: Optional[str] = None


class SuggestRequest(BaseModel):
    transcript: str = Field(..., min_length=1)
    summary: Optional[str] = None
    member_id: Optional[str] = None
    note_id: Optional[str] = None
    session_date: Optional[str] = None


class SuggestResponse(BaseModel):
    programs: List[ProgramSnapshot]
    keywords: List[str]
    recommendation_id: Optional[str] = None
    error: Optional[str] = None
    save_error: Optional[str] = None
    warning: Optional[str] = None


class RecommendationRecordOut(BaseModel):
    id: Optional[str] = None
    member_id: str
    note_id: Optional[str] = None
    session_date: str
    programs: List[ProgramSnapshot]
    keywords: List[str]
    created_at: Optional[str] = None


class StoredRecommendationsResponse(BaseModel):
    records: List[RecommendationRecordOut]
    flattened_programs: List[ProgramSnapshot]
    count: int
    error: Optional[str] = None
