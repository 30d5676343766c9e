# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-10
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Dict, Optional

from pydantic import BaseModel

class HealthResponse(BaseModel):
    status: str
    message: str

class HealthSummary(BaseModel):
    total: int
    passed: int
    failed: int

class IndexInfo(BaseModel):
    dimension: Optional[int] = None
    count: Optional[int] = None

class DeepHealthResponse(BaseModel):
    status: str
    results: Dict[str, bool]
    summary: HealthSummary
    index: IndexInfo
