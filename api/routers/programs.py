# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: programs router
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

import settings
from api.dependencies import get_recommendation_service
from api.schemas.programs import (
    AdaptiveResponse,
    StoredRecommendationsResponse,
    SuggestRequest,
    SuggestResponse,
)
from services.RecommendationService import RecommendationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/programs", tags=["programs"])


@router.get("/adaptive", response_model=AdaptiveResponse)
def get_adaptive(
    member_id: str = Query(..., description="Member to build recommendations for"),
    days: int = Query(settings.DEFAULT_WINDOW_DAYS, description="Look-back window in days"),
    top_k: int = Query(settings.DEFAULT_TOP_K, description="Number of programs to return"),
    svc: RecommendationService = Depends(get_recommendation_service),
) -> AdaptiveResponse:
    logger.info("GET /programs/adaptive member_id=%s days=%d top_k=%d", member_id, days, top_k)
    try:
        result = svc.get_adaptive_recommendations(member_id, window_days=days, top_k=top_k)
    except ValueError as e:
        logger.warning("Adaptive recommendations rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Adaptive recommendations failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to generate adaptive recommendations: {e}")

    return AdaptiveResponse(member_id=member_id.strip(), **result)


@router.post("/suggest", response_model=SuggestResponse)
def post_suggest(
    req: SuggestRequest,
    svc: RecommendationService = Depends(get_recommendation_service),
) -> SuggestResponse:
    logger.info(
        "POST /programs/suggest member_id=%s note_id=%s transcript_chars=%d",
        req.member_id,
        req.note_id,
        len(req.transcript),
    )
    try:
        result = svc.get_note_level_suggestions(
            req.transcript,
            summary_text=req.summary,
            member_id=req.member_id,
            note_id=req.note_id,
            session_date=req.session_date,
        )
    except ValueError as e:
        logger.warning("Program suggestion rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Program suggestion failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to suggest programs: {e}")

    return SuggestResponse(**result)


@router.get("/recommendations", response_model=StoredRecommendationsResponse)
def get_recommendations(
    member_id: str = Query(...),
    note_id: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, description="Inclusive lower bound on session_date"),
    end_date: Optional[str] = Query(None, description="Inclusive upper bound on session_date"),
    limit: int = Query(settings.STORED_LIMIT),
    svc: RecommendationService = Depends(get_recommendation_service),
) -> StoredRecommendationsResponse:
    logger.info("GET /programs/recommendations member_id=%s note_id=%s limit=%d", member_id, note_id, limit)
    try:
        result = svc.get_stored_recommendations(
            member_id,
            note_id=note_id,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )
    except ValueError as e:
        logger.warning("Stored recommendations rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Stored recommendations failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch recommendations: {e}")

    return StoredRecommendationsResponse(**result)
