# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-10
# Description: dependencies.py
# -----------------------------------------------------------------------------
from functools import lru_cache

from api.AppContainer import AppContainer
from services.HealthService import HealthService
from services.RecommendationService import RecommendationService


@lru_cache
def get_container() -> AppContainer:
    # built on first request, not at import time
    return AppContainer()


def get_recommendation_service() -> RecommendationService:
    return get_container().recommendation_service


def get_health_service() -> HealthService:
    return get_container().health_service
