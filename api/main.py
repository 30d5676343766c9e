# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-10
# Description: main.py
# -----------------------------------------------------------------------------
from fastapi import FastAPI

from api.routers import health, programs
from utility.logging_utils import get_logger

logger = get_logger("api")

app = FastAPI(title="Notes Companion Recommendation API")
app.include_router(health.router)
app.include_router(programs.router)

logger.info("Routers registered: %s", ", ".join(r.prefix for r in (health.router, programs.router)))
