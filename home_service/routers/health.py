"""Liveness/readiness probes for orchestrators."""
from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from home_service.db.session import get_engine

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger("home_service.routers.health")


@router.get("/liveness")
def liveness():
    return {"status": "UP"}


@router.get("/readiness")
def readiness():
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError) as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse({"status": "DOWN"}, status_code=503)
    return {"status": "UP"}
