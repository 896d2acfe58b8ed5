from __future__ import annotations

from fastapi import APIRouter, Response

from home_service.core.metrics import render_latest

router = APIRouter(tags=["metrics"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)
