# backend/api/routes/directions.py
from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from models.directions import DirectionsRequest, ErrorResponse, RouteResult
from services.directions import DirectionsPipeline, build_default_pipeline
from services.errors import DirectionsError

log = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["directions"])


@lru_cache(maxsize=1)
def get_pipeline() -> DirectionsPipeline:
    # the pipeline is stateless; one instance is shared by every request
    return build_default_pipeline()


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post(
    "/directions",
    response_model=RouteResult,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def directions(req: DirectionsRequest, pipeline: DirectionsPipeline = Depends(get_pipeline)):
    """Geocode both addresses, route between them, return a render-ready result."""
    try:
        return pipeline.plan(req.source or "", req.destination or "")
    except DirectionsError as e:
        log.warning("Directions error (%s): %s", e.kind.value, e.message)
        return error_response(e.user_message, e.status_code)
    except Exception as e:
        log.exception("Unexpected directions failure: %s", e)
        return error_response(str(e) or "Unknown error", 500)
