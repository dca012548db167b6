"""Caching proxy routes.

GET /dl/{video_id} → cached or freshly fetched upstream JSON
GET /api/cache     → live cache entries with remaining TTL
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from errors import INTERNAL_ERROR_BODY, ProxyError
from services.cache import TTLCache
from services.cache_report import describe_cache
from services.lookup import FetchedOk, Hit, LookupService, UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_cache(request: Request) -> TTLCache:
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        raise ProxyError("Cache not initialized", status_code=503)
    return cache


def get_lookup_service(request: Request) -> LookupService:
    service = getattr(request.app.state, "lookup_service", None)
    if service is None:
        raise ProxyError("Lookup service not initialized", status_code=503)
    return service


@router.get("/dl/{video_id}")
async def download_info(video_id: str, service: LookupService = Depends(get_lookup_service)):
    """Serve upstream data for `video_id`, from cache when still fresh."""
    result = await service.lookup(video_id)

    if isinstance(result, (Hit, FetchedOk)):
        return JSONResponse(result.value, status_code=200)
    if isinstance(result, UpstreamError):
        # Forward upstream semantics untouched
        return JSONResponse(result.body, status_code=result.status_code)

    logger.error("Transport error for %s: %s", video_id, result.message)
    raise ProxyError(INTERNAL_ERROR_BODY["error"], status_code=500)


@router.get("/api/cache")
async def cache_status(request: Request, cache: TTLCache = Depends(get_cache)) -> dict:
    """Live cache entries; expired-but-present keys are left out."""
    return describe_cache(cache, request.app.state.settings.remaining_time_format)
