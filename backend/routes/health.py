"""Health and readiness check routes."""

from fastapi import APIRouter, Depends, Request

from routes.proxy import get_cache
from services.cache import TTLCache

router = APIRouter()

SERVICE_NAME = "ytdl-cache-proxy"


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": SERVICE_NAME, "commit": request.app.state.settings.git_sha}


@router.get("/health")
async def health(request: Request, cache: TTLCache = Depends(get_cache)) -> dict:
    """Readiness plus cache occupancy. Does not call the upstream."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "commit": request.app.state.settings.git_sha,
        "cache": {
            "entries": len(cache),
            "max_entries": cache.max_entries,
            "ttl_seconds": cache.ttl_seconds,
        },
    }
