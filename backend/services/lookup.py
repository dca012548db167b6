"""Cache-first lookup against the upstream download API.

A hit is served from memory with no I/O. A miss performs exactly one
upstream GET (no retries, no coalescing of concurrent misses for the same
id) and stores successful JSON bodies; error outcomes are never cached.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from services.cache import TTLCache

logger = logging.getLogger(__name__)

GENERIC_UPSTREAM_ERROR = {"message": "External API error"}


@dataclass(frozen=True)
class Hit:
    value: Any


@dataclass(frozen=True)
class FetchedOk:
    value: Any


@dataclass(frozen=True)
class UpstreamError:
    status_code: int
    body: Any


@dataclass(frozen=True)
class TransportError:
    message: str


LookupResult = Hit | FetchedOk | UpstreamError | TransportError


class LookupService:
    def __init__(
        self,
        cache: TTLCache,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cache = cache
        self.base_url = base_url
        self._transport = transport

    def upstream_url(self, video_id: str) -> str:
        # Plain concatenation: the id is not escaped or validated.
        return f"{self.base_url}{video_id}"

    async def lookup(self, video_id: str) -> LookupResult:
        """Return the cached payload for `video_id`, fetching it on a miss.

        Raises only for faults outside the taxonomy, e.g. a 2xx response
        whose body is not JSON.
        """
        cached = self.cache.get(video_id)
        if cached is not None:
            logger.info("Cache hit: %s", video_id)
            return Hit(cached)

        logger.info("Cache miss. Fetching: %s", video_id)
        try:
            # No timeout: a slow upstream holds this request until it answers.
            async with httpx.AsyncClient(
                timeout=None, follow_redirects=True, transport=self._transport
            ) as client:
                resp = await client.get(self.upstream_url(video_id))
        except httpx.RequestError as e:
            logger.error("Upstream fetch failed for %s: %r", video_id, e)
            return TransportError(str(e) or type(e).__name__)

        if not resp.is_success:
            try:
                body = resp.json()
            except ValueError:
                body = GENERIC_UPSTREAM_ERROR
            logger.warning("Upstream returned %d for %s", resp.status_code, video_id)
            return UpstreamError(resp.status_code, body)

        data = resp.json()
        self.cache.set(video_id, data)
        return FetchedOk(data)
