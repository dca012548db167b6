"""Human-readable snapshot of the lookup cache for /api/cache."""

import math

from services.cache import TTLCache

TIME_FORMATS = {"minutes", "hours"}


def format_remaining(remaining_ms: float, style: str = "minutes") -> str:
    """Render a remaining TTL, e.g. "59分 3秒" or "3時間 59分 3秒"."""
    if style not in TIME_FORMATS:
        raise ValueError(f"Unknown time format: {style}. Supported: {sorted(TIME_FORMATS)}")

    total = math.ceil(remaining_ms / 1000)
    if style == "hours" and remaining_ms >= 3_600_000:
        hours, rest = divmod(total, 3600)
        return f"{hours}時間 {rest // 60}分 {rest % 60}秒"
    return f"{total // 60}分 {total % 60}秒"


def describe_cache(cache: TTLCache, style: str = "minutes") -> dict:
    """List live entries with their remaining TTL.

    cache.keys() can include expired entries, so each key is filtered on
    its own remaining TTL here.
    """
    details = []
    for video_id in cache.keys():
        remaining = cache.remaining_ttl(video_id)
        if remaining is None or remaining <= 0:
            continue
        remaining_ms = remaining * 1000
        details.append(
            {
                "videoid": video_id,
                "remainingTime": format_remaining(remaining_ms, style),
                "remainingTTL_ms": round(remaining_ms),
            }
        )

    return {"totalCachedItems": len(details), "cacheDetails": details}
