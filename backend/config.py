"""Centralized configuration — all env vars in one place."""

import os

from services.cache_report import TIME_FORMATS


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Local listener (ignored when a function host serves the app)
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _int_env("PORT", 3000)

        # Upstream download API; ids are appended verbatim
        self.upstream_base_url: str = os.getenv(
            "UPSTREAM_BASE_URL", "https://yt-dl-test.vercel.app/dl/"
        )

        # Cache variant: 3600s with "minutes", or 14400s with "hours"
        self.cache_max_entries: int = _int_env("CACHE_MAX_ENTRIES", 500)
        self.cache_ttl_seconds: int = _int_env("CACHE_TTL_SECONDS", 3600)
        self.remaining_time_format: str = os.getenv("REMAINING_TIME_FORMAT", "minutes")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of configuration problems."""
        problems = []
        if not 0 < self.port < 65536:
            problems.append(f"PORT out of range: {self.port}")
        if self.cache_max_entries < 1:
            problems.append(f"CACHE_MAX_ENTRIES must be >= 1: {self.cache_max_entries}")
        if self.cache_ttl_seconds <= 0:
            problems.append(f"CACHE_TTL_SECONDS must be > 0: {self.cache_ttl_seconds}")
        if self.remaining_time_format not in TIME_FORMATS:
            problems.append(f"REMAINING_TIME_FORMAT unknown: {self.remaining_time_format}")
        if not self.upstream_base_url.startswith(("http://", "https://")):
            problems.append(f"UPSTREAM_BASE_URL is not an http(s) URL: {self.upstream_base_url}")
        return problems


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


settings = Settings()
