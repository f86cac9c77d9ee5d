"""Application configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt


UTC = timezone.utc


class GitHubSettings(BaseModel):
    """Configuration options for the GitHub REST and GraphQL APIs."""

    token: str | None = Field(default=None, description="Personal access token or OAuth token.")
    graphql_url: str = Field(default="https://api.github.com/graphql")
    rest_url: str = Field(default="https://api.github.com")
    max_retries: PositiveInt = Field(default=3, description="Maximum number of attempts per HTTP request.")
    initial_backoff: float = Field(default=1.0, ge=0.0, description="Initial exponential backoff in seconds.")
    max_backoff: float = Field(default=30.0, ge=0.0, description="Maximum delay for exponential backoff in seconds.")
    request_timeout: float = Field(default=40.0, ge=1.0, description="Timeout for a single HTTP request in seconds.")


class StatsSettings(BaseModel):
    """Tunable parameters for report aggregation."""

    page_size: PositiveInt = Field(default=100, le=100, description="Repositories fetched per listing page.")
    contributions_repository_limit: PositiveInt = Field(
        default=100,
        le=100,
        description="Repositories requested with the contributions collection.",
    )
    cache_max_entries: NonNegativeInt = Field(default=100, description="Maximum number of cached reports.")
    cache_ttl: float = Field(default=300.0, ge=0.0, description="Seconds a cached report stays fresh.")
    min_call_interval: float = Field(
        default=1.0, ge=0.0, description="Minimum seconds between outbound call batches."
    )


class AppConfig(BaseModel):
    """Root configuration container."""

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    stats: StatsSettings = Field(default_factory=StatsSettings)

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None, overrides: dict[str, Any] | None = None) -> "AppConfig":
        """Construct a configuration object from environment variables."""

        env = env if env is not None else os.environ
        overrides = overrides or {}

        github = GitHubSettings(
            token=overrides.get("github_token") or env.get("GITHUB_TOKEN") or env.get("GH_TOKEN"),
            graphql_url=overrides.get("github_graphql_url") or env.get("GITHUB_GRAPHQL_URL") or "https://api.github.com/graphql",
            rest_url=overrides.get("github_rest_url") or env.get("GITHUB_REST_URL") or "https://api.github.com",
            max_retries=int(overrides.get("github_max_retries") or env.get("GITHUB_MAX_RETRIES", 3)),
            initial_backoff=float(overrides.get("github_initial_backoff") or env.get("GITHUB_INITIAL_BACKOFF", 1.0)),
            max_backoff=float(overrides.get("github_max_backoff") or env.get("GITHUB_MAX_BACKOFF", 30.0)),
            request_timeout=float(overrides.get("github_request_timeout") or env.get("GITHUB_REQUEST_TIMEOUT", 40.0)),
        )

        stats = StatsSettings(
            page_size=int(overrides.get("page_size") or env.get("STATS_PAGE_SIZE") or 100),
            contributions_repository_limit=int(
                overrides.get("contributions_repository_limit")
                or env.get("STATS_CONTRIBUTIONS_REPOSITORY_LIMIT")
                or 100
            ),
            cache_max_entries=int(_first_set(overrides.get("cache_max_entries"), env.get("STATS_CACHE_MAX_ENTRIES"), 100)),
            cache_ttl=float(_first_set(overrides.get("cache_ttl"), env.get("STATS_CACHE_TTL"), 300.0)),
            min_call_interval=float(
                _first_set(overrides.get("min_call_interval"), env.get("STATS_MIN_CALL_INTERVAL"), 1.0)
            ),
        )

        return cls(github=github, stats=stats)


def _first_set(*values: Any) -> Any:
    # Zero is a meaningful value for the cache and throttle knobs.
    for value in values:
        if value is not None and value != "":
            return value
    return None


def parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value).astimezone(UTC)
    except ValueError as exc:
        raise ValueError(f"Invalid datetime format: {value}") from exc


@dataclass(slots=True)
class RateLimitInfo:
    """Snapshot of GitHub's GraphQL rate limit state."""

    cost: int
    remaining: int
    reset_at: datetime | None


__all__ = [
    "AppConfig",
    "GitHubSettings",
    "StatsSettings",
    "RateLimitInfo",
    "UTC",
    "parse_datetime",
]
