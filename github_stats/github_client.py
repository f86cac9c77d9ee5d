"""HTTP client for GitHub's REST and GraphQL APIs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Iterable

import httpx

from .config import GitHubSettings, RateLimitInfo, parse_datetime
from .schemas import Viewer

LOGGER = logging.getLogger(__name__)


class GitHubClientError(RuntimeError):
    """Raised when a GitHub request fails permanently."""


@dataclass(slots=True)
class GraphQLResponse:
    data: dict[str, Any]
    rate_limit: RateLimitInfo | None


class GitHubClient:
    """Light-weight GitHub client bound to a single access token."""

    def __init__(self, settings: GitHubSettings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._graphql_endpoint = settings.graphql_url.rstrip("/")
        self._rest_endpoint = settings.rest_url.rstrip("/")
        headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": "github-stats",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if settings.token:
            headers["Authorization"] = f"bearer {settings.token}"
        self._headers = headers
        self._client = client or httpx.AsyncClient(
            headers=headers,
            timeout=settings.request_timeout,
        )
        self._owns_client = client is None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_viewer(self) -> Viewer:
        """Resolve the identity the token belongs to."""

        response = await self._request("GET", f"{self._rest_endpoint}/user")
        if response.status_code != 200:
            raise GitHubClientError(
                f"GitHub REST /user failed with HTTP {response.status_code}: {_message(response)}"
            )
        return Viewer.model_validate(response.json())

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> GraphQLResponse:
        """Execute a GraphQL query."""

        backoff = self._settings.initial_backoff
        attempt = 0

        while True:
            attempt += 1
            response = await self._request(
                "POST",
                self._graphql_endpoint,
                json={"query": query, "variables": variables or {}},
            )
            payload = _json(response)

            if response.status_code != 200:
                raise GitHubClientError(
                    f"GitHub GraphQL failed with HTTP {response.status_code}: {payload.get('message') or response.text}"
                )

            errors = payload.get("errors")
            if errors:
                if _is_retryable(errors) and attempt < self._settings.max_retries:
                    delay = _retry_delay(errors) or backoff
                    LOGGER.info("Retrying GraphQL call after error: %s", errors)
                    await asyncio.sleep(min(delay, self._settings.max_backoff))
                    backoff = min(backoff * 2, self._settings.max_backoff)
                    continue
                raise GitHubClientError(str(errors))

            data = payload.get("data")
            if data is None:
                raise GitHubClientError("Response payload missing 'data'")

            rate_limit = None
            if rate := data.get("rateLimit"):
                rate_limit = RateLimitInfo(
                    cost=rate.get("cost", 0),
                    remaining=rate.get("remaining", 0),
                    reset_at=parse_datetime(rate.get("resetAt")),
                )
            return GraphQLResponse(data=data, rate_limit=rate_limit)

    async def _request(self, method: str, url: str, json: dict[str, Any] | None = None) -> httpx.Response:
        """Send a request, retrying transient transport failures with backoff."""

        backoff = self._settings.initial_backoff
        attempt = 0

        while True:
            attempt += 1
            try:
                response = await self._client.request(method, url, json=json, headers=self._headers)
            except httpx.RequestError as exc:
                LOGGER.warning("GitHub request error: %s", exc)
                if attempt >= self._settings.max_retries:
                    raise GitHubClientError("Maximum retries exceeded") from exc
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, self._settings.max_backoff)
                continue

            if response.status_code in {502, 503, 504}:
                LOGGER.info("GitHub transient HTTP %s", response.status_code)
                if attempt >= self._settings.max_retries:
                    raise GitHubClientError(
                        f"GitHub service unavailable after {self._settings.max_retries} attempts"
                    )
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, self._settings.max_backoff)
                continue

            if response.status_code in {403, 429}:
                message = _message(response)
                if "rate limit" in message.lower() and attempt < self._settings.max_retries:
                    delay = _retry_after_seconds(response) or backoff
                    LOGGER.warning("GitHub rate limited: %s", message)
                    await asyncio.sleep(min(delay, self._settings.max_backoff))
                    backoff = min(max(backoff * 2, delay), self._settings.max_backoff)
                    continue

            return response


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise GitHubClientError(f"GitHub returned a non-JSON body (HTTP {response.status_code})") from exc
    if not isinstance(payload, dict):
        raise GitHubClientError("GitHub returned an unexpected JSON payload")
    return payload


def _message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text


def _is_retryable(errors: Iterable[dict[str, Any]]) -> bool:
    for error in errors:
        error_type = error.get("type") or ""
        message = (error.get("message") or "").lower()
        if error_type in {"RATE_LIMITED", "ABUSE_DETECTED"}:
            return True
        if "timeout" in message or "try again" in message or "temporary" in message:
            return True
    return False


def _retry_delay(errors: Iterable[dict[str, Any]]) -> float | None:
    for error in errors:
        if "retryAfter" in error:
            try:
                return float(error["retryAfter"])
            except (TypeError, ValueError):
                continue
    return None


def _retry_after_seconds(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        pass

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):  # pragma: no cover - defensive parsing
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    delta = (retry_at - datetime.now(timezone.utc)).total_seconds()
    return max(delta, 0.0)


__all__ = ["GitHubClient", "GitHubClientError", "GraphQLResponse"]
