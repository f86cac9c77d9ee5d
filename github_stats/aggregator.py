"""High level orchestration for building activity reports."""

from __future__ import annotations

import logging
from collections import defaultdict
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Iterable, Protocol

from .cache import ReportCache, cache_key
from .config import AppConfig, GitHubSettings
from .github_client import GitHubClient
from .graphql_queries import CONTRIBUTIONS_QUERY
from .models import (
    WEEKDAYS,
    ContributionTypeCount,
    DayBucket,
    LanguageShare,
    RepositoryStats,
    StatsReport,
    UserSummary,
)
from .rate_limiter import Throttle
from .repositories import RepositoryLister
from .schemas import ContributionCalendar, ContributionsCollection, Viewer

LOGGER = logging.getLogger(__name__)


class MissingCredentialError(ValueError):
    """Raised when no access token was supplied."""


class StatsClient(Protocol):
    async def get_viewer(self) -> Viewer: ...

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> Any: ...


ClientFactory = Callable[[str], AbstractAsyncContextManager[StatsClient]]


def github_client_factory(settings: GitHubSettings) -> ClientFactory:
    """Build a factory producing a :class:`GitHubClient` per token."""

    def factory(token: str) -> GitHubClient:
        return GitHubClient(settings.model_copy(update={"token": token}))

    return factory


class StatsAggregator:
    """Combines the contributions collection and repository listing into a report."""

    def __init__(
        self,
        client_factory: ClientFactory,
        cache: ReportCache,
        throttle: Throttle,
        *,
        page_size: int = 100,
        contributions_repository_limit: int = 100,
    ) -> None:
        self._client_factory = client_factory
        self._cache = cache
        self._throttle = throttle
        self._page_size = page_size
        self._contributions_repository_limit = contributions_repository_limit

    @classmethod
    def from_config(cls, config: AppConfig) -> "StatsAggregator":
        return cls(
            github_client_factory(config.github),
            ReportCache(config.stats.cache_max_entries, config.stats.cache_ttl),
            Throttle(config.stats.min_call_interval),
            page_size=config.stats.page_size,
            contributions_repository_limit=config.stats.contributions_repository_limit,
        )

    async def build_report(self, credential: str | None) -> StatsReport:
        if not credential:
            raise MissingCredentialError("No access token provided")

        key = cache_key(credential)
        cached = self._cache.get(key)
        if cached is not None:
            LOGGER.debug("Serving stats report from cache")
            return cached

        await self._throttle.wait()
        try:
            async with self._client_factory(credential) as client:
                report = await self._collect(client)
        except Exception:
            LOGGER.exception("Error fetching GitHub stats")
            raise

        self._cache.set(key, report)
        LOGGER.info(
            "Built stats report for %s: %s repositories, %s commits",
            report.user.login,
            report.total_repos,
            report.total_commits,
        )
        return report

    async def _collect(self, client: StatsClient) -> StatsReport:
        viewer = await client.get_viewer()
        contributions = await self._fetch_contributions(client, viewer.login)
        nodes = await RepositoryLister(client, self._page_size).list_all(viewer.login)

        by_day, active_days = weekday_distribution(contributions.contribution_calendar)
        repos = sort_repositories(RepositoryStats.from_node(node) for node in nodes)
        total_commits = contributions.total_commit_contributions
        total_comments = contributions.total_issue_contributions
        total_reviews = contributions.total_pull_request_review_contributions

        return StatsReport(
            repos=repos,
            total_commits=total_commits,
            total_comments=total_comments,
            total_reviews=total_reviews,
            total_repos=len(repos),
            active_days=active_days,
            contributions_by_day=by_day,
            contributions_by_type=(
                ContributionTypeCount("Commits", total_commits),
                ContributionTypeCount("Comments", total_comments),
                ContributionTypeCount("Reviews", total_reviews),
            ),
            languages=language_shares(repos),
            user=UserSummary(login=viewer.login, avatar_url=viewer.avatar_url),
        )

    async def _fetch_contributions(self, client: StatsClient, login: str) -> ContributionsCollection:
        variables = {"login": login, "maxRepositories": self._contributions_repository_limit}
        response = await client.execute(CONTRIBUTIONS_QUERY, variables)
        user = response.data.get("user")
        if user is None:
            raise LookupError(f"GitHub user {login!r} not found")
        collection = ContributionsCollection.model_validate(user.get("contributionsCollection") or {})
        LOGGER.debug(
            "%s has commit contributions in %s repositories",
            login,
            len(collection.commit_contributions_by_repository),
        )
        return collection


def weekday_distribution(calendar: ContributionCalendar) -> tuple[tuple[DayBucket, ...], int]:
    """Sum active days per weekday and count the distinct active dates."""

    totals: dict[str, int] = defaultdict(int)
    active_dates = set()
    for day in calendar.days():
        if day.contribution_count > 0:
            totals[WEEKDAYS[day.date.weekday()]] += day.contribution_count
            active_dates.add(day.date)
    buckets = tuple(DayBucket(day=name, count=totals.get(name, 0)) for name in WEEKDAYS)
    return buckets, len(active_dates)


def language_shares(repos: Iterable[RepositoryStats]) -> tuple[LanguageShare, ...]:
    """Percentage of commits per primary language, largest first."""

    commits_by_language: dict[str, int] = {}
    for repo in repos:
        if repo.language:
            commits_by_language[repo.language] = commits_by_language.get(repo.language, 0) + repo.commits

    total = sum(commits_by_language.values())
    shares = [
        LanguageShare(name=name, percentage=(count / total * 100) if total else 0.0)
        for name, count in commits_by_language.items()
    ]
    return tuple(sorted(shares, key=lambda share: share.percentage, reverse=True))


def sort_repositories(repos: Iterable[RepositoryStats]) -> tuple[RepositoryStats, ...]:
    # sorted() is stable, so equal commit counts keep the listing order.
    return tuple(sorted(repos, key=lambda repo: repo.commits, reverse=True))


__all__ = [
    "ClientFactory",
    "MissingCredentialError",
    "StatsAggregator",
    "StatsClient",
    "github_client_factory",
    "language_shares",
    "sort_repositories",
    "weekday_distribution",
]
