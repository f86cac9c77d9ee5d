"""Domain models for the aggregated statistics report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .schemas import RepositoryNode

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(slots=True, frozen=True)
class RepositoryStats:
    """Normalized per-repository statistics."""

    name: str
    commits: int
    stars: int
    url: str
    description: str | None
    language: str | None
    contributions: int
    is_private: bool

    @classmethod
    def from_node(cls, node: RepositoryNode) -> "RepositoryStats":
        """Convert a listing node into a :class:`RepositoryStats`."""

        commits = node.commit_count
        return cls(
            name=node.name_with_owner,
            commits=commits,
            stars=node.stargazer_count,
            url=node.url,
            description=node.description,
            language=node.language,
            contributions=commits,
            is_private=node.is_private,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "commits": self.commits,
            "stars": self.stars,
            "url": self.url,
            "description": self.description,
            "language": self.language,
            "contributions": self.contributions,
            "isPrivate": self.is_private,
        }


@dataclass(slots=True, frozen=True)
class LanguageShare:
    name: str
    percentage: float


@dataclass(slots=True, frozen=True)
class DayBucket:
    day: str
    count: int


@dataclass(slots=True, frozen=True)
class ContributionTypeCount:
    type: str
    count: int


@dataclass(slots=True, frozen=True)
class UserSummary:
    login: str
    avatar_url: str


@dataclass(slots=True, frozen=True)
class StatsReport:
    """Aggregated activity statistics for one identity.

    ``total_repos`` counts every repository the listing returned,
    private ones included.
    """

    repos: tuple[RepositoryStats, ...]
    total_commits: int
    total_comments: int
    total_reviews: int
    total_repos: int
    active_days: int
    contributions_by_day: tuple[DayBucket, ...]
    contributions_by_type: tuple[ContributionTypeCount, ...]
    languages: tuple[LanguageShare, ...]
    user: UserSummary

    def as_dict(self) -> dict[str, Any]:
        """Serialise the report with the dashboard's camelCase keys."""

        return {
            "repos": [repo.as_dict() for repo in self.repos],
            "totalCommits": self.total_commits,
            "totalComments": self.total_comments,
            "totalReviews": self.total_reviews,
            "totalRepos": self.total_repos,
            "activeDays": self.active_days,
            "contributionsByDay": [{"day": bucket.day, "count": bucket.count} for bucket in self.contributions_by_day],
            "contributionsByType": [{"type": item.type, "count": item.count} for item in self.contributions_by_type],
            "languages": [{"name": share.name, "percentage": share.percentage} for share in self.languages],
            "user": {"login": self.user.login, "avatarUrl": self.user.avatar_url},
        }


__all__ = [
    "ContributionTypeCount",
    "DayBucket",
    "LanguageShare",
    "RepositoryStats",
    "StatsReport",
    "UserSummary",
    "WEEKDAYS",
]
