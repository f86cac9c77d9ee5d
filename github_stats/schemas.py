"""Schemas for the GitHub API responses consumed by the aggregator.

Optional fields default to ``None``/zero so that partially populated
nodes (empty repositories, tags as default branch targets, missing
languages) never fail a page.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Viewer(_Schema):
    """Subset of the REST ``/user`` payload."""

    login: str
    avatar_url: str = ""


class Language(_Schema):
    name: str


class CommitHistory(_Schema):
    total_count: int = Field(default=0, alias="totalCount")


class CommitTarget(_Schema):
    # Only populated when the target is a Commit.
    history: CommitHistory | None = None


class BranchRef(_Schema):
    target: CommitTarget | None = None


class RepositoryNode(_Schema):
    """A repository as returned by the listing query."""

    name_with_owner: str = Field(alias="nameWithOwner")
    is_private: bool = Field(default=False, alias="isPrivate")
    url: str = ""
    description: str | None = None
    primary_language: Language | None = Field(default=None, alias="primaryLanguage")
    stargazer_count: int = Field(default=0, alias="stargazerCount")
    default_branch_ref: BranchRef | None = Field(default=None, alias="defaultBranchRef")

    @property
    def language(self) -> str | None:
        return self.primary_language.name if self.primary_language else None

    @property
    def commit_count(self) -> int:
        ref = self.default_branch_ref
        if ref is None or ref.target is None or ref.target.history is None:
            return 0
        return ref.target.history.total_count


class PageInfo(_Schema):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class RepositoryConnection(_Schema):
    nodes: list[RepositoryNode | None] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class ContributionDay(_Schema):
    contribution_count: int = Field(default=0, alias="contributionCount")
    date: dt.date
    weekday: int | None = None


class ContributionWeek(_Schema):
    contribution_days: list[ContributionDay] = Field(default_factory=list, alias="contributionDays")


class ContributionCalendar(_Schema):
    total_contributions: int = Field(default=0, alias="totalContributions")
    weeks: list[ContributionWeek] = Field(default_factory=list)

    def days(self) -> list[ContributionDay]:
        return [day for week in self.weeks for day in week.contribution_days]


class Owner(_Schema):
    login: str = ""


class ContributedRepository(_Schema):
    name_with_owner: str = Field(alias="nameWithOwner")
    is_private: bool = Field(default=False, alias="isPrivate")
    owner: Owner | None = None


class ContributionCount(_Schema):
    total_count: int = Field(default=0, alias="totalCount")


class RepositoryContributions(_Schema):
    """Commit contributions the identity made to one repository."""

    repository: ContributedRepository
    contributions: ContributionCount = Field(default_factory=ContributionCount)


class ContributionsCollection(_Schema):
    total_commit_contributions: int = Field(default=0, alias="totalCommitContributions")
    total_issue_contributions: int = Field(default=0, alias="totalIssueContributions")
    total_pull_request_contributions: int = Field(default=0, alias="totalPullRequestContributions")
    total_pull_request_review_contributions: int = Field(default=0, alias="totalPullRequestReviewContributions")
    commit_contributions_by_repository: list[RepositoryContributions] = Field(
        default_factory=list, alias="commitContributionsByRepository"
    )
    contribution_calendar: ContributionCalendar = Field(
        default_factory=ContributionCalendar, alias="contributionCalendar"
    )


__all__ = [
    "BranchRef",
    "CommitHistory",
    "CommitTarget",
    "ContributedRepository",
    "ContributionCalendar",
    "ContributionDay",
    "ContributionWeek",
    "ContributionsCollection",
    "Language",
    "PageInfo",
    "RepositoryConnection",
    "RepositoryContributions",
    "RepositoryNode",
    "Viewer",
]
