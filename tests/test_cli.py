from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from typer.testing import CliRunner

from github_stats import aggregator as aggregator_module
from github_stats import cli as cli_module
from github_stats.cli import app
from github_stats.github_client import GitHubClient


def repo_node(index: int) -> dict[str, Any]:
    return {
        "nameWithOwner": f"octocat/repo-{index}",
        "isPrivate": False,
        "url": f"https://github.com/octocat/repo-{index}",
        "description": None,
        "primaryLanguage": {"name": "Go"},
        "stargazerCount": index,
        "defaultBranchRef": {"target": {"history": {"totalCount": index + 1}}},
    }


class FakeGitHub:
    """Serves a three page repository listing through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.graphql_calls: list[dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == "/user":
            return httpx.Response(200, json={"login": "octocat", "avatar_url": "https://avatars.example/u/1"})

        payload = json.loads(request.content)
        self.graphql_calls.append(payload["variables"])
        if "contributionsCollection" in payload["query"]:
            return httpx.Response(
                200,
                json={
                    "data": {
                        "user": {
                            "contributionsCollection": {
                                "totalCommitContributions": 12,
                                "totalIssueContributions": 3,
                                "totalPullRequestContributions": 1,
                                "totalPullRequestReviewContributions": 2,
                                "commitContributionsByRepository": [],
                                "contributionCalendar": {"totalContributions": 0, "weeks": []},
                            }
                        }
                    }
                },
            )

        after = payload["variables"].get("after")
        page = int(after) if after else 0
        first = payload["variables"]["first"]
        nodes = [repo_node(page * first + offset) for offset in range(first)]
        has_next = page < 2
        return httpx.Response(
            200,
            json={
                "data": {
                    "user": {
                        "repositories": {
                            "nodes": nodes,
                            "pageInfo": {"hasNextPage": has_next, "endCursor": str(page + 1)},
                        }
                    }
                }
            },
        )

    def client_class(self) -> Callable[..., GitHubClient]:
        handler = self.handler

        class MockedGitHubClient(GitHubClient):
            def __init__(self, settings, client=None) -> None:
                super().__init__(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))
                self._owns_client = True

        return MockedGitHubClient


@pytest.fixture()
def github(monkeypatch) -> FakeGitHub:
    fake = FakeGitHub()
    mocked = fake.client_class()
    monkeypatch.setattr(cli_module, "GitHubClient", mocked)
    monkeypatch.setattr(aggregator_module, "GitHubClient", mocked)
    return fake


def test_report_requires_token():
    runner = CliRunner()

    result = runner.invoke(app, ["report"], env={"GITHUB_TOKEN": "", "GH_TOKEN": ""})

    assert result.exit_code == 2


def test_report_prints_camel_case_json(github):
    runner = CliRunner()

    result = runner.invoke(app, ["report"], env={"GITHUB_TOKEN": "token", "STATS_PAGE_SIZE": "2"})

    assert result.exit_code == 0, result.output
    document = json.loads(result.output)
    assert document["user"] == {"login": "octocat", "avatarUrl": "https://avatars.example/u/1"}
    assert document["totalCommits"] == 12
    assert document["totalComments"] == 3
    assert document["totalReviews"] == 2
    assert document["totalRepos"] == 6
    assert [entry["day"] for entry in document["contributionsByDay"]][0] == "Monday"
    assert document["languages"] == [{"name": "Go", "percentage": 100.0}]
    assert document["repos"][0]["name"] == "octocat/repo-5"
    assert "isPrivate" in document["repos"][0]


def test_report_writes_output_file(github, tmp_path):
    runner = CliRunner()
    output = tmp_path / "report.json"

    result = runner.invoke(
        app,
        ["report", "--output", str(output)],
        env={"GITHUB_TOKEN": "token", "STATS_PAGE_SIZE": "2"},
    )

    assert result.exit_code == 0, result.output
    assert "Wrote report for octocat" in result.output
    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["totalRepos"] == 6


def test_repos_limit_stops_pagination_early(github):
    runner = CliRunner()

    result = runner.invoke(app, ["repos", "--limit", "2"], env={"GITHUB_TOKEN": "token", "STATS_PAGE_SIZE": "1"})

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert [json.loads(line)["name"] for line in lines] == ["octocat/repo-0", "octocat/repo-1"]
    assert len(github.graphql_calls) == 2
