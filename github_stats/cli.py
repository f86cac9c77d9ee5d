"""Command line interface for the GitHub stats aggregator."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .aggregator import StatsAggregator
from .config import AppConfig
from .github_client import GitHubClient
from .models import RepositoryStats
from .repositories import RepositoryLister

app = typer.Typer(add_completion=False)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _load_config(github_token: Optional[str]) -> AppConfig:
    overrides = {"github_token": github_token} if github_token else {}
    config = AppConfig.from_env(overrides=overrides)
    if not config.github.token:
        raise typer.BadParameter("A GitHub token is required")
    return config


@app.callback()
def main() -> None:
    """Aggregate GitHub activity statistics."""


@app.command("report")
def report(
    github_token: Optional[str] = typer.Option(None, envvar="GITHUB_TOKEN", help="GitHub token"),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write the JSON report to this file"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Build the activity report and print it as JSON."""

    configure_logging(log_level)
    config = _load_config(github_token)
    aggregator = StatsAggregator.from_config(config)

    result = asyncio.run(aggregator.build_report(config.github.token))
    document = json.dumps(result.as_dict(), indent=2)
    if output is None:
        typer.echo(document)
    else:
        output.write_text(document + "\n", encoding="utf-8")
        typer.echo(f"Wrote report for {result.user.login} to {output}")


@app.command("repos")
def repos(
    github_token: Optional[str] = typer.Option(None, envvar="GITHUB_TOKEN", help="GitHub token"),
    limit: Optional[int] = typer.Option(None, min=1, help="Stop after this many repositories"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Stream the repositories visible to the token as JSON lines."""

    configure_logging(log_level)
    config = _load_config(github_token)

    async def runner() -> None:
        async with GitHubClient(config.github) as client:
            viewer = await client.get_viewer()
            lister = RepositoryLister(client, config.stats.page_size)
            emitted = 0
            async for node in lister.iter_repositories(viewer.login):
                typer.echo(json.dumps(RepositoryStats.from_node(node).as_dict()))
                emitted += 1
                if limit is not None and emitted >= limit:
                    break

    asyncio.run(runner())


__all__ = ["app"]
