"""Cursor-paginated listing of the repositories visible to an identity."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Protocol

from .graphql_queries import REPOSITORY_LIST_QUERY
from .schemas import RepositoryConnection, RepositoryNode


LOGGER = logging.getLogger(__name__)


class GraphQLExecutor(Protocol):
    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> Any: ...


class RepositoryLister:
    """Walks the ``user.repositories`` connection until it is exhausted.

    Covers repositories the identity owns, collaborates on or can access
    through organization membership, most recently updated first. Errors
    from any page abort the walk; pages are never retried here.
    """

    def __init__(self, client: GraphQLExecutor, page_size: int = 100) -> None:
        self._client = client
        self._page_size = page_size

    async def iter_repositories(self, login: str) -> AsyncIterator[RepositoryNode]:
        """Yield repositories page by page.

        The next page is only requested once the consumer has drained the
        current one, so breaking out early stops the pagination.
        """

        cursor: str | None = None
        page = 0
        while True:
            connection = await self._fetch_page(login, cursor)
            page += 1
            LOGGER.debug("Fetched repository page %s for %s (%s nodes)", page, login, len(connection.nodes))
            for node in connection.nodes:
                if node is not None:
                    yield node
            page_info = connection.page_info
            if not page_info.has_next_page or not page_info.end_cursor:
                break
            cursor = page_info.end_cursor

    async def list_all(self, login: str) -> list[RepositoryNode]:
        """Return every repository, preserving the API's ordering."""

        repositories = [node async for node in self.iter_repositories(login)]
        LOGGER.debug("Listed %s repositories for %s", len(repositories), login)
        return repositories

    async def _fetch_page(self, login: str, cursor: str | None) -> RepositoryConnection:
        variables = {"login": login, "first": self._page_size, "after": cursor}
        response = await self._client.execute(REPOSITORY_LIST_QUERY, variables)
        if response.rate_limit:
            LOGGER.debug("GraphQL budget remaining: %s", response.rate_limit.remaining)
        user = response.data.get("user")
        if user is None:
            raise LookupError(f"GitHub user {login!r} not found")
        return RepositoryConnection.model_validate(user.get("repositories") or {})


__all__ = ["GraphQLExecutor", "RepositoryLister"]
