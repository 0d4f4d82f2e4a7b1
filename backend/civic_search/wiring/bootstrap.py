"""Dependency injection bootstrap — the single place that binds ports to adapters.

Every factory function here can be used as a FastAPI ``Depends()`` target.
Routers never import concrete implementations directly; they depend on
the abstractions returned by these factories.

The session factory is built in the application lifespan and parked on
``app.state``; nothing here creates an engine at import time.

Example usage in a router::

    from civic_search.wiring.bootstrap import get_uow, get_search_issues_use_case

    @router.get("/search")
    async def search(
        uow: SqlUnitOfWork = Depends(get_uow),
        use_case: SearchIssuesUseCase = Depends(get_search_issues_use_case),
    ):
        result = use_case.execute(uow, query)
"""

from __future__ import annotations

from typing import Iterator

from fastapi import Request

from civic_search.infra.db.uow import SqlUnitOfWork
from civic_search.use_cases.issues.get_issue import GetIssueUseCase
from civic_search.use_cases.issues.vote_on_issue import VoteOnIssueUseCase
from civic_search.use_cases.search.get_search_facets import GetSearchFacetsUseCase
from civic_search.use_cases.search.search_issues import SearchIssuesUseCase


# ── Unit of Work ─────────────────────────────────────────────────────────


def get_uow(request: Request) -> Iterator[SqlUnitOfWork]:
    """Yield a SqlUnitOfWork bound to the app's session factory.

    Designed for FastAPI Depends()::

        uow: SqlUnitOfWork = Depends(get_uow)
    """
    uow = SqlUnitOfWork(request.app.state.session_factory)
    yield uow


# ── Use Cases ────────────────────────────────────────────────────────────


def get_search_issues_use_case() -> SearchIssuesUseCase:
    return SearchIssuesUseCase()


def get_search_facets_use_case() -> GetSearchFacetsUseCase:
    return GetSearchFacetsUseCase(search=get_search_issues_use_case())


def get_get_issue_use_case() -> GetIssueUseCase:
    return GetIssueUseCase()


def get_vote_on_issue_use_case() -> VoteOnIssueUseCase:
    return VoteOnIssueUseCase()
