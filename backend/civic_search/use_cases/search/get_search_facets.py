"""GetSearchFacetsUseCase — facet counts only, no page of issues.

Runs the regular search with the window pinned to page 1, limit 1 and
hands back just the facets.  Facets never depend on the window, so the
pinned window only keeps the page fetch as small as possible.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from civic_search.domain.common.uow import UnitOfWork
from civic_search.domain.search.filter_spec import FilterSpec
from civic_search.domain.search.models import FacetCounts
from civic_search.use_cases.search.search_issues import (
    SearchIssuesQuery,
    SearchIssuesUseCase,
)

FACETS_ONLY_PAGE = 1
FACETS_ONLY_LIMIT = 1


@dataclass(frozen=True)
class GetSearchFacetsQuery:
    filter_spec: FilterSpec = field(default_factory=FilterSpec)


@dataclass(frozen=True)
class GetSearchFacetsResult:
    facets: FacetCounts


class GetSearchFacetsUseCase:
    """Facets for a filter, independent of any requested page."""

    def __init__(self, search: SearchIssuesUseCase | None = None) -> None:
        self._search = search or SearchIssuesUseCase()

    def execute(
        self, uow: UnitOfWork, query: GetSearchFacetsQuery
    ) -> GetSearchFacetsResult:
        spec = query.filter_spec.with_window(FACETS_ONLY_PAGE, FACETS_ONLY_LIMIT)
        outcome = self._search.execute(uow, SearchIssuesQuery(filter_spec=spec))
        return GetSearchFacetsResult(facets=outcome.result.facets)
