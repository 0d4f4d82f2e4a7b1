"""Combine total, facets and page into one immutable SearchResult."""

from __future__ import annotations

from collections.abc import Iterable

from civic_search.domain.common.query import PageSpec
from civic_search.domain.search.models import FacetCounts, Issue, SearchResult


def assemble_result(
    issues: Iterable[Issue],
    total: int,
    facets: FacetCounts | None,
    page: PageSpec,
) -> SearchResult:
    """Never leaves a field null: an empty match gives ``()``, ``0`` and empty maps."""
    page_items = tuple(issues)[: page.limit]
    if total <= 0:
        return SearchResult(
            issues=(),
            total=0,
            facets=FacetCounts.empty(),
            page=page.page,
            limit=page.limit,
        )
    return SearchResult(
        issues=page_items,
        total=total,
        facets=facets if facets is not None else FacetCounts.empty(),
        page=page.page,
        limit=page.limit,
    )
