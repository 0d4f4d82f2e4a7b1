"""SearchIssuesUseCase — filtered, faceted, sorted page of issues.

Pipeline:
  1. Compile the FilterSpec into one Predicate
  2. Count the full match set
  3. Aggregate facets over the same predicate
  4. Fetch the requested page, sorted
  5. Assemble an immutable SearchResult

The same Predicate object flows through steps 2-4, so total, facets and
page all describe one filtered set.  Depends only on domain ports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from civic_search.domain.common.errors import StoreQueryError
from civic_search.domain.common.uow import UnitOfWork
from civic_search.domain.search.assembler import assemble_result
from civic_search.domain.search.compiler import compile_predicate
from civic_search.domain.search.facets import FacetAggregator
from civic_search.domain.search.filter_spec import FilterSpec
from civic_search.domain.search.models import SearchResult
from civic_search.domain.search.pagination import Paginator, page_window, resolve_sort

logger = logging.getLogger(__name__)


# ── Query (input) ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class SearchIssuesQuery:
    """Immutable value object describing what the caller wants to read."""

    filter_spec: FilterSpec = field(default_factory=FilterSpec)


# ── Result (output) ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class SearchIssuesResult:
    """What the use case returns to the caller."""

    result: SearchResult


# ── Use Case ────────────────────────────────────────────────────────────


class SearchIssuesUseCase:
    """Run one search request against the issue store."""

    def execute(self, uow: UnitOfWork, query: SearchIssuesQuery) -> SearchIssuesResult:
        spec = query.filter_spec
        predicate = compile_predicate(spec)
        sort = resolve_sort(spec.sort_by, spec.sort_order)
        window = page_window(spec)

        logger.debug(
            "Search: empty_predicate=%s sort=%s/%s page=%d limit=%d",
            predicate.is_empty(),
            sort.field,
            sort.order.value,
            window.page,
            window.limit,
        )

        with uow:
            store = uow.issue_store
            try:
                total = store.count(predicate)
                facets = FacetAggregator(store).aggregate(predicate, total=total)
                issues = Paginator(store).fetch_page(predicate, sort, window, total=total)
            except StoreQueryError:
                logger.error("Search failed for spec %r", spec)
                raise

        return SearchIssuesResult(result=assemble_result(issues, total, facets, window))
