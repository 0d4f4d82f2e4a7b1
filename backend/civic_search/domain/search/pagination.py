"""Sort-key resolution and page windowing.

Sort keys map to store fields:

* ``date``     → ``created_at`` (no secondary key)
* ``votes``    → ``vote_count`` (net up minus down), then newest first
* ``priority`` → ``priority_rank`` (ordinal of the priority), then newest first
"""

from __future__ import annotations

from civic_search.domain.common.query import (
    PageSpec,
    Predicate,
    SortOrder,
    SortSpec,
    TieBreak,
)
from civic_search.domain.search.filter_spec import FilterSpec, SortField
from civic_search.domain.search.models import Issue
from civic_search.domain.search.ports import IssueStore

SORT_FIELD_MAP: dict[SortField, str] = {
    SortField.DATE: "created_at",
    SortField.VOTES: "vote_count",
    SortField.PRIORITY: "priority_rank",
}

_NEWEST_FIRST = TieBreak(field="created_at", order=SortOrder.DESC)


def resolve_sort(sort_by: SortField, order: SortOrder) -> SortSpec:
    tie_break = None if sort_by == SortField.DATE else _NEWEST_FIRST
    return SortSpec(field=SORT_FIELD_MAP[sort_by], order=order, tie_break=tie_break)


def page_window(spec: FilterSpec) -> PageSpec:
    return PageSpec(page=spec.page, per_page=spec.limit)


class Paginator:
    """Fetch exactly one sorted page for a compiled predicate."""

    def __init__(self, store: IssueStore) -> None:
        self._store = store

    def fetch_page(
        self,
        predicate: Predicate,
        sort: SortSpec,
        page: PageSpec,
        *,
        total: int | None = None,
    ) -> tuple[Issue, ...]:
        # Nothing to fetch past the end of the match set.
        if total is not None and page.offset >= total:
            return ()
        return self._store.sorted_page(
            predicate, sort, offset=page.offset, limit=page.limit
        )
