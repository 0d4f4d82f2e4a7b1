"""Facet counts over the full filtered set.

Facets are self-inclusive: the predicate passed in already carries the
dimension's own filter, so selecting ``category=security`` narrows the
``categories`` facet to that one bucket.  Pagination never reaches here.
"""

from __future__ import annotations

import logging

from civic_search.domain.common.query import Predicate
from civic_search.domain.search.models import FacetCounts, FacetDimension
from civic_search.domain.search.ports import IssueStore

logger = logging.getLogger(__name__)

# Dimension → (issue field, multi-valued?)
FACET_SOURCES: dict[FacetDimension, tuple[str, bool]] = {
    FacetDimension.CATEGORIES: ("category", False),
    FacetDimension.PRIORITIES: ("priority", False),
    FacetDimension.STATUSES: ("status", False),
    FacetDimension.TAGS: ("tags", True),
}


class FacetAggregator:
    """Compute value → count maps for every facet dimension."""

    def __init__(self, store: IssueStore) -> None:
        self._store = store

    def aggregate(self, predicate: Predicate, *, total: int | None = None) -> FacetCounts:
        """Group-count each dimension against *predicate*.

        When the caller already knows the match is empty (``total == 0``)
        the store is not consulted.
        """
        if total == 0:
            return FacetCounts.empty()

        counts: dict[str, dict[str, int]] = {}
        for dimension, (field, multi_valued) in FACET_SOURCES.items():
            raw = self._store.group_count(predicate, field, multi_valued=multi_valued)
            counts[dimension.value] = {
                str(value): int(n) for value, n in raw.items() if value and n > 0
            }
        logger.debug(
            "Facet buckets: %s",
            {name: len(buckets) for name, buckets in counts.items()},
        )
        return FacetCounts(**counts)
