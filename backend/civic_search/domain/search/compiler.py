"""Compile a FilterSpec into the single composite predicate used by search.

Pure function: no I/O, no mutation.  The returned predicate is shared by
the total count, the facet counts and the page fetch.
"""

from __future__ import annotations

from civic_search.domain.common.query import GeoRadiusFilter, Predicate
from civic_search.domain.search.filter_spec import FilterSpec

TEXT_SEARCH_FIELDS: tuple[str, ...] = ("title", "description")


def compile_predicate(spec: FilterSpec) -> Predicate:
    """AND together every active dimension of *spec*."""
    predicate = (
        Predicate()
        .with_text_search(TEXT_SEARCH_FIELDS, spec.free_text)
        .with_membership("category", spec.categories)
        .with_membership("priority", spec.priorities)
        .with_membership("status", spec.statuses)
        .with_contains_all("tags", spec.tags)
    )

    if spec.date_range is not None:
        predicate = predicate.with_range(
            "created_at", spec.date_range.start, spec.date_range.end
        )

    if spec.geo is not None:
        predicate = predicate.with_geo_radius(
            GeoRadiusFilter.from_km(spec.geo.lat, spec.geo.lng, spec.geo.radius_km)
        )

    return predicate
