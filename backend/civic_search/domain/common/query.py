"""Predicate, sort, and pagination specifications for domain queries.

These types express query intent in domain terms, independent of
any persistence mechanism.  Adapters translate them into SQL WHERE
clauses, in-memory predicates, or whatever the infra layer requires.

A :class:`Predicate` is the logical AND of every clause it holds.  It is
frozen so that one instance can be handed to the page fetch, the total
count and every facet count without any of them drifting apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from civic_search.domain.search.geo import km_to_radians


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ---------------------------------------------------------------------------
# Individual Clause Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextSearchFilter:
    """Case- and diacritic-insensitive substring search over text fields."""

    fields: tuple[str, ...]
    pattern: str

    def is_empty(self) -> bool:
        return not self.pattern


@dataclass(frozen=True)
class MembershipFilter:
    """Field value must be one of ``values`` (OR within the dimension)."""

    field: str
    values: tuple[str, ...]  # tuple for hashability

    def is_empty(self) -> bool:
        return len(self.values) == 0


@dataclass(frozen=True)
class ContainsAllFilter:
    """Multi-valued field must hold every one of ``values`` (superset test)."""

    field: str
    values: tuple[str, ...]

    def is_empty(self) -> bool:
        return len(self.values) == 0


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive range constraint on a single field; either bound may be open."""

    field: str
    min_value: datetime | float | int | None = None
    max_value: datetime | float | int | None = None

    def is_empty(self) -> bool:
        return self.min_value is None and self.max_value is None


@dataclass(frozen=True)
class GeoRadiusFilter:
    """Spherical cap around ``(lat, lng)``.

    ``radius_radians`` is the angular radius of the cap.  Build it with
    :meth:`from_km` so the kilometre conversion happens in one place.
    """

    lat: float
    lng: float
    radius_radians: float

    @classmethod
    def from_km(cls, lat: float, lng: float, radius_km: float) -> GeoRadiusFilter:
        return cls(lat=lat, lng=lng, radius_radians=km_to_radians(radius_km))

    def is_empty(self) -> bool:
        return False


# ---------------------------------------------------------------------------
# Composite Specifications
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Predicate:
    """Holds all active clauses; matching means satisfying every one.

    Builder methods return a *new* predicate and silently skip empty /
    None values so callers don't need guard clauses.
    """

    text_searches: tuple[TextSearchFilter, ...] = ()
    membership_filters: tuple[MembershipFilter, ...] = ()
    containment_filters: tuple[ContainsAllFilter, ...] = ()
    range_filters: tuple[RangeFilter, ...] = ()
    geo_filters: tuple[GeoRadiusFilter, ...] = ()

    # -- Builder helpers ---------------------------------------------------

    def with_text_search(self, fields: tuple[str, ...], pattern: str) -> Predicate:
        if not pattern:
            return self
        clause = TextSearchFilter(fields=tuple(fields), pattern=pattern)
        return replace(self, text_searches=self.text_searches + (clause,))

    def with_membership(self, field_name: str, values) -> Predicate:
        vals = tuple(sorted(values))
        if not vals:
            return self
        clause = MembershipFilter(field=field_name, values=vals)
        return replace(self, membership_filters=self.membership_filters + (clause,))

    def with_contains_all(self, field_name: str, values) -> Predicate:
        vals = tuple(sorted(values))
        if not vals:
            return self
        clause = ContainsAllFilter(field=field_name, values=vals)
        return replace(self, containment_filters=self.containment_filters + (clause,))

    def with_range(
        self,
        field_name: str,
        min_value: datetime | float | int | None = None,
        max_value: datetime | float | int | None = None,
    ) -> Predicate:
        if min_value is None and max_value is None:
            return self
        clause = RangeFilter(field=field_name, min_value=min_value, max_value=max_value)
        return replace(self, range_filters=self.range_filters + (clause,))

    def with_geo_radius(self, clause: GeoRadiusFilter | None) -> Predicate:
        if clause is None:
            return self
        return replace(self, geo_filters=self.geo_filters + (clause,))

    def is_empty(self) -> bool:
        return not (
            self.text_searches
            or self.membership_filters
            or self.containment_filters
            or self.range_filters
            or self.geo_filters
        )


@dataclass(frozen=True)
class TieBreak:
    """Secondary sort key used when the primary key has duplicates."""

    field: str
    order: SortOrder = SortOrder.DESC


@dataclass(frozen=True)
class SortSpec:
    """Sort directive for query results."""

    field: str = "created_at"
    order: SortOrder = SortOrder.ASC
    tie_break: TieBreak | None = None


@dataclass(frozen=True)
class PageSpec:
    """Pagination parameters with validation."""

    page: int = 1
    per_page: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if not (1 <= self.per_page <= 100):
            raise ValueError(f"per_page must be 1-100, got {self.per_page}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "SortOrder",
    "TextSearchFilter",
    "MembershipFilter",
    "ContainsAllFilter",
    "RangeFilter",
    "GeoRadiusFilter",
    "Predicate",
    "TieBreak",
    "SortSpec",
    "PageSpec",
]
