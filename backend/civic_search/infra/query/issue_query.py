"""SQLAlchemy query builder for issue search.

Translates a domain Predicate / SortSpec into SQLAlchemy WHERE and
ORDER BY clauses over the ``issues`` table.  Tag containment and tag
facets go through the ``issue_tags`` association table.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, asc, case, desc, distinct, func, select
from sqlalchemy.orm import Query, aliased

from civic_search.domain.common.query import (
    ContainsAllFilter,
    GeoRadiusFilter,
    MembershipFilter,
    Predicate,
    RangeFilter,
    SortOrder,
    SortSpec,
    TextSearchFilter,
)
from civic_search.domain.search.geo import ANGLE_TOLERANCE_RADIANS
from civic_search.domain.search.models import PRIORITY_ORDER, UNKNOWN_PRIORITY_RANK
from civic_search.domain.search.text import fold_text
from civic_search.models.issue import Issue, IssueTag

# ── Column resolution ───────────────────────────────────────────────────

# Ordinal of the priority column; unknown values sort below "low".
_PRIORITY_RANK = case(PRIORITY_ORDER, value=Issue.priority, else_=UNKNOWN_PRIORITY_RANK)

# Maps domain filter/sort field names to Issue column expressions.
_COLUMN_MAP: dict[str, Any] = {
    "id": Issue.id,
    "title": Issue.title,
    "description": Issue.description,
    "category": Issue.category,
    "priority": Issue.priority,
    "status": Issue.status,
    "created_at": Issue.created_at,
    "updated_at": Issue.updated_at,
    "vote_count": Issue.vote_count,
    "priority_rank": _PRIORITY_RANK,
}

# Fields whose text is folded into Issue.search_text.
_TEXT_FIELDS = frozenset({"title", "description"})

# Multi-valued fields stored in association tables.
_MULTI_VALUED = {"tags": IssueTag}


class UnknownFieldError(KeyError):
    """A predicate or sort referenced a field the issue table doesn't have."""


def _column(field: str) -> Any:
    col = _COLUMN_MAP.get(field)
    if col is None:
        raise UnknownFieldError(field)
    return col


# ── Public API ──────────────────────────────────────────────────────────


def apply_predicate(query: Query, predicate: Predicate) -> Query:
    """Apply every Predicate clause as an AND-ed SQLAlchemy WHERE clause."""
    for ts in predicate.text_searches:
        query = _apply_text_search(query, ts)
    for mf in predicate.membership_filters:
        query = _apply_membership_filter(query, mf)
    for cf in predicate.containment_filters:
        query = _apply_containment_filter(query, cf)
    for rf in predicate.range_filters:
        query = _apply_range_filter(query, rf)
    for gf in predicate.geo_filters:
        query = _apply_geo_filter(query, gf)
    return query


def apply_sort(query: Query, sort: SortSpec) -> Query:
    """ORDER BY the primary sort key, then the tie-break key if any."""
    order_fn = asc if sort.order == SortOrder.ASC else desc
    query = query.order_by(order_fn(_column(sort.field)))
    if sort.tie_break is not None:
        tie_fn = asc if sort.tie_break.order == SortOrder.ASC else desc
        query = query.order_by(tie_fn(_column(sort.tie_break.field)))
    return query


def group_count_query(session, predicate: Predicate, field: str, multi_valued: bool) -> Query:
    """Build ``SELECT value, COUNT(*) ... GROUP BY value`` for one facet field."""
    if multi_valued:
        table = _MULTI_VALUED.get(field)
        if table is None:
            raise UnknownFieldError(field)
        matching_ids = apply_predicate(session.query(Issue.id), predicate).subquery()
        return (
            session.query(table.tag, func.count(table.issue_id))
            .filter(table.issue_id.in_(select(matching_ids.c.id)))
            .group_by(table.tag)
        )

    col = _column(field)
    q = session.query(col, func.count(Issue.id)).filter(col.isnot(None))
    return apply_predicate(q, predicate).group_by(col)


# ── Private helpers ─────────────────────────────────────────────────────


def _apply_text_search(query: Query, ts: TextSearchFilter) -> Query:
    """Substring match on the folded search_text column."""
    unknown = set(ts.fields) - _TEXT_FIELDS
    if unknown:
        raise UnknownFieldError(", ".join(sorted(unknown)))
    pattern = fold_text(ts.pattern)
    if not pattern:
        return query
    return query.filter(Issue.search_text.contains(pattern, autoescape=True))


def _apply_membership_filter(query: Query, mf: MembershipFilter) -> Query:
    return query.filter(_column(mf.field).in_(mf.values))


def _apply_containment_filter(query: Query, cf: ContainsAllFilter) -> Query:
    """Issue must carry every tag: count of matching tag rows == len(values)."""
    table = _MULTI_VALUED.get(cf.field)
    if table is None:
        raise UnknownFieldError(cf.field)
    # Aliased so the subquery never auto-correlates with an outer issue_tags.
    tag_row = aliased(table)
    holders = (
        select(tag_row.issue_id)
        .where(tag_row.tag.in_(cf.values))
        .group_by(tag_row.issue_id)
        .having(func.count(distinct(tag_row.tag)) == len(cf.values))
    )
    return query.filter(Issue.id.in_(holders))


def _apply_range_filter(query: Query, rf: RangeFilter) -> Query:
    """Inclusive range on a SQL column."""
    col = _column(rf.field)
    if rf.min_value is not None:
        query = query.filter(col >= rf.min_value)
    if rf.max_value is not None:
        query = query.filter(col <= rf.max_value)
    return query


def _apply_geo_filter(query: Query, gf: GeoRadiusFilter) -> Query:
    """Central angle to the center must not exceed the cap radius."""
    angle = func.great_circle_radians(Issue.lat, Issue.lng, gf.lat, gf.lng)
    return query.filter(
        and_(
            Issue.lat.isnot(None),
            Issue.lng.isnot(None),
            angle <= gf.radius_radians + ANGLE_TOLERANCE_RADIANS,
        )
    )
