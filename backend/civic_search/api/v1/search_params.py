"""Reusable FastAPI dependency for search query-string parsing.

Numeric and date parameters are taken as raw strings so malformed values
reach the lenient normaliser instead of failing FastAPI's own validation.
List parameters accept repeated keys (``?tags=a&tags=b``) as well as
comma-separated values (``?tags=a,b``).
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import Query

from civic_search.domain.search.filter_spec import FilterSpec
from civic_search.domain.search.normalization import build_filter_spec


def parse_search_filters(
    query: Optional[str] = Query(None, description="Free-text search over title and description"),
    categories: Optional[List[str]] = Query(None, description="Category filter"),
    priorities: Optional[List[str]] = Query(None, description="Priority filter"),
    statuses: Optional[List[str]] = Query(None, description="Status filter"),
    tags: Optional[List[str]] = Query(None, description="Issue must carry every tag"),
    start_date: Optional[str] = Query(None, alias="startDate", description="ISO-8601 lower bound"),
    end_date: Optional[str] = Query(None, alias="endDate", description="ISO-8601 upper bound"),
    lat: Optional[str] = Query(None, description="Geo center latitude"),
    lng: Optional[str] = Query(None, description="Geo center longitude"),
    radius: Optional[str] = Query(None, description="Geo radius in kilometres"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="date, votes or priority"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    limit: Optional[str] = Query(None, description="Page size (1-100)"),
) -> FilterSpec:
    """Build a FilterSpec from search query parameters."""
    return build_filter_spec(
        query=query,
        categories=categories,
        priorities=priorities,
        statuses=statuses,
        tags=tags,
        start_date=start_date,
        end_date=end_date,
        lat=lat,
        lng=lng,
        radius=radius,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
