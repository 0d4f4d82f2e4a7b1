"""Turn raw, possibly malformed client input into a :class:`FilterSpec`.

Robustness over strictness: unparsable numbers, unknown sort keys and
unreadable dates fall back to defaults instead of raising.  This is a
deliberate policy for the public search surface; structural problems
(a body that is not an object, a list field holding objects) are
rejected earlier, at the API schema.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timezone
from typing import Any

from dateutil.parser import isoparse, isoparser

from civic_search.domain.common.query import SortOrder
from civic_search.domain.search.filter_spec import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    DateRange,
    FilterSpec,
    GeoFilter,
    SortField,
)

logger = logging.getLogger(__name__)

_ISO_PARSER = isoparser()
# YYYYMMDD, YYYY-MM-DD
_CALENDAR_DATE_LENGTHS = (8, 10)


# ---------------------------------------------------------------------------
# Scalar parsing
# ---------------------------------------------------------------------------


def _parse_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


def _parse_float(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def parse_page(raw: Any) -> int:
    """Page number; anything non-positive or unparsable becomes 1."""
    page = _parse_int(raw)
    if page is None or page < 1:
        if raw not in (None, ""):
            logger.debug("page %r normalised to %d", raw, DEFAULT_PAGE)
        return DEFAULT_PAGE
    return page


def parse_limit(raw: Any) -> int:
    """Page size; anything outside 1-100 or unparsable becomes 10."""
    limit = _parse_int(raw)
    if limit is None or not (1 <= limit <= MAX_LIMIT):
        if raw not in (None, ""):
            logger.debug("limit %r normalised to %d", raw, DEFAULT_LIMIT)
        return DEFAULT_LIMIT
    return limit


def parse_geo(lat: Any, lng: Any, radius: Any) -> GeoFilter | None:
    """All three parts must be present and valid, otherwise no geo filter."""
    lat_f = _parse_float(lat)
    lng_f = _parse_float(lng)
    radius_f = _parse_float(radius)
    if lat_f is None or lng_f is None or radius_f is None:
        if any(v not in (None, "") for v in (lat, lng, radius)):
            logger.debug(
                "Ignoring partial geo filter lat=%r lng=%r radius=%r", lat, lng, radius
            )
        return None
    if not (-90.0 <= lat_f <= 90.0) or not (-180.0 <= lng_f <= 180.0) or radius_f < 0:
        logger.debug(
            "Ignoring out-of-range geo filter lat=%r lng=%r radius=%r", lat, lng, radius
        )
        return None
    return GeoFilter(lat=lat_f, lng=lng_f, radius_km=radius_f)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_date_bound(raw: Any, *, end_of_day: bool = False) -> datetime | None:
    """Parse an ISO-8601 date or datetime.

    A bare date covers the whole day: midnight for a start bound, the last
    microsecond of the day for an end bound.  Unreadable input is dropped.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return _to_naive_utc(raw)
    if isinstance(raw, date):
        return datetime.combine(raw, time.max if end_of_day else time.min)
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    # A calendar date without a time part is a whole-day bound. Month or
    # year precision (2024-03, 2024) names no single day and is dropped.
    try:
        day = _ISO_PARSER.parse_isodate(text)
    except (ValueError, OverflowError):
        day = None
    if day is not None:
        if len(text) not in _CALENDAR_DATE_LENGTHS:
            logger.debug("Ignoring reduced-precision date bound %r", raw)
            return None
        return datetime.combine(day, time.max if end_of_day else time.min)
    try:
        parsed = isoparse(text)
    except (ValueError, OverflowError):
        logger.debug("Ignoring unparsable date bound %r", raw)
        return None
    return _to_naive_utc(parsed)


def parse_string_set(raw: Any) -> frozenset[str]:
    """Accept a list of values or a comma-separated string; drop blanks."""
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items: Iterable[Any] = [raw]
    elif isinstance(raw, Iterable):
        items = raw
    else:
        items = [raw]
    values: set[str] = set()
    for item in items:
        if item is None:
            continue
        for part in str(item).split(","):
            part = part.strip()
            if part:
                values.add(part)
    return frozenset(values)


def parse_sort_by(raw: Any) -> SortField:
    if isinstance(raw, str):
        try:
            return SortField(raw.strip().lower())
        except ValueError:
            pass
    return SortField.DATE


def parse_sort_order(raw: Any) -> SortOrder:
    if isinstance(raw, str) and raw.strip().lower() == SortOrder.DESC.value:
        return SortOrder.DESC
    return SortOrder.ASC


# ---------------------------------------------------------------------------
# FilterSpec construction
# ---------------------------------------------------------------------------


def build_filter_spec(
    *,
    query: Any = None,
    categories: Any = None,
    priorities: Any = None,
    statuses: Any = None,
    tags: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    lat: Any = None,
    lng: Any = None,
    radius: Any = None,
    sort_by: Any = None,
    sort_order: Any = None,
    page: Any = None,
    limit: Any = None,
) -> FilterSpec:
    """Build a FilterSpec from raw field values.  Never raises on bad numbers."""
    free_text = query.strip() if isinstance(query, str) else ""

    start = parse_date_bound(start_date)
    end = parse_date_bound(end_date, end_of_day=True)
    date_range = DateRange(start=start, end=end) if start or end else None

    return FilterSpec(
        free_text=free_text,
        categories=parse_string_set(categories),
        priorities=parse_string_set(priorities),
        statuses=parse_string_set(statuses),
        tags=parse_string_set(tags),
        date_range=date_range,
        geo=parse_geo(lat, lng, radius),
        sort_by=parse_sort_by(sort_by),
        sort_order=parse_sort_order(sort_order),
        page=parse_page(page),
        limit=parse_limit(limit),
    )


def filter_spec_from_payload(payload: Mapping[str, Any]) -> FilterSpec:
    """Build a FilterSpec from a decoded JSON body (camelCase keys).

    Geo fields may be given flat (``lat``/``lng``/``radius``) or nested
    under ``location``; flat keys win when both are present.
    """
    location = payload.get("location")
    if not isinstance(location, Mapping):
        location = {}

    def _geo(key: str) -> Any:
        value = payload.get(key)
        return value if value is not None else location.get(key)

    return build_filter_spec(
        query=payload.get("query"),
        categories=payload.get("categories"),
        priorities=payload.get("priorities"),
        statuses=payload.get("statuses"),
        tags=payload.get("tags"),
        start_date=payload.get("startDate"),
        end_date=payload.get("endDate"),
        lat=_geo("lat"),
        lng=_geo("lng"),
        radius=_geo("radius"),
        sort_by=payload.get("sortBy"),
        sort_order=payload.get("sortOrder"),
        page=payload.get("page"),
        limit=payload.get("limit"),
    )
