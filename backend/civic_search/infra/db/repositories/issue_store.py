"""SQLAlchemy implementation of the IssueStore port."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from civic_search.domain.common.errors import StoreQueryError
from civic_search.domain.common.query import Predicate, SortSpec
from civic_search.domain.search.models import Issue
from civic_search.domain.search.ports import IssueStore
from civic_search.infra.db.mappers import issue_to_domain
from civic_search.infra.query.issue_query import (
    UnknownFieldError,
    apply_predicate,
    apply_sort,
    group_count_query,
)
from civic_search.models.issue import Issue as IssueRow

logger = logging.getLogger(__name__)


class SqlIssueStore(IssueStore):
    """Run search predicates against the ``issues`` table.

    All four operations share the unit of work's session.  SQLite does not
    pin a read snapshot across separate SELECTs, so under concurrent
    writes total, facets and page can disagree slightly.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def query(self, predicate: Predicate) -> tuple[Issue, ...]:
        try:
            q = apply_predicate(self._session.query(IssueRow), predicate)
            rows = q.order_by(IssueRow.created_at.asc()).all()
        except (SQLAlchemyError, UnknownFieldError) as e:
            raise self._wrap("query", e) from e
        return tuple(issue_to_domain(r) for r in rows)

    def count(self, predicate: Predicate) -> int:
        try:
            q = apply_predicate(self._session.query(func.count(IssueRow.id)), predicate)
            return q.scalar() or 0
        except (SQLAlchemyError, UnknownFieldError) as e:
            raise self._wrap("count", e) from e

    def group_count(
        self,
        predicate: Predicate,
        field: str,
        *,
        multi_valued: bool = False,
    ) -> dict[str, int]:
        try:
            rows = group_count_query(self._session, predicate, field, multi_valued).all()
        except (SQLAlchemyError, UnknownFieldError) as e:
            raise self._wrap(f"group_count({field})", e) from e
        return {value: count for value, count in rows if value is not None}

    def sorted_page(
        self,
        predicate: Predicate,
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> tuple[Issue, ...]:
        try:
            q = apply_predicate(self._session.query(IssueRow), predicate)
            q = apply_sort(q, sort).offset(offset).limit(limit)
            rows = q.all()
        except (SQLAlchemyError, UnknownFieldError) as e:
            raise self._wrap("sorted_page", e) from e
        return tuple(issue_to_domain(r) for r in rows)

    @staticmethod
    def _wrap(operation: str, exc: Exception) -> StoreQueryError:
        logger.error("Issue store %s failed: %s", operation, exc, exc_info=True)
        return StoreQueryError(f"Issue store {operation} failed: {exc}")
