"""SQLAlchemy Unit of Work — concrete implementation of the domain UoW port.

Wraps a SQLAlchemy Session and exposes the issue repository and issue
store on that same session, so a search reads total, facets and page
through one connection.
"""

from __future__ import annotations

from typing import Self

from sqlalchemy.orm import Session, sessionmaker

from civic_search.domain.common.uow import UnitOfWork
from civic_search.infra.db.repositories.issue_repo import SqlIssueRepository
from civic_search.infra.db.repositories.issue_store import SqlIssueStore


class SqlUnitOfWork(UnitOfWork):
    """Transactional boundary backed by a SQLAlchemy Session."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def __enter__(self) -> Self:
        self.session: Session = self._session_factory()
        self.issues = SqlIssueRepository(self.session)
        self.issue_store = SqlIssueStore(self.session)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            self.rollback()
        self.session.close()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
