"""Shared fixtures for SQL integration tests.

Every test gets a fresh in-memory SQLite database built through the
production engine factory, so the ``great_circle_radians`` SQL function
and pragmas are installed exactly as in the running service.
"""

from __future__ import annotations

import pytest

from civic_search.database import create_db_engine, init_db, make_session_factory
from civic_search.infra.db.uow import SqlUnitOfWork


@pytest.fixture
def engine():
    """Function-scoped in-memory SQLite engine with all tables created."""
    eng = create_db_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def sql_uow(session_factory) -> SqlUnitOfWork:
    return SqlUnitOfWork(session_factory)


@pytest.fixture
def seed(session_factory):
    """Insert domain issues through the repository and commit."""

    def _seed(issues):
        with SqlUnitOfWork(session_factory) as uow:
            for issue in issues:
                uow.issues.add(issue)
            uow.commit()

    return _seed
