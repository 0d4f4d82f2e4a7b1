"""Unit of Work port.

A use case enters the unit of work, talks to the repositories it
exposes, and commits explicitly.  Leaving the block without committing
rolls back.
"""

from __future__ import annotations

import abc

from civic_search.domain.search.ports import IssueRepository, IssueStore


class UnitOfWork(abc.ABC):
    """Transactional boundary shared by the issue repository and store."""

    issues: IssueRepository
    issue_store: IssueStore

    @abc.abstractmethod
    def __enter__(self) -> UnitOfWork:
        ...

    @abc.abstractmethod
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    @abc.abstractmethod
    def commit(self) -> None:
        ...

    @abc.abstractmethod
    def rollback(self) -> None:
        ...
