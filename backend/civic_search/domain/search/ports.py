"""Ports (abstract interfaces) for the issue search domain.

These define WHAT the domain needs from the outside world without
specifying HOW it's provided.  Concrete implementations live in infra/.

Note: No infrastructure types (Session, Engine) appear here.
Implementations receive their session/connection through the UnitOfWork,
not through method parameters.
"""

from __future__ import annotations

import abc
from datetime import datetime

from civic_search.domain.common.query import Predicate, SortSpec
from civic_search.domain.search.models import Issue, IssueUpdate, VoteType


# ---------------------------------------------------------------------------
# Read side
# ---------------------------------------------------------------------------


class IssueStore(abc.ABC):
    """Document collection queried by the search engine.

    Every method takes the same composite :class:`Predicate`; callers build
    it once and reuse it so totals, facets and pages agree.  Failures are
    raised as :class:`~civic_search.domain.common.errors.StoreQueryError`.
    """

    @abc.abstractmethod
    def query(self, predicate: Predicate) -> tuple[Issue, ...]:
        """Return every matching issue, oldest first."""
        ...

    @abc.abstractmethod
    def count(self, predicate: Predicate) -> int:
        ...

    @abc.abstractmethod
    def group_count(
        self,
        predicate: Predicate,
        field: str,
        *,
        multi_valued: bool = False,
    ) -> dict[str, int]:
        """Count matching issues per distinct value of *field*.

        With ``multi_valued=True`` the field holds a set of values and each
        issue counts once towards every value it carries.  Missing / null
        values are not reported.
        """
        ...

    @abc.abstractmethod
    def sorted_page(
        self,
        predicate: Predicate,
        sort: SortSpec,
        *,
        offset: int,
        limit: int,
    ) -> tuple[Issue, ...]:
        """Return one sorted window of matching issues."""
        ...


# ---------------------------------------------------------------------------
# Write side
# ---------------------------------------------------------------------------


class IssueRepository(abc.ABC):
    """Persist and retrieve individual issues."""

    @abc.abstractmethod
    def add(self, issue: Issue) -> Issue:
        ...

    @abc.abstractmethod
    def get(self, issue_id: str) -> Issue | None:
        ...

    @abc.abstractmethod
    def update(self, issue_id: str, changes: IssueUpdate, *, now: datetime) -> Issue:
        """Apply an enumerated set of field changes.

        Raises EntityNotFoundError when the issue does not exist.
        """
        ...

    @abc.abstractmethod
    def apply_vote(
        self, issue_id: str, user_id: str, vote_type: VoteType, *, now: datetime
    ) -> Issue:
        """Record *user_id*'s vote, moving it out of the opposite set.

        Raises EntityNotFoundError when the issue does not exist.
        """
        ...

    @abc.abstractmethod
    def add_comment(
        self, issue_id: str, user_id: str, content: str, *, now: datetime
    ) -> Issue:
        """Append a comment.  Raises EntityNotFoundError for unknown issues."""
        ...
