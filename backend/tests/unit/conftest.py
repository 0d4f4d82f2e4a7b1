"""Shared test fakes and fixtures for issue search unit tests.

Consolidates all in-memory fake implementations of domain ports.
Each fake stores real data and evaluates predicates against it —
verifying actual behavior, not just "was method X called?".

Other test files can import these fakes directly::

    from tests.unit.conftest import FakeIssueStore, FakeUnitOfWork, make_issue
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

import pytest

from civic_search.domain.common.errors import EntityNotFoundError, StoreQueryError
from civic_search.domain.common.query import Predicate, SortOrder, SortSpec
from civic_search.domain.common.uow import UnitOfWork
from civic_search.domain.search.geo import ANGLE_TOLERANCE_RADIANS, great_circle_radians
from civic_search.domain.search.models import (
    PRIORITY_ORDER,
    UNKNOWN_PRIORITY_RANK,
    Comment,
    Issue,
    IssuePriority,
    IssueUpdate,
    Location,
    Votes,
    VoteType,
)
from civic_search.domain.search.ports import IssueRepository, IssueStore
from civic_search.domain.search.text import fold_text, searchable_text

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_issue(
    issue_id: str | None = None,
    *,
    title: str = "Pothole on Main Street",
    description: str = "",
    category: str | None = "infrastructure",
    priority: str | None = IssuePriority.MEDIUM.value,
    status: str | None = "pending",
    tags: set[str] | frozenset[str] = frozenset(),
    location: Location | None = None,
    up: set[str] | frozenset[str] = frozenset(),
    down: set[str] | frozenset[str] = frozenset(),
    created_at: datetime | None = None,
    comments: tuple[Comment, ...] = (),
) -> Issue:
    created = created_at or BASE_TIME
    return Issue(
        id=issue_id or str(uuid.uuid4()),
        title=title,
        description=description,
        category=category,
        priority=priority,
        status=status,
        created_at=created,
        updated_at=created,
        location=location,
        tags=frozenset(tags),
        votes=Votes(up=frozenset(up), down=frozenset(down)),
        comments=comments,
    )


def make_issues_by_day(count: int, **kwargs) -> list[Issue]:
    """*count* issues created one day apart starting at BASE_TIME."""
    return [
        make_issue(f"issue-{i:03d}", created_at=BASE_TIME + timedelta(days=i), **kwargs)
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# In-memory predicate evaluation
# ---------------------------------------------------------------------------


def within_cap(
    center_lat: float,
    center_lng: float,
    radius_radians: float,
    lat: float | None,
    lng: float | None,
) -> bool:
    """Same inclusive cap test the SQL store applies with great_circle_radians."""
    angle = great_circle_radians(center_lat, center_lng, lat, lng)
    if angle is None:
        return False
    return angle <= radius_radians + ANGLE_TOLERANCE_RADIANS


def _field_value(issue: Issue, field: str):
    if field == "vote_count":
        return issue.vote_count
    if field == "priority_rank":
        return PRIORITY_ORDER.get(issue.priority, UNKNOWN_PRIORITY_RANK)
    return getattr(issue, field)


def matches(issue: Issue, predicate: Predicate) -> bool:
    """Python rendition of the store's predicate semantics."""
    for ts in predicate.text_searches:
        haystack = searchable_text(*(getattr(issue, f) for f in ts.fields))
        if fold_text(ts.pattern) not in haystack:
            return False
    for mf in predicate.membership_filters:
        if _field_value(issue, mf.field) not in mf.values:
            return False
    for cf in predicate.containment_filters:
        if not set(cf.values) <= set(_field_value(issue, cf.field)):
            return False
    for rf in predicate.range_filters:
        value = _field_value(issue, rf.field)
        if rf.min_value is not None and value < rf.min_value:
            return False
        if rf.max_value is not None and value > rf.max_value:
            return False
    for gf in predicate.geo_filters:
        if issue.location is None:
            return False
        if not within_cap(
            gf.lat, gf.lng, gf.radius_radians, issue.location.lat, issue.location.lng
        ):
            return False
    return True


# ---------------------------------------------------------------------------
# Fake ports
# ---------------------------------------------------------------------------


class FakeIssueStore(IssueStore):
    """Evaluates predicates in memory and records every predicate it sees."""

    def __init__(self, issues: list[Issue] | None = None, *, fail: bool = False):
        self.issues: list[Issue] = list(issues or [])
        self.fail = fail
        self.seen_predicates: list[Predicate] = []
        self.page_requests: list[tuple[SortSpec, int, int]] = []
        self.group_count_calls = 0

    def _filter(self, predicate: Predicate) -> list[Issue]:
        self.seen_predicates.append(predicate)
        if self.fail:
            raise StoreQueryError("store unavailable")
        return [i for i in self.issues if matches(i, predicate)]

    def query(self, predicate):
        return tuple(sorted(self._filter(predicate), key=lambda i: i.created_at))

    def count(self, predicate):
        return len(self._filter(predicate))

    def group_count(self, predicate, field, *, multi_valued=False):
        self.group_count_calls += 1
        counts: dict[str, int] = {}
        for issue in self._filter(predicate):
            values = _field_value(issue, field)
            for value in (values if multi_valued else [values]):
                if value is None:
                    continue
                counts[value] = counts.get(value, 0) + 1
        return counts

    def sorted_page(self, predicate, sort, *, offset, limit):
        self.page_requests.append((sort, offset, limit))
        rows = self._filter(predicate)
        # Stable sorts: secondary key first, then primary.
        if sort.tie_break is not None:
            rows.sort(
                key=lambda i: _field_value(i, sort.tie_break.field),
                reverse=sort.tie_break.order == SortOrder.DESC,
            )
        rows.sort(
            key=lambda i: _field_value(i, sort.field),
            reverse=sort.order == SortOrder.DESC,
        )
        return tuple(rows[offset:offset + limit])


class FakeIssueRepository(IssueRepository):
    def __init__(self, issues: list[Issue] | None = None):
        self.rows: dict[str, Issue] = {i.id: i for i in (issues or [])}

    def add(self, issue):
        self.rows[issue.id] = issue
        return issue

    def get(self, issue_id):
        return self.rows.get(issue_id)

    def _load(self, issue_id) -> Issue:
        issue = self.rows.get(issue_id)
        if issue is None:
            raise EntityNotFoundError("Issue", issue_id)
        return issue

    def update(self, issue_id, changes: IssueUpdate, *, now):
        issue = self._load(issue_id)
        fields = dict(changes.changed_fields())
        if "tags" in fields:
            fields["tags"] = frozenset(fields["tags"])
        updated = Issue(**{**issue.__dict__, **fields, "updated_at": now})
        self.rows[issue_id] = updated
        return updated

    def apply_vote(self, issue_id, user_id, vote_type: VoteType, *, now):
        issue = self._load(issue_id)
        updated = Issue(
            **{**issue.__dict__, "votes": issue.votes.cast(user_id, vote_type), "updated_at": now}
        )
        self.rows[issue_id] = updated
        return updated

    def add_comment(self, issue_id, user_id, content, *, now):
        issue = self._load(issue_id)
        comment = Comment(
            id=str(uuid.uuid4()),
            content=content,
            created_by=user_id,
            created_at=now,
            updated_at=now,
        )
        updated = Issue(
            **{**issue.__dict__, "comments": issue.comments + (comment,), "updated_at": now}
        )
        self.rows[issue_id] = updated
        return updated


class FakeUnitOfWork(UnitOfWork):
    def __init__(
        self,
        issues: list[Issue] | None = None,
        *,
        store: FakeIssueStore | None = None,
    ):
        self.issue_store = store or FakeIssueStore(issues)
        self.issues = FakeIssueRepository(issues)
        self.committed = 0
        self.rolled_back = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, *args):
        if exc_type:
            self.rollback()

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_issues() -> list[Issue]:
    """A small mixed corpus used by several use-case tests."""
    return [
        make_issue(
            "a",
            title="Broken streetlight",
            category="infrastructure",
            priority="high",
            status="pending",
            tags={"lighting", "safety"},
            up={"u1", "u2"},
            created_at=BASE_TIME,
        ),
        make_issue(
            "b",
            title="Clinic closed",
            category="healthcare",
            priority="critical",
            status="active",
            tags={"safety"},
            up={"u1"},
            down={"u3"},
            created_at=BASE_TIME + timedelta(days=1),
        ),
        make_issue(
            "c",
            title="Unsafe crossing",
            category="security",
            priority="low",
            status="active",
            tags={"safety", "traffic"},
            up={"u1", "u2", "u3"},
            created_at=BASE_TIME + timedelta(days=2),
        ),
        make_issue(
            "d",
            title="Library hours",
            category="education",
            priority="medium",
            status="resolved",
            created_at=BASE_TIME + timedelta(days=3),
        ),
    ]


@pytest.fixture
def uow(sample_issues) -> FakeUnitOfWork:
    return FakeUnitOfWork(sample_issues)
