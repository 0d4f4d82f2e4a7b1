"""Domain models for the issue search bounded context.

Pure value objects and enums that represent issues, votes and search
results independently of any infrastructure (ORM, HTTP).
All dataclasses use frozen=True for immutability.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class VoteType(str, Enum):
    UP = "up"
    DOWN = "down"


class FacetDimension(str, Enum):
    """Dimensions reported in the ``facets`` object of a search response."""

    CATEGORIES = "categories"
    PRIORITIES = "priorities"
    STATUSES = "statuses"
    TAGS = "tags"


# Ordinal used by the priority sort.  Unknown priorities rank below LOW.
PRIORITY_ORDER: dict[str, int] = {
    IssuePriority.LOW.value: 0,
    IssuePriority.MEDIUM.value: 1,
    IssuePriority.HIGH.value: 2,
    IssuePriority.CRITICAL.value: 3,
}
UNKNOWN_PRIORITY_RANK = -1


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    address: str = ""


@dataclass(frozen=True)
class Votes:
    """Up and down voters for one issue.

    A user id never appears in both sets; :meth:`cast` moves a voter
    between them instead of adding a second entry.
    """

    up: frozenset[str] = frozenset()
    down: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        both = self.up & self.down
        if both:
            raise ValueError(f"users cannot vote both ways: {sorted(both)}")

    @property
    def net(self) -> int:
        return len(self.up) - len(self.down)

    def cast(self, user_id: str, vote_type: VoteType) -> Votes:
        if vote_type == VoteType.UP:
            return Votes(up=self.up | {user_id}, down=self.down - {user_id})
        return Votes(up=self.up - {user_id}, down=self.down | {user_id})


@dataclass(frozen=True)
class Comment:
    id: str
    content: str
    created_by: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Issue:
    """A citizen-reported issue as the search engine sees it."""

    id: str
    title: str
    description: str
    category: str | None
    priority: str | None
    status: str | None
    created_at: datetime
    updated_at: datetime
    location: Location | None = None
    tags: frozenset[str] = frozenset()
    votes: Votes = field(default_factory=Votes)
    comments: tuple[Comment, ...] = ()
    created_by: str | None = None

    @property
    def vote_count(self) -> int:
        return self.votes.net


@dataclass(frozen=True)
class IssueUpdate:
    """The complete set of fields an update may touch.

    ``None`` means "leave unchanged".  Anything not listed here cannot be
    written through the update path.
    """

    title: str | None = None
    description: str | None = None
    category: str | None = None
    priority: str | None = None
    status: str | None = None
    tags: frozenset[str] | None = None
    location: Location | None = None

    def changed_fields(self) -> dict[str, object]:
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("category", self.category),
                ("priority", self.priority),
                ("status", self.status),
                ("tags", self.tags),
                ("location", self.location),
            )
            if value is not None
        }


@dataclass(frozen=True)
class FacetCounts:
    """Value → count maps for each facet dimension.

    Every map is always present; an empty match yields four empty maps.
    """

    categories: dict[str, int] = field(default_factory=dict)
    priorities: dict[str, int] = field(default_factory=dict)
    statuses: dict[str, int] = field(default_factory=dict)
    tags: dict[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> FacetCounts:
        return cls()

    def for_dimension(self, dimension: FacetDimension) -> dict[str, int]:
        return getattr(self, dimension.value)

    def as_dict(self) -> dict[str, dict[str, int]]:
        return {dim.value: dict(self.for_dimension(dim)) for dim in FacetDimension}


@dataclass(frozen=True)
class SearchResult:
    """One page of matching issues plus total and facets.

    ``total`` counts every match regardless of page/limit.
    """

    issues: tuple[Issue, ...]
    total: int
    facets: FacetCounts
    page: int
    limit: int


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "IssuePriority",
    "VoteType",
    "FacetDimension",
    "PRIORITY_ORDER",
    "UNKNOWN_PRIORITY_RANK",
    "Location",
    "Votes",
    "Comment",
    "Issue",
    "IssueUpdate",
    "FacetCounts",
    "SearchResult",
]
