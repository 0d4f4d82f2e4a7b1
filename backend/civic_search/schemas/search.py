"""Pydantic schemas for the search API endpoints.

Request models only check the *shape* of a JSON body.  Values inside
that shape (page, limit, geo numbers, sort keys, dates) are normalised
leniently afterwards, so numeric fields accept any scalar here.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Self, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain.search.models import FacetCounts, Issue, SearchResult

Scalar = Union[str, int, float, None]
StringList = Union[str, List[str], None]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class GeoPoint(_CamelModel):
    """Nested alternative to the flat ``lat``/``lng``/``radius`` fields."""

    lat: Scalar = None
    lng: Scalar = None
    radius: Scalar = None


class SearchRequest(_CamelModel):
    """JSON body accepted by ``POST /search`` and ``POST /search/facets``."""

    query: Optional[str] = Field(default=None, description="Free-text search")
    categories: StringList = None
    priorities: StringList = None
    statuses: StringList = None
    tags: StringList = Field(default=None, description="Issue must carry all tags")
    start_date: Optional[str] = Field(default=None, description="ISO-8601 lower bound")
    end_date: Optional[str] = Field(default=None, description="ISO-8601 upper bound")
    lat: Scalar = None
    lng: Scalar = None
    radius: Scalar = Field(default=None, description="Radius in kilometres")
    location: Optional[GeoPoint] = None
    sort_by: Optional[str] = Field(default=None, description="date, votes or priority")
    sort_order: Optional[str] = Field(default=None, description="asc or desc")
    page: Scalar = None
    limit: Scalar = None

    def to_payload(self) -> dict[str, Any]:
        """camelCase dict in the form the FilterSpec normaliser reads."""
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class LocationResponse(_CamelModel):
    lat: float
    lng: float
    address: str = ""


class VotesResponse(_CamelModel):
    up: List[str]
    down: List[str]


class CommentResponse(_CamelModel):
    id: str
    content: str
    created_by: str
    created_at: datetime
    updated_at: datetime


class IssueResponse(_CamelModel):
    id: str
    title: str
    description: str
    category: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    location: Optional[LocationResponse] = None
    tags: List[str]
    votes: VotesResponse
    vote_count: int
    comments: List[CommentResponse]
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, issue: Issue) -> Self:
        """Map a domain Issue to the HTTP response model."""
        location = None
        if issue.location is not None:
            location = LocationResponse(
                lat=issue.location.lat,
                lng=issue.location.lng,
                address=issue.location.address,
            )
        return cls(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            category=issue.category,
            priority=issue.priority,
            status=issue.status,
            location=location,
            tags=sorted(issue.tags),
            votes=VotesResponse(up=sorted(issue.votes.up), down=sorted(issue.votes.down)),
            vote_count=issue.vote_count,
            comments=[
                CommentResponse(
                    id=c.id,
                    content=c.content,
                    created_by=c.created_by,
                    created_at=c.created_at,
                    updated_at=c.updated_at,
                )
                for c in issue.comments
            ],
            created_by=issue.created_by,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )


class FacetsResponse(_CamelModel):
    """Value → count per dimension.  Always all four keys."""

    categories: Dict[str, int] = Field(default_factory=dict)
    priorities: Dict[str, int] = Field(default_factory=dict)
    statuses: Dict[str, int] = Field(default_factory=dict)
    tags: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, facets: FacetCounts) -> Self:
        return cls(**facets.as_dict())


class SearchResponse(_CamelModel):
    issues: List[IssueResponse]
    total: int
    facets: FacetsResponse

    @classmethod
    def from_domain(cls, result: SearchResult) -> Self:
        return cls(
            issues=[IssueResponse.from_domain(i) for i in result.issues],
            total=result.total,
            facets=FacetsResponse.from_domain(result.facets),
        )
