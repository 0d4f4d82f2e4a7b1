"""ORM row → domain object mapping shared by the issue store and repository."""

from __future__ import annotations

from civic_search.domain.search.models import Comment, Issue, Location, VoteType, Votes
from civic_search.models.issue import Issue as IssueRow


def issue_to_domain(row: IssueRow) -> Issue:
    location = None
    if row.lat is not None and row.lng is not None:
        location = Location(lat=row.lat, lng=row.lng, address=row.address or "")

    up = frozenset(v.user_id for v in row.votes if v.direction == VoteType.UP.value)
    down = frozenset(v.user_id for v in row.votes if v.direction == VoteType.DOWN.value)

    return Issue(
        id=row.id,
        title=row.title,
        description=row.description or "",
        category=row.category,
        priority=row.priority,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
        location=location,
        tags=frozenset(t.tag for t in row.tags),
        votes=Votes(up=up, down=down),
        comments=tuple(
            Comment(
                id=c.id,
                content=c.content,
                created_by=c.created_by,
                created_at=c.created_at,
                updated_at=c.updated_at,
            )
            for c in row.comments
        ),
        created_by=row.created_by,
    )
