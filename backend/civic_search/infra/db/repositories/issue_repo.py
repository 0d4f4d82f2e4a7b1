"""SQLAlchemy implementation of IssueRepository."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from civic_search.domain.common.errors import EntityNotFoundError
from civic_search.domain.search.models import Issue, IssueUpdate, VoteType
from civic_search.domain.search.ports import IssueRepository
from civic_search.domain.search.text import searchable_text
from civic_search.infra.db.mappers import issue_to_domain
from civic_search.models.issue import Issue as IssueRow
from civic_search.models.issue import IssueComment, IssueTag, IssueVote

logger = logging.getLogger(__name__)


class SqlIssueRepository(IssueRepository):
    """Persist and retrieve Issue rows via SQLAlchemy."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, issue: Issue) -> Issue:
        row = IssueRow(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            search_text=searchable_text(issue.title, issue.description),
            category=issue.category,
            priority=issue.priority,
            status=issue.status,
            lat=issue.location.lat if issue.location else None,
            lng=issue.location.lng if issue.location else None,
            address=issue.location.address if issue.location else None,
            vote_count=issue.votes.net,
            created_by=issue.created_by,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )
        row.tags = [IssueTag(tag=t) for t in sorted(issue.tags)]
        row.votes = [
            IssueVote(user_id=u, direction=VoteType.UP.value, created_at=issue.created_at)
            for u in sorted(issue.votes.up)
        ] + [
            IssueVote(user_id=u, direction=VoteType.DOWN.value, created_at=issue.created_at)
            for u in sorted(issue.votes.down)
        ]
        row.comments = [
            IssueComment(
                id=c.id,
                content=c.content,
                created_by=c.created_by,
                created_at=c.created_at,
                updated_at=c.updated_at,
            )
            for c in issue.comments
        ]
        self._session.add(row)
        self._session.flush()
        return issue_to_domain(row)

    def get(self, issue_id: str) -> Issue | None:
        row = self._session.get(IssueRow, issue_id)
        return issue_to_domain(row) if row is not None else None

    def update(self, issue_id: str, changes: IssueUpdate, *, now: datetime) -> Issue:
        row = self._load(issue_id)
        fields = changes.changed_fields()

        for name in ("title", "description", "category", "priority", "status"):
            if name in fields:
                setattr(row, name, fields[name])
        if "title" in fields or "description" in fields:
            row.search_text = searchable_text(row.title, row.description)

        if "location" in fields:
            location = fields["location"]
            row.lat, row.lng, row.address = location.lat, location.lng, location.address

        if "tags" in fields:
            wanted = set(fields["tags"])
            # Diff instead of replace so unchanged tag rows are left alone.
            row.tags = [t for t in row.tags if t.tag in wanted]
            present = {t.tag for t in row.tags}
            row.tags.extend(IssueTag(tag=t) for t in sorted(wanted - present))

        row.updated_at = now
        self._session.flush()
        logger.debug("Issue %s updated fields=%s", issue_id, sorted(fields))
        return issue_to_domain(row)

    def apply_vote(
        self, issue_id: str, user_id: str, vote_type: VoteType, *, now: datetime
    ) -> Issue:
        row = self._load(issue_id)

        # One row per (issue, user): flipping a vote rewrites its direction,
        # so the user can never sit in both the up and the down set.
        existing = next((v for v in row.votes if v.user_id == user_id), None)
        if existing is None:
            row.votes.append(
                IssueVote(user_id=user_id, direction=vote_type.value, created_at=now)
            )
        elif existing.direction != vote_type.value:
            existing.direction = vote_type.value
            existing.created_at = now

        row.vote_count = _net_votes(row.votes)
        row.updated_at = now
        self._session.flush()
        return issue_to_domain(row)

    def add_comment(
        self, issue_id: str, user_id: str, content: str, *, now: datetime
    ) -> Issue:
        row = self._load(issue_id)
        row.comments.append(
            IssueComment(
                id=str(uuid.uuid4()),
                content=content,
                created_by=user_id,
                created_at=now,
                updated_at=now,
            )
        )
        row.updated_at = now
        self._session.flush()
        return issue_to_domain(row)

    # ── Helpers ─────────────────────────────────────────────────────────

    def _load(self, issue_id: str) -> IssueRow:
        row = self._session.get(IssueRow, issue_id)
        if row is None:
            raise EntityNotFoundError("Issue", issue_id)
        return row


def _net_votes(votes: list[IssueVote]) -> int:
    up = sum(1 for v in votes if v.direction == VoteType.UP.value)
    down = sum(1 for v in votes if v.direction == VoteType.DOWN.value)
    return up - down
