"""VoteOnIssueUseCase — record an up or down vote.

A user holds at most one vote per issue.  Voting the other way moves the
user across; voting the same way again is a no-op apart from the
``updated_at`` bump.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from civic_search.domain.common.errors import ValidationError
from civic_search.domain.common.uow import UnitOfWork
from civic_search.domain.search.models import Issue, VoteType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Naive UTC, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class VoteOnIssueCommand:
    issue_id: str
    user_id: str
    vote_type: VoteType


@dataclass(frozen=True)
class VoteOnIssueResult:
    issue: Issue


class VoteOnIssueUseCase:
    """Apply one vote and commit."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock

    def execute(self, uow: UnitOfWork, cmd: VoteOnIssueCommand) -> VoteOnIssueResult:
        if not cmd.user_id.strip():
            raise ValidationError("userId must not be blank")

        with uow:
            issue = uow.issues.apply_vote(
                cmd.issue_id, cmd.user_id, cmd.vote_type, now=self._clock()
            )
            uow.commit()

        logger.info(
            "User %s voted %s on issue %s (net=%d)",
            cmd.user_id,
            cmd.vote_type.value,
            cmd.issue_id,
            issue.vote_count,
        )
        return VoteOnIssueResult(issue=issue)
