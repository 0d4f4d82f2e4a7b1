"""Unit tests for GetIssueUseCase and VoteOnIssueUseCase."""

from __future__ import annotations

from datetime import datetime

import pytest

from civic_search.domain.common.errors import EntityNotFoundError, ValidationError
from civic_search.domain.search.models import VoteType
from civic_search.use_cases.issues.get_issue import GetIssueQuery, GetIssueUseCase
from civic_search.use_cases.issues.vote_on_issue import (
    VoteOnIssueCommand,
    VoteOnIssueUseCase,
)

NOW = datetime(2024, 6, 1, 9, 0, 0)


def _vote(uow, issue_id, user_id, vote_type):
    use_case = VoteOnIssueUseCase(clock=lambda: NOW)
    return use_case.execute(
        uow, VoteOnIssueCommand(issue_id=issue_id, user_id=user_id, vote_type=vote_type)
    ).issue


class TestGetIssue:
    def test_found(self, uow):
        result = GetIssueUseCase().execute(uow, GetIssueQuery(issue_id="a"))
        assert result.issue.title == "Broken streetlight"

    def test_missing(self, uow):
        with pytest.raises(EntityNotFoundError):
            GetIssueUseCase().execute(uow, GetIssueQuery(issue_id="nope"))


class TestVoteOnIssue:
    def test_up_vote_commits(self, uow):
        issue = _vote(uow, "d", "u9", VoteType.UP)
        assert issue.votes.up == {"u9"}
        assert issue.vote_count == 1
        assert issue.updated_at == NOW
        assert uow.committed == 1

    def test_flip_keeps_sets_disjoint(self, uow):
        # "b" starts with u1 up, u3 down
        issue = _vote(uow, "b", "u3", VoteType.UP)
        assert issue.votes.up == {"u1", "u3"}
        assert issue.votes.down == frozenset()
        issue = _vote(uow, "b", "u1", VoteType.DOWN)
        assert issue.votes.up == {"u3"}
        assert issue.votes.down == {"u1"}
        assert issue.vote_count == 0

    def test_unknown_issue(self, uow):
        with pytest.raises(EntityNotFoundError):
            _vote(uow, "nope", "u1", VoteType.UP)
        assert uow.committed == 0
        assert uow.rolled_back == 1

    def test_blank_user_rejected(self, uow):
        with pytest.raises(ValidationError):
            _vote(uow, "a", "  ", VoteType.UP)
