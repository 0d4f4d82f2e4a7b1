"""GetIssueUseCase — fetch a single issue by id."""

from __future__ import annotations

from dataclasses import dataclass

from civic_search.domain.common.errors import EntityNotFoundError
from civic_search.domain.common.uow import UnitOfWork
from civic_search.domain.search.models import Issue


@dataclass(frozen=True)
class GetIssueQuery:
    issue_id: str


@dataclass(frozen=True)
class GetIssueResult:
    issue: Issue


class GetIssueUseCase:
    def execute(self, uow: UnitOfWork, query: GetIssueQuery) -> GetIssueResult:
        with uow:
            issue = uow.issues.get(query.issue_id)
            if issue is None:
                raise EntityNotFoundError("Issue", query.issue_id)
        return GetIssueResult(issue=issue)
