"""
Single-issue API endpoints.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ...domain.common.errors import EntityNotFoundError, ValidationError as DomainValidationError
from ...infra.db.uow import SqlUnitOfWork
from ...schemas.issue import VoteRequest
from ...schemas.search import IssueResponse
from ...use_cases.issues.get_issue import GetIssueQuery, GetIssueUseCase
from ...use_cases.issues.vote_on_issue import VoteOnIssueCommand, VoteOnIssueUseCase
from ...wiring.bootstrap import get_get_issue_use_case, get_uow, get_vote_on_issue_use_case

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: str,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: GetIssueUseCase = Depends(get_get_issue_use_case),
):
    """Get one issue with its tags, votes and comments."""
    try:
        result = use_case.execute(uow, GetIssueQuery(issue_id=issue_id))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error getting issue {issue_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error getting issue: {str(e)}")

    return IssueResponse.from_domain(result.issue)


@router.post("/{issue_id}/vote", response_model=IssueResponse)
async def vote_on_issue(
    issue_id: str,
    request: VoteRequest,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: VoteOnIssueUseCase = Depends(get_vote_on_issue_use_case),
):
    """
    Cast an up or down vote.

    A second vote from the same user replaces the first.
    """
    cmd = VoteOnIssueCommand(
        issue_id=issue_id, user_id=request.user_id, vote_type=request.vote_type
    )
    try:
        result = use_case.execute(uow, cmd)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DomainValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error voting on issue {issue_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error voting on issue: {str(e)}")

    return IssueResponse.from_domain(result.issue)
