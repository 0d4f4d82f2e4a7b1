"""
Issue search API endpoints.

GET and POST run the same search; the facets endpoint returns only the
facet counts for a filter.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ...domain.common.errors import StoreQueryError
from ...domain.search.filter_spec import FilterSpec
from ...domain.search.normalization import filter_spec_from_payload
from ...infra.db.uow import SqlUnitOfWork
from ...schemas.search import FacetsResponse, SearchRequest, SearchResponse
from ...use_cases.search.get_search_facets import (
    GetSearchFacetsQuery,
    GetSearchFacetsUseCase,
)
from ...use_cases.search.search_issues import SearchIssuesQuery, SearchIssuesUseCase
from ...wiring.bootstrap import (
    get_search_facets_use_case,
    get_search_issues_use_case,
    get_uow,
)
from .search_params import parse_search_filters

logger = logging.getLogger(__name__)
router = APIRouter()


async def _filter_spec_from_body(request: Request) -> FilterSpec:
    """Decode and shape-check a JSON search body.  Any failure is a 400."""
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    try:
        body = SearchRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid search request: {e.errors()}")

    return filter_spec_from_payload(body.to_payload())


def _run_search(
    uow: SqlUnitOfWork, use_case: SearchIssuesUseCase, spec: FilterSpec
) -> SearchResponse:
    try:
        result = use_case.execute(uow, SearchIssuesQuery(filter_spec=spec))
        return SearchResponse.from_domain(result.result)
    except StoreQueryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error searching issues: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error searching issues: {str(e)}")


@router.get("", response_model=SearchResponse)
async def search_issues(
    spec: FilterSpec = Depends(parse_search_filters),
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: SearchIssuesUseCase = Depends(get_search_issues_use_case),
):
    """
    Search issues by query string.

    Returns one page of matching issues, the total match count and facet
    counts over the whole match set.
    """
    return _run_search(uow, use_case, spec)


@router.post("", response_model=SearchResponse)
async def search_issues_post(
    request: Request,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: SearchIssuesUseCase = Depends(get_search_issues_use_case),
):
    """Search issues with the filter given as a JSON body."""
    spec = await _filter_spec_from_body(request)
    return _run_search(uow, use_case, spec)


@router.post("/facets", response_model=FacetsResponse)
async def get_search_facets(
    request: Request,
    uow: SqlUnitOfWork = Depends(get_uow),
    use_case: GetSearchFacetsUseCase = Depends(get_search_facets_use_case),
):
    """
    Facet counts only.

    Page and limit in the body are ignored.
    """
    spec = await _filter_spec_from_body(request)
    try:
        result = use_case.execute(uow, GetSearchFacetsQuery(filter_spec=spec))
    except StoreQueryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error getting search facets: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error getting search facets: {str(e)}")

    return FacetsResponse.from_domain(result.facets)
