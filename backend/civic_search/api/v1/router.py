"""Aggregate router for the v1 API."""
from fastapi import APIRouter

from . import issues, search

router = APIRouter()
router.include_router(search.router, prefix="/search", tags=["search"])
router.include_router(issues.router, prefix="/issues", tags=["issues"])
