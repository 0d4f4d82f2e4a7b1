"""Pydantic schemas for single-issue endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain.search.models import VoteType


class VoteRequest(BaseModel):
    """Body of ``POST /issues/{issue_id}/vote``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(..., min_length=1, description="Voting user")
    vote_type: VoteType = Field(..., description="up or down")
