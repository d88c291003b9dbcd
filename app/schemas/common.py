"""
Common/Shared Pydantic schemas
"""
from pydantic import BaseModel, Field, ConfigDict, AliasChoices
from typing import Optional


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    current_page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class LikeRequest(BaseModel):
    """Identifier of whoever is liking: user id or anonymous client id"""
    user_id: Optional[str] = Field(
        None,
        max_length=200,
        validation_alias=AliasChoices("user_id", "userId"),
        description="User identifier"
    )


# Config for all schemas
ORMConfig = ConfigDict(from_attributes=True)
