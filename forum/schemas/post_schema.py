from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Optional
from forum.schemas.user_schema import ResolvedUser, UserRef
from forum.schemas.category_schema import CategorySummary


class PostBase(BaseModel):
    title: str = Field(..., max_length=100)
    content: str


class PostCreate(PostBase):
    category_id: int


class PostUpdate(PostBase):
    title: str | None = Field(None, max_length=100)
    content: str | None = None
    category_id: int | None = None


class VoteRequest(BaseModel):
    # Validated by the vote ledger so a bad value is a 400, not a 422
    vote_type: Any = Field(None, alias="voteType")

    model_config = ConfigDict(populate_by_name=True)


class CommentCreate(BaseModel):
    content: str


class ResponseComment(BaseModel):
    id: int
    post_id: int
    author: UserRef
    content: str
    created_at: datetime | None


class ResponseUserComment(ResponseComment):
    post_title: str


class ResponsePost(PostBase):
    id: int
    author: ResolvedUser
    category: Optional[CategorySummary]
    upvoters: list[int]
    downvoters: list[int]
    likers: list[int]
    score: int
    comments: list[ResponseComment]
    created_at: datetime | None
    updated_at: datetime | None
