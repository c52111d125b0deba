from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Annotated, Literal, Optional, Union
from datetime import datetime


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None


# A reference to a user is either just the id or the expanded user.
# Clients switch on ``kind`` instead of guessing from the payload shape.

class UnresolvedUser(BaseModel):
    kind: Literal["unresolved"] = "unresolved"
    id: int


class ResolvedUser(BaseModel):
    kind: Literal["resolved"] = "resolved"
    id: int
    username: str
    avatar: Optional[str] = None


UserRef = Annotated[Union[UnresolvedUser, ResolvedUser], Field(discriminator="kind")]


def user_ref(user_id: int, user=None) -> UnresolvedUser | ResolvedUser:
    if user is None:
        return UnresolvedUser(id=user_id)
    return ResolvedUser(id=user.id, username=user.username, avatar=user.avatar)
