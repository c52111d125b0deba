from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


# Returned by both register and login
class AuthResponse(BaseModel):
    id: int
    username: str
    email: str
    avatar: Optional[str] = None
    access_token: str
    token_type: str = "bearer"


class UserDetailsUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None
