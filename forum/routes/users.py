from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from forum.core.limiter import api_limit
from forum.db.session import get_db
from forum.core.exceptions import Forbidden, NotFound
from forum.models.user import User
from forum.schemas.user_schema import UserResponse, UserUpdate
from forum.services.auth import apply_profile_changes, get_current_user
from forum.services.posts import list_user_comments

router = APIRouter(tags=["users"])

# Get user profile by id

@router.get("/users/{user_id}")
@api_limit
async def get_user(request: Request, user_id: int, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return {"success": True, "data": UserResponse.model_validate(user)}

# Update own profile

@router.put("/users/{user_id}")
@api_limit
async def update_user(request: Request, user_id: int, profile_data: UserUpdate, db: Session = Depends(get_db),
                      current_user: User = Depends(get_current_user)):
    if current_user.id != user_id:
        raise Forbidden("Not authorized to update this user")
    user = apply_profile_changes(db, current_user, profile_data.model_dump(exclude_unset=True))
    return {"success": True, "data": UserResponse.model_validate(user)}

# Comments a user wrote, across every post

@router.get("/comments/user/{user_id}")
@api_limit
async def get_user_comments(request: Request, user_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": list_user_comments(db, user_id)}
