from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from forum.schemas.auth_schema import UserCreate, UserLogin, AuthResponse, UserDetailsUpdate
from forum.schemas.user_schema import UserResponse
from forum.services.auth import register_user, login_user, get_current_user, update_details
from forum.models.user import User
from forum.core.limiter import auth_limit
from forum.db.session import get_db

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@auth_limit
def register(request: Request, user: UserCreate, db: Session = Depends(get_db)):
    return register_user(user, db)


@router.post("/login", response_model=AuthResponse)
@auth_limit
def login(request: Request, user: UserLogin, db: Session = Depends(get_db)):
    return login_user(user, db)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/updatedetails")
def update_my_details(details: UserDetailsUpdate, db: Session = Depends(get_db),
                      current_user: User = Depends(get_current_user)):
    user = update_details(current_user, details, db)
    return {"success": True, "data": UserResponse.model_validate(user)}
