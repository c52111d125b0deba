from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session
from forum.schemas.auth_schema import UserCreate, UserLogin, AuthResponse, UserDetailsUpdate
from forum.models.user import User
from forum.core.security import hash_password, verify_password, create_access_token, decode_access_token
from forum.core.exceptions import AdminRequired, InvalidArgument, Unauthorized
from forum.db.session import get_db
import logging

# Missing credentials are reported by get_current_user, not by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token({"sub": str(user.id)})
    return AuthResponse(id=user.id, username=user.username, email=user.email,
                        avatar=user.avatar, access_token=token)


def register_user(user: UserCreate, db: Session) -> AuthResponse:
    logging.debug(f"Registering user: {user.username} <{user.email}>")
    # Check if the email or username already exists
    existing_user = db.query(User).filter(
        (User.email == user.email) | (User.username == user.username)).first()
    if existing_user:
        if existing_user.email == user.email:
            raise InvalidArgument("Email already exists")
        raise InvalidArgument("Username already exists")

    # Hash the password and create a new user
    new_user = User(email=user.email, username=user.username,
                    password=hash_password(user.password))
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logging.info(f"Registered user {new_user.id} ({new_user.username})")
    return _auth_response(new_user)


def login_user(user: UserLogin, db: Session) -> AuthResponse:
    logging.debug(f"Logging in user: {user.email}")
    db_user = db.query(User).filter(User.email == user.email).first()
    if not db_user or not verify_password(user.password, db_user.password):
        raise Unauthorized("Invalid credentials")
    return _auth_response(db_user)


def user_from_token(token: str, db: Session) -> User:
    """Resolve a bearer token to its user or raise Unauthorized."""
    if not isinstance(token, str):
        raise Unauthorized("Not authorized, invalid token")
    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise Unauthorized("Not authorized, token expired")
    except JWTError:
        raise Unauthorized("Not authorized, invalid token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Not authorized, invalid token")

    user = db.get(User, user_id)
    if not user:
        logging.debug(f"User not found for token: {user_id}")
        raise Unauthorized("Not authorized, user not found")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not credentials or not credentials.credentials:
        raise Unauthorized("Not authorized, no token")
    return user_from_token(credentials.credentials, db)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise AdminRequired()
    return current_user


def ensure_unique_identity(db: Session, user: User, username: str | None, email: str | None):
    """Reject a username or email that another account already uses."""
    if email and email != user.email:
        if db.query(User).filter(User.email == email).first():
            raise InvalidArgument("Email already in use")
    if username and username != user.username:
        if db.query(User).filter(User.username == username).first():
            raise InvalidArgument("Username already in use")


def apply_profile_changes(db: Session, user: User, changes: dict) -> User:
    """Write the given profile fields to ``user``.

    A field sent as null is left unchanged; an empty string clears optional
    fields such as the avatar or bio.
    """
    changes = {key: value for key, value in changes.items() if value is not None}
    ensure_unique_identity(db, user, changes.get("username"), changes.get("email"))
    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    logging.info(f"Updated profile fields {sorted(changes)} for user {user.id}")
    return user


def update_details(user: User, details: UserDetailsUpdate, db: Session) -> User:
    return apply_profile_changes(db, user, details.model_dump(exclude_unset=True))
