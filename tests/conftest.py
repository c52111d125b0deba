import os

# Settings are read at import time, so point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

import forum.models  # noqa: F401
from forum.core.limiter import limiter
from forum.core.security import create_access_token, hash_password
from forum.db.session import Base, SessionLocal, engine
from forum.main import app
from forum.models.category import Category
from forum.models.post import Post
from forum.models.user import User

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    limiter.reset()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    def _make(username: str, role: str = "user") -> User:
        user = User(username=username, email=f"{username}@example.com",
                    password=hash_password(PASSWORD), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def category(db):
    cat = Category(name="General Discussion", description="Anything goes")
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


@pytest.fixture
def make_post(db, category):
    def _make(author: User, title: str = "Hello", content: str = "First post", **extra) -> Post:
        post = Post(title=title, content=content, category_id=category.id,
                    user_id=author.id, **extra)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def password():
    return PASSWORD
