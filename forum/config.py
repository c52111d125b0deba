from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    APP_NAME: str = "Forum"
    SECRET_KEY: str = "your_secret_key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    DATABASE_URL: str = "sqlite:///./forum.db"
    LOG_LEVEL: str = "INFO"

    # Posts older than this drop out of the trending listing
    TRENDING_WINDOW_DAYS: int = 7
    SEED_CATEGORIES: bool = True

    # Per-IP request limits (slowapi syntax, e.g. "10 per hour")
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_API: str = "500 per 15 minutes"
    RATE_LIMIT_AUTH: str = "10 per hour"
    RATE_LIMIT_CREATE_POST: str = "10 per hour"

    # CORS: default allow local frontend on port 3000 (can be overridden via .env)
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"  # Load environment variables from the .env file


settings = Settings()
