import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from forum.routes import auth, categories, post, realtime, users
from forum.config import settings
from forum.core.limiter import limiter
from forum.db.session import Base, SessionLocal, engine
from forum.services.broadcast import ConnectionRegistry
from forum.services.categories import seed_categories
import forum.models  # <- ensure all model modules are imported and mappers registered

logging.basicConfig(level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    if settings.SEED_CATEGORIES:
        db = SessionLocal()
        try:
            seed_categories(db)
        finally:
            db.close()

    app.state.registry = ConnectionRegistry()
    logging.info(f"{settings.APP_NAME} API started")
    yield
    await app.state.registry.close()
    logging.info(f"{settings.APP_NAME} API stopped")


app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

# Per-IP rate limits, answered with 429 once exceeded
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Use configured origins (reads from forum.config.settings)
origins = settings.ALLOWED_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(categories.router)
app.include_router(post.router)
app.include_router(users.router)
app.include_router(realtime.router)


@app.get("/")
async def read_root():
    return {"message": f"{settings.APP_NAME} API is running"}


@app.get("/health")
async def health():
    return {"status": "ok"}
