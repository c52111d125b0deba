from slowapi import Limiter
from slowapi.util import get_remote_address
from forum.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# One budget per client shared by every post, comment and profile route
api_limit = limiter.shared_limit(
    settings.RATE_LIMIT_API, scope="api",
    error_message="Too many requests from this IP, please try again later")

auth_limit = limiter.shared_limit(
    settings.RATE_LIMIT_AUTH, scope="auth",
    error_message="Too many login attempts from this IP, please try again after an hour")

create_post_limit = limiter.limit(
    settings.RATE_LIMIT_CREATE_POST,
    error_message="Too many posts created from this IP, please try again after an hour")
