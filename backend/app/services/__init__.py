"""Services package."""
from app.services.rate_limiter import RateLimiter
from app.services.session_store import SessionStore

__all__ = [
    "RateLimiter",
    "SessionStore",
]
