"""
Dependency injection for services, repositories and shared components.

This module provides FastAPI dependencies for injecting services into route
handlers. The database session is created per request by `get_db` and handed
explicitly to the repositories; the output cache and the rate limiter are the
only process-wide objects.
"""

from typing import Callable, Optional, Sequence
from sqlalchemy.orm import Session
from fastapi import Depends, Request

from config import settings
from core.output_cache import OutputCache
from core.rate_limit import FixedWindowRateLimiter
from database.db import get_db
from repositories.post_repository import PostRepository
from repositories.user_repository import UserRepository
from services.post_service import PostService
from services.user_service import UserService


# ==================== Shared Components ====================

_output_cache: Optional[OutputCache] = None
_rate_limiter: Optional[FixedWindowRateLimiter] = None


def get_output_cache() -> OutputCache:
    """
    Get the process-wide OutputCache instance.

    Returns:
        OutputCache configured from settings (TTL and size)
    """
    global _output_cache
    if _output_cache is None:
        _output_cache = OutputCache(
            ttl=settings.output_cache_ttl_seconds,
            maxsize=settings.output_cache_max_entries,
        )
    return _output_cache


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Get the process-wide rate limiter (fixed window of one minute)."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = FixedWindowRateLimiter(
            permit_limit=settings.rate_limit_per_minute,
            window_seconds=60,
        )
    return _rate_limiter


def enforce_rate_limit(request: Request, limiter: FixedWindowRateLimiter) -> None:
    """
    Counts the request against its client.

    Raises:
        RateLimitExceededException: When the client exceeded its window
    """
    client_id = request.client.host if request.client else "anonymous"
    limiter.hit(client_id)


def rate_limit_guard(cache_vary_by: Optional[Sequence[str]] = None) -> Callable[..., None]:
    """
    Build the rate-limit dependency of one route.

    Requests that the output cache will answer are not counted, so cached
    responses are never throttled.

    Args:
        cache_vary_by: Vary-by parameters of a cached GET route, or None
    """
    def guard(
        request: Request,
        limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
        cache: OutputCache = Depends(get_output_cache),
    ) -> None:
        if cache_vary_by is not None and cache.contains(request, cache_vary_by):
            return
        enforce_rate_limit(request, limiter)

    return guard


# ==================== Service Dependencies ====================

def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """
    Get UserService instance bound to the request session.

    Example:
        ```python
        def listar_users(service: UserService = Depends(get_user_service)):
            return service.list_users(...)
        ```
    """
    return UserService(UserRepository(db))


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    """
    Get PostService instance bound to the request session.

    Both repositories share the same session, so the author check and the
    insert run in the same transaction.
    """
    return PostService(PostRepository(db), UserRepository(db))
