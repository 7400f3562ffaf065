from .posts import Post, PostCreate, PostUpdate
from .users import User, UserCreate, UserUpdate
from .common import (
    ErrorResponse,
    HealthCheckResponse,
    create_error_response,
)

__all__ = [
    # Posts
    "Post", "PostCreate", "PostUpdate",
    # Users
    "User", "UserCreate", "UserUpdate",
    # Common responses
    "ErrorResponse", "HealthCheckResponse", "create_error_response",
]
