from .base_service import BaseService, ConditionalRead
from .user_service import UserService
from .post_service import PostService

__all__ = [
    "BaseService",
    "ConditionalRead",
    "UserService",
    "PostService",
]
