"""
Service for Post business logic.

Handles all business operations related to posts.
"""

from typing import List, Optional
import logging

from services.base_service import BaseService
from repositories.post_repository import PostRepository
from repositories.user_repository import UserRepository
from database.models import PostORM
from models.posts import (
    Post,
    PostCreate,
    PostUpdate,
    TITLE_MAX_LENGTH,
    CONTENT_MAX_LENGTH,
)
from core.exceptions import ValidationException
from core.pagination import PageRequest
from utils.datetime_utils import get_utc_now, to_utc

logger = logging.getLogger(__name__)


class PostService(BaseService[PostORM, PostRepository]):
    """Service for managing post business logic."""

    def __init__(self, repository: PostRepository, user_repository: UserRepository):
        """
        Initialize post service.

        Args:
            repository: PostRepository instance
            user_repository: UserRepository instance (author lookups)
        """
        super().__init__(repository)
        self.user_repo = user_repository

    def to_wire(self, entity: PostORM) -> dict:
        return Post(
            id=entity.id,
            title=entity.title,
            content=entity.content,
            user_id=entity.user_id,
            user_name=entity.user.name,
            created_at=to_utc(entity.created_at),
            updated_at=to_utc(entity.updated_at),
        ).to_wire()

    def list_posts(self, page: PageRequest, user_id: Optional[int] = None) -> List[dict]:
        """
        Get a page of posts, newest first.

        Args:
            page: Normalized page request
            user_id: Optional author filter

        Returns:
            List of posts in wire format
        """
        posts = self.repository.list_page(
            skip=page.skip,
            limit=page.page_size,
            user_id=user_id
        )
        return [self.to_wire(post) for post in posts]

    def create_post(self, post_data: PostCreate) -> PostORM:
        """
        Create a new post.

        Args:
            post_data: Post creation data

        Returns:
            Created post ORM instance

        Raises:
            ValidationException: If fields are missing or the author does not exist
        """
        title = self.require_text(post_data.title, "title", TITLE_MAX_LENGTH)
        content = self.require_text(post_data.content, "content", CONTENT_MAX_LENGTH)

        if post_data.user_id is None or post_data.user_id <= 0:
            raise ValidationException(
                "El campo 'userId' es obligatorio y debe ser un entero positivo",
                field="userId",
            )

        # Verify user exists
        if not self.user_repo.exists(post_data.user_id):
            logger.warning(
                f"Attempted to create post with non-existent user {post_data.user_id}"
            )
            raise ValidationException(
                f"El usuario con ID {post_data.user_id} no existe",
                field="userId",
            )

        now = get_utc_now()
        post = PostORM(
            title=title,
            content=content,
            user_id=post_data.user_id,
            created_at=now,
            updated_at=now,
        )

        created = self.repository.create(post)
        self.repository.commit()

        logger.info(f"Created post {created.id} for user {post_data.user_id}")
        return created

    def update_post(
        self,
        post_id: int,
        post_update: PostUpdate,
        if_match: Optional[str] = None
    ) -> PostORM:
        """
        Update title and content of a post.

        Args:
            post_id: Post ID
            post_update: New title and content
            if_match: Optional If-Match header (validator precondition)

        Returns:
            Updated post

        Raises:
            ValidationException: If data is invalid
            NotFoundException: If post not found
            PreconditionFailedException: If If-Match does not match
        """
        title = self.require_text(post_update.title, "title", TITLE_MAX_LENGTH)
        content = self.require_text(post_update.content, "content", CONTENT_MAX_LENGTH)

        def apply(post: PostORM) -> PostORM:
            post.title = title
            post.content = content
            post.updated_at = get_utc_now()
            return self.repository.update(post)

        updated = self.write_current(post_id, if_match, apply)

        logger.info(f"Updated post {post_id}")
        return updated
