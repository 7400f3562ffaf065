"""
Service for User business logic.

Handles all business operations related to users.
"""

from typing import List, Optional
import logging

from email_validator import validate_email, EmailNotValidError

from services.base_service import BaseService
from repositories.user_repository import UserRepository
from database.models import UserORM
from models.users import (
    User,
    UserCreate,
    UserUpdate,
    NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
)
from core.exceptions import ValidationException
from core.pagination import PageRequest

logger = logging.getLogger(__name__)


class UserService(BaseService[UserORM, UserRepository]):
    """Service for managing user business logic."""

    def __init__(self, repository: UserRepository):
        """
        Initialize user service.

        Args:
            repository: UserRepository instance
        """
        super().__init__(repository)

    def to_wire(self, entity: UserORM) -> dict:
        return User.model_validate(entity).to_wire()

    def list_users(self, page: PageRequest) -> List[dict]:
        """
        Get a page of users ordered by id.

        Args:
            page: Normalized page request

        Returns:
            List of users in wire format
        """
        users = self.repository.list_page(skip=page.skip, limit=page.page_size)
        return [self.to_wire(user) for user in users]

    def create_user(self, user_data: UserCreate) -> UserORM:
        """
        Create a new user.

        Args:
            user_data: User creation data

        Returns:
            Created user ORM instance (with its row version)

        Raises:
            ValidationException: If name/email are missing or invalid
        """
        name, email = self._validate_fields(user_data.name, user_data.email)

        created = self.repository.create(UserORM(name=name, email=email))
        self.repository.commit()

        logger.info(f"Created user {created.id}")
        return created

    def update_user(
        self,
        user_id: int,
        user_update: UserUpdate,
        if_match: Optional[str] = None
    ) -> UserORM:
        """
        Update a user in place.

        Args:
            user_id: User ID
            user_update: New name and email
            if_match: Optional If-Match header (validator precondition)

        Returns:
            Updated user

        Raises:
            ValidationException: If data is invalid
            NotFoundException: If user not found
            PreconditionFailedException: If If-Match does not match
        """
        name, email = self._validate_fields(user_update.name, user_update.email)

        def apply(user: UserORM) -> UserORM:
            user.name = name
            user.email = email
            return self.repository.update(user)

        updated = self.write_current(user_id, if_match, apply)

        logger.info(f"Updated user {user_id}")
        return updated

    def before_delete(self, entity: UserORM) -> None:
        # posts.user_id es ON DELETE RESTRICT
        if self.repository.has_posts(entity.id):
            raise ValidationException(
                f"El usuario {entity.id} tiene posts y no puede eliminarse",
                field="id",
            )

    def _validate_fields(self, name: Optional[str], email: Optional[str]) -> tuple[str, str]:
        name = self.require_text(name, "name", NAME_MAX_LENGTH)
        email = self.require_text(email, "email", EMAIL_MAX_LENGTH)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationException(
                f"El campo 'email' no es una dirección válida: {e}",
                field="email",
            )
        return name, email
