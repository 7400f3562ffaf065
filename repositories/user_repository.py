"""
Repositorio para la entidad User.
Gestiona todas las operaciones de base de datos relacionadas con los usuarios.
"""

from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from repositories.base_repository import BaseRepository
from database.models import UserORM, PostORM
from core.exceptions import DatabaseException
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[UserORM]):
    """Repositorio para la gestión de entidades de usuario."""

    resource_name = "Usuario"

    def __init__(self, db: Session):
        """
        Inicializa el repositorio de usuarios.

        Args:
            db: SQLAlchemy session
        """
        super().__init__(db, UserORM)

    def list_page(self, skip: int = 0, limit: int = 20) -> List[UserORM]:
        """
        Obtiene una página de usuarios ordenados por ID ascendente.

        Args:
            skip: Número de registros a omitir
            limit: Número máximo de registros a devolver

        Returns:
            Lista de usuarios
        """
        return self.get_all(skip=skip, limit=limit, order_by="id", order_desc=False)

    def has_posts(self, user_id: int) -> bool:
        """
        Verifica si el usuario es autor de algún post.

        Args:
            user_id: ID del usuario

        Returns:
            True si existe al menos un post del usuario
        """
        try:
            return self.db.query(PostORM.id).filter(
                PostORM.user_id == user_id
            ).first() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking posts of user {user_id}: {e}")
            raise DatabaseException("Error al verificar los posts del usuario")
