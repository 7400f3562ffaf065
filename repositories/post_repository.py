"""
Repositorio para la entidad Post.
Gestiona todas las operaciones de base de datos relacionadas con los posts.
"""

from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError

from repositories.base_repository import BaseRepository
from database.models import PostORM
from core.exceptions import DatabaseException
import logging

logger = logging.getLogger(__name__)


class PostRepository(BaseRepository[PostORM]):
    """Repositorio para la entidad Post."""

    resource_name = "Post"

    def __init__(self, db: Session):
        """
        Inicializa el repositorio de posts.

        Args:
            db: SQLAlchemy session
        """
        super().__init__(db, PostORM)

    def get_by_id(self, id: int) -> Optional[PostORM]:
        """
        Obtiene un post junto con su autor.

        El cuerpo de la respuesta y el token de versión salen de esta misma lectura.
        """
        try:
            return self.db.get(PostORM, id, options=[joinedload(PostORM.user)])
        except SQLAlchemyError as e:
            logger.error(f"Error getting post by id {id}: {e}")
            raise DatabaseException("Error al obtener Post")

    def list_page(
        self,
        skip: int = 0,
        limit: int = 20,
        user_id: Optional[int] = None
    ) -> List[PostORM]:
        """
        Obtiene una página de posts, los más recientes primero.

        Args:
            skip: Número de registros a omitir
            limit: Número máximo de registros a devolver
            user_id: Filtro opcional por autor

        Returns:
            Lista de posts con el autor cargado
        """
        try:
            query = self.db.query(PostORM).options(joinedload(PostORM.user))

            if user_id is not None:
                query = query.filter(PostORM.user_id == user_id)

            # Order by: creación descendente, ID como desempate estable
            query = query.order_by(PostORM.created_at.desc(), PostORM.id.desc())

            return query.offset(skip).limit(limit).all()
        except SQLAlchemyError as e:
            logger.error(f"Error listing posts (user_id={user_id}): {e}")
            raise DatabaseException("Error al listar posts")
