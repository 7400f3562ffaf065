"""
Repositorio base con operaciones CRUD comunes:
Este repositorio genérico proporciona operaciones de base de datos estándar
que se pueden reutilizar en todos los repositorios de entidades
"""

from typing import TypeVar, Generic, List, Optional, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy import desc, asc
import logging

from core.exceptions import NotFoundException, DatabaseException, PreconditionFailedException

logger = logging.getLogger(__name__)

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """
    Repositorio genérico proporciona operaciones CRUD estándar

    Esta clase debe ser heredada por repositorios de entidades específicos.
    """

    # Nombre del recurso usado en los mensajes de error
    resource_name: str = "Registro"

    def __init__(self, db: Session, model_class: Type[T]):
        """
        Inicializa el repositorio.

        Args:
            db: Sesión SQLAlchemy de la petición en curso
            model_class: Clase del modelo ORM para este repositorio
        """
        self.db = db
        self.model_class = model_class

    def get_by_id(self, id: int) -> Optional[T]:
        """
        Obtiene una entidad por su ID.

        Args:
            id: ID de la entidad

        Returns:
            The entity or None if not found
        """
        try:
            return self.db.get(self.model_class, id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model_class.__name__} by id {id}: {e}")
            raise DatabaseException(f"Error al obtener {self.resource_name}")

    def get_by_id_or_fail(self, id: int) -> T:
        """
        Obtiene una entidad por su ID o lanza una excepción si no se encuentra.

        Args:
            id: ID de la entidad

        Returns:
            The entity

        Raises:
            NotFoundException: If entity is not found
        """
        entity = self.get_by_id(id)
        if entity is None:
            raise NotFoundException(
                resource=self.resource_name,
                identifier=id
            )
        return entity

    def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        order_by: Optional[str] = None,
        order_desc: bool = False
    ) -> List[T]:
        """
        Obtiene todas las entidades con paginación.

        Args:
            skip: Número de registros a saltar
            limit: Número máximo de registros a devolver
            order_by: Field name to order by
            order_desc: Whether to order descending

        Returns:
            List of entities
        """
        try:
            query = self.db.query(self.model_class)

            # Apply ordering
            if order_by and hasattr(self.model_class, order_by):
                order_field = getattr(self.model_class, order_by)
                if order_desc:
                    query = query.order_by(desc(order_field))
                else:
                    query = query.order_by(asc(order_field))

            return query.offset(skip).limit(limit).all()
        except SQLAlchemyError as e:
            logger.error(f"Error getting all {self.model_class.__name__}: {e}")
            raise DatabaseException(f"Error al listar {self.resource_name}")

    def create(self, entity: T) -> T:
        """
        Crea una nueva entidad.

        El token de versión lo asigna el default de la columna al hacer flush.

        Args:
            entity: La entidad a crear

        Returns:
            The created entity
        """
        try:
            self.db.add(entity)
            self.db.flush()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model_class.__name__}: {e}")
            self.db.rollback()
            raise DatabaseException(f"Error al crear {self.resource_name}")

    def update(self, entity: T) -> T:
        """
        Actualiza una entidad existente.

        Args:
            entity: La entidad a actualizar (ya modificada en memoria)

        El UPDATE solo afecta a la fila si su versión sigue siendo la leída.

        Returns:
            The updated entity

        Raises:
            PreconditionFailedException: Si otra escritura cambió la fila antes
            DatabaseException: Para cualquier otro error de base de datos
        """
        try:
            self.db.add(entity)
            self.db.flush()
            self.db.refresh(entity)
            return entity
        except StaleDataError as e:
            logger.info(f"Stale update on {self.model_class.__name__} {entity.id}: {e}")
            self.db.rollback()
            raise PreconditionFailedException()
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.model_class.__name__}: {e}")
            self.db.rollback()
            raise DatabaseException(f"Error al actualizar {self.resource_name}")

    def delete(self, entity: T) -> None:
        """
        Elimina una entidad de forma definitiva (no se guarda tombstone).

        Args:
            entity: La entidad a eliminar

        Raises:
            PreconditionFailedException: Si otra escritura cambió la fila antes
        """
        try:
            self.db.delete(entity)
            self.db.flush()
        except StaleDataError as e:
            logger.info(f"Stale delete on {self.model_class.__name__} {entity.id}: {e}")
            self.db.rollback()
            raise PreconditionFailedException()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model_class.__name__}: {e}")
            self.db.rollback()
            raise DatabaseException(f"Error al eliminar {self.resource_name}")

    def exists(self, id: int) -> bool:
        """
        Verifica si una entidad existe por su ID.

        Args:
            id: ID de la entidad

        Returns:
            True si la entidad existe, False en caso contrario
        """
        try:
            return self.db.query(self.model_class.id).filter(
                self.model_class.id == id
            ).first() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking {self.model_class.__name__} {id}: {e}")
            raise DatabaseException(f"Error al verificar {self.resource_name}")

    def commit(self) -> None:
        """Realiza el commit de la transacción actual."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error committing transaction: {e}")
            self.db.rollback()
            raise DatabaseException("Error al guardar cambios en la base de datos")
