"""
Servicio base con operaciones de lógica de negocio comunes.
Esta clase proporciona una base para las clases de servicio que implementan
la lógica de negocio y coordinan las operaciones del repositorio, incluido
el protocolo de lecturas condicionales (ETag / If-None-Match).
"""

from typing import Callable, TypeVar, Generic, NamedTuple, Optional
import logging

from core.etag import (
    ConditionalResult,
    encode_etag,
    evaluate_if_match,
    evaluate_if_none_match,
)
from core.exceptions import PreconditionFailedException, ValidationException
from core.utils import clean_text

logger = logging.getLogger(__name__)

# Type variables
T = TypeVar('T')  # ORM Model
R = TypeVar('R')  # Repository
V = TypeVar('V')  # Resultado de una escritura


class ConditionalRead(NamedTuple):
    """Resultado de una lectura por ID.

    `body` es None cuando el cliente ya tiene la versión actual (304).
    """
    etag: str
    result: ConditionalResult
    body: Optional[dict]

    @property
    def not_modified(self) -> bool:
        return self.result is ConditionalResult.HIT


class BaseService(Generic[T, R]):
    """
    Servicio base que proporciona operaciones lógicas de negocio comunes.
    Esta clase debe ser heredada por servicios de entidades específicas.
    """

    # Relecturas permitidas tras perder una carrera sin If-Match
    stale_write_retries: int = 1

    def __init__(self, repository: R):
        """
        Inicializa el servicio.

        Args:
            repository: The repository instance for data access
        """
        self.repository = repository

    def to_wire(self, entity: T) -> dict:
        """Serializa la entidad a su representación pública."""
        raise NotImplementedError

    def get_etag(self, entity: T) -> str:
        return encode_etag(entity.row_version)

    def read_conditional(self, id: int, if_none_match: Optional[str] = None) -> ConditionalRead:
        """
        Lee una entidad por ID aplicando el protocolo de lectura condicional.

        Args:
            id: ID de la entidad
            if_none_match: Encabezado If-None-Match presentado por el cliente

        Returns:
            ConditionalRead con el validador actual y, si cambió, el cuerpo

        Raises:
            NotFoundException: If entity is not found
        """
        entity = self.repository.get_by_id_or_fail(id)
        etag = self.get_etag(entity)

        result = evaluate_if_none_match(if_none_match, etag)
        if result is ConditionalResult.HIT:
            logger.debug(f"ETag match for {self.repository.resource_name} {id}, returning 304")
            return ConditionalRead(etag=etag, result=result, body=None)

        return ConditionalRead(etag=etag, result=result, body=self.to_wire(entity))

    def check_if_match(self, entity: T, if_match: Optional[str]) -> None:
        """
        Valida la precondición If-Match antes de escribir.

        Raises:
            PreconditionFailedException: Si el cliente presentó un validador que ya no es el actual
        """
        current = self.get_etag(entity)
        if not evaluate_if_match(if_match, current):
            logger.info(
                f"If-Match rechazado para {self.repository.resource_name} {entity.id}"
            )
            raise PreconditionFailedException(details={"etag": current})

    def write_current(self, id: int, if_match: Optional[str], write: Callable[[T], V]) -> V:
        """
        Aplica una escritura sobre la versión actual de la entidad.

        La escritura lleva en su WHERE la versión leída. Si otra petición
        cambió la fila en medio, con If-Match se responde 412; sin If-Match
        se vuelve a leer y se reintenta una vez (gana la última escritura).

        Args:
            id: ID de la entidad
            if_match: Encabezado If-Match presentado por el cliente
            write: Modifica o elimina la entidad mediante el repositorio

        Returns:
            Lo que devuelva `write`

        Raises:
            NotFoundException: If entity is not found
            PreconditionFailedException: Si la precondición falla o la carrera persiste
        """
        attempt = 0
        while True:
            entity = self.repository.get_by_id_or_fail(id)
            self.check_if_match(entity, if_match)
            try:
                result = write(entity)
            except PreconditionFailedException:
                if if_match is not None or attempt >= self.stale_write_retries:
                    raise
                attempt += 1
                logger.info(
                    f"Concurrent write on {self.repository.resource_name} {id}, retrying"
                )
                continue
            self.repository.commit()
            return result

    def delete(self, id: int) -> None:
        """
        Elimina una entidad.

        Args:
            id: ID de la entidad

        Raises:
            NotFoundException: If entity is not found
        """
        def remove(entity: T) -> None:
            self.before_delete(entity)
            self.repository.delete(entity)

        self.write_current(id, None, remove)
        logger.info(f"Deleted {self.repository.resource_name} {id}")

    def before_delete(self, entity: T) -> None:
        """Gancho para reglas de negocio previas a la eliminación."""

    @staticmethod
    def require_text(value: Optional[str], field: str, max_length: int) -> str:
        """
        Recorta y valida un campo de texto obligatorio.

        Args:
            value: Valor recibido
            field: Nombre público del campo (para el mensaje de error)
            max_length: Longitud máxima permitida

        Returns:
            El valor recortado

        Raises:
            ValidationException: Si falta, queda vacío o excede la longitud
        """
        text = clean_text(value)
        if text is None:
            raise ValidationException(f"El campo '{field}' es obligatorio", field=field)
        if len(text) > max_length:
            raise ValidationException(
                f"El campo '{field}' no puede superar {max_length} caracteres",
                field=field,
            )
        return text
