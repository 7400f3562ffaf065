"""
Excepciones personalizadas para la aplicación.

Estas excepciones proporcionan una forma estructurada de manejar errores de lógica de negocio
y mapearlos a códigos de estado HTTP apropiados en la capa de API.
"""

from typing import Optional, Any


class AppException(Exception):
    """Excepción base para todos los errores de la aplicación."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(AppException):
    """Excepción cuando un recurso no se encuentra."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        message = f"{resource} no encontrado"
        if identifier is not None:
            message += f": {identifier}"
        super().__init__(message=message, status_code=404, details=details)


class ValidationException(AppException):
    """Excepción para errores de validación.

    Se responde con 400: un cuerpo inválido o una referencia a otra entidad
    que no existe nunca se reintenta.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if field:
            details = details or {}
            details["field"] = field
        super().__init__(message=message, status_code=400, details=details)


class PreconditionFailedException(AppException):
    """Excepción cuando el validador de If-Match no coincide con la versión actual."""

    def __init__(
        self,
        message: str = "La versión del recurso ha cambiado",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=412, details=details)


class RateLimitExceededException(AppException):
    """Excepción cuando un cliente supera el número de peticiones permitidas."""

    def __init__(
        self,
        retry_after: int,
        details: Optional[dict[str, Any]] = None,
    ):
        self.retry_after = retry_after
        super().__init__(
            message="Demasiadas peticiones, intente más tarde",
            status_code=429,
            details=details,
        )


class DatabaseException(AppException):
    """Excepción para errores de base de datos."""

    def __init__(
        self,
        message: str = "Error de base de datos",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=500, details=details)
