"""
Piezas compartidas por los controladores de recursos.

- Traducción de excepciones del servicio a HTTPException
- Respuesta de lecturas condicionales (200 + ETag / 304 + ETag)
- Lectura de encabezados con lista de validadores
"""

from typing import Optional
import logging

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from core.exceptions import (
    AppException,
    NotFoundException,
    PreconditionFailedException,
    ValidationException,
)
from services.base_service import ConditionalRead

logger = logging.getLogger(__name__)


# ==================== Exception Handler ====================

def handle_service_exception(e: Exception) -> HTTPException:
    """Convert service layer exceptions to HTTP exceptions."""
    if isinstance(e, NotFoundException):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )
    elif isinstance(e, ValidationException):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    elif isinstance(e, PreconditionFailedException):
        return HTTPException(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            detail=e.message,
            headers={"ETag": e.details["etag"]} if "etag" in e.details else None
        )
    elif isinstance(e, AppException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message
        )
    else:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor"
        )


# ==================== Conditional reads ====================

def read_header_list(request: Request, name: str) -> Optional[str]:
    """
    Une todas las apariciones de un encabezado en una sola lista separada por comas.

    Returns:
        El valor combinado, o None si el cliente no envió el encabezado
    """
    values = request.headers.getlist(name)
    if not values:
        return None
    return ", ".join(values)


def conditional_response(read: ConditionalRead) -> Response:
    """
    Construye la respuesta de un GET por ID.

    El encabezado ETag se envía siempre; en 304 no hay cuerpo.
    """
    if read.not_modified:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": read.etag})
    return JSONResponse(content=read.body, headers={"ETag": read.etag})


def no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
