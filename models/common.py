"""
Modelos comunes de respuesta para la API.

Estos modelos proporcionan respuestas consistentes y estandarizadas
para los endpoints operativos y los errores.
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """Respuesta estándar de error."""
    detail: str = Field(..., description="Mensaje descriptivo del error")
    field: Optional[str] = Field(None, description="Campo que no cumplió la validación")


class HealthCheckResponse(BaseModel):
    """Respuesta del health check."""
    status: str = Field(..., description="Estado general (healthy/unhealthy)")
    service: str = Field(..., description="Nombre del servicio")
    version: str = Field(..., description="Versión de la API")
    database: str = Field(..., description="Estado de la base de datos")
    environment: str = Field(..., description="Entorno (production/development)")
    output_cache_entries: int = Field(0, description="Entradas vigentes en la caché de salida")
    timestamp: datetime = Field(default_factory=_utc_now)


def create_error_response(message: str, field: Optional[str] = None) -> dict:
    """Helper para crear respuestas de error."""
    return ErrorResponse(detail=message, field=field).model_dump(exclude_none=True)
