from pydantic import BaseModel, ConfigDict
from typing import Any, Optional


class UserCreate(BaseModel):
    """Modelo de entrada para registrar un usuario.

    `name` y `email` se validan en el servicio después de recortar espacios.
    """
    name: Optional[str] = None
    email: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# Límites de longitud de las columnas
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 254

__all__ = [
    "UserCreate",
    "UserUpdate",
    "User",
    "NAME_MAX_LENGTH",
    "EMAIL_MAX_LENGTH",
]
