from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime


class PostCreate(BaseModel):
    """Modelo de entrada para crear un post.

    Los campos son opcionales a nivel de esquema: el servicio recorta los
    espacios y responde 400 indicando qué campo falta o es inválido.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None
    user_id: Optional[int] = None


class PostUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None


class Post(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    content: str
    user_id: int
    user_name: str
    created_at: datetime
    updated_at: datetime

    def to_wire(self) -> dict[str, Any]:
        """Representación JSON con los nombres de campo públicos (camelCase)."""
        return self.model_dump(mode="json", by_alias=True)


# Límites de longitud de las columnas
TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000

__all__ = [
    "PostCreate",
    "PostUpdate",
    "Post",
    "TITLE_MAX_LENGTH",
    "CONTENT_MAX_LENGTH",
]
