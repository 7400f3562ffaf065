"""
Utilidades de paginación para una paginación consistente en toda la aplicación.

Los parámetros de paginación son indulgentes: un valor fuera de rango o
que no es un entero se reemplaza por el valor por defecto en lugar de
rechazar la petición.
"""

from typing import Any, NamedTuple, Optional


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


class PageRequest(NamedTuple):
    """Página ya normalizada (1-indexed)."""
    page: int
    page_size: int

    @property
    def skip(self) -> int:
        return calculate_skip(self.page, self.page_size)


def parse_int(value: Any) -> Optional[int]:
    """
    Convierte un valor de query string a entero sin lanzar excepciones.

    Args:
        value: Valor crudo (str, int o None)

    Returns:
        El entero, o None si el valor no representa un entero
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def normalize_pagination(
    page: Any,
    page_size: Any,
    default_page: int = DEFAULT_PAGE,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """
    Normaliza los parámetros de paginación enviados por el cliente.

    Args:
        page: Número de página solicitado (1-indexed, puede venir inválido)
        page_size: Tamaño de página solicitado (puede venir inválido)
        default_page: Página usada cuando `page` no es >= 1
        default_page_size: Tamaño usado cuando `page_size` está fuera de [1, max_page_size]
        max_page_size: Tamaño máximo permitido

    Returns:
        PageRequest con valores dentro de rango. Nunca falla.
    """
    page_value = parse_int(page)
    size_value = parse_int(page_size)

    if page_value is None or page_value < 1:
        page_value = default_page
    if size_value is None or not 1 <= size_value <= max_page_size:
        size_value = default_page_size

    return PageRequest(page=page_value, page_size=size_value)


def calculate_skip(page: int, page_size: int) -> int:
    """
    Calcula el valor de skip/offset para las consultas de la base de datos.

    Args:
        page: Número de página actual (indexado desde 1)
        page_size: Número de elementos por página

    Returns:
        Número de elementos a saltar
    """
    return (page - 1) * page_size
