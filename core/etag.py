"""
Validadores de caché (ETag) derivados del token de versión de cada fila.

El token lo asigna la capa de almacenamiento; aquí solo se codifica para el
cable y se compara contra lo que presenta el cliente en If-None-Match / If-Match.
"""

import base64
from enum import Enum
from typing import List, Optional


# Validador fijo para entidades sin token (no persistidas)
SENTINEL_ETAG = '"0"'
WILDCARD = "*"


class ConditionalResult(str, Enum):
    """Resultado de evaluar una lectura condicional."""
    HIT = "hit"
    MISS = "miss"


def encode_etag(token: Optional[bytes]) -> str:
    """
    Codifica un token de versión como validador débil.

    Args:
        token: Bytes opacos de la versión de la fila, o None

    Returns:
        W/"<base64>" si hay token, o el centinela '"0"' si no lo hay
    """
    if not token:
        return SENTINEL_ETAG
    return f'W/"{base64.b64encode(bytes(token)).decode("ascii")}"'


def parse_validator_list(header_value: Optional[str]) -> List[str]:
    """
    Separa un encabezado If-None-Match / If-Match en sus validadores.

    Args:
        header_value: Valor crudo del encabezado (lista separada por comas)

    Returns:
        Lista de validadores sin espacios alrededor; vacía si no hay encabezado
    """
    if not header_value:
        return []
    return [item.strip() for item in header_value.split(",") if item.strip()]


def evaluate_if_none_match(presented: Optional[str], current: str) -> ConditionalResult:
    """
    Decide si la representación que tiene el cliente sigue vigente.

    Args:
        presented: Encabezado If-None-Match enviado por el cliente
        current: Validador actual de la entidad

    Returns:
        HIT si algún validador coincide exactamente (o es '*'), MISS en otro caso
    """
    for candidate in parse_validator_list(presented):
        if candidate == current or candidate == WILDCARD:
            return ConditionalResult.HIT
    return ConditionalResult.MISS


def evaluate_if_match(presented: Optional[str], current: str) -> bool:
    """Precondición de escritura: sin encabezado se permite (last writer wins)."""
    validators = parse_validator_list(presented)
    if not validators:
        return True
    return any(candidate == current or candidate == WILDCARD for candidate in validators)
