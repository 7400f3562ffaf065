""" Utilidades principales y componentes compartidos para la aplicación.

Este paquete contiene:

- Excepciones personalizadas
- Codificación y evaluación de validadores ETag
- Funciones auxiliares de paginación
- Caché de salida y limitador de peticiones
"""

from .exceptions import (
    AppException,
    NotFoundException,
    ValidationException,
    PreconditionFailedException,
    RateLimitExceededException,
    DatabaseException,
)
from .etag import (
    ConditionalResult,
    SENTINEL_ETAG,
    encode_etag,
    evaluate_if_none_match,
    evaluate_if_match,
)
from .pagination import (
    PageRequest,
    normalize_pagination,
    calculate_skip,
    parse_int,
)
from .output_cache import OutputCache, CachedResponse
from .rate_limit import FixedWindowRateLimiter
from .utils import clean_text

__all__ = [
    # Excepciones
    "AppException",
    "NotFoundException",
    "ValidationException",
    "PreconditionFailedException",
    "RateLimitExceededException",
    "DatabaseException",
    # etag
    "ConditionalResult",
    "SENTINEL_ETAG",
    "encode_etag",
    "evaluate_if_none_match",
    "evaluate_if_match",
    # paginacion
    "PageRequest",
    "normalize_pagination",
    "calculate_skip",
    "parse_int",
    # cache / rate limit
    "OutputCache",
    "CachedResponse",
    "FixedWindowRateLimiter",
    # utils
    "clean_text",
]
