"""
Caché de salida en memoria para respuestas GET.

Guarda respuestas completas (estado, cuerpo y encabezados) con un TTL fijo
desde la inserción. Las escrituras no invalidan entradas: un lector puede ver
datos con hasta un TTL de antigüedad (staleness acotada).
"""

import logging
import threading
import time
from typing import Callable, Dict, NamedTuple, Optional, Sequence, Tuple
from urllib.parse import urlencode

from cachetools import TTLCache
from fastapi import Request
from fastapi.responses import Response

logger = logging.getLogger(__name__)

KeyBuilder = Callable[[Request, Sequence[str]], str]


class CachedResponse(NamedTuple):
    """Respuesta inmutable guardada en la caché."""
    status_code: int
    body: bytes
    headers: Tuple[Tuple[str, str], ...]
    media_type: Optional[str]

    def to_response(self) -> Response:
        return Response(
            content=self.body,
            status_code=self.status_code,
            headers=dict(self.headers),
            media_type=self.media_type,
        )


# Encabezados que se vuelven a calcular al construir la respuesta
_SKIPPED_HEADERS = {"content-length", "content-type"}


def default_key_builder(request: Request, vary_by: Sequence[str]) -> str:
    """
    Construye la clave de caché a partir de la ruta y los parámetros permitidos.

    Args:
        request: Petición entrante
        vary_by: Parámetros de query que distinguen entradas (lista blanca)

    Returns:
        Clave "GET /ruta?k=v" con los parámetros en el orden de la lista blanca
    """
    path = request.url.path.rstrip("/").lower() or "/"
    params = [(name, request.query_params.get(name, "")) for name in vary_by]
    return f"{request.method.upper()} {path}?{urlencode(params)}"


class OutputCache:
    """Caché de respuestas compartida por todo el proceso."""

    def __init__(
        self,
        ttl: float = 60,
        maxsize: int = 1024,
        timer: Callable[[], float] = time.monotonic,
        key_builder: KeyBuilder = default_key_builder,
    ):
        """
        Inicializa la caché.

        Args:
            ttl: Segundos que vive cada entrada desde que se inserta
            maxsize: Número máximo de entradas (se descartan las más antiguas)
            timer: Reloj usado para la expiración
            key_builder: Función que deriva la clave a partir de la petición
        """
        self.ttl = ttl
        self.key_builder = key_builder
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = threading.Lock()

    @staticmethod
    def participates(request: Request) -> bool:
        """Solo GET sin If-None-Match: las lecturas condicionales ven el estado real."""
        return request.method == "GET" and "if-none-match" not in request.headers

    def build_key(self, request: Request, vary_by: Sequence[str]) -> str:
        return self.key_builder(request, vary_by)

    def contains(self, request: Request, vary_by: Sequence[str]) -> bool:
        """Indica si `lookup` respondería ahora desde la caché."""
        if not self.participates(request):
            return False
        key = self.build_key(request, vary_by)
        with self._lock:
            return key in self._entries

    def lookup(self, request: Request, vary_by: Sequence[str]) -> Optional[Response]:
        """
        Busca una respuesta vigente para la petición.

        Args:
            request: Petición entrante
            vary_by: Parámetros de query que forman parte de la clave

        Returns:
            Una nueva Response con el contenido guardado, o None
        """
        if not self.participates(request):
            return None

        key = self.build_key(request, vary_by)
        with self._lock:
            entry: Optional[CachedResponse] = self._entries.get(key)

        if entry is None:
            logger.debug(f"Output cache miss: {key}")
            return None

        logger.debug(f"Output cache hit: {key}")
        return entry.to_response()

    def store(self, request: Request, vary_by: Sequence[str], response: Response) -> None:
        """
        Guarda (o reemplaza) la respuesta de una petición.

        Solo se guardan respuestas 200 de peticiones que participan en la caché.
        """
        if not self.participates(request) or response.status_code != 200:
            return

        headers = tuple(
            (name, value)
            for name, value in response.headers.items()
            if name.lower() not in _SKIPPED_HEADERS
        )
        entry = CachedResponse(
            status_code=response.status_code,
            body=bytes(response.body),
            headers=headers,
            media_type=response.media_type,
        )
        key = self.build_key(request, vary_by)
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, float]:
        with self._lock:
            self._entries.expire()
            return {"entries": len(self._entries), "ttl_seconds": self.ttl}

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire()
            return len(self._entries)
