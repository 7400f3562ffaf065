"""
Limitador de peticiones por ventana fija.

Cada cliente dispone de `permit_limit` peticiones por ventana de
`window_seconds`; al superar el límite se responde 429 sin cola de espera.
Las ventanas viven en un TTLCache: un cliente que no vuelve desaparece
cuando su ventana caduca.
"""

import logging
import math
import threading
import time
from typing import Callable

from cachetools import TTLCache

from core.exceptions import RateLimitExceededException

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """Rate limiter en memoria con ventana fija por cliente."""

    def __init__(
        self,
        permit_limit: int = 100,
        window_seconds: float = 60,
        timer: Callable[[], float] = time.monotonic,
        max_clients: int = 10_000,
    ):
        """
        Inicializa el limitador.

        Args:
            permit_limit: Peticiones permitidas por ventana (0 desactiva el límite)
            window_seconds: Duración de la ventana
            timer: Reloj usado para las ventanas y su expiración
            max_clients: Número máximo de clientes con ventana abierta
        """
        self.permit_limit = permit_limit
        self.window_seconds = window_seconds
        self._timer = timer
        # client_id -> (inicio de la ventana, peticiones en la ventana)
        self._windows: TTLCache = TTLCache(maxsize=max_clients, ttl=window_seconds, timer=timer)
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.permit_limit > 0

    def hit(self, client_id: str) -> None:
        """
        Registra una petición del cliente.

        Args:
            client_id: Identificador del cliente (IP)

        Raises:
            RateLimitExceededException: Si el cliente superó el límite de la ventana
        """
        if not self.enabled:
            return

        now = self._timer()
        with self._lock:
            window_start, count = self._windows.get(client_id, (now, 0))
            if now - window_start >= self.window_seconds:
                window_start, count = now, 0

            if count >= self.permit_limit:
                retry_after = math.ceil(self.window_seconds - (now - window_start))
                logger.warning(f"Rate limit superado para el cliente {client_id}")
                raise RateLimitExceededException(retry_after=max(retry_after, 1))

            self._windows[client_id] = (window_start, count + 1)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        """Clientes con una ventana todavía abierta."""
        with self._lock:
            self._windows.expire()
            return len(self._windows)
