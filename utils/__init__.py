"""
Utilidades del sistema.
"""
from .datetime_utils import get_utc_now, to_utc

__all__ = ["get_utc_now", "to_utc"]
