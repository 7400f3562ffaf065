"""
Utilidades para manejo de fechas.

Las marcas de tiempo de las entidades se guardan en UTC sin zona horaria
(columnas DateTime naive) y se serializan en ISO 8601.
"""
from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """
    Obtiene la fecha y hora actual en UTC, sin información de zona horaria.

    Returns:
        datetime: Fecha y hora actual (naive, UTC).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc(dt: datetime) -> datetime:
    """
    Normaliza un datetime a UTC con zona horaria explícita.

    Args:
        dt: Datetime naive (se asume UTC) o con zona horaria.

    Returns:
        datetime: Fecha en UTC.
    """
    if dt is None:
        return None

    # Si el datetime es naive (sin zona horaria), asumimos que es UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)
