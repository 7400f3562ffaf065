"""
Funciones de utilidad generales.
"""

from typing import Optional, Any


def clean_text(value: Any) -> Optional[str]:
    """
    Recorta los espacios de un campo de texto.

    Args:
        value: Valor recibido en el cuerpo de la petición

    Returns:
        El texto sin espacios alrededor, o None si queda vacío
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None
