"""
Tabla de rutas explícita.

Cada endpoint se declara como dato (método, ruta, código de estado y
parámetros que distinguen su entrada en la caché de salida) y la tabla se
compone en un APIRouter al arrancar la aplicación, en lugar de decorar cada
función.
"""

from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from fastapi import APIRouter, Depends

from config import settings
from dependencies import rate_limit_guard


class RouteDef(NamedTuple):
    """Declaración de un endpoint de la API.

    `cache_vary_by` es None para rutas que no usan la caché de salida.
    """
    method: str
    path: str
    endpoint: Callable[..., Any]
    name: str
    status_code: int = 200
    summary: Optional[str] = None
    cache_vary_by: Optional[Sequence[str]] = None


def resource_prefix(resource: str) -> str:
    """Prefijo versionado de un recurso, p. ej. /api/v1/posts."""
    return f"{settings.api_prefix}/{resource}"


def build_router(resource: str, routes: Sequence[RouteDef]) -> APIRouter:
    """
    Compone la tabla de rutas de un recurso en un APIRouter.

    Args:
        resource: Nombre del recurso en plural (posts, users)
        routes: Declaraciones de los endpoints

    Returns:
        APIRouter con todas las rutas registradas y el rate limit aplicado
    """
    router = APIRouter(prefix=resource_prefix(resource), tags=[resource])
    for route in routes:
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=[route.method],
            name=route.name,
            status_code=route.status_code,
            summary=route.summary,
            dependencies=[Depends(rate_limit_guard(route.cache_vary_by))],
        )
    return router


def describe_routes(router: APIRouter) -> List[str]:
    """Lista legible "MÉTODO /ruta" de un router, usada en el log de arranque."""
    lines = []
    for route in router.routes:
        for method in sorted(getattr(route, "methods", None) or []):
            lines.append(f"{method} {route.path}")
    return lines
