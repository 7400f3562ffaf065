"""
User routes (Controllers) - Layered Architecture.

This module handles HTTP requests/responses for user endpoints.
All business logic is delegated to the UserService layer.
"""

from typing import Optional
import logging

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from config import settings
from core.exceptions import AppException
from core.output_cache import OutputCache
from core.pagination import normalize_pagination
from dependencies import get_output_cache, get_user_service
from models.users import UserCreate, UserUpdate
from routes.common import (
    conditional_response,
    handle_service_exception,
    no_content,
    read_header_list,
)
from routes.route_table import RouteDef, build_router
from services.user_service import UserService

logger = logging.getLogger(__name__)

USER_LIST_VARY_BY = ("page", "pageSize")
USER_DETAIL_VARY_BY = ()


# ==================== Endpoints ====================

async def listar_users(
    request: Request,
    page: Optional[str] = Query(None, description="Número de página (1-indexed)"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Tamaño de página"),
    service: UserService = Depends(get_user_service),
    cache: OutputCache = Depends(get_output_cache),
):
    """
    Get a page of users ordered by id.

    Args:
        page: Page number (1-indexed)
        page_size: Items per page
        service: Injected UserService
        cache: Injected OutputCache

    Returns:
        JSON array of users
    """
    cached = cache.lookup(request, USER_LIST_VARY_BY)
    if cached is not None:
        return cached

    page_request = normalize_pagination(
        page,
        page_size,
        default_page=settings.default_page,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )

    try:
        items = service.list_users(page_request)
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error getting users: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener usuarios"
        )

    response = JSONResponse(content=items)
    cache.store(request, USER_LIST_VARY_BY, response)
    return response


async def obtener_user(
    user_id: int,
    request: Request,
    service: UserService = Depends(get_user_service),
    cache: OutputCache = Depends(get_output_cache),
):
    """Get a user by ID (conditional read with ETag / If-None-Match)."""
    cached = cache.lookup(request, USER_DETAIL_VARY_BY)
    if cached is not None:
        return cached

    try:
        read = service.read_conditional(user_id, read_header_list(request, "if-none-match"))
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error getting user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener usuario"
        )

    response = conditional_response(read)
    cache.store(request, USER_DETAIL_VARY_BY, response)
    return response


async def crear_user(
    user: UserCreate,
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """
    Create a new user.

    Returns:
        201 with the created user, its ETag and Location
    """
    try:
        created = service.create_user(user)
        body = service.to_wire(created)
        etag = service.get_etag(created)
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error creating user: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear usuario"
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=body,
        headers={
            "Location": str(request.url_for("obtener_user", user_id=created.id)),
            "ETag": etag,
        },
    )


async def actualizar_user(
    user_id: int,
    user_update: UserUpdate,
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """Replace name and email of a user."""
    try:
        service.update_user(user_id, user_update, if_match=read_header_list(request, "if-match"))
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error updating user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar usuario"
        )
    return no_content()


async def eliminar_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
):
    """
    Delete a user.

    Users that still own posts cannot be deleted (400).
    """
    try:
        service.delete(user_id)
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error deleting user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar usuario"
        )
    return no_content()


# ==================== Route table ====================

USER_ROUTES = (
    RouteDef("GET", "", listar_users, "listar_users", summary="Listar usuarios",
             cache_vary_by=USER_LIST_VARY_BY),
    RouteDef("GET", "/{user_id}", obtener_user, "obtener_user", summary="Obtener usuario",
             cache_vary_by=USER_DETAIL_VARY_BY),
    RouteDef("POST", "", crear_user, "crear_user", status.HTTP_201_CREATED, "Crear usuario"),
    RouteDef("PUT", "/{user_id}", actualizar_user, "actualizar_user", status.HTTP_204_NO_CONTENT, "Actualizar usuario"),
    RouteDef("DELETE", "/{user_id}", eliminar_user, "eliminar_user", status.HTTP_204_NO_CONTENT, "Eliminar usuario"),
)

router = build_router("users", USER_ROUTES)
