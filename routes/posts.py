"""
Post routes (Controllers) - Layered Architecture.

This module handles HTTP requests/responses for post endpoints.
All business logic is delegated to the PostService layer.

Responsibilities:
- Parse HTTP requests (lenient pagination, conditional headers)
- Serve and fill the output cache for GET endpoints
- Delegate to service layer
- Format HTTP responses (ETag, Location, 304/201/204)
"""

from typing import Optional
import logging

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from config import settings
from core.exceptions import AppException
from core.output_cache import OutputCache
from core.pagination import normalize_pagination, parse_int
from dependencies import get_output_cache, get_post_service
from models.posts import PostCreate, PostUpdate
from routes.common import (
    conditional_response,
    handle_service_exception,
    no_content,
    read_header_list,
)
from routes.route_table import RouteDef, build_router
from services.post_service import PostService

logger = logging.getLogger(__name__)

# Parámetros de query que distinguen entradas de la caché
POST_LIST_VARY_BY = ("page", "pageSize", "userId")
POST_DETAIL_VARY_BY = ()


# ==================== Endpoints ====================

async def listar_posts(
    request: Request,
    page: Optional[str] = Query(None, description="Número de página (1-indexed)"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Tamaño de página"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filtrar por autor"),
    service: PostService = Depends(get_post_service),
    cache: OutputCache = Depends(get_output_cache),
):
    """
    Get a page of posts, newest first.

    Out-of-range or malformed pagination values fall back to the defaults.

    Args:
        page: Page number (1-indexed)
        page_size: Items per page (1..max_page_size)
        user_id: Optional author filter
        service: Injected PostService
        cache: Injected OutputCache

    Returns:
        JSON array of posts
    """
    cached = cache.lookup(request, POST_LIST_VARY_BY)
    if cached is not None:
        return cached

    page_request = normalize_pagination(
        page,
        page_size,
        default_page=settings.default_page,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )

    author = None
    if user_id is not None and user_id.strip():
        author = parse_int(user_id)
        if author is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="El parámetro 'userId' debe ser un entero"
            )

    try:
        items = service.list_posts(page_request, user_id=author)
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error getting posts: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener posts"
        )

    response = JSONResponse(content=items)
    cache.store(request, POST_LIST_VARY_BY, response)
    return response


async def obtener_post(
    post_id: int,
    request: Request,
    service: PostService = Depends(get_post_service),
    cache: OutputCache = Depends(get_output_cache),
):
    """
    Get a post by ID.

    Sends the current ETag. If the client presents it in If-None-Match the
    answer is 304 without body.
    """
    cached = cache.lookup(request, POST_DETAIL_VARY_BY)
    if cached is not None:
        return cached

    try:
        read = service.read_conditional(post_id, read_header_list(request, "if-none-match"))
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error getting post {post_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al obtener post"
        )

    response = conditional_response(read)
    cache.store(request, POST_DETAIL_VARY_BY, response)
    return response


async def crear_post(
    post: PostCreate,
    request: Request,
    service: PostService = Depends(get_post_service),
):
    """
    Create a new post.

    Args:
        post: Title, content and author id
        request: Incoming request (used to build the Location header)
        service: Injected PostService

    Returns:
        201 with the created post, its ETag and Location
    """
    try:
        created = service.create_post(post)
        body = service.to_wire(created)
        etag = service.get_etag(created)
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error creating post: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al crear post"
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=body,
        headers={
            "Location": str(request.url_for("obtener_post", post_id=created.id)),
            "ETag": etag,
        },
    )


async def actualizar_post(
    post_id: int,
    post_update: PostUpdate,
    request: Request,
    service: PostService = Depends(get_post_service),
):
    """
    Update title and content of a post.

    An If-Match header, when present, must carry the current ETag.
    """
    try:
        service.update_post(post_id, post_update, if_match=read_header_list(request, "if-match"))
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error updating post {post_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al actualizar post"
        )
    return no_content()


async def eliminar_post(
    post_id: int,
    service: PostService = Depends(get_post_service),
):
    """Delete a post permanently."""
    try:
        service.delete(post_id)
    except AppException as e:
        raise handle_service_exception(e)
    except Exception as e:
        logger.error(f"Error deleting post {post_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al eliminar post"
        )
    return no_content()


# ==================== Route table ====================

POST_ROUTES = (
    RouteDef("GET", "", listar_posts, "listar_posts", summary="Listar posts",
             cache_vary_by=POST_LIST_VARY_BY),
    RouteDef("GET", "/{post_id}", obtener_post, "obtener_post", summary="Obtener post",
             cache_vary_by=POST_DETAIL_VARY_BY),
    RouteDef("POST", "", crear_post, "crear_post", status.HTTP_201_CREATED, "Crear post"),
    RouteDef("PUT", "/{post_id}", actualizar_post, "actualizar_post", status.HTTP_204_NO_CONTENT, "Actualizar post"),
    RouteDef("DELETE", "/{post_id}", eliminar_post, "eliminar_post", status.HTTP_204_NO_CONTENT, "Eliminar post"),
)

router = build_router("posts", POST_ROUTES)
