from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import uvicorn
import logging

from config import settings, configure_logging

from core.exceptions import AppException, RateLimitExceededException
from core.output_cache import OutputCache
from database.db import create_tables, get_database_url
from dependencies import get_output_cache
from models.common import HealthCheckResponse, create_error_response
from routes import posts_router, users_router
from routes.route_table import describe_routes

logger = logging.getLogger(__name__)

# Configurar logging una sola vez al inicio
configure_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Maneja el ciclo de vida de la aplicación."""
    # Startup
    try:
        create_tables()
        logger.info(f"Base de datos: {get_database_url()}")
    except Exception as e:
        logger.warning(f"No se pudieron crear tablas en la base de datos: {e}")
    for router in (posts_router, users_router):
        for line in describe_routes(router):
            logger.debug(f"Ruta registrada: {line}")
    yield
    # Shutdown

app = FastAPI(
    title=settings.app_name,
    description="API REST de posts y usuarios con lecturas condicionales (ETag) y caché de salida.",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    debug=settings.debug_mode
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "Location", "Retry-After"],
)


# ==================== Exception handlers ====================

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Errores de negocio lanzados fuera de los controladores (p. ej. dependencias)."""
    headers = None
    if isinstance(exc, RateLimitExceededException):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.message, exc.details.get("field")),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Cuerpo o parámetros de ruta con forma inválida: 400 en lugar de 422."""
    errors = exc.errors()
    field = None
    message = "Petición inválida"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or None
        message = f"Petición inválida: {first.get('msg', '')}"
    logger.info(f"Petición rechazada {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=create_error_response(message, field),
    )


@app.get("/")
async def root():
    """Endpoint raíz con información de la API."""
    return {
        "message": f"{settings.app_name} - Posts y usuarios",
        "version": settings.app_version,
        "api": settings.api_prefix,
        "status": "active",
        "environment": "production" if settings.is_production else "development",
        "docs": "/docs",
        "redoc": "/redoc"
    }

app.include_router(posts_router)
app.include_router(users_router)

@app.get("/health", response_model=HealthCheckResponse)
async def health_check(cache: OutputCache = Depends(get_output_cache)):
    """Health check endpoint con verificación de base de datos."""
    from database.db import engine
    from sqlalchemy import text

    db_status = "unknown"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(f"Health check: Error de conexión a BD: {e}")
        db_status = "disconnected"

    return HealthCheckResponse(
        status="healthy" if db_status == "connected" else "unhealthy",
        service=settings.app_name,
        version=settings.app_version,
        database=db_status,
        environment="production" if settings.is_production else "development",
        output_cache_entries=cache.stats()["entries"],
    )

if __name__ == "__main__":
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
