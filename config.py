"""
Configuración centralizada de la aplicación usando pydantic-settings.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación de manera tipada y validada.
"""
import logging
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Configuración de la aplicación cargada desde variables de entorno."""

    # Database
    database_url: str = Field(
        default="sqlite:///./blog.db",
        description="URL de conexión a la base de datos"
    )

    # CORS Configuration
    cors_allowed_origins: str = Field(
        default="http://localhost,http://localhost:3000,http://localhost:8000",
        description="Orígenes permitidos para CORS, separados por coma"
    )

    # Application
    app_name: str = Field(
        default="Blog API",
        description="Nombre de la aplicación"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Versión de la aplicación"
    )
    api_version: str = Field(
        default="v1",
        description="Prefijo de versión de las rutas (/api/{api_version}/...)"
    )
    debug_mode: bool = Field(
        default=False,
        description="Modo debug (solo para desarrollo)"
    )

    # Paginación
    default_page: int = Field(
        default=1,
        ge=1,
        description="Página por defecto para listados (1-indexed)"
    )
    default_page_size: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Tamaño de página por defecto para listados"
    )
    max_page_size: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Tamaño máximo de página permitido"
    )

    # Output cache
    output_cache_ttl_seconds: float = Field(
        default=60,
        gt=0,
        description="Tiempo de vida de las respuestas en la caché de salida"
    )
    output_cache_max_entries: int = Field(
        default=1024,
        ge=1,
        description="Número máximo de respuestas guardadas en la caché de salida"
    )

    # Rate limiting
    rate_limit_per_minute: int = Field(
        default=100,
        ge=0,
        description="Peticiones permitidas por cliente y minuto (0 desactiva el límite)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valida que el nivel de logging sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(
                f"Nivel de log '{v}' no válido. Usando 'INFO'. "
                f"Niveles válidos: {valid_levels}"
            )
            return "INFO"
        return v_upper

    @property
    def cors_origins_list(self) -> list[str]:
        """Devuelve la lista de orígenes CORS permitidos."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Determina si la app está en modo producción."""
        return not self.debug_mode

    @property
    def api_prefix(self) -> str:
        """Prefijo común de todas las rutas versionadas."""
        return f"/api/{self.api_version}"


# Instancia global de configuración
settings = Settings()


def configure_logging():
    """Configura el sistema de logging de la aplicación."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )

    # Reducir verbosidad de librerías externas
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.info(f"Logging configurado en nivel {settings.log_level}")
    logger.info(f"Aplicación: {settings.app_name} v{settings.app_version}")
    logger.info(f"Modo: {'Desarrollo' if settings.debug_mode else 'Producción'}")
