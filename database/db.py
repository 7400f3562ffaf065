"""módulo de base de datos con manejo mejorado de errores y configuración centralizada."""
from typing import Generator
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

# import ORM classes and Base from models.py
from .models import (
    Base,
    UserORM,
    PostORM,
)

#import configuration
from config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Crea el engine de SQLAlchemy para la URL indicada.

    Con SQLite se activan las claves foráneas en cada conexión para que
    ON DELETE RESTRICT se respete igual que en el servidor.
    """
    is_sqlite = database_url.startswith("sqlite")
    engine = create_engine(
        database_url,
        echo=settings.debug_mode,
        future=True,
        pool_pre_ping=True,  #verifica conexiones antes de usarlas
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


#engine / session con configuración centralizada
engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """dependencia de FastAPI que provee una sesión por petición.

    Yields:
        Session: Sesión de SQLAlchemy

    Nota:
        - Hace rollback automático si hay excepciones SQLAlchemy
        - Cierra la sesión de forma segura
        - Ninguna escritura a medias queda visible: lo no confirmado se descarta
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Error de base de datos en sesión: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def create_tables() -> None:
    """Crear tablas ORM en la base de datos.

    Raises:
        SQLAlchemyError: Si hay error al crear las tablas
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Tablas de base de datos creadas/verificadas exitosamente")
    except SQLAlchemyError as e:
        logger.error(f"Error al crear tablas: {e}", exc_info=True)
        raise


def get_database_url() -> str:
    """Obtiene la URL de la base de datos (sin credenciales sensibles)."""
    return engine.url.render_as_string(hide_password=True)
