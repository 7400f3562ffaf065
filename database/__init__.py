from .db import (
    SessionLocal,
    build_engine,
    create_tables,
    engine,
    get_db,
    get_database_url,
    UserORM,
    PostORM,
)

__all__ = [
    "SessionLocal",
    "build_engine",
    "create_tables",
    "engine",
    "get_db",
    "get_database_url",
    "UserORM",
    "PostORM",
]
