from typing import Optional
from uuid import uuid4

from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, LargeBinary
from sqlalchemy.orm import declarative_base, relationship

from utils.datetime_utils import get_utc_now

Base = declarative_base()


def new_row_version(current: Optional[bytes] = None) -> bytes:
    """Genera un nuevo token de versión opaco para una fila.

    Lo invoca el mapper de SQLAlchemy en cada INSERT y UPDATE. Como la
    columna es `version_id_col`, el UPDATE y el DELETE llevan además
    `WHERE row_version = <versión leída>`: si otra escritura cambió la fila
    entre la lectura y la escritura, el flush lanza StaleDataError.
    """
    return uuid4().bytes


#ORM: Users
class UserORM(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=False)
    # token de versión: solo lo asigna la capa de almacenamiento
    row_version = Column(LargeBinary(16), nullable=False)

    __mapper_args__ = {
        "version_id_col": row_version,
        "version_id_generator": new_row_version,
    }


#ORM: Posts
class PostORM(Base):
    __tablename__ = "posts"
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=get_utc_now, index=True)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now)
    row_version = Column(LargeBinary(16), nullable=False)

    #Relationship: autor del post
    user = relationship("UserORM", lazy="select")

    __mapper_args__ = {
        "version_id_col": row_version,
        "version_id_generator": new_row_version,
    }


__all__ = [
    "Base",
    "UserORM",
    "PostORM",
    "new_row_version",
]
