from loguru import logger
from sqlmodel import SQLModel

from denuncia_api.db import session as session_module
from denuncia_api.models import denuncia  # noqa: F401


def init_db(drop_all: bool = False) -> None:
    engine = session_module.engine
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    logger.info("Denuncias table created or verified")


def close_db() -> None:
    session_module.engine.dispose()
    logger.info("Database connection closed")
