from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from denuncia_api.core.config import settings


def build_engine(url: str, timeout: float) -> Engine:
    if url.startswith('sqlite'):
        return create_engine(url, connect_args={'check_same_thread': False, 'timeout': timeout})
    return create_engine(url, pool_pre_ping=True, pool_timeout=timeout)


engine = build_engine(settings.DATABASE_URL, settings.DATABASE_TIMEOUT)


def get_engine() -> Engine:
    return engine


def get_session():
    with Session(engine) as session:
        yield session
