from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Optional

import anyio
from loguru import logger
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from denuncia_api.core.errors import StatisticsError, StorageError
from denuncia_api.models.base import utc_now
from denuncia_api.models.denuncia import Denuncia
from denuncia_api.schemas.denuncia import DenunciaStatistics
from denuncia_api.services.validation import Coordinates, Pagination

WEEK = timedelta(days=7)
MONTH = timedelta(days=30)
# Largest value a 64-bit SQL integer can bind.
MAX_SQL_OFFSET = 2 ** 63 - 1


def create_denuncia(
    session: Session,
    coordinates: Coordinates,
    client_ip: str,
    client_agent: str,
) -> Denuncia:
    record = Denuncia(
        latitude=coordinates.latitude,
        longitude=coordinates.longitude,
        client_ip=client_ip,
        client_agent=client_agent,
    )
    try:
        session.add(record)
        session.commit()
        session.refresh(record)
    except SQLAlchemyError as exc:
        session.rollback()
        logger.opt(exception=exc).error("Failed to insert denuncia from {}", client_ip)
        raise StorageError() from exc
    logger.info("New denuncia registered: id={} ip={}", record.id, client_ip)
    return record


def count_denuncias(
    session: Session,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> int:
    statement = select(func.count()).select_from(Denuncia)
    if since is not None:
        statement = statement.where(Denuncia.created_at >= since)
    if until is not None:
        statement = statement.where(Denuncia.created_at < until)
    result = session.exec(statement).one()
    return int(result or 0)


def list_denuncias(session: Session, pagination: Pagination) -> tuple[list[Denuncia], int]:
    statement = (
        select(Denuncia)
        .order_by(Denuncia.created_at.desc(), Denuncia.id.desc())
        .offset(min(pagination.offset, MAX_SQL_OFFSET))
        .limit(pagination.limit)
    )
    try:
        records = list(session.exec(statement).all())
        total = count_denuncias(session)
    except SQLAlchemyError as exc:
        logger.opt(exception=exc).error("Failed to list denuncias")
        raise StorageError() from exc
    return records, total


def statistics_windows(now: datetime) -> dict[str, tuple[Optional[datetime], Optional[datetime]]]:
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return {
        'total': (None, None),
        'hoje': (today, today + timedelta(days=1)),
        'semana': (now - WEEK, None),
        'mes': (now - MONTH, None),
    }


async def aggregate_statistics(engine: Engine, now: Optional[datetime] = None) -> DenunciaStatistics:
    """Run the four counts concurrently; any failure fails the whole aggregate."""
    windows = statistics_windows(now or utc_now())

    def _count(name: str, since: Optional[datetime], until: Optional[datetime]) -> int:
        try:
            with Session(engine) as session:
                return count_denuncias(session, since=since, until=until)
        except SQLAlchemyError as exc:
            logger.opt(exception=exc).error("Failed to compute statistic {}", name)
            raise StatisticsError() from exc

    counts = await asyncio.gather(
        *(anyio.to_thread.run_sync(_count, name, since, until) for name, (since, until) in windows.items())
    )
    return DenunciaStatistics(**dict(zip(windows, counts)))
