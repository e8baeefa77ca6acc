from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, func
from sqlmodel import Field, SQLModel

from denuncia_api.models.base import utc_now


class Denuncia(SQLModel, table=True):
    __tablename__ = 'denuncias'
    __table_args__ = {'sqlite_autoincrement': True}

    id: Optional[int] = Field(default=None, primary_key=True)
    latitude: float = Field(nullable=False)
    longitude: float = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=utc_now,
        index=True,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"nullable": False, "server_default": func.current_timestamp()},
    )
    client_ip: Optional[str] = None
    client_agent: Optional[str] = None
