from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from denuncia_api.models.base import as_utc


class DenunciaCreate(BaseModel):
    # Raw values: the precision guard needs the textual form the client sent.
    latitude: Any = None
    longitude: Any = None


class DenunciaOut(BaseModel):
    id: int
    latitude: float
    longitude: float
    timestamp: datetime

    @field_validator('timestamp')
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class DenunciaCreated(DenunciaOut):
    message: str


class DenunciaPage(BaseModel):
    denuncias: list[DenunciaOut]
    total: int
    limit: int
    offset: int


class DenunciaStatistics(BaseModel):
    total: int
    hoje: int
    semana: int
    mes: int
