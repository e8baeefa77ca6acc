from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from denuncia_api.core.errors import InvalidCoordinates, InvalidPagination, MissingCoordinates

MAX_DECIMAL_PLACES = 6
LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

_DECIMAL_RE = re.compile(r'^[+-]?(?:\d+(?:\.(?P<frac>\d*))?|\.(?P<frac_only>\d+))(?:[eE][+-]?\d+)?$', re.ASCII)
_INTEGER_RE = re.compile(r'^[+-]?\d+$', re.ASCII)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Pagination:
    limit: int = DEFAULT_LIMIT
    offset: int = 0


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _textual(value: Any) -> Optional[str]:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return value.strip()
    return None


def _parse_decimal(value: Any) -> tuple[float, int]:
    """Return the parsed number and the count of digits after its decimal point."""
    text = _textual(value)
    if text is None:
        raise InvalidCoordinates('Latitude e longitude devem ser números válidos')
    match = _DECIMAL_RE.match(text)
    if not match:
        raise InvalidCoordinates('Latitude e longitude devem ser números válidos')
    number = float(text)
    if not math.isfinite(number):
        raise InvalidCoordinates('Latitude e longitude devem ser números válidos')
    fraction = match.group('frac') or match.group('frac_only') or ''
    return number, len(fraction)


def validate_coordinates(latitude: Any, longitude: Any) -> Coordinates:
    if _is_missing(latitude) or _is_missing(longitude):
        raise MissingCoordinates()

    lat, lat_places = _parse_decimal(latitude)
    lng, lng_places = _parse_decimal(longitude)

    if not LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1] or not LONGITUDE_RANGE[0] <= lng <= LONGITUDE_RANGE[1]:
        raise InvalidCoordinates('Coordenadas fora do range válido')

    if lat_places > MAX_DECIMAL_PLACES or lng_places > MAX_DECIMAL_PLACES:
        raise InvalidCoordinates('Coordenadas com precisão excessiva')

    return Coordinates(latitude=lat, longitude=lng)


def _parse_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    text = value.strip()
    if not _INTEGER_RE.match(text):
        raise InvalidPagination()
    return int(text)


def parse_pagination(limit: Optional[str] = None, offset: Optional[str] = None) -> Pagination:
    limit_value = _parse_int(limit, DEFAULT_LIMIT)
    offset_value = _parse_int(offset, 0)
    if limit_value < 1 or limit_value > MAX_LIMIT or offset_value < 0:
        raise InvalidPagination()
    return Pagination(limit=limit_value, offset=offset_value)
