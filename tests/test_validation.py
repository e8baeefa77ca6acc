import pytest

from denuncia_api.core.errors import ErrorCode, InvalidCoordinates, InvalidPagination, MissingCoordinates
from denuncia_api.services.validation import Coordinates, Pagination, parse_pagination, validate_coordinates


def test_accepts_valid_coordinates():
    assert validate_coordinates(-23.5505, -46.6333) == Coordinates(latitude=-23.5505, longitude=-46.6333)


def test_accepts_numeric_strings():
    result = validate_coordinates("-23.5505", " -46.6333 ")
    assert result == Coordinates(latitude=-23.5505, longitude=-46.6333)


def test_accepts_boundaries_and_zero():
    assert validate_coordinates(90, -180) == Coordinates(latitude=90.0, longitude=-180.0)
    assert validate_coordinates(0, 0) == Coordinates(latitude=0.0, longitude=0.0)


@pytest.mark.parametrize("latitude,longitude", [(None, 1), (1, None), ("", 1), (1, "   ")])
def test_missing_values(latitude, longitude):
    with pytest.raises(MissingCoordinates) as exc_info:
        validate_coordinates(latitude, longitude)
    assert exc_info.value.code == ErrorCode.MISSING_COORDINATES
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize(
    "latitude,longitude",
    [
        ("abc", 0),
        (0, "12abc"),
        ("nan", 0),
        ("inf", 0),
        ("1e400", 0),
        ("1_0", 0),
        (True, 0),
        ([1], 0),
        ({"lat": 1}, 0),
    ],
)
def test_rejects_non_numeric(latitude, longitude):
    with pytest.raises(InvalidCoordinates):
        validate_coordinates(latitude, longitude)


@pytest.mark.parametrize("latitude,longitude", [(91, 0), (-90.5, 0), (0, 180.1), (0, -181)])
def test_rejects_out_of_range(latitude, longitude):
    with pytest.raises(InvalidCoordinates) as exc_info:
        validate_coordinates(latitude, longitude)
    assert exc_info.value.message == "Coordenadas fora do range válido"


def test_rejects_excessive_precision_on_the_text_form():
    with pytest.raises(InvalidCoordinates) as exc_info:
        validate_coordinates(45.1234567, 0)
    assert exc_info.value.message == "Coordenadas com precisão excessiva"

    with pytest.raises(InvalidCoordinates):
        validate_coordinates("10", "10.1000000")


def test_six_decimal_places_are_allowed():
    assert validate_coordinates("45.123456", "-46.000001").latitude == 45.123456


def test_pagination_defaults():
    assert parse_pagination() == Pagination(limit=100, offset=0)


def test_pagination_parses_values():
    assert parse_pagination("1", "0") == Pagination(limit=1, offset=0)
    assert parse_pagination("1000", "5000") == Pagination(limit=1000, offset=5000)


@pytest.mark.parametrize(
    "limit,offset",
    [("0", None), ("1001", None), (None, "-1"), ("abc", None), ("", None), ("1.5", None), (None, "x")],
)
def test_pagination_rejects_invalid(limit, offset):
    with pytest.raises(InvalidPagination) as exc_info:
        parse_pagination(limit, offset)
    assert exc_info.value.code == ErrorCode.INVALID_PAGINATION


def test_rejects_non_ascii_digits():
    with pytest.raises(InvalidCoordinates):
        validate_coordinates("٤٥", "1")
    with pytest.raises(InvalidCoordinates):
        validate_coordinates("1", "１２.５")
    with pytest.raises(InvalidPagination):
        parse_pagination("٥", None)
