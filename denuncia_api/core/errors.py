from __future__ import annotations

from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from denuncia_api.core.config import settings


class ErrorCode(str, Enum):
    RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED'
    DENUNCIA_LIMIT_EXCEEDED = 'DENUNCIA_LIMIT_EXCEEDED'
    MISSING_COORDINATES = 'MISSING_COORDINATES'
    INVALID_COORDINATES = 'INVALID_COORDINATES'
    INVALID_PAGINATION = 'INVALID_PAGINATION'
    DATABASE_ERROR = 'DATABASE_ERROR'
    STATISTICS_ERROR = 'STATISTICS_ERROR'
    INTERNAL_ERROR = 'INTERNAL_ERROR'
    NOT_FOUND = 'NOT_FOUND'


class ApiError(Exception):
    """Error that maps onto a ``{error, code}`` JSON response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    message: str = 'Erro interno do servidor'

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code.value}


class MissingCoordinates(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.MISSING_COORDINATES
    message = 'Latitude e longitude são obrigatórias'


class InvalidCoordinates(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.INVALID_COORDINATES
    message = 'Coordenadas inválidas'


class InvalidPagination(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.INVALID_PAGINATION
    message = 'Parâmetros de paginação inválidos. Limit deve estar entre 1-1000 e offset >= 0.'


class RateLimitExceeded(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = ErrorCode.RATE_LIMIT_EXCEEDED
    message = 'Muitas tentativas. Tente novamente em 15 minutos.'


class StorageError(ApiError):
    code = ErrorCode.DATABASE_ERROR


class StatisticsError(ApiError):
    code = ErrorCode.STATISTICS_ERROR
    message = 'Erro interno do servidor ao buscar estatísticas'


def error_response(exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers or None)


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected malformed request body: {}", exc.errors())
    return error_response(InvalidCoordinates('Corpo da requisição inválido'))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                'error': 'Rota não encontrada',
                'code': ErrorCode.NOT_FOUND.value,
                'path': request.url.path,
            },
        )
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        return error_response(InvalidCoordinates('Corpo da requisição inválido'))
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': str(exc.detail), 'code': ErrorCode.INTERNAL_ERROR.value},
        headers=getattr(exc, 'headers', None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    content = {'error': 'Erro interno do servidor', 'code': ErrorCode.INTERNAL_ERROR.value}
    if settings.expose_errors:
        content['message'] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
