import json
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from denuncia_api.core.errors import InvalidCoordinates
from denuncia_api.db.session import get_session
from denuncia_api.schemas.denuncia import DenunciaCreate, DenunciaCreated, DenunciaOut, DenunciaPage
from denuncia_api.services.denuncia_service import create_denuncia, list_denuncias
from denuncia_api.services.rate_limiter import (
    RateLimitResult,
    enforce_submission_limit,
    get_client_agent,
    get_client_ip,
)
from denuncia_api.services.validation import parse_pagination, validate_coordinates

router = APIRouter(prefix='/denuncias', tags=['denuncias'])


async def read_denuncia_payload(
    request: Request,
    _: RateLimitResult = Depends(enforce_submission_limit),
) -> DenunciaCreate:
    # Decoded only after the submission limit has counted the request.
    raw = await request.body()
    if not raw.strip():
        return DenunciaCreate()
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise InvalidCoordinates('Corpo da requisição inválido') from exc
    if data is None:
        return DenunciaCreate()
    if not isinstance(data, dict):
        raise InvalidCoordinates('Corpo da requisição inválido')
    return DenunciaCreate.model_validate(data)


@router.post(
    '',
    response_model=DenunciaCreated,
    status_code=status.HTTP_201_CREATED,
    openapi_extra={
        'requestBody': {
            'content': {'application/json': {'schema': DenunciaCreate.model_json_schema()}},
        },
    },
)
def create_denuncia_endpoint(
    request: Request,
    payload: DenunciaCreate = Depends(read_denuncia_payload),
    session: Session = Depends(get_session),
) -> DenunciaCreated:
    coordinates = validate_coordinates(payload.latitude, payload.longitude)
    record = create_denuncia(
        session,
        coordinates,
        client_ip=get_client_ip(request),
        client_agent=get_client_agent(request),
    )
    return DenunciaCreated(
        id=record.id,
        latitude=record.latitude,
        longitude=record.longitude,
        timestamp=record.created_at,
        message='Denúncia registrada com sucesso',
    )


@router.get('', response_model=DenunciaPage)
def list_denuncias_endpoint(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    session: Session = Depends(get_session),
) -> DenunciaPage:
    pagination = parse_pagination(limit, offset)
    records, total = list_denuncias(session, pagination)
    return DenunciaPage(
        denuncias=[
            DenunciaOut(
                id=record.id,
                latitude=record.latitude,
                longitude=record.longitude,
                timestamp=record.created_at,
            )
            for record in records
        ],
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
    )
