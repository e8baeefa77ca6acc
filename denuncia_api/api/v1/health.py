from fastapi import APIRouter

from denuncia_api.models.base import utc_now
from denuncia_api.schemas.health import HealthOut

router = APIRouter()


@router.get('/health', response_model=HealthOut)
def health() -> HealthOut:
    return HealthOut(status='OK', message='Servidor funcionando corretamente', timestamp=utc_now())
