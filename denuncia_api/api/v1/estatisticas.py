from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from denuncia_api.db.session import get_engine
from denuncia_api.schemas.denuncia import DenunciaStatistics
from denuncia_api.services.denuncia_service import aggregate_statistics

router = APIRouter(prefix='/estatisticas', tags=['estatisticas'])


@router.get('', response_model=DenunciaStatistics)
async def statistics_endpoint(engine: Engine = Depends(get_engine)) -> DenunciaStatistics:
    return await aggregate_statistics(engine)
