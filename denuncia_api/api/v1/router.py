from fastapi import APIRouter

from denuncia_api.api.v1 import denuncias, estatisticas, health
from denuncia_api.core.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(denuncias.router)
api_router.include_router(estatisticas.router)
