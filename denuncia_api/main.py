from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from denuncia_api.api.v1.router import api_router
from denuncia_api.core.config import settings
from denuncia_api.core.errors import register_exception_handlers
from denuncia_api.core.logging import configure_logging
from denuncia_api.core.middleware import access_log_middleware, rate_limit_middleware, security_headers_middleware
from denuncia_api.db.init_db import close_db, init_db
from denuncia_api.services.rate_limiter import build_rate_limiters

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info("Environment: {}", settings.ENV)
    yield
    logger.info("Shutting down server...")
    close_db()

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)
app.state.rate_limiters = build_rate_limiters(settings)

register_exception_handlers(app)

app.middleware('http')(rate_limit_middleware)

allow_origins = settings.cors_origins
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)
app.middleware('http')(security_headers_middleware)
app.middleware('http')(access_log_middleware)

app.include_router(api_router)


def run() -> None:
    logger.info("Server listening on port {}", settings.PORT)
    uvicorn.run(
        "denuncia_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
