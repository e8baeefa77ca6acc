import time

from fastapi import Request

from denuncia_api.core.errors import RateLimitExceeded, error_response
from denuncia_api.core.logging import log_access
from denuncia_api.services.rate_limiter import get_client_agent, get_client_ip, get_rate_limiters

SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'no-referrer',
    'Cross-Origin-Resource-Policy': 'same-origin',
    'X-DNS-Prefetch-Control': 'off',
}


async def rate_limit_middleware(request: Request, call_next):
    limiter = get_rate_limiters(request).general
    try:
        result = limiter.check(get_client_ip(request))
    except RateLimitExceeded as exc:
        return error_response(exc)
    response = await call_next(request)
    for name, value in result.headers().items():
        response.headers.setdefault(name, value)
    return response


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


async def access_log_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    log_access(
        get_client_ip(request),
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        get_client_agent(request),
    )
    return response
