from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Response
from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter
from loguru import logger

from denuncia_api.core.config import Settings, settings
from denuncia_api.core.errors import ErrorCode, RateLimitExceeded


@dataclass(frozen=True)
class RateLimitPolicy:
    name: str
    limit: int
    window_seconds: int
    code: ErrorCode
    message: str


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int

    def headers(self) -> dict[str, str]:
        values = {
            'RateLimit-Limit': str(self.limit),
            'RateLimit-Remaining': str(self.remaining),
            'RateLimit-Reset': str(self.reset_after),
        }
        if not self.allowed:
            values['Retry-After'] = str(self.reset_after)
        return values


class RateLimiter:
    """Fixed-window counter per client key.

    Each instance owns its storage, so two limiters never share counters.
    Expired windows are dropped by the storage itself.
    """

    def __init__(self, policy: RateLimitPolicy, storage: Optional[Storage] = None) -> None:
        self.policy = policy
        self._item = RateLimitItemPerSecond(policy.limit, policy.window_seconds, namespace=policy.name)
        self._storage = storage or MemoryStorage()
        self._strategy = FixedWindowRateLimiter(self._storage)

    def hit(self, key: str) -> RateLimitResult:
        allowed = self._strategy.hit(self._item, key)
        stats = self._strategy.get_window_stats(self._item, key)
        reset_after = max(0, math.ceil(stats.reset_time - time.time()))
        return RateLimitResult(
            allowed=allowed,
            limit=self.policy.limit,
            remaining=max(0, stats.remaining),
            reset_after=reset_after,
        )

    def check(self, key: str) -> RateLimitResult:
        result = self.hit(key)
        if not result.allowed:
            logger.warning("Rate limit {} exceeded for {}", self.policy.name, key)
            raise RateLimitExceeded(
                self.policy.message,
                code=self.policy.code,
                headers=result.headers(),
            )
        return result

    def reset(self) -> None:
        self._storage.reset()


@dataclass(frozen=True)
class RateLimiters:
    general: RateLimiter
    submission: RateLimiter


def build_rate_limiters(config: Settings = settings) -> RateLimiters:
    general = RateLimitPolicy(
        name='general',
        limit=config.RATE_LIMIT_MAX,
        window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
        code=ErrorCode.RATE_LIMIT_EXCEEDED,
        message='Muitas tentativas. Tente novamente em 15 minutos.',
    )
    submission = RateLimitPolicy(
        name='denuncia',
        limit=config.DENUNCIA_LIMIT_MAX,
        window_seconds=config.DENUNCIA_LIMIT_WINDOW_SECONDS,
        code=ErrorCode.DENUNCIA_LIMIT_EXCEEDED,
        message='Limite de denúncias excedido. Tente novamente em 1 hora.',
    )
    return RateLimiters(general=RateLimiter(general), submission=RateLimiter(submission))


def get_client_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        forwarded = request.headers.get('x-forwarded-for')
        if forwarded:
            first = forwarded.split(',')[0].strip()
            if first:
                return first
    if request.client and request.client.host:
        return request.client.host
    return 'unknown'


def get_client_agent(request: Request) -> str:
    return request.headers.get('user-agent') or 'unknown'


def get_rate_limiters(request: Request) -> RateLimiters:
    return request.app.state.rate_limiters


def enforce_submission_limit(request: Request, response: Response) -> RateLimitResult:
    limiters = get_rate_limiters(request)
    result = limiters.submission.check(get_client_ip(request))
    response.headers.update(result.headers())
    return result
