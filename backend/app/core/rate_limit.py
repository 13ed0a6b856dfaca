"""
Rate limiting usando Redis (janela fixa por usuário ou IP).

Configurável via variáveis de ambiente:
    - RATE_LIMIT_ENABLED: bool (default: True) - Habilita/desabilita rate limiting
    - RATE_LIMIT_REQUESTS: int (default: 60) - Número de requests permitidos
    - RATE_LIMIT_WINDOW_SECONDS: int (default: 60) - Janela de tempo em segundos

Uso:
    @router.post("/endpoint")
    async def endpoint(
        _: None = Depends(RateLimiter(requests=30, window=60)),
    ):
        ...

Sem Redis (ou com erro no Redis) a requisição passa (fail-open).
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import get_settings
from app.core.security import decode_token, get_token_subject
from app.db import redis as redis_db

logger = logging.getLogger(__name__)
settings = get_settings()
optional_bearer = HTTPBearer(auto_error=False)


class RateLimiter:
    """
    Dependency para rate limiting usando Redis.

    Args:
        requests: Número máximo de requests por janela (default: config)
        window: Janela de tempo em segundos (default: config)
        key_prefix: Prefixo para a chave no Redis
    """

    def __init__(
        self,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        key_prefix: str = "rate_limit",
    ):
        self.requests = requests or settings.RATE_LIMIT_REQUESTS
        self.window = window or settings.RATE_LIMIT_WINDOW_SECONDS
        self.key_prefix = key_prefix

    async def __call__(
        self,
        request: Request,
        credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(optional_bearer)] = None,
    ) -> None:
        """
        Verifica rate limit.

        Raises:
            HTTPException 429: Rate limit excedido
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        client = redis_db.redis_client
        if client is None:
            return

        key = f"{self.key_prefix}:{self._get_identifier(request, credentials)}"

        try:
            current = await client.incr(key)
            if current == 1:
                await client.expire(key, self.window)

            if current > self.requests:
                ttl = await client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit excedido. Tente novamente em {ttl} segundos.",
                    headers={"Retry-After": str(ttl)},
                )
        except HTTPException:
            raise
        except Exception as e:
            logger.warning(f"Rate limit ignorado, erro no Redis: {e}")

    @staticmethod
    def _get_identifier(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials],
    ) -> str:
        """
        Identificador do cliente.

        Prioridade:
            1. user_id do JWT (se autenticado)
            2. IP do cliente (considerando X-Forwarded-For)
        """
        if credentials:
            user_id = get_token_subject(decode_token(credentials.credentials))
            if user_id is not None:
                return f"user:{user_id}"

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return f"ip:{forwarded.split(',')[0].strip()}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"


# Instâncias pré-configuradas
rate_limit_auth = RateLimiter(requests=10, window=60, key_prefix="rate_limit:auth")
rate_limit_status_change = RateLimiter(requests=30, window=60, key_prefix="rate_limit:status")
