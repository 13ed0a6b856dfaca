"""
Conexão com Redis (cache do catálogo de status e rate limiting).

redis_client é inicializado no startup. Os consumidores leem
redis_db.redis_client no momento do uso, nunca no import.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

redis_client: Optional[redis.Redis] = None


async def init_redis() -> redis.Redis:
    """Cria o cliente Redis a partir de REDIS_URL."""
    global redis_client
    redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
    )
    return redis_client


async def close_redis() -> None:
    """Fecha a conexão com o Redis."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None


async def check_redis_connection() -> bool:
    """
    Verifica se a conexão com o Redis está funcionando.

    Returns:
        True se o PING respondeu, False caso contrário.
    """
    if redis_client is None:
        return False
    try:
        await redis_client.ping()
        return True
    except (RedisError, OSError) as e:
        logger.warning(f"Erro ao verificar conexão Redis: {e}")
        return False
