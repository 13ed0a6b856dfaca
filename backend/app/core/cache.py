"""
Cache service usando Redis.

Fornece cache para dados de referência lidos com frequência.
Configurável via variáveis de ambiente:
    - CACHE_ENABLED: bool (default: True) - Habilita/desabilita cache
    - CACHE_STATUS_NAMES_TTL_SECONDS: int (default: 300) - TTL do catálogo de status

Uso:
    names = await cache_service.get_status_names()
    if names is None:
        names = await repo.list_all()
        await cache_service.set_status_names(names)

Falhas do Redis nunca propagam: o cache apenas deixa de ser usado.
"""

import json
import logging
from typing import Optional

from app.core.config import get_settings
from app.db import redis as redis_db
from app.models.enums import OrderStatusName

logger = logging.getLogger(__name__)
settings = get_settings()


class CacheService:
    """
    Service para operações de cache usando Redis.

    Implementa cache para:
        - Catálogo de nomes de status de pedido (GET /order-statuses)
    """

    KEY_STATUS_NAMES = "cache:order-status-names"

    def __init__(self, ttl: Optional[int] = None):
        """
        Args:
            ttl: TTL padrão em segundos (default: config)
        """
        self.ttl = ttl or settings.CACHE_STATUS_NAMES_TTL_SECONDS

    @staticmethod
    def _client():
        if not settings.CACHE_ENABLED:
            return None
        return redis_db.redis_client

    async def get_status_names(self) -> Optional[list[OrderStatusName]]:
        """
        Busca o catálogo de status no cache.

        Returns:
            Lista de status ou None se não está em cache
        """
        client = self._client()
        if client is None:
            return None

        try:
            data = await client.get(self.KEY_STATUS_NAMES)
            if data:
                return [OrderStatusName(value) for value in json.loads(data)]
            return None
        except Exception as e:
            logger.warning(f"Erro ao buscar cache de status: {e}")
            return None

    async def set_status_names(
        self,
        names: list[OrderStatusName],
        ttl: Optional[int] = None,
    ) -> bool:
        """
        Salva o catálogo de status no cache.

        Returns:
            True se salvou com sucesso, False caso contrário
        """
        client = self._client()
        if client is None:
            return False

        try:
            await client.setex(
                self.KEY_STATUS_NAMES,
                ttl or self.ttl,
                json.dumps([name.value for name in names]),
            )
            return True
        except Exception as e:
            logger.warning(f"Erro ao salvar cache de status: {e}")
            return False

    async def invalidate_status_names(self) -> bool:
        """
        Remove o catálogo de status do cache (ex.: após rodar o seed).

        Returns:
            True se invalidou com sucesso, False caso contrário
        """
        client = self._client()
        if client is None:
            return False

        try:
            await client.delete(self.KEY_STATUS_NAMES)
            return True
        except Exception as e:
            logger.warning(f"Erro ao invalidar cache de status: {e}")
            return False


# Instância global para uso nos services
cache_service = CacheService()
