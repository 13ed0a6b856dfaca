"""
Repository para operações de Order no banco de dados.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.order import Order
from app.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Repository para operações de Order."""

    def __init__(self, db: AsyncSession):
        super().__init__(Order, db)

    async def lock(self, order_id: UUID) -> bool:
        """
        Trava a linha do pedido até o fim da transação (SELECT ... FOR UPDATE).

        Serializa mudanças de status concorrentes no mesmo pedido: a segunda
        requisição só lê o status atual depois que a primeira fizer commit.

        Returns:
            True se o pedido existe
        """
        result = await self.db.execute(
            select(Order.id).where(Order.id == order_id).with_for_update()
        )
        return result.scalar_one_or_none() is not None

    async def get_with_relations(self, order_id: UUID) -> Order | None:
        """Busca pedido com dono, equipamentos, histórico e status de equipamento."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(
                selectinload(Order.user),
                selectinload(Order.equipment),
                selectinload(Order.status_history),
                selectinload(Order.equipment_statuses),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
