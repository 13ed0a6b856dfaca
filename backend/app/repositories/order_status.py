"""
Repositories para histórico de status de pedido e catálogo de nomes de status.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.enums import OrderStatusName
from app.models.order import Order, OrderStatusEvent, OrderStatusNameEntry, order_equipment
from app.repositories.base import BaseRepository


class OrderStatusRepository(BaseRepository[OrderStatusEvent]):
    """Repository append-only dos eventos de status de pedido."""

    def __init__(self, db: AsyncSession):
        super().__init__(OrderStatusEvent, db)

    async def get_current_status(self, order_id: UUID) -> OrderStatusEvent | None:
        """
        Busca o status atual (evento mais recente) de um pedido.

        O evento volta com order, order.user e order.equipment carregados.
        Empate de created_at é resolvido pelo id, só para a escolha ser estável.

        Returns:
            Evento mais recente ou None se o pedido não tem eventos
        """
        result = await self.db.execute(
            select(OrderStatusEvent)
            .where(OrderStatusEvent.order_id == order_id)
            .options(
                selectinload(OrderStatusEvent.order).selectinload(Order.user),
                selectinload(OrderStatusEvent.order).selectinload(Order.equipment),
                selectinload(OrderStatusEvent.changed_by),
            )
            .order_by(OrderStatusEvent.created_at.desc(), OrderStatusEvent.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def append_status(
        self,
        order_id: UUID,
        status: OrderStatusName,
        changed_by_id: UUID,
        comment: str,
        created_at: datetime,
    ) -> OrderStatusEvent:
        """Adiciona um novo evento ao histórico (nunca altera os existentes)."""
        event = await self.create(
            order_id=order_id,
            status=status,
            changed_by_id=changed_by_id,
            comment=comment,
            created_at=created_at,
        )
        # changed_by carregado aqui: lazy load não funciona na sessão async
        await self.db.refresh(event, attribute_names=["changed_by"])
        return event

    async def get_history(self, order_id: UUID) -> list[OrderStatusEvent]:
        """Lista o histórico do pedido em ordem cronológica estável."""
        result = await self.db.execute(
            select(OrderStatusEvent)
            .where(OrderStatusEvent.order_id == order_id)
            .options(selectinload(OrderStatusEvent.changed_by))
            .order_by(OrderStatusEvent.created_at, OrderStatusEvent.id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _latest_status_subquery():
        """DISTINCT ON (order_id): só o evento mais recente de cada pedido."""
        return (
            select(OrderStatusEvent.order_id, OrderStatusEvent.status)
            .distinct(OrderStatusEvent.order_id)
            .order_by(
                OrderStatusEvent.order_id,
                OrderStatusEvent.created_at.desc(),
                OrderStatusEvent.id.desc(),
            )
            .subquery()
        )

    async def get_orders_with_current_status(
        self,
        status: OrderStatusName,
    ) -> list[Order]:
        """Lista pedidos cujo status atual é status, por rent_end."""
        latest = self._latest_status_subquery()
        result = await self.db.execute(
            select(Order)
            .join(latest, latest.c.order_id == Order.id)
            .where(latest.c.status == status)
            .options(selectinload(Order.user))
            .order_by(Order.rent_end)
        )
        return list(result.scalars().all())

    async def get_orders_to_block(
        self,
        equipment_id: UUID,
        statuses: list[OrderStatusName],
        start: datetime,
        end: datetime,
    ) -> list[Order]:
        """
        Lista pedidos do equipamento afetados por um bloqueio em [start, end].

        Entram os pedidos que começam dentro do período, terminam depois
        do seu início e cujo status atual está em statuses.
        """
        if not statuses:
            return []
        latest = self._latest_status_subquery()
        result = await self.db.execute(
            select(Order)
            .join(order_equipment, order_equipment.c.order_id == Order.id)
            .join(latest, latest.c.order_id == Order.id)
            .where(
                order_equipment.c.equipment_id == equipment_id,
                latest.c.status.in_(statuses),
                Order.rent_start >= start,
                Order.rent_start <= end,
                Order.rent_end >= start,
            )
            .order_by(Order.rent_start, Order.id)
        )
        return list(result.scalars().all())


class OrderStatusNameRepository:
    """Repository do catálogo de nomes de status (somente leitura)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[OrderStatusName]:
        """Lista todos os nomes de status cadastrados."""
        result = await self.db.execute(select(OrderStatusNameEntry.status))
        names = set(result.scalars().all())
        # Ordem do ciclo de vida, não a ordem do banco
        return [name for name in OrderStatusName if name in names]
