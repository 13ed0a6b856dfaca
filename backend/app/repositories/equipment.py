"""
Repositories para Equipment e EquipmentStatus.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import EquipmentStatusName
from app.models.equipment import Equipment, EquipmentStatus
from app.repositories.base import BaseRepository

# Status que ocupam o equipamento no período
BLOCKING_STATUSES = (
    EquipmentStatusName.BOOKED,
    EquipmentStatusName.IN_USE,
    EquipmentStatusName.NOT_AVAILABLE,
)


class EquipmentRepository(BaseRepository[Equipment]):
    """Repository para operações de Equipment."""

    def __init__(self, db: AsyncSession):
        super().__init__(Equipment, db)

    async def lock(self, equipment_id: UUID) -> bool:
        """
        Trava a linha do equipamento até o fim da transação (SELECT ... FOR UPDATE).

        Returns:
            True se o equipamento existe
        """
        result = await self.db.execute(
            select(Equipment.id).where(Equipment.id == equipment_id).with_for_update()
        )
        return result.scalar_one_or_none() is not None


class EquipmentStatusRepository(BaseRepository[EquipmentStatus]):
    """Repository para os intervalos de status de equipamento."""

    def __init__(self, db: AsyncSession):
        super().__init__(EquipmentStatus, db)

    async def get_by_order(self, order_id: UUID) -> list[EquipmentStatus]:
        """Lista os registros de status de equipamento ligados a um pedido."""
        result = await self.db.execute(
            select(EquipmentStatus)
            .where(EquipmentStatus.order_id == order_id)
            .order_by(EquipmentStatus.created_at, EquipmentStatus.id)
        )
        return list(result.scalars().all())

    async def get_current_block(self, equipment_id: UUID) -> EquipmentStatus | None:
        """
        Busca o bloqueio manual vigente do equipamento.

        Bloqueio manual é um registro NOT_AVAILABLE sem pedido. Havendo
        mais de um, vale o de end_date mais recente.
        """
        result = await self.db.execute(
            select(EquipmentStatus)
            .where(
                EquipmentStatus.equipment_id == equipment_id,
                EquipmentStatus.order_id.is_(None),
                EquipmentStatus.status == EquipmentStatusName.NOT_AVAILABLE,
            )
            .order_by(EquipmentStatus.end_date.desc(), EquipmentStatus.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_blocking_in_period(
        self,
        equipment_ids: list[UUID],
        start: datetime,
        end: datetime,
    ) -> list[EquipmentStatus]:
        """
        Lista registros BOOKED/IN_USE/NOT_AVAILABLE que cruzam [start, end]
        para os equipamentos informados.
        """
        if not equipment_ids:
            return []
        result = await self.db.execute(
            select(EquipmentStatus)
            .where(
                EquipmentStatus.equipment_id.in_(equipment_ids),
                EquipmentStatus.status.in_(BLOCKING_STATUSES),
                EquipmentStatus.start_date <= end,
                EquipmentStatus.end_date >= start,
            )
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        record: EquipmentStatus,
        status: EquipmentStatusName | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> EquipmentStatus:
        """
        Atualização parcial: só altera os campos informados.
        """
        return await self.update(
            record,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
