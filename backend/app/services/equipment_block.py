"""
Bloqueio e desbloqueio manual de equipamento (somente MANAGER).

Bloquear cria (ou estende) um registro NOT_AVAILABLE sem pedido para o
período e move para BLOCKED os pedidos do equipamento que começam dentro
dele e ainda não saíram do estoque (APPROVED ou PREPARED). Tudo em uma
única transação.

Desbloquear devolve o registro para AVAILABLE. Os pedidos BLOCKED não
voltam ao status anterior: o gerente encerra cada um (BLOCKED -> CLOSED),
o que libera os equipamentos com o dia de folga.
"""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, system_clock
from app.core.logging import log_context
from app.models.enums import EquipmentStatusName, OrderStatusName
from app.repositories.equipment import EquipmentRepository, EquipmentStatusRepository
from app.repositories.order import OrderRepository
from app.repositories.order_status import OrderStatusRepository
from app.schemas.equipment import (
    EquipmentBlockCreate,
    EquipmentBlockResult,
    EquipmentUnblockResult,
)
from app.schemas.user import Principal
from app.services.transitions import list_transition_rules

logger = logging.getLogger(__name__)


def blockable_statuses() -> list[OrderStatusName]:
    """Status a partir dos quais a tabela permite ir para BLOCKED."""
    return [
        rule.current
        for rule in list_transition_rules()
        if rule.target == OrderStatusName.BLOCKED
    ]


class EquipmentBlockService:
    """Service de bloqueio de equipamento."""

    def __init__(self, db: AsyncSession, clock: Clock | None = None):
        self.db = db
        self.clock = clock or system_clock
        self.equipment_repo = EquipmentRepository(db)
        self.equipment_status_repo = EquipmentStatusRepository(db)
        self.order_repo = OrderRepository(db)
        self.order_status_repo = OrderStatusRepository(db)

    # ==========================================
    # Block
    # ==========================================

    async def block(
        self,
        equipment_id: UUID,
        data: EquipmentBlockCreate,
        principal: Principal,
    ) -> EquipmentBlockResult:
        """
        Bloqueia o equipamento no período e bloqueia os pedidos afetados.

        Se o equipamento já tem um bloqueio manual, o período dele é
        substituído pelo novo (nesse caso start_date pode estar no passado).

        Raises:
            HTTPException 400: Período inválido ou já encerrado
            HTTPException 404: Equipamento não encontrado
            HTTPException 500: Falha de leitura/escrita (nada é gravado)
        """
        now = self.clock.now()
        ctx = log_context(equipment_id=equipment_id, actor=principal.id)

        if data.start_date > data.end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="start_date deve ser anterior a end_date",
            )
        if data.end_date < now:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_date não pode estar no passado",
            )

        try:
            result = await self._apply_block(equipment_id, data, principal, now)
            await self.db.commit()
        except HTTPException:
            await self.db.rollback()
            raise
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Falha ao bloquear equipamento | {ctx}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível bloquear o equipamento",
            )

        logger.info(f"Equipamento bloqueado | {ctx} orders={len(result.blocked_order_ids)}")
        return result

    async def _apply_block(
        self,
        equipment_id: UUID,
        data: EquipmentBlockCreate,
        principal: Principal,
        now: datetime,
    ) -> EquipmentBlockResult:
        if not await self.equipment_repo.lock(equipment_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Equipamento não encontrado",
            )

        record = await self.equipment_status_repo.get_current_block(equipment_id)
        if record is None:
            if data.start_date < now:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="start_date não pode estar no passado",
                )
            record = await self.equipment_status_repo.create(
                equipment_id=equipment_id,
                order_id=None,
                status=EquipmentStatusName.NOT_AVAILABLE,
                start_date=data.start_date,
                end_date=data.end_date,
                comment=data.comment,
            )
        else:
            record = await self.equipment_status_repo.update_status(
                record,
                start_date=data.start_date,
                end_date=data.end_date,
            )

        statuses = blockable_statuses()
        orders = await self.order_status_repo.get_orders_to_block(
            equipment_id, statuses, data.start_date, data.end_date
        )

        blocked_ids = []
        for order in orders:
            # Revalida com o pedido travado
            await self.order_repo.lock(order.id)
            current = await self.order_status_repo.get_current_status(order.id)
            if current is None or current.status not in statuses:
                continue

            await self.order_status_repo.append_status(
                order_id=order.id,
                status=OrderStatusName.BLOCKED,
                changed_by_id=principal.id,
                comment=data.comment,
                created_at=now,
            )
            blocked_ids.append(order.id)
            logger.info(
                f"Pedido bloqueado | {log_context(order_id=order.id, previous=current.status)}"
            )

        return EquipmentBlockResult(
            equipment_id=equipment_id,
            equipment_status_id=record.id,
            start_date=record.start_date,
            end_date=record.end_date,
            blocked_order_ids=blocked_ids,
            message=f"Equipamento bloqueado, {len(blocked_ids)} pedido(s) movido(s) para BLOCKED",
        )

    # ==========================================
    # Unblock
    # ==========================================

    async def unblock(
        self,
        equipment_id: UUID,
        principal: Principal,
    ) -> EquipmentUnblockResult:
        """
        Encerra o bloqueio manual vigente do equipamento.

        O registro vira AVAILABLE e o end_date é antecipado para o momento
        do desbloqueio (nunca antes do start_date).

        Raises:
            HTTPException 404: Equipamento não encontrado ou não bloqueado
            HTTPException 500: Falha de leitura/escrita
        """
        now = self.clock.now()
        ctx = log_context(equipment_id=equipment_id, actor=principal.id)

        try:
            if not await self.equipment_repo.lock(equipment_id):
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Equipamento não encontrado",
                )

            record = await self.equipment_status_repo.get_current_block(equipment_id)
            if record is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Equipamento não está bloqueado",
                )

            end_date = max(record.start_date, min(record.end_date, now))
            record = await self.equipment_status_repo.update_status(
                record,
                status=EquipmentStatusName.AVAILABLE,
                end_date=end_date,
            )
            await self.db.commit()
        except HTTPException:
            await self.db.rollback()
            raise
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Falha ao desbloquear equipamento | {ctx}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível desbloquear o equipamento",
            )

        logger.info(f"Equipamento desbloqueado | {ctx}")
        return EquipmentUnblockResult(
            equipment_id=equipment_id,
            equipment_status_id=record.id,
            end_date=record.end_date,
            message="Equipamento desbloqueado",
        )
