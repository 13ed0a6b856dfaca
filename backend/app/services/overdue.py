"""
Verificação periódica de pedidos atrasados.

Um pedido IN_PROGRESS cujo rent_end já passou vira OVERDUE, desde que
todos os seus equipamentos estejam IN_USE. O evento é registrado em nome
do dono do pedido. Os status de equipamento não mudam.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, system_clock
from app.core.logging import log_context
from app.models.enums import EquipmentStatusName, OrderStatusName
from app.repositories.equipment import EquipmentStatusRepository
from app.repositories.order import OrderRepository
from app.repositories.order_status import OrderStatusRepository
from app.schemas.order_status import OverdueCheckResult
from app.services.equipment_sync import find_mismatched_equipment
from app.services.transitions import get_transition_rule

logger = logging.getLogger(__name__)

OVERDUE_COMMENT = "overdue"


class OverdueService:
    """Service que move pedidos vencidos para OVERDUE."""

    def __init__(self, db: AsyncSession, clock: Clock | None = None):
        self.db = db
        self.clock = clock or system_clock
        self.order_repo = OrderRepository(db)
        self.order_status_repo = OrderStatusRepository(db)
        self.equipment_status_repo = EquipmentStatusRepository(db)

    async def checkup(self) -> OverdueCheckResult:
        """
        Processa todos os pedidos IN_PROGRESS vencidos.

        Returns:
            OverdueCheckResult com pedidos marcados e pedidos ignorados

        Raises:
            HTTPException 500: Falha de leitura/escrita (nada é gravado)
        """
        rule = get_transition_rule(OrderStatusName.IN_PROGRESS, OrderStatusName.OVERDUE)
        now = self.clock.now()
        overdue_ids = []
        skipped_ids = []

        try:
            orders = await self.order_status_repo.get_orders_with_current_status(rule.current)

            for order in orders:
                if order.rent_end >= now:
                    continue

                ctx = log_context(order_id=order.id, owner=order.user_id)

                # Revalida com o pedido travado: o status pode ter mudado
                await self.order_repo.lock(order.id)
                current = await self.order_status_repo.get_current_status(order.id)
                if current is None or current.status != rule.current:
                    continue

                records = await self.equipment_status_repo.get_by_order(order.id)
                mismatched = find_mismatched_equipment(records, EquipmentStatusName.IN_USE)
                if mismatched:
                    logger.warning(
                        f"Pedido vencido com equipamento fora de IN_USE | {ctx} "
                        f"equipment_status_ids={','.join(str(i) for i in mismatched)}"
                    )
                    skipped_ids.append(order.id)
                    continue

                await self.order_status_repo.append_status(
                    order_id=order.id,
                    status=rule.target,
                    changed_by_id=order.user_id,
                    comment=OVERDUE_COMMENT,
                    created_at=now,
                )
                overdue_ids.append(order.id)
                logger.info(f"Pedido marcado como OVERDUE | {ctx}")

            if overdue_ids:
                await self.db.commit()
            else:
                await self.db.rollback()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Falha na verificação de pedidos atrasados")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível verificar pedidos atrasados",
            )

        return OverdueCheckResult(
            overdue_order_ids=overdue_ids,
            skipped_order_ids=skipped_ids,
            message=f"{len(overdue_ids)} pedido(s) marcado(s) como OVERDUE, {len(skipped_ids)} ignorado(s)",
        )
