"""
Service para lógica de negócio de pedidos (Order).

Regras de negócio:
    - Todo pedido nasce com um evento IN_REVIEW criado pelo próprio dono
    - Cada equipamento do pedido recebe um registro BOOKED no período da locação
    - Equipamento ocupado (BOOKED/IN_USE/NOT_AVAILABLE) no período não pode ser reservado
    - Pedido é visível apenas para staff ou para o dono
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, system_clock
from app.core.logging import log_context
from app.models.enums import EquipmentStatusName, OrderStatusName
from app.models.order import Order
from app.repositories.equipment import EquipmentRepository, EquipmentStatusRepository
from app.repositories.order import OrderRepository
from app.repositories.order_status import OrderStatusRepository
from app.schemas.order import OrderCreate
from app.schemas.user import Principal

logger = logging.getLogger(__name__)


class OrderService:
    """Service para operações de pedido."""

    def __init__(self, db: AsyncSession, clock: Clock | None = None):
        self.db = db
        self.clock = clock or system_clock
        self.order_repo = OrderRepository(db)
        self.order_status_repo = OrderStatusRepository(db)
        self.equipment_repo = EquipmentRepository(db)
        self.equipment_status_repo = EquipmentStatusRepository(db)

    # ==========================================
    # Create Order
    # ==========================================

    async def create_order(self, principal: Principal, data: OrderCreate) -> Order:
        """
        Cria um novo pedido.

        Fluxo:
            1. Busca os equipamentos solicitados
            2. Verifica conflitos de agenda no período
            3. Cria o pedido
            4. Cria o evento IN_REVIEW
            5. Cria um registro BOOKED por equipamento
            6. Commit único

        Raises:
            HTTPException 400: Equipamento indisponível no período
            HTTPException 404: Equipamento não encontrado
            HTTPException 500: Falha ao gravar
        """
        equipment_ids = list(dict.fromkeys(data.equipment_ids))

        # 1. Equipamentos
        equipment = await self.equipment_repo.get_many(equipment_ids)
        found = {item.id for item in equipment}
        missing = [str(equipment_id) for equipment_id in equipment_ids if equipment_id not in found]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"message": "Equipamento não encontrado", "equipment_ids": missing},
            )

        # 2. Conflitos
        conflicts = await self.equipment_status_repo.get_blocking_in_period(
            equipment_ids, data.rent_start, data.rent_end
        )
        if conflicts:
            busy = sorted({str(record.equipment_id) for record in conflicts})
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Equipamento indisponível no período", "equipment_ids": busy},
            )

        try:
            # 3. Pedido
            order = await self.order_repo.create(
                user_id=principal.id,
                description=data.description,
                quantity=data.quantity,
                rent_start=data.rent_start,
                rent_end=data.rent_end,
                equipment=equipment,
            )

            # 4. Primeiro evento
            await self.order_status_repo.append_status(
                order_id=order.id,
                status=OrderStatusName.IN_REVIEW,
                changed_by_id=principal.id,
                comment=data.description,
                created_at=self.clock.now(),
            )

            # 5. Reserva dos equipamentos
            for item in equipment:
                await self.equipment_status_repo.create(
                    equipment_id=item.id,
                    order_id=order.id,
                    status=EquipmentStatusName.BOOKED,
                    start_date=data.rent_start,
                    end_date=data.rent_end,
                    comment="",
                )

            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Falha ao criar pedido | {log_context(actor=principal.id)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível criar o pedido",
            )

        logger.info(
            f"Pedido criado | {log_context(order_id=order.id, actor=principal.id, equipment=len(equipment))}"
        )
        return await self.order_repo.get_with_relations(order.id)

    # ==========================================
    # Get Order
    # ==========================================

    async def get_order(self, order_id: UUID, principal: Principal) -> Order:
        """
        Busca pedido com relacionamentos.

        Raises:
            HTTPException 403: Ator não é staff nem dono do pedido
            HTTPException 404: Pedido não encontrado
        """
        order = await self.order_repo.get_with_relations(order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pedido não encontrado",
            )

        if not principal.is_staff and order.user_id != principal.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Você não tem permissão para ver este pedido",
            )
        return order
