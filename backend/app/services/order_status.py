"""
Service de coordenação de status de pedido e de equipamento.

Fluxo de uma mudança de status (add_status):
    1. Valida o status solicitado (vazio/desconhecido -> 400)
    2. Trava o pedido e carrega o status atual (inexistente -> 404)
    3. Consulta o guard de autorização (negado -> 403)
    4. Carrega os status de equipamento do pedido
    5. Valida o pré-requisito de equipamento (violação -> 500 com IDs)
    6. Adiciona o novo evento ao histórico
    7. Aplica as alterações de equipamento
    8. Commit único

Os passos 2-7 rodam em uma única transação: qualquer falha faz rollback
de tudo, então status de pedido e de equipamento nunca ficam divergentes.
A trava da linha do pedido (FOR UPDATE) impede que duas requisições
simultâneas validem contra o mesmo status atual.
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import cache_service
from app.core.clock import Clock, system_clock
from app.core.config import get_settings
from app.core.logging import log_context
from app.models.enums import OrderStatusName, is_known_status
from app.models.order import OrderStatusEvent
from app.repositories.equipment import EquipmentStatusRepository
from app.repositories.order import OrderRepository
from app.repositories.order_status import OrderStatusNameRepository, OrderStatusRepository
from app.schemas.order_status import (
    EquipmentStatusChange,
    OrderStatusChangeResult,
    OrderStatusCreate,
    OrderStatusRead,
)
from app.schemas.user import Principal
from app.services.equipment_sync import compute_equipment_updates, require_equipment_status
from app.services.order_guard import can_change_status, can_view_history
from app.services.transitions import TransitionRule, list_transition_rules

logger = logging.getLogger(__name__)
settings = get_settings()


class OrderStatusService:
    """Service para mudanças e consultas de status de pedido."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock | None = None,
        staff_override: bool | None = None,
    ):
        self.db = db
        self.clock = clock or system_clock
        if staff_override is None:
            staff_override = settings.ORDER_STATUS_STAFF_OVERRIDE
        self.staff_override = staff_override
        self.order_repo = OrderRepository(db)
        self.order_status_repo = OrderStatusRepository(db)
        self.status_name_repo = OrderStatusNameRepository(db)
        self.equipment_status_repo = EquipmentStatusRepository(db)

    # ==========================================
    # Add Status
    # ==========================================

    async def add_status(
        self,
        order_id: UUID,
        data: OrderStatusCreate,
        principal: Principal,
    ) -> OrderStatusChangeResult:
        """
        Adiciona um novo status ao pedido e sincroniza os equipamentos.

        Args:
            order_id: ID do pedido
            data: Status solicitado e comentário
            principal: Ator autenticado

        Returns:
            OrderStatusChangeResult com o evento criado e as alterações de equipamento

        Raises:
            HTTPException 400: Status vazio ou desconhecido
            HTTPException 403: Ator sem permissão para a transição
            HTTPException 404: Pedido não encontrado
            HTTPException 500: Falha de leitura/escrita ou equipamento fora do status exigido
        """
        if not data.status or not is_known_status(data.status):
            logger.error(
                f"Status inválido | {log_context(order_id=order_id, actor=principal.id, status=data.status)}"
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Status vazio ou desconhecido",
            )
        target = OrderStatusName(data.status)

        try:
            result = await self._apply_status(order_id, target, data.comment, principal)
            await self.db.commit()
        except HTTPException:
            await self.db.rollback()
            raise
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(
                f"Falha ao gravar status | {log_context(order_id=order_id, actor=principal.id, target=target)}"
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível atualizar o status",
            )

        logger.info(
            "Status alterado | "
            + log_context(
                order_id=order_id,
                actor=principal.id,
                role=principal.role,
                current=result.previous_status,
                target=target,
                equipment=len(result.equipment_changes),
            )
        )
        return result

    async def _apply_status(
        self,
        order_id: UUID,
        target: OrderStatusName,
        comment: str,
        principal: Principal,
    ) -> OrderStatusChangeResult:
        """Passos 2-7 de add_status, dentro da transação aberta."""
        ctx = log_context(order_id=order_id, actor=principal.id, role=principal.role, target=target)

        # 2. Pedido travado + status atual
        try:
            exists = await self.order_repo.lock(order_id)
            current_event = await self.order_status_repo.get_current_status(order_id) if exists else None
        except SQLAlchemyError:
            logger.exception(f"Falha ao buscar status atual | {ctx}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível obter o status atual do pedido",
            )

        if not exists:
            logger.info(f"Pedido não encontrado | {ctx}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pedido não encontrado",
            )
        if current_event is None:
            logger.error(f"Pedido sem histórico de status | {ctx}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível obter o status atual do pedido",
            )

        current = current_event.status
        owner_id = current_event.order.user_id if current_event.order else None

        # 3. Autorização
        if not can_change_status(
            principal, owner_id, current, target, staff_override=self.staff_override
        ):
            logger.warning(f"Transição negada | {ctx} current={current.value}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Você não tem permissão para adicionar este status",
            )

        # 4. Status de equipamento do pedido
        try:
            records = await self.equipment_status_repo.get_by_order(order_id)
        except SQLAlchemyError:
            logger.exception(f"Falha ao buscar status de equipamento | {ctx}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível obter o status dos equipamentos",
            )

        # 5. Pré-requisito de equipamento
        require_equipment_status(target, records)

        # 6. Novo evento (append-only)
        event = await self.order_status_repo.append_status(
            order_id=order_id,
            status=target,
            changed_by_id=principal.id,
            comment=comment,
            created_at=self.clock.now(),
        )

        # 7. Alterações de equipamento
        updates = compute_equipment_updates(target, current, principal.role, records)
        records_by_id = {record.id: record for record in records}
        for update in updates:
            await self.equipment_status_repo.update_status(
                records_by_id[update.equipment_status_id],
                status=update.status,
                end_date=update.end_date,
            )

        return OrderStatusChangeResult(
            order_id=order_id,
            previous_status=current,
            status=target,
            event=OrderStatusRead.from_event(event),
            equipment_changes=[
                EquipmentStatusChange(
                    equipment_status_id=update.equipment_status_id,
                    equipment_id=update.equipment_id,
                    status=update.status,
                    end_date=update.end_date,
                )
                for update in updates
            ],
            message=f"Status alterado de {current.value} para {target.value}",
        )

    # ==========================================
    # History / Catalogue
    # ==========================================

    async def get_history(
        self,
        order_id: UUID,
        principal: Principal,
    ) -> list[OrderStatusEvent]:
        """
        Histórico completo de status do pedido.

        Raises:
            HTTPException 403: Ator não é staff nem alterou nenhum evento do pedido
            HTTPException 404: Pedido sem histórico (inexistente)
            HTTPException 500: Falha de leitura
        """
        try:
            history = await self.order_status_repo.get_history(order_id)
        except SQLAlchemyError:
            logger.exception(f"Falha ao buscar histórico | {log_context(order_id=order_id)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível obter o histórico do pedido",
            )

        if not can_view_history(principal, history):
            logger.warning(
                f"Acesso ao histórico negado | {log_context(order_id=order_id, actor=principal.id)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Você não tem permissão para ver este pedido",
            )

        if not history:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pedido não encontrado",
            )
        return history

    async def list_status_names(self) -> list[OrderStatusName]:
        """
        Catálogo de nomes de status (com cache Redis).

        Raises:
            HTTPException 500: Falha de leitura
        """
        cached = await cache_service.get_status_names()
        if cached is not None:
            return cached

        try:
            names = await self.status_name_repo.list_all()
        except SQLAlchemyError:
            logger.exception("Falha ao buscar nomes de status")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Não foi possível obter os nomes de status",
            )

        await cache_service.set_status_names(names)
        return names

    @staticmethod
    def list_transitions() -> list[TransitionRule]:
        """Tabela de transições vigente."""
        return list_transition_rules()
