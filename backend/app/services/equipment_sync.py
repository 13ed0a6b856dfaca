"""
Sincronização entre status de pedido e status de equipamento.

Regras:
    - PREPARED e IN_PROGRESS exigem todos os equipamentos BOOKED
    - REJECTED libera os equipamentos (AVAILABLE)
    - IN_PROGRESS marca os equipamentos como IN_USE
    - CLOSED libera os equipamentos e, em alguns casos, estende o
      end_date em um dia de folga (buffer) antes da próxima locação
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence
from uuid import UUID

from fastapi import HTTPException, status

from app.models.enums import EquipmentStatusName, OrderStatusName, UserRole
from app.models.equipment import EquipmentStatus
from app.services.transitions import EQUIPMENT_STATUS_EFFECT, REQUIRED_EQUIPMENT_STATUS

logger = logging.getLogger(__name__)

BUFFER_DAYS = 1

# Fechamento a partir destes status sempre ganha o dia de folga
_BUFFER_ALWAYS = frozenset({OrderStatusName.IN_PROGRESS, OrderStatusName.OVERDUE})
# Fechamento a partir destes status ganha o dia de folga quando feito por MANAGER
_BUFFER_FOR_MANAGER = frozenset({
    OrderStatusName.APPROVED,
    OrderStatusName.BLOCKED,
    OrderStatusName.PREPARED,
})


@dataclass(frozen=True)
class EquipmentStatusUpdate:
    """Alteração a aplicar em um registro de status de equipamento."""
    equipment_status_id: UUID
    equipment_id: UUID
    status: EquipmentStatusName
    end_date: datetime | None = None


def find_mismatched_equipment(
    records: Sequence[EquipmentStatus],
    required: EquipmentStatusName,
) -> list[UUID]:
    """Retorna os IDs de todos os registros cujo status difere de required."""
    return [record.id for record in records if record.status != required]


def require_equipment_status(
    target: OrderStatusName,
    records: Sequence[EquipmentStatus],
) -> None:
    """
    Valida o pré-requisito de equipamento para o status de destino.

    Raises:
        HTTPException 500: Algum equipamento não está no status exigido.
            O detail lista todos os registros fora do status.
    """
    required = REQUIRED_EQUIPMENT_STATUS.get(target)
    if required is None:
        return

    mismatched = [record for record in records if record.status != required]
    if mismatched:
        record_ids = [str(record.id) for record in mismatched]
        logger.error(
            f"Equipamentos fora do status esperado: required={required.value} "
            f"target={target.value} ids={record_ids}"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": f"Equipamentos não estão com status {required.value}",
                "equipment_status_ids": record_ids,
                "equipment_ids": [str(record.equipment_id) for record in mismatched],
            },
        )


def closure_extends_end_date(current: OrderStatusName, role: UserRole | None) -> bool:
    """
    Regra do dia de folga no fechamento.

    Estende se o pedido estava IN_PROGRESS/OVERDUE, ou se estava
    APPROVED/BLOCKED/PREPARED e quem fechou foi um MANAGER.
    """
    if current in _BUFFER_ALWAYS:
        return True
    return current in _BUFFER_FOR_MANAGER and role == UserRole.MANAGER


def compute_equipment_updates(
    target: OrderStatusName,
    current: OrderStatusName,
    role: UserRole | None,
    records: Sequence[EquipmentStatus],
) -> list[EquipmentStatusUpdate]:
    """
    Calcula as alterações de equipamento que acompanham a transição.

    O novo end_date é calculado por registro, a partir do end_date
    do próprio registro.

    Args:
        target: Status de destino do pedido
        current: Status do pedido antes da transição
        role: Role de quem executa a transição
        records: Registros de status de equipamento do pedido

    Returns:
        Lista vazia quando o destino não afeta equipamentos
    """
    new_status = EQUIPMENT_STATUS_EFFECT.get(target)
    if new_status is None:
        return []

    extend = target == OrderStatusName.CLOSED and closure_extends_end_date(current, role)

    return [
        EquipmentStatusUpdate(
            equipment_status_id=record.id,
            equipment_id=record.equipment_id,
            status=new_status,
            end_date=record.end_date + timedelta(days=BUFFER_DAYS) if extend else None,
        )
        for record in records
    ]
