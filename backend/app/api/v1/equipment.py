"""
Endpoints de bloqueio de equipamento.

Contratos:
    - POST /equipment/{id}/block: Bloqueia o equipamento e os pedidos afetados
    - POST /equipment/{id}/unblock: Encerra o bloqueio manual vigente

Autorização:
    - Todos os endpoints requerem MANAGER

Status codes:
    - 200: Sucesso
    - 400: Período inválido ou no passado
    - 401: Não autenticado
    - 403: Sem permissão (não é gerente)
    - 404: Equipamento não encontrado ou não bloqueado
    - 422: Datas sem fuso horário
    - 500: Falha de leitura/escrita (nada é gravado)
"""

from uuid import UUID

from fastapi import APIRouter

from app.core.deps import DbSession, ManagerUser
from app.schemas.equipment import (
    EquipmentBlockCreate,
    EquipmentBlockResult,
    EquipmentUnblockResult,
)
from app.services.equipment_block import EquipmentBlockService

router = APIRouter(prefix="/equipment", tags=["Equipment"])


@router.post(
    "/{equipment_id}/block",
    response_model=EquipmentBlockResult,
    summary="Bloquear equipamento",
    description=(
        "Marca o equipamento como NOT_AVAILABLE no período e move para BLOCKED "
        "os pedidos APPROVED/PREPARED que começam dentro dele. **Requer MANAGER.**"
    ),
)
async def block_equipment(
    equipment_id: UUID,
    data: EquipmentBlockCreate,
    db: DbSession,
    manager: ManagerUser,
) -> EquipmentBlockResult:
    service = EquipmentBlockService(db)
    return await service.block(equipment_id, data, manager)


@router.post(
    "/{equipment_id}/unblock",
    response_model=EquipmentUnblockResult,
    summary="Desbloquear equipamento",
    description="Devolve o equipamento para AVAILABLE. Pedidos BLOCKED continuam BLOCKED. **Requer MANAGER.**",
)
async def unblock_equipment(
    equipment_id: UUID,
    db: DbSession,
    manager: ManagerUser,
) -> EquipmentUnblockResult:
    """
    Pedidos bloqueados não voltam ao status anterior: o gerente encerra
    cada um (BLOCKED -> CLOSED).
    """
    service = EquipmentBlockService(db)
    return await service.unblock(equipment_id, manager)
