"""
Endpoints do catálogo de status de pedido.

Contratos:
    - GET /order-statuses: Nomes de status cadastrados (cache Redis)
    - GET /order-statuses/transitions: Tabela de transições (staff)
"""

from fastapi import APIRouter

from app.core.deps import CurrentPrincipal, DbSession, StaffUser
from app.schemas.order_status import OrderStatusNameRead, TransitionRuleRead
from app.services.order_status import OrderStatusService

router = APIRouter(prefix="/order-statuses", tags=["Order Statuses"])


@router.get(
    "",
    response_model=list[OrderStatusNameRead],
    summary="Listar nomes de status",
)
async def list_status_names(
    db: DbSession,
    principal: CurrentPrincipal,
) -> list[OrderStatusNameRead]:
    """Lista os nomes de status de pedido na ordem do ciclo de vida."""
    service = OrderStatusService(db)
    names = await service.list_status_names()
    return [OrderStatusNameRead(status=name) for name in names]


@router.get(
    "/transitions",
    response_model=list[TransitionRuleRead],
    summary="Tabela de transições",
    description="Quem pode mover um pedido de um status para outro. **Requer staff.**",
)
async def list_transitions(staff: StaffUser) -> list[TransitionRuleRead]:
    """Tabela de transições com papéis permitidos e efeitos nos equipamentos."""
    return [TransitionRuleRead.from_rule(rule) for rule in OrderStatusService.list_transitions()]
