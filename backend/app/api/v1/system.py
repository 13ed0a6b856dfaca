"""
Endpoints de Sistema (Admin).

Contratos:
    - POST /system/check-overdue: Marca como OVERDUE os pedidos IN_PROGRESS vencidos

Autorização:
    - Todos os endpoints requerem ADMIN

Status codes:
    - 200: Sucesso
    - 401: Não autenticado
    - 403: Sem permissão (não é admin)
    - 500: Falha de leitura/escrita (nada é gravado)
"""

from fastapi import APIRouter

from app.core.deps import AdminUser, DbSession
from app.schemas.order_status import OverdueCheckResult
from app.services.overdue import OverdueService

router = APIRouter(prefix="/system", tags=["System (Admin)"])


@router.post(
    "/check-overdue",
    response_model=OverdueCheckResult,
    summary="Verificar pedidos atrasados",
    description="Move pedidos IN_PROGRESS com rent_end vencido para OVERDUE. **Requer ADMIN.**",
)
async def check_overdue(
    db: DbSession,
    admin: AdminUser,
) -> OverdueCheckResult:
    """
    Para cada pedido IN_PROGRESS com rent_end no passado:
        1. Confere se todos os equipamentos estão IN_USE
        2. Adiciona o status OVERDUE em nome do dono do pedido

    Pedidos com equipamento fora de IN_USE são ignorados e listados em skipped_order_ids.
    """
    service = OverdueService(db)
    return await service.checkup()
