"""
Endpoints de Pedidos (Order) e de mudança de status.

Contratos:
    - POST /orders: Cria pedido (usuário autenticado)
    - GET /orders/{id}: Detalhes do pedido
    - POST /orders/{id}/status: Adiciona status ao pedido
    - GET /orders/{id}/history: Histórico de status

Autorização:
    - GET /orders/{id}: staff ou dono
    - POST /orders/{id}/status: tabela de transições por papel + cancelamento pelo dono
    - GET /orders/{id}/history: staff ou quem alterou algum status do pedido

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: Status vazio/desconhecido ou equipamento indisponível
    - 401: Não autenticado
    - 403: Sem permissão
    - 404: Pedido não encontrado
    - 500: Falha de leitura/escrita ou equipamento fora do status exigido
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.core.deps import CurrentPrincipal, DbSession
from app.core.rate_limit import rate_limit_status_change
from app.schemas.order import OrderCreate, OrderDetail
from app.schemas.order_status import OrderStatusChangeResult, OrderStatusCreate, OrderStatusRead
from app.services.order import OrderService
from app.services.order_status import OrderStatusService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=OrderDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Criar pedido",
    description="Cria um pedido de locação em IN_REVIEW e reserva (BOOKED) os equipamentos no período.",
)
async def create_order(
    data: OrderCreate,
    db: DbSession,
    principal: CurrentPrincipal,
) -> OrderDetail:
    """
    Cria novo pedido para o usuário autenticado.

    Raises:
        400: Equipamento indisponível no período
        404: Equipamento não encontrado
        422: rent_end não é posterior a rent_start
    """
    service = OrderService(db)
    order = await service.create_order(principal, data)
    return OrderDetail.from_order(order)


@router.get(
    "/{order_id}",
    response_model=OrderDetail,
    summary="Detalhes do pedido",
)
async def get_order(
    order_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> OrderDetail:
    """
    Retorna pedido com status atual, histórico e status dos equipamentos.

    Autorização: staff ou dono do pedido.
    """
    service = OrderService(db)
    order = await service.get_order(order_id, principal)
    return OrderDetail.from_order(order)


@router.post(
    "/{order_id}/status",
    response_model=OrderStatusChangeResult,
    summary="Adicionar status ao pedido",
    description="Registra a transição de status e sincroniza os status dos equipamentos.",
)
async def add_order_status(
    order_id: UUID,
    data: OrderStatusCreate,
    db: DbSession,
    principal: CurrentPrincipal,
    _: None = Depends(rate_limit_status_change),
) -> OrderStatusChangeResult:
    """
    Adiciona um novo status ao pedido.

    Efeitos nos equipamentos:
        - REJECTED: AVAILABLE
        - IN_PROGRESS: IN_USE (exige todos BOOKED)
        - PREPARED: exige todos BOOKED
        - CLOSED: AVAILABLE, com um dia de folga no end_date conforme o status anterior

    Raises:
        400: Status vazio ou desconhecido
        403: Transição não permitida para o ator
        404: Pedido não encontrado
        500: Equipamento fora do status exigido (lista os IDs) ou falha de escrita
    """
    service = OrderStatusService(db)
    return await service.add_status(order_id, data, principal)


@router.get(
    "/{order_id}/history",
    response_model=list[OrderStatusRead],
    summary="Histórico de status do pedido",
)
async def get_order_history(
    order_id: UUID,
    db: DbSession,
    principal: CurrentPrincipal,
) -> list[OrderStatusRead]:
    """
    Lista todos os status do pedido em ordem cronológica.

    Autorização: staff ou quem alterou algum status do pedido.
    """
    service = OrderStatusService(db)
    history = await service.get_history(order_id, principal)
    return [OrderStatusRead.from_event(event) for event in history]
