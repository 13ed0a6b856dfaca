"""
Autorização de mudanças de status de pedido.

Dois caminhos independentes, combinados com OR, ambos lidos da
tabela de transições:
    1. Cancelamento pelo dono: regras com owner_may_request (o dono
       fecha o próprio pedido em IN_REVIEW, APPROVED ou PREPARED).
    2. Role: a role do ator precisa estar em allowed_roles da regra
       da transição (ver app.services.transitions).
"""

from typing import Iterable
from uuid import UUID

from app.models.enums import OrderStatusName
from app.models.order import OrderStatusEvent
from app.schemas.user import Principal
from app.services.transitions import get_transition_rule


def owner_can_close(
    principal: Principal,
    owner_id: UUID | None,
    current: OrderStatusName,
    target: OrderStatusName,
) -> bool:
    """Caminho de cancelamento pelo próprio dono do pedido."""
    if owner_id is None or principal.id != owner_id:
        return False
    # Sem override: o dono nunca ganha pares fora da tabela
    rule = get_transition_rule(current, target)
    return rule is not None and rule.owner_may_request


def role_can_transition(
    principal: Principal,
    current: OrderStatusName,
    target: OrderStatusName,
    staff_override: bool = False,
) -> bool:
    """Caminho baseado na role do ator."""
    rule = get_transition_rule(current, target, staff_override=staff_override)
    if rule is None:
        return False
    return principal.role in rule.allowed_roles


def can_change_status(
    principal: Principal,
    owner_id: UUID | None,
    current: OrderStatusName,
    target: OrderStatusName,
    staff_override: bool = False,
) -> bool:
    """
    Decide se o ator pode mover o pedido de current para target.

    Args:
        principal: Ator autenticado (id + role)
        owner_id: ID do dono do pedido
        current: Status atual
        target: Status solicitado
        staff_override: Liga o fallback permissivo para staff

    Returns:
        True se algum dos dois caminhos autoriza
    """
    return owner_can_close(principal, owner_id, current, target) or role_can_transition(
        principal, current, target, staff_override=staff_override
    )


def can_view_history(principal: Principal, history: Iterable[OrderStatusEvent]) -> bool:
    """
    Staff vê qualquer histórico; os demais só se alteraram
    pelo menos um dos eventos (o dono cria o IN_REVIEW).
    """
    if principal.is_staff:
        return True
    return any(event.changed_by_id == principal.id for event in history)
