"""
Tabela explícita de transições de status de pedido.

Toda a política de mudança de status fica visível aqui:
    - quem pode pedir cada transição (roles e/ou dono do pedido)
    - qual status de equipamento é exigido antes da transição
    - qual status de equipamento é aplicado depois dela

Qualquer par (atual, destino) fora da tabela é negado, a menos que o
override de staff esteja ligado (ORDER_STATUS_STAFF_OVERRIDE).
"""

from dataclasses import dataclass

from app.models.enums import (
    STAFF_ROLES,
    EquipmentStatusName,
    OrderStatusName,
    UserRole,
)

# Status de equipamento exigido para entrar no status de destino
REQUIRED_EQUIPMENT_STATUS: dict[OrderStatusName, EquipmentStatusName] = {
    OrderStatusName.PREPARED: EquipmentStatusName.BOOKED,
    OrderStatusName.IN_PROGRESS: EquipmentStatusName.BOOKED,
}

# Status aplicado aos equipamentos do pedido ao entrar no status de destino
EQUIPMENT_STATUS_EFFECT: dict[OrderStatusName, EquipmentStatusName] = {
    OrderStatusName.REJECTED: EquipmentStatusName.AVAILABLE,
    OrderStatusName.IN_PROGRESS: EquipmentStatusName.IN_USE,
    OrderStatusName.CLOSED: EquipmentStatusName.AVAILABLE,
}


@dataclass(frozen=True)
class TransitionRule:
    """
    Regra de uma transição (current -> target).

    Attributes:
        current: Status atual do pedido
        target: Status solicitado
        allowed_roles: Roles que podem executar a transição
        owner_may_request: Se o dono do pedido pode executá-la (cancelamento)
    """
    current: OrderStatusName
    target: OrderStatusName
    allowed_roles: frozenset[UserRole] = frozenset()
    owner_may_request: bool = False

    @property
    def required_equipment_status(self) -> EquipmentStatusName | None:
        return REQUIRED_EQUIPMENT_STATUS.get(self.target)

    @property
    def equipment_status(self) -> EquipmentStatusName | None:
        return EQUIPMENT_STATUS_EFFECT.get(self.target)

    @property
    def is_system_only(self) -> bool:
        """Transição que nenhum usuário pode pedir (OVERDUE, BLOCKED)."""
        return not self.allowed_roles and not self.owner_may_request


def _rules(*rules: TransitionRule) -> dict[tuple[OrderStatusName, OrderStatusName], TransitionRule]:
    return {(rule.current, rule.target): rule for rule in rules}


_S = OrderStatusName
_MANAGER = frozenset({UserRole.MANAGER})
_OPERATOR = frozenset({UserRole.OPERATOR})
_MANAGER_OR_OPERATOR = frozenset({UserRole.MANAGER, UserRole.OPERATOR})

TRANSITIONS = _rules(
    TransitionRule(_S.IN_REVIEW, _S.APPROVED, _MANAGER),
    TransitionRule(_S.IN_REVIEW, _S.REJECTED, _MANAGER),
    TransitionRule(_S.IN_REVIEW, _S.CLOSED, owner_may_request=True),
    TransitionRule(_S.APPROVED, _S.PREPARED, frozenset({UserRole.OPERATOR, UserRole.ADMIN})),
    TransitionRule(_S.APPROVED, _S.CLOSED, _MANAGER, owner_may_request=True),
    TransitionRule(_S.PREPARED, _S.IN_PROGRESS, _OPERATOR),
    TransitionRule(_S.PREPARED, _S.CLOSED, _MANAGER_OR_OPERATOR, owner_may_request=True),
    TransitionRule(_S.IN_PROGRESS, _S.CLOSED, _MANAGER_OR_OPERATOR),
    TransitionRule(_S.IN_PROGRESS, _S.OVERDUE),
    # Bloqueio de equipamento (EquipmentBlockService)
    TransitionRule(_S.APPROVED, _S.BLOCKED),
    TransitionRule(_S.PREPARED, _S.BLOCKED),
    TransitionRule(_S.OVERDUE, _S.CLOSED, _MANAGER_OR_OPERATOR),
    TransitionRule(_S.BLOCKED, _S.CLOSED, _MANAGER),
)


def get_transition_rule(
    current: OrderStatusName,
    target: OrderStatusName,
    staff_override: bool = False,
) -> TransitionRule | None:
    """
    Busca a regra da transição current -> target.

    Args:
        current: Status atual do pedido
        target: Status solicitado
        staff_override: Se True, pares fora da tabela viram permitidos
            para qualquer role de staff (comportamento legado)

    Returns:
        TransitionRule ou None se a transição nunca é permitida
    """
    rule = TRANSITIONS.get((current, target))
    if rule is not None:
        return rule
    if staff_override and current != target:
        return TransitionRule(current, target, STAFF_ROLES)
    return None


def list_transition_rules() -> list[TransitionRule]:
    """Lista a tabela inteira em ordem estável (ordem do enum)."""
    order = list(OrderStatusName)
    return sorted(
        TRANSITIONS.values(),
        key=lambda rule: (order.index(rule.current), order.index(rule.target)),
    )
