"""
Enums utilizados nos models da aplicação.

Este módulo é o vocabulário fixo de status: nomes de status de pedido,
nomes de status de equipamento e roles de usuário.
"""

import enum


class UserRole(str, enum.Enum):
    """Roles de usuário no sistema."""
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    OPERATOR = "OPERATOR"
    USER = "USER"


# Roles que compõem a equipe (staff)
STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.OPERATOR})


class OrderStatusName(str, enum.Enum):
    """
    Status do ciclo de vida de um pedido (order).

    Fluxo típico:
        IN_REVIEW -> APPROVED -> PREPARED -> IN_PROGRESS -> CLOSED
        IN_REVIEW -> REJECTED
        IN_PROGRESS -> OVERDUE -> CLOSED (atraso na devolução)
        APPROVED|PREPARED -> BLOCKED -> CLOSED (equipamento bloqueado)
    """
    IN_REVIEW = "IN_REVIEW"      # Aguardando análise do gerente
    APPROVED = "APPROVED"        # Aprovado pelo gerente
    PREPARED = "PREPARED"        # Equipamento separado pelo operador
    IN_PROGRESS = "IN_PROGRESS"  # Equipamento entregue ao usuário
    OVERDUE = "OVERDUE"          # Devolução atrasada
    REJECTED = "REJECTED"        # Recusado pelo gerente
    CLOSED = "CLOSED"            # Encerrado (devolvido ou cancelado)
    BLOCKED = "BLOCKED"          # Equipamento bloqueado pelo gerente


class EquipmentStatusName(str, enum.Enum):
    """Status de disponibilidade de um equipamento em um intervalo."""
    AVAILABLE = "AVAILABLE"          # Livre para reserva
    BOOKED = "BOOKED"                # Reservado para um pedido futuro
    IN_USE = "IN_USE"                # Retirado pelo usuário
    NOT_AVAILABLE = "NOT_AVAILABLE"  # Indisponível (manutenção, reparo)


_KNOWN_ORDER_STATUSES = frozenset(status.value for status in OrderStatusName)


def is_known_status(name: object) -> bool:
    """
    Retorna True se name é um dos 8 status de pedido.

    Aceita membros do enum ou a string do valor ("APPROVED").
    """
    if isinstance(name, OrderStatusName):
        return True
    return isinstance(name, str) and name in _KNOWN_ORDER_STATUSES
