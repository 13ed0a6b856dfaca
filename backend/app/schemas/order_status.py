"""
Schemas Pydantic para status de pedido (histórico, catálogo e transições).
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.enums import EquipmentStatusName, OrderStatusName, UserRole
from app.schemas.base import BaseSchema
from app.schemas.user import UserEmbedded


class OrderStatusCreate(BaseSchema):
    """
    Schema para adicionar um novo status a um pedido.

    status é texto livre de propósito: status vazio ou desconhecido
    é rejeitado pelo service com 400 (e não 422 do Pydantic).
    """
    status: str | None = Field(None, examples=["APPROVED"])
    comment: str = Field("", max_length=2000, examples=["Aprovado pelo gerente"])


class OrderStatusRead(BaseSchema):
    """Um evento do histórico de status de um pedido."""
    id: UUID
    order_id: UUID
    status: OrderStatusName
    comment: str
    created_at: datetime
    changed_by: UserEmbedded | None = None

    @classmethod
    def from_event(cls, event) -> "OrderStatusRead":
        """Cria o schema a partir de um OrderStatusEvent com changed_by carregado."""
        changed_by = getattr(event, "changed_by", None)
        return cls(
            id=event.id,
            order_id=event.order_id,
            status=event.status,
            comment=event.comment,
            created_at=event.created_at,
            changed_by=UserEmbedded(id=changed_by.id, name=changed_by.name) if changed_by else None,
        )


class OrderStatusNameRead(BaseModel):
    """Item do catálogo de nomes de status."""
    status: OrderStatusName


class TransitionRuleRead(BaseModel):
    """Linha da tabela de transições."""
    current: OrderStatusName
    target: OrderStatusName
    allowed_roles: list[UserRole]
    owner_may_request: bool
    required_equipment_status: EquipmentStatusName | None = None
    equipment_status: EquipmentStatusName | None = None

    @classmethod
    def from_rule(cls, rule) -> "TransitionRuleRead":
        return cls(
            current=rule.current,
            target=rule.target,
            allowed_roles=sorted(rule.allowed_roles, key=lambda role: role.value),
            owner_may_request=rule.owner_may_request,
            required_equipment_status=rule.required_equipment_status,
            equipment_status=rule.equipment_status,
        )


class EquipmentStatusChange(BaseModel):
    """Alteração aplicada a um registro de status de equipamento."""
    equipment_status_id: UUID
    equipment_id: UUID
    status: EquipmentStatusName
    end_date: datetime | None = None


class OrderStatusChangeResult(BaseModel):
    """Resposta de uma mudança de status bem-sucedida."""
    order_id: UUID
    previous_status: OrderStatusName
    status: OrderStatusName
    event: OrderStatusRead
    equipment_changes: list[EquipmentStatusChange] = Field(default_factory=list)
    message: str


class OverdueCheckResult(BaseModel):
    """Resultado da verificação de pedidos atrasados."""
    overdue_order_ids: list[UUID] = Field(default_factory=list)
    skipped_order_ids: list[UUID] = Field(default_factory=list)
    message: str
