"""
Schemas Pydantic para Order (pedido de locação).
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from app.models.enums import OrderStatusName
from app.schemas.base import BaseSchema, TimestampSchema
from app.schemas.equipment import EquipmentRead, EquipmentStatusRead
from app.schemas.order_status import OrderStatusRead
from app.schemas.user import UserEmbedded


class OrderCreate(BaseSchema):
    """Schema para criar pedido."""
    equipment_ids: list[UUID] = Field(..., min_length=1, description="Equipamentos a locar")
    rent_start: datetime = Field(..., examples=["2023-02-20T09:00:00Z"])
    rent_end: datetime = Field(..., examples=["2023-02-24T18:00:00Z"])
    description: str = Field("", max_length=2000)
    quantity: int = Field(1, ge=1)

    @model_validator(mode="after")
    def validate_period(self) -> "OrderCreate":
        if self.rent_end <= self.rent_start:
            raise ValueError("rent_end deve ser posterior a rent_start")
        return self


class OrderRead(TimestampSchema):
    """Schema de leitura básico de pedido."""
    id: UUID
    user_id: UUID
    description: str
    quantity: int
    rent_start: datetime
    rent_end: datetime


class OrderDetail(OrderRead):
    """
    Pedido com dono, equipamentos, status atual e históricos.

    Construído por from_order a partir de um Order carregado com
    OrderRepository.get_with_relations.
    """
    user: UserEmbedded | None = None
    current_status: OrderStatusName | None = None
    equipment: list[EquipmentRead] = Field(default_factory=list)
    status_history: list[OrderStatusRead] = Field(default_factory=list)
    equipment_statuses: list[EquipmentStatusRead] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order) -> "OrderDetail":
        user = getattr(order, "user", None)
        history = sorted(
            order.status_history or [],
            key=lambda event: (event.created_at, str(event.id)),
        )
        return cls(
            id=order.id,
            user_id=order.user_id,
            description=order.description,
            quantity=order.quantity,
            rent_start=order.rent_start,
            rent_end=order.rent_end,
            created_at=order.created_at,
            updated_at=order.updated_at,
            user=UserEmbedded(id=user.id, name=user.name) if user else None,
            current_status=history[-1].status if history else None,
            equipment=[EquipmentRead.model_validate(item) for item in order.equipment or []],
            status_history=[OrderStatusRead.from_event(event) for event in history],
            equipment_statuses=[
                EquipmentStatusRead.model_validate(record)
                for record in order.equipment_statuses or []
            ],
        )
