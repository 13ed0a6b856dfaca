"""
Models de pedido: Order, histórico de status (OrderStatusEvent) e catálogo de nomes de status.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Table, Text
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.models.base import UUIDMixin, TimestampMixin
from app.models.enums import OrderStatusName

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.equipment import Equipment, EquipmentStatus


# Tipo ENUM compartilhado entre o catálogo e o histórico
order_status_name_enum = ENUM(OrderStatusName, name="order_status_name", create_type=True)


# Tabela de associação N:N entre pedidos e equipamentos
order_equipment = Table(
    "order_equipment",
    Base.metadata,
    Column(
        "order_id",
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "equipment_id",
        UUID(as_uuid=True),
        ForeignKey("equipment.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
)


class OrderStatusNameEntry(Base):
    """
    Catálogo imutável de nomes de status de pedido.

    Uma linha por membro de OrderStatusName, criada pela migration/seed.
    """
    __tablename__ = "order_status_names"

    status: Mapped[OrderStatusName] = mapped_column(
        order_status_name_enum,
        primary_key=True,
    )

    def __repr__(self) -> str:
        return f"<OrderStatusNameEntry {self.status.value}>"


class Order(Base, UUIDMixin, TimestampMixin):
    """
    Pedido de locação de um ou mais equipamentos.

    Regras de negócio:
        - Todo pedido nasce com um evento IN_REVIEW
        - O status atual é o evento com maior created_at
        - O histórico é append-only

    Attributes:
        id: UUID único do pedido
        user_id: FK para o usuário dono do pedido
        description: Descrição/justificativa do pedido
        quantity: Quantidade de itens
        rent_start: Início da locação
        rent_end: Fim previsto da locação
        equipment: Equipamentos do pedido
        status_history: Eventos de status (append-only)
        equipment_statuses: Registros de status de equipamento gerados pelo pedido
    """
    __tablename__ = "orders"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rent_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    rent_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="orders",
        lazy="selectin",
    )
    equipment: Mapped[List["Equipment"]] = relationship(
        "Equipment",
        secondary=order_equipment,
        lazy="selectin",
    )
    status_history: Mapped[List["OrderStatusEvent"]] = relationship(
        "OrderStatusEvent",
        back_populates="order",
        lazy="raise",
        order_by="OrderStatusEvent.created_at",
    )
    equipment_statuses: Mapped[List["EquipmentStatus"]] = relationship(
        "EquipmentStatus",
        back_populates="order",
        lazy="raise",
    )

    __table_args__ = (
        Index("ix_orders_user_id", "user_id"),
        Index("ix_orders_rent_end", "rent_end"),
    )

    def __repr__(self) -> str:
        return f"<Order {self.id}>"


class OrderStatusEvent(Base, UUIDMixin):
    """
    Atribuição de um status a um pedido.

    Append-only: um novo evento é criado a cada transição e nunca é
    alterado ou removido. created_at vem do Clock do service.

    Attributes:
        id: UUID único do evento
        order_id: FK para o pedido
        status: Nome do status (FK para order_status_names)
        comment: Comentário de quem alterou
        created_at: Momento da transição
        changed_by_id: FK para o usuário que fez a alteração
    """
    __tablename__ = "order_statuses"

    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[OrderStatusName] = mapped_column(
        ENUM(OrderStatusName, name="order_status_name", create_type=False),
        ForeignKey("order_status_names.status", ondelete="RESTRICT"),
        nullable=False,
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    changed_by_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # Relationships
    order: Mapped["Order"] = relationship(
        "Order",
        back_populates="status_history",
        lazy="raise",
    )
    changed_by: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
    )

    __table_args__ = (
        # Status atual = evento mais recente do pedido
        Index("ix_order_statuses_order_created", "order_id", "created_at"),
        Index("ix_order_statuses_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<OrderStatusEvent {self.order_id} - {self.status.value}>"
