"""
Models de equipamento: Equipment (item físico) e EquipmentStatus (intervalo de status).
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, String, Text, Index
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.models.base import UUIDMixin, TimestampMixin, PeriodMixin
from app.models.enums import EquipmentStatusName

if TYPE_CHECKING:
    from app.models.order import Order


class Equipment(Base, UUIDMixin, TimestampMixin):
    """
    Item físico disponível para locação.

    Attributes:
        id: UUID único do equipamento
        name: Nome do equipamento
        inventory_number: Número de patrimônio (único)
        description: Descrição livre (opcional)
        statuses: Histórico de intervalos de status
    """
    __tablename__ = "equipment"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    inventory_number: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    statuses: Mapped[List["EquipmentStatus"]] = relationship(
        "EquipmentStatus",
        back_populates="equipment",
        lazy="selectin",
        order_by="EquipmentStatus.end_date",
    )

    def __repr__(self) -> str:
        return f"<Equipment {self.inventory_number} - {self.name}>"


class EquipmentStatus(Base, UUIDMixin, TimestampMixin, PeriodMixin):
    """
    Intervalo durante o qual um equipamento tem um determinado status.

    Criado quando um pedido reserva o equipamento (BOOKED) e alterado
    (status e/ou end_date) conforme o pedido avança. No encerramento o
    end_date pode ganhar um dia de folga entre locações.

    Attributes:
        id: UUID único do registro
        equipment_id: FK para o equipamento
        order_id: FK para o pedido que gerou o registro (opcional)
        status: AVAILABLE, BOOKED, IN_USE ou NOT_AVAILABLE
        start_date: Início do intervalo
        end_date: Fim do intervalo
        comment: Observação livre
    """
    __tablename__ = "equipment_statuses"

    equipment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("equipment.id", ondelete="CASCADE"),
        nullable=False,
    )
    order_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[EquipmentStatusName] = mapped_column(
        ENUM(EquipmentStatusName, name="equipment_status_name", create_type=True),
        nullable=False,
        default=EquipmentStatusName.AVAILABLE,
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Relationships
    equipment: Mapped["Equipment"] = relationship(
        "Equipment",
        back_populates="statuses",
        lazy="selectin",
    )
    order: Mapped[Optional["Order"]] = relationship(
        "Order",
        back_populates="equipment_statuses",
        lazy="raise",
    )

    __table_args__ = (
        Index("ix_equipment_statuses_equipment_id", "equipment_id"),
        Index("ix_equipment_statuses_order_id", "order_id"),
        # Busca de conflitos de agenda por equipamento
        Index("ix_equipment_statuses_equipment_period", "equipment_id", "start_date", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<EquipmentStatus {self.id} - {self.status.value}>"
