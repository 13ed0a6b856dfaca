"""
Schemas Pydantic para Equipment e EquipmentStatus.
"""

from datetime import datetime
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from app.models.enums import EquipmentStatusName
from app.schemas.base import BaseSchema


class EquipmentRead(BaseSchema):
    """Schema de leitura de equipamento."""
    id: UUID
    name: str
    inventory_number: str
    description: str | None = None


class EquipmentStatusRead(BaseSchema):
    """Intervalo de status de um equipamento."""
    id: UUID
    equipment_id: UUID
    order_id: UUID | None = None
    status: EquipmentStatusName
    start_date: datetime
    end_date: datetime
    comment: str = ""


class EquipmentBlockCreate(BaseSchema):
    """Período de bloqueio de um equipamento (manutenção, perda, etc.)."""
    start_date: AwareDatetime
    end_date: AwareDatetime
    comment: str = Field(default="", max_length=1000)


class EquipmentBlockResult(BaseModel):
    """Resultado do bloqueio: registro NOT_AVAILABLE e pedidos movidos para BLOCKED."""
    equipment_id: UUID
    equipment_status_id: UUID
    start_date: datetime
    end_date: datetime
    blocked_order_ids: list[UUID] = Field(default_factory=list)
    message: str


class EquipmentUnblockResult(BaseModel):
    """Resultado do desbloqueio."""
    equipment_id: UUID
    equipment_status_id: UUID
    end_date: datetime
    message: str
