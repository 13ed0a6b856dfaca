"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que o Alembic detecte as mudanças.
"""

from app.models.enums import (
    STAFF_ROLES,
    EquipmentStatusName,
    OrderStatusName,
    UserRole,
    is_known_status,
)
from app.models.user import User
from app.models.equipment import Equipment, EquipmentStatus
from app.models.order import Order, OrderStatusEvent, OrderStatusNameEntry, order_equipment

__all__ = [
    "STAFF_ROLES",
    "EquipmentStatusName",
    "OrderStatusName",
    "UserRole",
    "is_known_status",
    "User",
    "Equipment",
    "EquipmentStatus",
    "Order",
    "OrderStatusEvent",
    "OrderStatusNameEntry",
    "order_equipment",
]
