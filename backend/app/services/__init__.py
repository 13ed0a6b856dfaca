"""
Módulo de serviços - lógica de negócio.
"""

from app.services.auth import AuthService
from app.services.equipment_block import EquipmentBlockService
from app.services.order import OrderService
from app.services.order_status import OrderStatusService
from app.services.overdue import OverdueService

__all__ = [
    "AuthService",
    "EquipmentBlockService",
    "OrderService",
    "OrderStatusService",
    "OverdueService",
]
