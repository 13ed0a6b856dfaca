"""
Módulo de repositórios - acesso a dados.
"""

from app.repositories.base import BaseRepository
from app.repositories.user import UserRepository
from app.repositories.equipment import EquipmentRepository, EquipmentStatusRepository
from app.repositories.order import OrderRepository
from app.repositories.order_status import OrderStatusRepository, OrderStatusNameRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "EquipmentRepository",
    "EquipmentStatusRepository",
    "OrderRepository",
    "OrderStatusRepository",
    "OrderStatusNameRepository",
]
