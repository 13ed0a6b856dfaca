"""
Schemas Pydantic da aplicação.
"""

from app.schemas.base import BaseSchema, TimestampSchema
from app.schemas.health import HealthResponse
from app.schemas.user import (
    Principal,
    TokenResponse,
    UserEmbedded,
    UserLogin,
    UserRead,
    UserWithToken,
)
from app.schemas.equipment import (
    EquipmentBlockCreate,
    EquipmentBlockResult,
    EquipmentRead,
    EquipmentStatusRead,
    EquipmentUnblockResult,
)
from app.schemas.order_status import (
    EquipmentStatusChange,
    OrderStatusChangeResult,
    OrderStatusCreate,
    OrderStatusNameRead,
    OrderStatusRead,
    OverdueCheckResult,
    TransitionRuleRead,
)
from app.schemas.order import OrderCreate, OrderDetail, OrderRead

__all__ = [
    # Base
    "BaseSchema",
    "TimestampSchema",
    # Health
    "HealthResponse",
    # User
    "Principal",
    "TokenResponse",
    "UserEmbedded",
    "UserLogin",
    "UserRead",
    "UserWithToken",
    # Equipment
    "EquipmentBlockCreate",
    "EquipmentBlockResult",
    "EquipmentRead",
    "EquipmentStatusRead",
    "EquipmentUnblockResult",
    # Order status
    "EquipmentStatusChange",
    "OrderStatusChangeResult",
    "OrderStatusCreate",
    "OrderStatusNameRead",
    "OrderStatusRead",
    "OverdueCheckResult",
    "TransitionRuleRead",
    # Order
    "OrderCreate",
    "OrderDetail",
    "OrderRead",
]
