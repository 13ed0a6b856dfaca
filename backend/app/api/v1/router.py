"""
Router principal da API v1.

Inclui todos os routers de endpoints.
"""

from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.api.v1.equipment import router as equipment_router
from app.api.v1.order_statuses import router as order_statuses_router
from app.api.v1.orders import router as orders_router
from app.api.v1.system import router as system_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router)
api_router.include_router(orders_router)
api_router.include_router(order_statuses_router)
api_router.include_router(equipment_router)
api_router.include_router(system_router)
