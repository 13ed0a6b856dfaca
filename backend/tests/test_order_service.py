"""
Testes unitários do OrderService (criação e consulta de pedidos).
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.models.enums import EquipmentStatusName, OrderStatusName, UserRole
from app.models.equipment import Equipment
from app.schemas.order import OrderCreate, OrderDetail
from app.services.order import OrderService

from conftest import NOW, make_equipment_status, make_event, make_order, make_user, principal_of

RENT_START = datetime(2023, 2, 20, 9, 0, tzinfo=timezone.utc)
RENT_END = datetime(2023, 2, 24, 18, 0, tzinfo=timezone.utc)


def make_equipment(number: str) -> Equipment:
    return Equipment(id=uuid.uuid4(), name=f"Equipamento {number}", inventory_number=number)


@pytest.fixture
def service(mock_db, clock):
    service = OrderService(mock_db, clock=clock)
    service.order_repo = AsyncMock()
    service.order_status_repo = AsyncMock()
    service.equipment_repo = AsyncMock()
    service.equipment_status_repo = AsyncMock()
    service.equipment_status_repo.get_blocking_in_period.return_value = []
    return service


# ==========================================
# Schema
# ==========================================

class TestOrderCreateSchema:
    """Validação de OrderCreate."""

    def test_rent_end_must_follow_rent_start(self):
        with pytest.raises(ValidationError):
            OrderCreate(equipment_ids=[uuid.uuid4()], rent_start=RENT_END, rent_end=RENT_START)

    def test_needs_at_least_one_equipment(self):
        with pytest.raises(ValidationError):
            OrderCreate(equipment_ids=[], rent_start=RENT_START, rent_end=RENT_END)


# ==========================================
# Create Order
# ==========================================

class TestCreateOrder:
    """Testes para create_order."""

    @pytest.mark.anyio
    async def test_creates_order_event_and_bookings(self, service, mock_db, owner):
        equipment = [make_equipment("EQ-1"), make_equipment("EQ-2")]
        order = make_order(owner)
        service.equipment_repo.get_many.return_value = equipment
        service.order_repo.create.return_value = order
        service.order_repo.get_with_relations.return_value = order
        data = OrderCreate(
            equipment_ids=[item.id for item in equipment],
            rent_start=RENT_START,
            rent_end=RENT_END,
            description="Gravação externa",
        )

        result = await service.create_order(principal_of(owner), data)

        assert result is order
        service.order_repo.create.assert_awaited_once_with(
            user_id=owner.id,
            description="Gravação externa",
            quantity=1,
            rent_start=RENT_START,
            rent_end=RENT_END,
            equipment=equipment,
        )
        service.order_status_repo.append_status.assert_awaited_once_with(
            order_id=order.id,
            status=OrderStatusName.IN_REVIEW,
            changed_by_id=owner.id,
            comment="Gravação externa",
            created_at=NOW,
        )
        booked = [call.kwargs for call in service.equipment_status_repo.create.await_args_list]
        assert [kwargs["equipment_id"] for kwargs in booked] == [item.id for item in equipment]
        assert all(kwargs["status"] == EquipmentStatusName.BOOKED for kwargs in booked)
        assert all(kwargs["end_date"] == RENT_END for kwargs in booked)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.anyio
    async def test_duplicated_ids_book_once(self, service, owner):
        item = make_equipment("EQ-1")
        service.equipment_repo.get_many.return_value = [item]
        service.order_repo.create.return_value = make_order(owner)
        data = OrderCreate(equipment_ids=[item.id, item.id], rent_start=RENT_START, rent_end=RENT_END)

        await service.create_order(principal_of(owner), data)

        service.equipment_repo.get_many.assert_awaited_once_with([item.id])
        assert service.equipment_status_repo.create.await_count == 1

    @pytest.mark.anyio
    async def test_unknown_equipment_is_404(self, service, mock_db, owner):
        known = make_equipment("EQ-1")
        missing_id = uuid.uuid4()
        service.equipment_repo.get_many.return_value = [known]
        data = OrderCreate(equipment_ids=[known.id, missing_id], rent_start=RENT_START, rent_end=RENT_END)

        with pytest.raises(HTTPException) as exc_info:
            await service.create_order(principal_of(owner), data)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail["equipment_ids"] == [str(missing_id)]
        service.order_repo.create.assert_not_awaited()
        mock_db.commit.assert_not_awaited()

    @pytest.mark.anyio
    async def test_busy_equipment_is_400(self, service, mock_db, owner):
        item = make_equipment("EQ-1")
        conflict = make_equipment_status(None, EquipmentStatusName.IN_USE)
        conflict.equipment_id = item.id
        service.equipment_repo.get_many.return_value = [item]
        service.equipment_status_repo.get_blocking_in_period.return_value = [conflict]
        data = OrderCreate(equipment_ids=[item.id], rent_start=RENT_START, rent_end=RENT_END)

        with pytest.raises(HTTPException) as exc_info:
            await service.create_order(principal_of(owner), data)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail["equipment_ids"] == [str(item.id)]
        service.order_repo.create.assert_not_awaited()

    @pytest.mark.anyio
    async def test_write_failure_rolls_back(self, service, mock_db, owner):
        item = make_equipment("EQ-1")
        service.equipment_repo.get_many.return_value = [item]
        service.order_repo.create.return_value = make_order(owner)
        service.equipment_status_repo.create.side_effect = SQLAlchemyError("boom")
        data = OrderCreate(equipment_ids=[item.id], rent_start=RENT_START, rent_end=RENT_END)

        with pytest.raises(HTTPException) as exc_info:
            await service.create_order(principal_of(owner), data)

        assert exc_info.value.status_code == 500
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()


# ==========================================
# Get Order
# ==========================================

class TestGetOrder:
    """Testes para get_order."""

    @pytest.mark.anyio
    async def test_owner_sees_order(self, service, owner):
        order = make_order(owner)
        service.order_repo.get_with_relations.return_value = order

        assert await service.get_order(order.id, principal_of(owner)) is order

    @pytest.mark.anyio
    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.MANAGER, UserRole.OPERATOR])
    async def test_staff_sees_any_order(self, service, owner, role):
        order = make_order(owner)
        service.order_repo.get_with_relations.return_value = order

        assert await service.get_order(order.id, principal_of(make_user(role))) is order

    @pytest.mark.anyio
    async def test_stranger_is_forbidden(self, service, owner):
        service.order_repo.get_with_relations.return_value = make_order(owner)

        with pytest.raises(HTTPException) as exc_info:
            await service.get_order(uuid.uuid4(), principal_of(make_user()))

        assert exc_info.value.status_code == 403

    @pytest.mark.anyio
    async def test_missing_order_is_404(self, service, owner):
        service.order_repo.get_with_relations.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            await service.get_order(uuid.uuid4(), principal_of(owner))

        assert exc_info.value.status_code == 404


class TestOrderDetail:
    """Testes para OrderDetail.from_order."""

    def test_current_status_is_latest_event(self, owner, manager):
        order = make_order(owner)
        make_event(order, OrderStatusName.APPROVED, manager, datetime(2023, 2, 21, tzinfo=timezone.utc))
        make_event(order, OrderStatusName.IN_REVIEW, owner, datetime(2023, 2, 20, tzinfo=timezone.utc))

        detail = OrderDetail.from_order(order)

        assert detail.current_status == OrderStatusName.APPROVED
        assert [e.status for e in detail.status_history] == [
            OrderStatusName.IN_REVIEW,
            OrderStatusName.APPROVED,
        ]
        assert detail.user.id == owner.id
