"""
Testes de integração dos repositories de status contra PostgreSQL.

Cobrem as consultas que dependem do banco de verdade: DISTINCT ON do
status atual, ordem do histórico, FOR UPDATE e sobreposição de períodos.
Cada teste roda em uma transação desfeita no final (fixture test_db).
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.models.enums import EquipmentStatusName, OrderStatusName, UserRole
from app.models.equipment import Equipment, EquipmentStatus
from app.models.order import Order, OrderStatusEvent
from app.models.user import User
from app.repositories.equipment import EquipmentRepository, EquipmentStatusRepository
from app.repositories.order import OrderRepository
from app.repositories.order_status import OrderStatusNameRepository, OrderStatusRepository

S = OrderStatusName
E = EquipmentStatusName

T0 = datetime(2023, 2, 20, 9, 0, tzinfo=timezone.utc)


def at(days: float) -> datetime:
    return T0 + timedelta(days=days)


# ==========================================
# Builders (persistidos)
# ==========================================

async def add_user(db, role: UserRole = UserRole.USER) -> User:
    user = User(
        name=f"{role.value.title()} Teste",
        email=f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@rental.com",
        password_hash="hashed_password",
        role=role,
    )
    db.add(user)
    await db.flush()
    return user


async def add_equipment(db) -> Equipment:
    item = Equipment(name="Câmera", inventory_number=f"EQ-{uuid.uuid4().hex[:8]}")
    db.add(item)
    await db.flush()
    return item


async def add_order(db, owner: User, equipment=(), rent_start=T0, rent_end=None) -> Order:
    order = Order(
        user_id=owner.id,
        description="Pedido de teste",
        quantity=1,
        rent_start=rent_start,
        rent_end=rent_end or rent_start + timedelta(days=4),
        equipment=list(equipment),
    )
    db.add(order)
    await db.flush()
    return order


async def add_event(db, order: Order, status: OrderStatusName, by: User, created_at: datetime, id=None):
    event = OrderStatusEvent(
        id=id or uuid.uuid4(),
        order_id=order.id,
        status=status,
        changed_by_id=by.id,
        comment="",
        created_at=created_at,
    )
    db.add(event)
    await db.flush()
    return event


async def add_equipment_status(db, item: Equipment, status: EquipmentStatusName, start, end, order=None):
    record = EquipmentStatus(
        equipment_id=item.id,
        order_id=order.id if order else None,
        status=status,
        start_date=start,
        end_date=end,
        comment="",
    )
    db.add(record)
    await db.flush()
    return record


async def settle(db) -> None:
    """Grava o pendente e limpa o identity map: as consultas leem do banco."""
    await db.flush()
    db.expunge_all()


@pytest.fixture
async def people(test_db):
    owner = await add_user(test_db, UserRole.USER)
    manager = await add_user(test_db, UserRole.MANAGER)
    return owner, manager


# ==========================================
# Status atual
# ==========================================

class TestCurrentStatus:
    """OrderStatusRepository.get_current_status."""

    @pytest.mark.anyio
    async def test_latest_event_wins(self, test_db, people):
        owner, manager = people
        order = await add_order(test_db, owner)
        await add_event(test_db, order, S.APPROVED, manager, at(1))
        await add_event(test_db, order, S.IN_REVIEW, owner, at(0))
        await settle(test_db)

        current = await OrderStatusRepository(test_db).get_current_status(order.id)

        assert current.status == S.APPROVED
        assert current.order.user.id == owner.id
        assert current.changed_by.id == manager.id

    @pytest.mark.anyio
    async def test_same_timestamp_falls_back_to_id(self, test_db, people):
        owner, manager = people
        order = await add_order(test_db, owner)
        low_id, high_id = sorted([uuid.uuid4(), uuid.uuid4()])
        await add_event(test_db, order, S.APPROVED, manager, at(1), id=high_id)
        await add_event(test_db, order, S.REJECTED, manager, at(1), id=low_id)
        await settle(test_db)

        current = await OrderStatusRepository(test_db).get_current_status(order.id)

        assert current.id == high_id
        assert current.status == S.APPROVED

    @pytest.mark.anyio
    async def test_order_without_events(self, test_db, people):
        owner, _ = people
        order = await add_order(test_db, owner)
        await settle(test_db)

        assert await OrderStatusRepository(test_db).get_current_status(order.id) is None


# ==========================================
# Histórico
# ==========================================

class TestHistory:
    """OrderStatusRepository.get_history / append_status."""

    @pytest.mark.anyio
    async def test_history_is_chronological(self, test_db, people):
        owner, manager = people
        order = await add_order(test_db, owner)
        low_id, high_id = sorted([uuid.uuid4(), uuid.uuid4()])
        await add_event(test_db, order, S.PREPARED, manager, at(2), id=high_id)
        await add_event(test_db, order, S.IN_REVIEW, owner, at(0))
        await add_event(test_db, order, S.APPROVED, manager, at(2), id=low_id)
        await settle(test_db)

        history = await OrderStatusRepository(test_db).get_history(order.id)

        assert [event.status for event in history] == [S.IN_REVIEW, S.APPROVED, S.PREPARED]
        assert all(event.changed_by is not None for event in history)

    @pytest.mark.anyio
    async def test_appended_event_becomes_current(self, test_db, people):
        owner, manager = people
        order = await add_order(test_db, owner)
        await add_event(test_db, order, S.IN_REVIEW, owner, at(0))
        repo = OrderStatusRepository(test_db)

        event = await repo.append_status(order.id, S.APPROVED, manager.id, "ok", at(1))
        await settle(test_db)

        assert event.changed_by.id == manager.id
        assert (await repo.get_current_status(order.id)).status == S.APPROVED
        assert len(await repo.get_history(order.id)) == 2

    @pytest.mark.anyio
    async def test_catalogue_lists_every_status(self, test_db):
        assert await OrderStatusNameRepository(test_db).list_all() == list(OrderStatusName)


# ==========================================
# DISTINCT ON: pedidos por status atual
# ==========================================

class TestOrdersWithCurrentStatus:
    """OrderStatusRepository.get_orders_with_current_status."""

    @pytest.mark.anyio
    async def test_only_latest_status_counts(self, test_db, people):
        owner, manager = people
        late = await add_order(test_db, owner, rent_end=at(5))
        early = await add_order(test_db, owner, rent_end=at(3))
        returned = await add_order(test_db, owner, rent_end=at(1))
        for order in (late, early, returned):
            await add_event(test_db, order, S.IN_REVIEW, owner, at(0))
            await add_event(test_db, order, S.IN_PROGRESS, manager, at(0.5))
        await add_event(test_db, returned, S.CLOSED, manager, at(0.75))
        await settle(test_db)

        orders = await OrderStatusRepository(test_db).get_orders_with_current_status(S.IN_PROGRESS)

        assert [order.id for order in orders] == [early.id, late.id]
        assert all(order.user.id == owner.id for order in orders)

    @pytest.mark.anyio
    async def test_earlier_status_does_not_match(self, test_db, people):
        owner, manager = people
        order = await add_order(test_db, owner)
        await add_event(test_db, order, S.IN_REVIEW, owner, at(0))
        await add_event(test_db, order, S.APPROVED, manager, at(1))
        await settle(test_db)

        repo = OrderStatusRepository(test_db)

        assert await repo.get_orders_with_current_status(S.IN_REVIEW) == []
        assert [o.id for o in await repo.get_orders_with_current_status(S.APPROVED)] == [order.id]


# ==========================================
# Bloqueio de equipamento
# ==========================================

class TestOrdersToBlock:
    """OrderStatusRepository.get_orders_to_block."""

    @pytest.mark.anyio
    async def test_selects_orders_starting_inside_period(self, test_db, people):
        owner, manager = people
        item = await add_equipment(test_db)
        other_item = await add_equipment(test_db)

        approved = await add_order(test_db, owner, [item], rent_start=at(2))
        prepared = await add_order(test_db, owner, [item], rent_start=at(1))
        in_progress = await add_order(test_db, owner, [item], rent_start=at(1))
        started_before = await add_order(test_db, owner, [item], rent_start=at(-2))
        starts_after = await add_order(test_db, owner, [item], rent_start=at(10))
        other_equipment = await add_order(test_db, owner, [other_item], rent_start=at(2))

        statuses = {
            approved: S.APPROVED,
            prepared: S.PREPARED,
            in_progress: S.IN_PROGRESS,
            started_before: S.APPROVED,
            starts_after: S.APPROVED,
            other_equipment: S.APPROVED,
        }
        for order, status in statuses.items():
            await add_event(test_db, order, S.IN_REVIEW, owner, at(-5))
            await add_event(test_db, order, status, manager, at(-4))
        await settle(test_db)

        orders = await OrderStatusRepository(test_db).get_orders_to_block(
            item.id, [S.APPROVED, S.PREPARED], at(0), at(5)
        )

        assert [order.id for order in orders] == [prepared.id, approved.id]

    @pytest.mark.anyio
    async def test_no_statuses_returns_empty(self, test_db):
        item = await add_equipment(test_db)

        assert await OrderStatusRepository(test_db).get_orders_to_block(item.id, [], at(0), at(5)) == []


class TestCurrentBlock:
    """EquipmentStatusRepository.get_current_block."""

    @pytest.mark.anyio
    async def test_only_manual_not_available_records(self, test_db, people):
        owner, _ = people
        item = await add_equipment(test_db)
        order = await add_order(test_db, owner, [item])
        await add_equipment_status(test_db, item, E.NOT_AVAILABLE, at(0), at(9), order=order)
        await add_equipment_status(test_db, item, E.AVAILABLE, at(0), at(9))
        older = await add_equipment_status(test_db, item, E.NOT_AVAILABLE, at(0), at(2))
        newer = await add_equipment_status(test_db, item, E.NOT_AVAILABLE, at(3), at(6))
        await settle(test_db)

        block = await EquipmentStatusRepository(test_db).get_current_block(item.id)

        assert block.id == newer.id
        assert block.id != older.id

    @pytest.mark.anyio
    async def test_no_block(self, test_db):
        item = await add_equipment(test_db)
        await settle(test_db)

        assert await EquipmentStatusRepository(test_db).get_current_block(item.id) is None


# ==========================================
# Travas e sobreposição
# ==========================================

class TestLocks:
    """OrderRepository.lock / EquipmentRepository.lock."""

    @pytest.mark.anyio
    async def test_lock_existing_rows(self, test_db, people):
        owner, _ = people
        item = await add_equipment(test_db)
        order = await add_order(test_db, owner, [item])
        await settle(test_db)

        assert await OrderRepository(test_db).lock(order.id) is True
        assert await EquipmentRepository(test_db).lock(item.id) is True

    @pytest.mark.anyio
    async def test_lock_missing_rows(self, test_db):
        assert await OrderRepository(test_db).lock(uuid.uuid4()) is False
        assert await EquipmentRepository(test_db).lock(uuid.uuid4()) is False


class TestBlockingInPeriod:
    """EquipmentStatusRepository.get_blocking_in_period."""

    @pytest.mark.anyio
    async def test_period_bounds_are_inclusive(self, test_db, people):
        owner, _ = people
        item = await add_equipment(test_db)
        order = await add_order(test_db, owner, [item])
        booked = await add_equipment_status(test_db, item, E.BOOKED, at(1), at(4), order=order)
        await settle(test_db)
        repo = EquipmentStatusRepository(test_db)

        touching_end = await repo.get_blocking_in_period([item.id], at(4), at(6))
        touching_start = await repo.get_blocking_in_period([item.id], at(-1), at(1))
        after = await repo.get_blocking_in_period([item.id], at(4.5), at(6))

        assert [r.id for r in touching_end] == [booked.id]
        assert [r.id for r in touching_start] == [booked.id]
        assert after == []

    @pytest.mark.anyio
    async def test_available_and_other_equipment_are_ignored(self, test_db):
        item = await add_equipment(test_db)
        other_item = await add_equipment(test_db)
        await add_equipment_status(test_db, item, E.AVAILABLE, at(0), at(5))
        in_use = await add_equipment_status(test_db, item, E.IN_USE, at(0), at(5))
        await add_equipment_status(test_db, other_item, E.NOT_AVAILABLE, at(0), at(5))
        await settle(test_db)

        records = await EquipmentStatusRepository(test_db).get_blocking_in_period([item.id], at(1), at(2))

        assert [r.id for r in records] == [in_use.id]

    @pytest.mark.anyio
    async def test_empty_equipment_list(self, test_db):
        assert await EquipmentStatusRepository(test_db).get_blocking_in_period([], at(0), at(1)) == []
