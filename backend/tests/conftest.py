"""
Fixtures compartilhadas para testes.

Os testes unitários não dependem de PostgreSQL ou Redis: services recebem
uma sessão AsyncMock e os endpoints usam dependency overrides. Os testes
de repository usam test_db e são pulados quando o PostgreSQL não responde.
"""

import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import get_settings
from app.core.deps import get_current_principal
from app.db.seed import seed_status_names
from app.db.session import Base, get_db
from app.main import app
from app.models.enums import EquipmentStatusName, OrderStatusName, UserRole
from app.models.equipment import EquipmentStatus
from app.models.order import Order, OrderStatusEvent
from app.models.user import User
from app.schemas.user import Principal

settings = get_settings()


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==========================================
# Clock
# ==========================================

class FixedClock:
    """Clock de teste com horário fixo."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now


NOW = datetime(2023, 2, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


# ==========================================
# Builders
# ==========================================

def make_user(role: UserRole = UserRole.USER, name: str = "Test User") -> User:
    return User(
        id=uuid.uuid4(),
        name=name,
        email=f"{role.value.lower()}-{uuid.uuid4().hex[:6]}@example.com",
        password_hash="hashed_password",
        role=role,
        created_at=NOW,
        updated_at=NOW,
    )


def make_order(owner: User, rent_end: datetime | None = None) -> Order:
    order = Order(
        id=uuid.uuid4(),
        user_id=owner.id,
        description="Pedido de teste",
        quantity=1,
        rent_start=datetime(2023, 2, 20, 9, 0, tzinfo=timezone.utc),
        rent_end=rent_end or datetime(2023, 2, 24, 18, 0, tzinfo=timezone.utc),
        created_at=NOW,
        updated_at=NOW,
    )
    order.user = owner
    order.equipment = []
    order.status_history = []
    order.equipment_statuses = []
    return order


def make_event(
    order: Order,
    status: OrderStatusName,
    changed_by: User,
    created_at: datetime = NOW,
) -> OrderStatusEvent:
    event = OrderStatusEvent(
        id=uuid.uuid4(),
        order_id=order.id,
        status=status,
        comment="",
        created_at=created_at,
        changed_by_id=changed_by.id,
    )
    event.order = order
    event.changed_by = changed_by
    return event


def make_equipment_status(
    order: Order | None,
    status: EquipmentStatusName,
    end_date: datetime | None = None,
) -> EquipmentStatus:
    return EquipmentStatus(
        id=uuid.uuid4(),
        equipment_id=uuid.uuid4(),
        order_id=order.id if order else None,
        status=status,
        start_date=datetime(2023, 2, 20, 9, 0, tzinfo=timezone.utc),
        end_date=end_date or datetime(2023, 2, 24, 18, 0, tzinfo=timezone.utc),
        comment="",
        created_at=NOW,
        updated_at=NOW,
    )


def principal_of(user: User) -> Principal:
    return Principal(id=user.id, role=user.role)


# ==========================================
# Users
# ==========================================

@pytest.fixture
def owner() -> User:
    return make_user(UserRole.USER, "Dono do Pedido")


@pytest.fixture
def manager() -> User:
    return make_user(UserRole.MANAGER, "Gerente")


@pytest.fixture
def operator() -> User:
    return make_user(UserRole.OPERATOR, "Operador")


@pytest.fixture
def admin() -> User:
    return make_user(UserRole.ADMIN, "Administrador")


@pytest.fixture
def mock_db():
    """Mock da sessão do banco."""
    return AsyncMock()


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
def as_principal():
    """
    Define o ator autenticado das requisições do client.

    Uso:
        as_principal(Principal(id=..., role=UserRole.MANAGER))
    """
    def _set(principal: Principal) -> None:
        app.dependency_overrides[get_current_principal] = lambda: principal
    return _set


@pytest.fixture
async def client(mock_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono com get_db substituído pelo mock_db.
    """
    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ==========================================
# Database fixtures (PostgreSQL)
# ==========================================

@pytest.fixture(scope="session")
def test_engine():
    """
    Engine de teste com NullPool para evitar problemas de event loop.

    NullPool não mantém conexões abertas entre testes.
    """
    return create_async_engine(
        settings.database_url_async,
        echo=False,
        poolclass=NullPool,
    )


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Sessão presa a uma transação que sofre rollback no fim do teste.

    As tabelas e o catálogo de status são criados dentro da própria
    transação (DDL é transacional no PostgreSQL), então o banco não
    guarda nada entre testes.
    """
    try:
        conn = await test_engine.connect()
    except (OSError, SQLAlchemyError) as exc:
        pytest.skip(f"PostgreSQL indisponível em {settings.database_url_async}: {exc}")

    trans = await conn.begin()
    session = AsyncSession(
        bind=conn,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        await conn.run_sync(Base.metadata.create_all)
        await seed_status_names(session)
        await session.flush()
        yield session
    finally:
        await session.close()
        await trans.rollback()
        await conn.close()
