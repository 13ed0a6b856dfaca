"""
Script de seed para criar dados iniciais no banco.

Uso:
    python -m app.db.seed

Cria (se não existirem):
    - Os nomes de status de pedido (order_status_names)
    - Um usuário por papel: admin, gerente, operador e usuário comum
    - Alguns equipamentos de demonstração

Idempotente: pode ser executado várias vezes.
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import cache_service
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.core.security import hash_password
from app.db.redis import close_redis, init_redis
from app.db.session import async_session_factory
from app.models.enums import OrderStatusName, UserRole
from app.models.equipment import Equipment
from app.models.order import OrderStatusNameEntry
from app.models.user import User

logger = logging.getLogger(__name__)
settings = get_settings()

SEED_USERS = [
    ("Administrador", settings.ADMIN_EMAIL, UserRole.ADMIN),
    ("Gerente", "manager@rental.com", UserRole.MANAGER),
    ("Operador", "operator@rental.com", UserRole.OPERATOR),
    ("Usuário Demo", "user@rental.com", UserRole.USER),
]

SEED_EQUIPMENT = [
    ("Câmera Sony A7 III", "EQ-0001"),
    ("Lente 24-70mm f/2.8", "EQ-0002"),
    ("Tripé Manfrotto", "EQ-0003"),
    ("Kit de iluminação LED", "EQ-0004"),
]


async def seed_status_names(db: AsyncSession) -> int:
    """Insere os nomes de status que faltam."""
    result = await db.execute(select(OrderStatusNameEntry.status))
    existing = set(result.scalars().all())
    missing = [name for name in OrderStatusName if name not in existing]
    for name in missing:
        db.add(OrderStatusNameEntry(status=name))
    return len(missing)


async def seed_users(db: AsyncSession) -> int:
    """Cria um usuário por papel. A senha de todos é ADMIN_PASSWORD."""
    created = 0
    for name, email, role in SEED_USERS:
        result = await db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            logger.info(f"Usuário já existe: {email}")
            continue
        db.add(
            User(
                name=name,
                email=email,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                role=role,
            )
        )
        created += 1
        logger.info(f"Usuário criado: {email} ({role.value})")
    return created


async def seed_equipment(db: AsyncSession) -> int:
    """Cria os equipamentos de demonstração."""
    created = 0
    for name, inventory_number in SEED_EQUIPMENT:
        result = await db.execute(
            select(Equipment).where(Equipment.inventory_number == inventory_number)
        )
        if result.scalar_one_or_none():
            continue
        db.add(Equipment(name=name, inventory_number=inventory_number))
        created += 1
    return created


async def main() -> None:
    """Executa todos os seeds em uma transação."""
    setup_logging()
    logger.info("Executando seeds...")

    async with async_session_factory() as db:
        statuses = await seed_status_names(db)
        users = await seed_users(db)
        equipment = await seed_equipment(db)
        await db.commit()

    logger.info(
        f"Seeds concluídos: {statuses} status, {users} usuário(s), {equipment} equipamento(s)"
    )

    if statuses:
        await init_redis()
        await cache_service.invalidate_status_names()
        await close_redis()


if __name__ == "__main__":
    asyncio.run(main())
