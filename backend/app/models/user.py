"""
Model de usuário do sistema.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.models.base import UUIDMixin, TimestampMixin
from app.models.enums import STAFF_ROLES, UserRole

if TYPE_CHECKING:
    from app.models.order import Order


class User(Base, UUIDMixin, TimestampMixin):
    """
    Usuário do sistema de locação.

    Attributes:
        id: UUID único do usuário
        name: Nome completo
        email: Email único (usado como login)
        password_hash: Hash bcrypt da senha
        role: ADMIN, MANAGER, OPERATOR ou USER
        orders: Pedidos feitos pelo usuário
    """
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.USER,
    )

    # Relationships
    orders: Mapped[List["Order"]] = relationship(
        "Order",
        back_populates="user",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_staff(self) -> bool:
        """Retorna True para ADMIN, MANAGER e OPERATOR."""
        return self.role in STAFF_ROLES
