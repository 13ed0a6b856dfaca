"""
Create rental schema: users, equipment, orders and status tables.

Also inserts one row per order status name into order_status_names,
the reference table referenced by order_statuses.status.

Revision ID: 5b2e8c1d9a47
Revises:
Create Date: 2026-10-18 09:12:41.318205
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


revision: str = "5b2e8c1d9a47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ("ADMIN", "MANAGER", "OPERATOR", "USER")
ORDER_STATUS_NAMES = (
    "IN_REVIEW",
    "APPROVED",
    "PREPARED",
    "IN_PROGRESS",
    "OVERDUE",
    "REJECTED",
    "CLOSED",
    "BLOCKED",
)
EQUIPMENT_STATUS_NAMES = ("AVAILABLE", "BOOKED", "IN_USE", "NOT_AVAILABLE")

user_role = postgresql.ENUM(*USER_ROLES, name="user_role", create_type=False)
order_status_name = postgresql.ENUM(*ORDER_STATUS_NAMES, name="order_status_name", create_type=False)
equipment_status_name = postgresql.ENUM(
    *EQUIPMENT_STATUS_NAMES, name="equipment_status_name", create_type=False
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create enum types, tables, indexes and the status-name rows."""
    bind = op.get_bind()
    for enum_type in (user_role, order_status_name, equipment_status_name):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "equipment",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("inventory_number", sa.String(64), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "orders",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("rent_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("rent_end", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_rent_end", "orders", ["rent_end"])

    op.create_table(
        "order_equipment",
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "equipment_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("equipment.id", ondelete="RESTRICT"),
            primary_key=True,
        ),
    )

    status_names = op.create_table(
        "order_status_names",
        sa.Column("status", order_status_name, primary_key=True),
    )
    op.bulk_insert(status_names, [{"status": name} for name in ORDER_STATUS_NAMES])

    op.create_table(
        "order_statuses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "status",
            order_status_name,
            sa.ForeignKey("order_status_names.status", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "changed_by_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
    )
    op.create_index("ix_order_statuses_order_created", "order_statuses", ["order_id", "created_at"])
    op.create_index("ix_order_statuses_status", "order_statuses", ["status"])

    op.create_table(
        "equipment_statuses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "equipment_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("equipment.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "order_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("orders.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", equipment_status_name, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_equipment_statuses_equipment_id", "equipment_statuses", ["equipment_id"])
    op.create_index("ix_equipment_statuses_order_id", "equipment_statuses", ["order_id"])
    op.create_index("ix_equipment_statuses_end_date", "equipment_statuses", ["end_date"])
    op.create_index(
        "ix_equipment_statuses_equipment_period",
        "equipment_statuses",
        ["equipment_id", "start_date", "end_date"],
    )


def downgrade() -> None:
    """Drop tables and enum types in reverse dependency order."""
    op.drop_table("equipment_statuses")
    op.drop_table("order_statuses")
    op.drop_table("order_status_names")
    op.drop_table("order_equipment")
    op.drop_table("orders")
    op.drop_table("equipment")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (equipment_status_name, order_status_name, user_role):
        enum_type.drop(bind, checkfirst=True)
