"""Initial schema — catalog, ledger, registrations, loans, events, settings, users.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "items",
        sa.Column("code", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, server_default=""),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("size", sa.String(20), nullable=False),
        sa.Column("min_quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column("creation_date", sa.String(40), nullable=False),
    )
    op.create_index("ix_items_type", "items", ["type"])

    # No FK to items: deleting an item keeps its ledger history
    op.create_table(
        "movements",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("date", sa.String(40), nullable=False),
        sa.Column("direction", sa.String(10), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
    )
    op.create_index("ix_movements_code", "movements", ["code"])
    op.create_index("ix_movements_date", "movements", ["date"])

    op.create_table(
        "baptisms",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(200), nullable=False, server_default=""),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("pending", sa.String(5), nullable=False, server_default="yes"),
        sa.Column("created_at", sa.String(40), nullable=True),
        sa.Column("completed_at", sa.String(40), nullable=True),
    )

    op.create_table(
        "presentations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("child_name", sa.String(200), nullable=False),
        sa.Column("mother_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("father_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("email", sa.String(200), nullable=False, server_default=""),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("pending", sa.String(5), nullable=False, server_default="yes"),
        sa.Column("scheduled_date", sa.String(40), nullable=True),
        sa.Column("created_at", sa.String(40), nullable=True),
        sa.Column("completed_at", sa.String(40), nullable=True),
    )

    op.create_table(
        "loans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("borrower_name", sa.String(200), nullable=False),
        sa.Column("item_type", sa.String(20), nullable=False),
        sa.Column("size", sa.String(20), nullable=False),
        sa.Column("loan_date", sa.String(40), nullable=True),
        sa.Column("return_date", sa.String(40), nullable=True),
        sa.Column("status", sa.String(5), nullable=False, server_default="yes"),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("link", sa.Text, nullable=False),
        sa.Column("created_at", sa.String(40), nullable=False),
    )

    op.create_table(
        "settings",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("value", sa.JSON, nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("username", sa.String(64), primary_key=True),
        sa.Column("password_hash", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("created_at", sa.String(40), nullable=False),
    )
    op.create_index("ix_users_role", "users", ["role"])


def downgrade() -> None:
    op.drop_index("ix_users_role", table_name="users")
    op.drop_table("users")
    op.drop_table("settings")
    op.drop_table("events")
    op.drop_table("loans")
    op.drop_table("presentations")
    op.drop_table("baptisms")
    op.drop_index("ix_movements_date", table_name="movements")
    op.drop_index("ix_movements_code", table_name="movements")
    op.drop_table("movements")
    op.drop_index("ix_items_type", table_name="items")
    op.drop_table("items")
