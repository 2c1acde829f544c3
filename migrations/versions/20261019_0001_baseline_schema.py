"""baseline boarding house schema with contract and room version counters

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum("ADMIN", "MANAGER", name="user_role")
room_status = sa.Enum("AVAILABLE", "OCCUPIED", "RESERVED", "MAINTENANCE", name="room_status")
contract_status = sa.Enum("ACTIVE", "EXPIRED", "TERMINATED", name="contract_status")
bill_status = sa.Enum("UNPAID", "PAID", "OVERDUE", name="bill_status")
residency_type = sa.Enum("TEMPORARY_RESIDENCE", "TEMPORARY_ABSENCE", name="residency_type")


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("number", sa.String(length=32), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=False),
        sa.Column("area", sa.Float(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Integer(), nullable=False),
        sa.Column("status", room_status, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("number"),
    )
    op.create_index("idx_rooms_status", "rooms", ["status"])

    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("id_card", sa.String(length=32), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("hometown", sa.String(length=255), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("id_card"),
    )

    op.create_table(
        "contracts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("contract_number", sa.String(length=64), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("deposit", sa.Integer(), nullable=False),
        sa.Column("status", contract_status, nullable=True),
        sa.Column("status_reason", sa.Text(), nullable=True),
        sa.Column("checked_in_at", sa.DateTime(), nullable=True),
        sa.Column("terminated_at", sa.DateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("contract_number"),
    )
    op.create_index("idx_contracts_room_status", "contracts", ["room_id", "status"])
    op.create_index("idx_contracts_end_date", "contracts", ["end_date"])

    op.create_table(
        "contract_tenants",
        sa.Column("contract_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("contract_id", "tenant_id"),
    )

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("contract_id", sa.Integer(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("rent_amount", sa.Integer(), nullable=False),
        sa.Column("electric_amount", sa.Integer(), nullable=False),
        sa.Column("water_amount", sa.Integer(), nullable=False),
        sa.Column("service_amount", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=False),
        sa.Column("status", bill_status, nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("contract_id", "month", "year", name="uq_bills_contract_period"),
    )
    op.create_index("idx_bills_period", "bills", ["year", "month"])
    op.create_index("idx_bills_status", "bills", ["status"])

    op.create_table(
        "residency_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("type", residency_type, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_residency_records_tenant", "residency_records", ["tenant_id"])


def downgrade() -> None:
    op.drop_index("idx_residency_records_tenant", table_name="residency_records")
    op.drop_table("residency_records")

    op.drop_index("idx_bills_status", table_name="bills")
    op.drop_index("idx_bills_period", table_name="bills")
    op.drop_table("bills")

    op.drop_table("contract_tenants")

    op.drop_index("idx_contracts_end_date", table_name="contracts")
    op.drop_index("idx_contracts_room_status", table_name="contracts")
    op.drop_table("contracts")

    op.drop_table("tenants")

    op.drop_index("idx_rooms_status", table_name="rooms")
    op.drop_table("rooms")

    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (residency_type, bill_status, contract_status, room_status, user_role):
        enum_type.drop(bind, checkfirst=True)
