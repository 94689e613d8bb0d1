"""accounts, vehicles, spots, wallet ledger, top-ups and swap history

Revision ID: 5e2a9c41d7b3
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5e2a9c41d7b3"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), server_default="user"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("email", sa.String(length=100), unique=True),
        sa.Column("display_name", sa.String(length=100)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("language", sa.String(length=8), server_default="en"),
        sa.Column("wallet_available_cents", sa.Integer()),
        sa.Column("wallet_reserved_cents", sa.Integer()),
        sa.Column("wallet", sa.Float()),
        sa.Column("wallet_version", sa.Integer()),
        sa.Column("premium_parks", sa.Integer()),
        sa.Column("premium_parks_initialized", sa.Boolean(), server_default=sa.false()),
        sa.Column("transactions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("kyc_status", sa.String(length=32)),
        sa.Column("kyc_session_id", sa.String(length=255)),
        sa.Column("kyc_provider", sa.String(length=32)),
        sa.Column("kyc_updated_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)

    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("plate", sa.String(length=32), nullable=False),
        sa.Column("photo", sa.String(length=1024)),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_vehicles_owner_id", "vehicles", ["owner_id"])

    op.create_table(
        "spots",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("host_id", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("host_name", sa.String(length=100)),
        sa.Column("car_model", sa.String(length=100)),
        sa.Column("host_vehicle_plate", sa.String(length=32)),
        sa.Column("host_vehicle_id", sa.String(length=36)),
        sa.Column("time", sa.Integer()),
        sa.Column("price", sa.String(length=32)),
        sa.Column("length", sa.Float()),
        sa.Column("lat", sa.Float()),
        sa.Column("lng", sa.Float()),
        sa.Column("x", sa.Float()),
        sa.Column("y", sa.Float()),
        sa.Column("address", sa.String(length=255)),
        sa.Column("status", sa.String(length=20), server_default="available"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("booking_session_id", sa.String(length=64)),
        sa.Column("booked_at", sa.DateTime(timezone=True)),
        sa.Column("book_op_id", sa.String(length=64)),
        sa.Column("book_op_at", sa.DateTime(timezone=True)),
        sa.Column("booker_id", sa.String(length=36)),
        sa.Column("booker_name", sa.String(length=100)),
        sa.Column("booker_accepted", sa.Boolean(), server_default=sa.false()),
        sa.Column("booker_accepted_at", sa.DateTime(timezone=True)),
        sa.Column("nav_op_id", sa.String(length=64)),
        sa.Column("nav_op_at", sa.DateTime(timezone=True)),
        sa.Column("booker_vehicle_plate", sa.String(length=32)),
        sa.Column("booker_vehicle_id", sa.String(length=36)),
        sa.Column("premium_parks_applied_at", sa.DateTime(timezone=True)),
        sa.Column("premium_parks_applied_by", sa.String(length=36)),
        sa.Column("premium_parks_booker_delta", sa.Integer()),
        sa.Column("premium_parks_booker_after", sa.Integer()),
        sa.Column("premium_parks_host_delta", sa.Integer()),
        sa.Column("premium_parks_host_after", sa.Integer()),
        sa.Column("host_verified_booker_plate", sa.Boolean(), server_default=sa.false()),
        sa.Column("host_verified_booker_plate_at", sa.DateTime(timezone=True)),
        sa.Column("host_confirmed_booker_plate", sa.String(length=32)),
        sa.Column("host_confirmed_booker_plate_norm", sa.String(length=32)),
        sa.Column("booker_verified_host_plate", sa.Boolean(), server_default=sa.false()),
        sa.Column("booker_verified_host_plate_at", sa.DateTime(timezone=True)),
        sa.Column("booker_confirmed_host_plate", sa.String(length=32)),
        sa.Column("booker_confirmed_host_plate_norm", sa.String(length=32)),
        sa.Column("plate_confirmed", sa.Boolean(), server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_by", sa.String(length=36)),
        sa.Column("cancelled_by_role", sa.String(length=16)),
        sa.Column("cancelled_for", sa.String(length=36)),
        sa.Column("cancelled_for_name", sa.String(length=100)),
    )
    op.create_index("ix_spots_host_id", "spots", ["host_id"])
    op.create_index("ix_spots_status", "spots", ["status"])
    op.create_index("ix_spots_booker_id", "spots", ["booker_id"])

    op.create_table(
        "wallet_ledger",
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("uid", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("balance_after_cents", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="eur"),
        sa.Column("spot_id", sa.String(length=36)),
        sa.Column("booking_session_id", sa.String(length=64)),
        sa.Column("counterparty_uid", sa.String(length=36)),
        sa.Column("session_id", sa.String(length=255)),
        sa.Column("payment_intent_id", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_wallet_ledger_uid", "wallet_ledger", ["uid"])

    op.create_table(
        "wallet_topups",
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("uid", sa.String(length=36), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("fee_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_cents", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="paid"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="eur"),
        sa.Column("session_id", sa.String(length=255)),
        sa.Column("payment_intent_id", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_wallet_topups_uid", "wallet_topups", ["uid"])

    op.create_table(
        "swap_transactions",
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("spot_id", sa.String(length=36), nullable=False),
        sa.Column("booking_session_id", sa.String(length=64)),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("role", sa.String(length=10), nullable=False),
        sa.Column("host_id", sa.String(length=36)),
        sa.Column("host_name", sa.String(length=100)),
        sa.Column("booker_id", sa.String(length=36)),
        sa.Column("booker_name", sa.String(length=100)),
        sa.Column("amount_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("title", sa.String(length=255)),
        sa.Column("concluded_counted_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_swap_transactions_user_id", "swap_transactions", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_swap_transactions_user_id", table_name="swap_transactions")
    op.drop_table("swap_transactions")
    op.drop_index("ix_wallet_topups_uid", table_name="wallet_topups")
    op.drop_table("wallet_topups")
    op.drop_index("ix_wallet_ledger_uid", table_name="wallet_ledger")
    op.drop_table("wallet_ledger")
    op.drop_index("ix_spots_booker_id", table_name="spots")
    op.drop_index("ix_spots_status", table_name="spots")
    op.drop_index("ix_spots_host_id", table_name="spots")
    op.drop_table("spots")
    op.drop_index("ix_vehicles_owner_id", table_name="vehicles")
    op.drop_table("vehicles")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
