"""Initial schema for prospects, clients, billing and payments."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from backend.app.db_types import GUID, INET, MACADDR

revision = "20260901_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _contact_columns() -> list[sa.Column]:
    return [
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name_paterno", sa.String(length=120), nullable=False),
        sa.Column("last_name_materno", sa.String(length=120), nullable=True),
        sa.Column("phone1", sa.String(length=20), nullable=False),
        sa.Column("phone1_country", sa.String(length=2), nullable=False, server_default="MX"),
        sa.Column("phone2", sa.String(length=20), nullable=True),
        sa.Column("phone2_country", sa.String(length=2), nullable=False, server_default="MX"),
        sa.Column("phone3_country", sa.String(length=2), nullable=False, server_default="MX"),
        sa.Column("street", sa.String(length=200), nullable=False),
        sa.Column("exterior_number", sa.String(length=20), nullable=False),
        sa.Column("interior_number", sa.String(length=20), nullable=True),
        sa.Column("neighborhood", sa.String(length=120), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("postal_code", sa.String(length=10), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        *_timestamps(),
    ]


def upgrade() -> None:
    op.create_table(
        "cities",
        sa.Column("city_id", GUID(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
    )

    op.create_table(
        "service_plans",
        sa.Column("plan_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("download_speed_mbps", sa.Numeric(8, 2), nullable=True),
        sa.Column("upload_speed_mbps", sa.Numeric(8, 2), nullable=True),
        sa.Column("monthly_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=8), nullable=False, server_default="active"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("monthly_price >= 0", name="ck_service_plans_price_non_negative"),
    )

    op.create_table(
        "prospects",
        sa.Column("prospect_id", GUID(), primary_key=True),
        *_contact_columns(),
        sa.Column("phone3_signer", sa.String(length=20), nullable=True),
        sa.Column("ssid", sa.String(length=120), nullable=True),
        sa.Column("antenna_ip", INET(), nullable=True),
        sa.Column("status", sa.String(length=9), nullable=False, server_default="pending"),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=True),
    )
    op.create_index("prospects_status_idx", "prospects", ["status"])
    op.create_index("prospects_city_idx", "prospects", ["city"])

    op.create_table(
        "clients",
        sa.Column("client_id", GUID(), primary_key=True),
        *_contact_columns(),
        sa.Column("phone3", sa.String(length=20), nullable=True),
        sa.Column(
            "prospect_id",
            GUID(),
            sa.ForeignKey("prospects.prospect_id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
        sa.Column("status", sa.String(length=9), nullable=False, server_default="active"),
        sa.Column("created_by", sa.String(length=64), nullable=True),
    )
    op.create_index("clients_status_idx", "clients", ["status"])
    op.create_index("clients_city_idx", "clients", ["city"])

    op.create_table(
        "prospect_change_history",
        sa.Column("change_id", GUID(), primary_key=True),
        sa.Column(
            "prospect_id",
            GUID(),
            sa.ForeignKey("prospects.prospect_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "client_id",
            GUID(),
            sa.ForeignKey("clients.client_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("field_name", sa.String(length=64), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("changed_by", sa.String(length=64), nullable=True),
        sa.Column(
            "changed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "prospect_change_history_prospect_idx",
        "prospect_change_history",
        ["prospect_id"],
    )

    op.create_table(
        "equipment",
        sa.Column("equipment_id", GUID(), primary_key=True),
        sa.Column(
            "client_id",
            GUID(),
            sa.ForeignKey("clients.client_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("antenna_ssid", sa.String(length=120), nullable=True),
        sa.Column("antenna_ip", INET(), nullable=True),
        sa.Column("antenna_mac", MACADDR(), nullable=True),
        sa.Column("router_mac", MACADDR(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "client_billing",
        sa.Column("billing_id", GUID(), primary_key=True),
        sa.Column(
            "client_id",
            GUID(),
            sa.ForeignKey("clients.client_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "service_plan_id",
            sa.Integer(),
            sa.ForeignKey("service_plans.plan_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("monthly_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("installation_cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("installation_date", sa.Date(), nullable=False),
        sa.Column("first_billing_date", sa.Date(), nullable=False),
        sa.Column("billing_day", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("prorated_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("days_charged", sa.Integer(), nullable=False),
        sa.Column("additional_charges", sa.Numeric(10, 2), nullable=False),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "billing_day >= 1 AND billing_day <= 28",
            name="ck_client_billing_day_range",
        ),
        sa.CheckConstraint("monthly_fee >= 0", name="ck_client_billing_fee_non_negative"),
        sa.CheckConstraint(
            "installation_cost >= 0",
            name="ck_client_billing_installation_non_negative",
        ),
        sa.CheckConstraint("days_charged >= 0", name="ck_client_billing_days_non_negative"),
    )

    op.create_table(
        "client_charges",
        sa.Column("charge_id", GUID(), primary_key=True),
        sa.Column(
            "client_id",
            GUID(),
            sa.ForeignKey("clients.client_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.String(length=200), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False, server_default="pending"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("amount >= 0", name="ck_client_charges_amount_non_negative"),
    )
    op.create_index("client_charges_description_idx", "client_charges", ["description"])
    op.create_index(
        "client_charges_client_status_idx",
        "client_charges",
        ["client_id", "status"],
    )

    op.create_table(
        "payment_methods",
        sa.Column("method_id", GUID(), primary_key=True),
        sa.Column("name", sa.String(length=80), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
    )

    op.create_table(
        "banks",
        sa.Column("bank_id", GUID(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("short_name", sa.String(length=40), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
    )

    op.create_table(
        "payments",
        sa.Column("payment_id", GUID(), primary_key=True),
        sa.Column(
            "client_id",
            GUID(),
            sa.ForeignKey("clients.client_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column(
            "payment_type",
            GUID(),
            sa.ForeignKey("payment_methods.method_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "bank_id",
            GUID(),
            sa.ForeignKey("banks.bank_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("receipt_number", sa.String(length=64), nullable=True),
        sa.Column("period_month", sa.Integer(), nullable=True),
        sa.Column("period_year", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("recorded_by", sa.String(length=64), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        sa.CheckConstraint(
            "period_month IS NULL OR (period_month >= 1 AND period_month <= 12)",
            name="ck_payments_period_month_range",
        ),
    )
    op.create_index("payments_payment_date_idx", "payments", ["payment_date"])
    op.create_index("payments_client_idx", "payments", ["client_id"])

    op.create_table(
        "scheduled_services",
        sa.Column("service_id", GUID(), primary_key=True),
        sa.Column(
            "client_id",
            GUID(),
            sa.ForeignKey("clients.client_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "prospect_id",
            GUID(),
            sa.ForeignKey("prospects.prospect_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("assigned_to", sa.String(length=64), nullable=False),
        sa.Column("assigned_name", sa.String(length=160), nullable=True),
        sa.Column("service_type", sa.String(length=16), nullable=False, server_default="other"),
        sa.Column("status", sa.String(length=11), nullable=False, server_default="scheduled"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_notes", sa.Text(), nullable=True),
        sa.Column("charge_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index("scheduled_services_date_idx", "scheduled_services", ["scheduled_date"])
    op.create_index("scheduled_services_assigned_idx", "scheduled_services", ["assigned_to"])


def downgrade() -> None:
    op.drop_index("scheduled_services_assigned_idx", table_name="scheduled_services")
    op.drop_index("scheduled_services_date_idx", table_name="scheduled_services")
    op.drop_table("scheduled_services")
    op.drop_index("payments_client_idx", table_name="payments")
    op.drop_index("payments_payment_date_idx", table_name="payments")
    op.drop_table("payments")
    op.drop_table("banks")
    op.drop_table("payment_methods")
    op.drop_index("client_charges_client_status_idx", table_name="client_charges")
    op.drop_index("client_charges_description_idx", table_name="client_charges")
    op.drop_table("client_charges")
    op.drop_table("client_billing")
    op.drop_table("equipment")
    op.drop_index("prospect_change_history_prospect_idx", table_name="prospect_change_history")
    op.drop_table("prospect_change_history")
    op.drop_index("clients_city_idx", table_name="clients")
    op.drop_index("clients_status_idx", table_name="clients")
    op.drop_table("clients")
    op.drop_index("prospects_city_idx", table_name="prospects")
    op.drop_index("prospects_status_idx", table_name="prospects")
    op.drop_table("prospects")
    op.drop_table("service_plans")
    op.drop_table("cities")
