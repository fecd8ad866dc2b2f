"""Track visit start time and GPS position on scheduled services."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20260915_0002"
down_revision = "20260901_0001"
branch_labels = None
depends_on = None


VISIT_COLUMNS = ("visit_started_at", "visit_latitude", "visit_longitude")


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    existing = {column["name"] for column in inspector.get_columns("scheduled_services")}

    if "visit_started_at" not in existing:
        op.add_column(
            "scheduled_services",
            sa.Column("visit_started_at", sa.DateTime(timezone=True), nullable=True),
        )
    if "visit_latitude" not in existing:
        op.add_column(
            "scheduled_services",
            sa.Column("visit_latitude", sa.Numeric(9, 6), nullable=True),
        )
    if "visit_longitude" not in existing:
        op.add_column(
            "scheduled_services",
            sa.Column("visit_longitude", sa.Numeric(9, 6), nullable=True),
        )


def downgrade() -> None:
    with op.batch_alter_table("scheduled_services") as batch_op:
        for column in VISIT_COLUMNS:
            batch_op.drop_column(column)
