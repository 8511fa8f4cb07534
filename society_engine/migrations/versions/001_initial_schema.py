"""Initial schema: flats, users, bills, payments, bookings, visitors, complaints,
broadcasts and the activity log.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-03-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "flats",
        sa.Column(
            "id", sa.String(length=20), nullable=False,
            comment="Stable flat code: <tower>-<flat number>",
        ),
        sa.Column("tower", sa.String(length=10), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=False),
        sa.Column("flat_number", sa.String(length=10), nullable=False),
        sa.Column("owner_name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_flats_tower", "flats", ["tower"])
    op.create_index("idx_flat_tower_floor", "flats", ["tower", "floor"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("role", sa.String(length=8), nullable=False),
        sa.Column("flat_id", sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["flat_id"], ["flats.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_flat_id", "users", ["flat_id"])

    op.create_table(
        "maintenance_bills",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("flat_id", sa.String(length=20), nullable=False),
        sa.Column(
            "month", sa.Integer(), nullable=False,
            comment="Billing month 1-12",
        ),
        sa.Column(
            "year", sa.Integer(), nullable=False,
            comment="Billing year",
        ),
        sa.Column(
            "amount", sa.Integer(), nullable=False,
            comment="Bill amount in currency minor units",
        ),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=6), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["flat_id"], ["flats.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("flat_id", "month", "year", name="uq_bill_flat_period"),
    )
    op.create_index("ix_maintenance_bills_flat_id", "maintenance_bills", ["flat_id"])
    op.create_index("ix_maintenance_bills_status", "maintenance_bills", ["status"])
    op.create_index("idx_bill_period", "maintenance_bills", ["year", "month"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "bill_id", sa.Integer(), nullable=False,
            comment="Bill settled by this payment",
        ),
        sa.Column("payment_mode", sa.String(length=30), nullable=False),
        sa.Column("transaction_ref", sa.String(length=100), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["bill_id"], ["maintenance_bills.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("bill_id"),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("amenity", sa.String(length=50), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.String(length=30), nullable=False),
        sa.Column(
            "flat_id", sa.String(length=20), nullable=False,
            comment="Flat holding the reservation",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["flat_id"], ["flats.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("amenity", "booking_date", "time_slot", name="uq_booking_amenity_slot"),
    )
    op.create_index("ix_bookings_booking_date", "bookings", ["booking_date"])
    op.create_index("ix_bookings_flat_id", "bookings", ["flat_id"])

    op.create_table(
        "visitor_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("tower", sa.String(length=10), nullable=False),
        sa.Column(
            "flat_id", sa.String(length=20), nullable=False,
            comment="Flat being visited",
        ),
        sa.Column("entry_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("exit_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=3), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["flat_id"], ["flats.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_visitor_sessions_tower", "visitor_sessions", ["tower"])
    op.create_index("ix_visitor_sessions_flat_id", "visitor_sessions", ["flat_id"])
    op.create_index("idx_visitor_status_tower", "visitor_sessions", ["status", "tower"])

    op.create_table(
        "complaints",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("flat_id", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=11), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["flat_id"], ["flats.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_complaints_flat_id", "complaints", ["flat_id"])
    op.create_index("ix_complaints_status", "complaints", ["status"])

    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "tower", sa.String(length=10), nullable=False,
            comment="Target tower label, or 'All'",
        ),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("severity", sa.String(length=6), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_alerts_tower", "alerts", ["tower"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])

    op.create_table(
        "notices",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("user_name", sa.String(length=255), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_activity_action", "activity_logs", ["action"])
    op.create_index("idx_activity_timestamp", "activity_logs", ["timestamp"])


def downgrade() -> None:
    op.drop_table("activity_logs")
    op.drop_table("notices")
    op.drop_table("events")
    op.drop_table("alerts")
    op.drop_table("complaints")
    op.drop_table("visitor_sessions")
    op.drop_table("bookings")
    op.drop_table("payments")
    op.drop_table("maintenance_bills")
    op.drop_table("users")
    op.drop_table("flats")
