"""Core tables: users, sessions, trips, cities and transportation legs."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20260101_01"
down_revision = None
branch_labels = None
depends_on = None

TRANSPORT_VALUES = (
    "flight",
    "car",
    "train",
    "public_transport",
    "motorbike",
    "boat",
    "bike",
    "walk",
)
BIGINT = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", BIGINT, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("sid", sa.String(length=128), primary_key=True),
        sa.Column("user_id", BIGINT, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_sessions_user_id_users",
        ),
    )
    op.create_index("ix_sessions_user_id", "sessions", ["user_id"])

    op.create_table(
        "trips",
        sa.Column("id", BIGINT, primary_key=True, autoincrement=True),
        sa.Column("user_id", BIGINT, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_trips_user_id_users",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_trips_user_id", "trips", ["user_id"])

    op.create_table(
        "cities",
        sa.Column("id", BIGINT, primary_key=True, autoincrement=True),
        sa.Column("trip_id", BIGINT, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "nights",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "sort_order",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["trip_id"],
            ["trips.id"],
            ondelete="CASCADE",
            name="fk_cities_trip_id_trips",
        ),
        # city ids must never be reused: legs reference them without a FK
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_cities_trip_sort",
        "cities",
        ["trip_id", "sort_order", "id"],
    )

    mode_values = ", ".join(f"'{value}'" for value in TRANSPORT_VALUES)
    op.create_table(
        "transportation",
        sa.Column("id", BIGINT, primary_key=True, autoincrement=True),
        sa.Column("trip_id", BIGINT, nullable=False),
        sa.Column("from_city_id", BIGINT, nullable=False),
        sa.Column("to_city_id", BIGINT, nullable=False),
        sa.Column("mode", sa.String(length=32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["trip_id"],
            ["trips.id"],
            ondelete="CASCADE",
            name="fk_transportation_trip_id_trips",
        ),
        sa.UniqueConstraint(
            "trip_id",
            "from_city_id",
            "to_city_id",
            name="uq_transportation_trip_leg",
        ),
        sa.CheckConstraint(
            f"mode IN ({mode_values})",
            name="ck_transportation_transport_mode",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_transportation_trip_id", "transportation", ["trip_id"])
    op.create_index(
        "ix_transportation_from_city_id", "transportation", ["from_city_id"]
    )
    op.create_index("ix_transportation_to_city_id", "transportation", ["to_city_id"])


def downgrade() -> None:
    op.drop_index("ix_transportation_to_city_id", table_name="transportation")
    op.drop_index("ix_transportation_from_city_id", table_name="transportation")
    op.drop_index("ix_transportation_trip_id", table_name="transportation")
    op.drop_table("transportation")
    op.drop_index("ix_cities_trip_sort", table_name="cities")
    op.drop_table("cities")
    op.drop_index("ix_trips_user_id", table_name="trips")
    op.drop_table("trips")
    op.drop_index("ix_sessions_user_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
