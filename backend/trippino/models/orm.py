from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trippino.models import Base

BIGINT_TYPE = sa.BigInteger().with_variant(sa.Integer, "sqlite")


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
    )


class TransportMode(StrEnum):
    FLIGHT = "flight"
    CAR = "car"
    TRAIN = "train"
    PUBLIC_TRANSPORT = "public_transport"
    MOTORBIKE = "motorbike"
    BOAT = "boat"
    BIKE = "bike"
    WALK = "walk"


def _transport_values(enum_cls: type[TransportMode]) -> list[str]:
    return [member.value for member in enum_cls]


TRANSPORT_ENUM = sa.Enum(
    TransportMode,
    name="transport_mode",
    native_enum=False,
    create_constraint=True,
    validate_strings=True,
    length=32,
    values_callable=_transport_values,
)


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        primary_key=True,
        autoincrement=True,
    )
    email: Mapped[str] = mapped_column(sa.String(255), unique=True, index=True)
    name: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)

    trips: Mapped[list["Trip"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sessions: Mapped[list["UserSession"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class UserSession(Base):
    """Session row issued by the auth collaborator; only read here."""

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(sa.String(128), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )

    user: Mapped["User"] = relationship(back_populates="sessions")


class Trip(TimestampMixin, Base):
    __tablename__ = "trips"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    start_date: Mapped[date | None] = mapped_column(sa.Date, nullable=True)

    user: Mapped["User"] = relationship(back_populates="trips")
    cities: Mapped[list["City"]] = relationship(
        back_populates="trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[City.sort_order, City.id]",
    )
    transportation: Mapped[list["Transportation"]] = relationship(
        back_populates="trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class City(TimestampMixin, Base):
    __tablename__ = "cities"
    __table_args__ = (
        sa.Index("ix_cities_trip_sort", "trip_id", "sort_order", "id"),
        sa.Index("ix_cities_coordinates", "latitude", "longitude"),
        # Ids are never reused; legs refer to cities by id without a FK.
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        primary_key=True,
        autoincrement=True,
    )
    trip_id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        sa.ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    nights: Mapped[int] = mapped_column(
        sa.Integer,
        nullable=False,
        server_default=sa.text("0"),
    )
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    # Not unique: gaps and collisions are allowed, ties break on id.
    sort_order: Mapped[int] = mapped_column(
        sa.Integer,
        nullable=False,
        server_default=sa.text("0"),
    )
    latitude: Mapped[float | None] = mapped_column(sa.Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(sa.Float, nullable=True)

    trip: Mapped["Trip"] = relationship(back_populates="cities")


class Transportation(TimestampMixin, Base):
    """Leg between a city and its successor; city ids are not foreign keys."""

    __tablename__ = "transportation"
    __table_args__ = (
        sa.UniqueConstraint(
            "trip_id",
            "from_city_id",
            "to_city_id",
            name="uq_transportation_trip_leg",
        ),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        primary_key=True,
        autoincrement=True,
    )
    trip_id: Mapped[int] = mapped_column(
        BIGINT_TYPE,
        sa.ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_city_id: Mapped[int] = mapped_column(BIGINT_TYPE, nullable=False, index=True)
    to_city_id: Mapped[int] = mapped_column(BIGINT_TYPE, nullable=False, index=True)
    mode: Mapped[TransportMode] = mapped_column(TRANSPORT_ENUM, nullable=False)
    notes: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    trip: Mapped["Trip"] = relationship(back_populates="transportation")


__all__ = [
    "User",
    "UserSession",
    "Trip",
    "City",
    "Transportation",
    "TransportMode",
    "TRANSPORT_ENUM",
]
