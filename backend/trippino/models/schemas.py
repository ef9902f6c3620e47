from __future__ import annotations

from datetime import date as dt_date
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trippino.models.orm import TransportMode

# Largest id a BIGINT (or SQLite INTEGER) primary key can hold.
MAX_ROW_ID = 2**63 - 1

RowId = Annotated[int, Field(ge=1, le=MAX_ROW_ID)]


def is_row_id(value: int) -> bool:
    return 1 <= value <= MAX_ROW_ID


class ORMBaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CityCreate(BaseModel):
    name: str
    nights: float | None = None
    notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class CityUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    name: str | None = None
    nights: float | None = None
    notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class CityReorderPayload(BaseModel):
    city_ids: list[RowId] = Field(description="City ids in their new order")


class CitySchema(ORMBaseSchema):
    id: int
    trip_id: int
    name: str
    nights: int
    notes: str | None = None
    sort_order: int
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TransportationUpsert(BaseModel):
    to_city_id: RowId
    # Checked against TransportMode by the ledger, not here.
    mode: str
    notes: str | None = None


class TransportationSchema(ORMBaseSchema):
    id: int
    trip_id: int
    from_city_id: int
    to_city_id: int
    mode: TransportMode
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def _blank_date_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TripCreate(BaseModel):
    name: str
    start_date: dt_date | None = None

    normalize_start_date = field_validator("start_date", mode="before")(
        _blank_date_to_none
    )


class TripUpdate(BaseModel):
    """Partial update; an empty start_date string clears the date."""

    name: str | None = None
    start_date: dt_date | None = None

    normalize_start_date = field_validator("start_date", mode="before")(
        _blank_date_to_none
    )


class TripSchema(ORMBaseSchema):
    id: int
    user_id: int
    name: str
    start_date: dt_date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TripSummarySchema(TripSchema):
    city_count: int = 0


class TripDetailSchema(TripSchema):
    cities: list[CitySchema] = Field(default_factory=list)
    transportation: list[TransportationSchema] = Field(default_factory=list)


class StateCity(BaseModel):
    name: str
    nights: float | None = None
    notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class StateTrip(BaseModel):
    name: str
    start_date: dt_date | None = None
    cities: list[StateCity] = Field(default_factory=list)


class StateImportPayload(BaseModel):
    trips: list[StateTrip] = Field(default_factory=list)


class StateSchema(BaseModel):
    trips: list[TripDetailSchema] = Field(default_factory=list)


__all__ = [
    "MAX_ROW_ID",
    "RowId",
    "is_row_id",
    "CityCreate",
    "CityUpdate",
    "CityReorderPayload",
    "CitySchema",
    "TransportationUpsert",
    "TransportationSchema",
    "TripCreate",
    "TripUpdate",
    "TripSchema",
    "TripSummarySchema",
    "TripDetailSchema",
    "StateCity",
    "StateTrip",
    "StateImportPayload",
    "StateSchema",
]
