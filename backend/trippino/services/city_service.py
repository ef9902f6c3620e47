from __future__ import annotations

import math
from typing import Sequence

from sqlalchemy.orm import Session

from trippino.core.settings import settings
from trippino.models.orm import City
from trippino.models.schemas import CityCreate, CitySchema, CityUpdate, is_row_id
from trippino.repositories import CityRepository

from .base import TripServiceBase
from .context import RequestContext
from .errors import INVALID_ORDER, NO_FIELDS_TO_UPDATE, ValidationError
from .transportation_service import prune_stale_legs

UPDATABLE_FIELDS = frozenset({"name", "nights", "notes", "latitude", "longitude"})
# nights is stored in a 32-bit INTEGER column.
MAX_NIGHTS = 2**31 - 1


def clean_city_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError("city name required")
    return name


def clean_nights(value: float | None) -> int:
    """Nights is a whole, non-negative number; zero is allowed."""

    if value is None or not math.isfinite(value) or value < 0:
        raise ValidationError("nights must be a non-negative number")
    if value > MAX_NIGHTS:
        raise ValidationError(f"nights must be at most {MAX_NIGHTS}")
    if not float(value).is_integer():
        raise ValidationError("nights must be a whole number")
    return int(value)


def clean_notes(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def clean_coordinate(value: float | None, *, limit: float, label: str) -> float | None:
    if value is None:
        return None
    if not math.isfinite(value) or not -limit <= value <= limit:
        raise ValidationError(f"{label} must be between -{limit:g} and {limit:g}")
    return value


class CitySequenceService(TripServiceBase):
    """Owns the ordered list of cities inside a trip."""

    def list_cities(self, ctx: RequestContext, trip_id: int) -> list[CitySchema]:
        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id)
            cities = CityRepository(session).list_ordered(trip_id)
            return [CitySchema.model_validate(city) for city in cities]

    def append_city(
        self,
        ctx: RequestContext,
        trip_id: int,
        payload: CityCreate,
    ) -> CitySchema:
        with self._transaction() as session:
            # Row lock serializes concurrent appends and reorders on one trip.
            self._require_trip(session, ctx, trip_id, for_update=True)
            name = clean_city_name(payload.name)
            nights = (
                settings.city_default_nights
                if payload.nights is None
                else clean_nights(payload.nights)
            )
            repo = CityRepository(session)
            current_max = repo.max_sort_order(trip_id)
            city = repo.add(
                City(
                    trip_id=trip_id,
                    name=name,
                    nights=nights,
                    notes=clean_notes(payload.notes),
                    sort_order=0 if current_max is None else current_max + 1,
                    latitude=clean_coordinate(
                        payload.latitude, limit=90, label="latitude"
                    ),
                    longitude=clean_coordinate(
                        payload.longitude, limit=180, label="longitude"
                    ),
                )
            )
            schema = CitySchema.model_validate(city)
        self.logger.info(
            "city.appended",
            extra={
                "trip_id": trip_id,
                "city_id": schema.id,
                "sort_order": schema.sort_order,
            },
        )
        return schema

    def update_city(
        self,
        ctx: RequestContext,
        trip_id: int,
        city_id: int,
        payload: CityUpdate,
    ) -> CitySchema:
        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id)
            city = self._require_city(session, trip_id, city_id)
            fields = payload.model_fields_set & UPDATABLE_FIELDS
            if not fields:
                raise ValidationError("no fields to update", code=NO_FIELDS_TO_UPDATE)

            if "name" in fields:
                city.name = clean_city_name(payload.name)
            if "nights" in fields:
                city.nights = clean_nights(payload.nights)
            if "notes" in fields:
                city.notes = clean_notes(payload.notes)
            if "latitude" in fields:
                city.latitude = clean_coordinate(
                    payload.latitude, limit=90, label="latitude"
                )
            if "longitude" in fields:
                city.longitude = clean_coordinate(
                    payload.longitude, limit=180, label="longitude"
                )

            session.flush()
            schema = CitySchema.model_validate(city)
        self.logger.info(
            "city.updated",
            extra={"trip_id": trip_id, "city_id": city_id, "fields": sorted(fields)},
        )
        return schema

    def reorder_cities(
        self,
        ctx: RequestContext,
        trip_id: int,
        city_ids: Sequence[int],
    ) -> list[CitySchema]:
        """Give each listed city a sort key equal to its list position.

        Cities left out of a partial list keep their keys. All updates run in
        one transaction holding the trip row lock.
        """

        ordered_ids = list(city_ids)
        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id, for_update=True)
            if not ordered_ids:
                raise ValidationError("city_ids must not be empty", code=INVALID_ORDER)
            if len(set(ordered_ids)) != len(ordered_ids):
                raise ValidationError("duplicate city ids", code=INVALID_ORDER)
            if not all(is_row_id(city_id) for city_id in ordered_ids):
                raise ValidationError("invalid city ids", code=INVALID_ORDER)
            repo = CityRepository(session)
            known = repo.ids_in_trip(trip_id, ordered_ids)
            if len(known) != len(ordered_ids):
                raise ValidationError("invalid city ids", code=INVALID_ORDER)

            for position, city_id in enumerate(ordered_ids):
                repo.set_sort_order(city_id, position)

            pruned = self._maybe_prune(session, trip_id)
            cities = [
                CitySchema.model_validate(city) for city in repo.list_ordered(trip_id)
            ]
        self.logger.info(
            "cities.reordered",
            extra={"trip_id": trip_id, "count": len(ordered_ids), "pruned": pruned},
        )
        return cities

    def delete_city(self, ctx: RequestContext, trip_id: int, city_id: int) -> None:
        """Delete one city; the other cities keep their sort keys."""

        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id, for_update=True)
            self._require_city(session, trip_id, city_id)
            CityRepository(session).delete(city_id)
            pruned = self._maybe_prune(session, trip_id)
        self.logger.info(
            "city.deleted",
            extra={"trip_id": trip_id, "city_id": city_id, "pruned": pruned},
        )

    def _maybe_prune(self, session: Session, trip_id: int) -> int:
        if not settings.prune_stale_legs:
            return 0
        pruned = prune_stale_legs(session, trip_id)
        if pruned:
            self.logger.info(
                "transportation.pruned",
                extra={"trip_id": trip_id, "count": pruned},
            )
        return pruned


__all__ = [
    "CitySequenceService",
    "clean_city_name",
    "clean_coordinate",
    "clean_nights",
    "clean_notes",
]
