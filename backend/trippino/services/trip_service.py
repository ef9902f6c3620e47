from __future__ import annotations

from typing import Sequence

from sqlalchemy.orm import Session

from trippino.core.settings import settings
from trippino.models.orm import City, Trip
from trippino.models.schemas import (
    CityCreate,
    CitySchema,
    CityUpdate,
    StateImportPayload,
    StateSchema,
    TransportationSchema,
    TransportationUpsert,
    TripCreate,
    TripDetailSchema,
    TripSchema,
    TripSummarySchema,
    TripUpdate,
)
from trippino.repositories import CityRepository, TripRepository

from .adjacency import AdjacencyService
from .base import TripServiceBase
from .city_service import (
    CitySequenceService,
    clean_city_name,
    clean_coordinate,
    clean_nights,
    clean_notes,
)
from .context import RequestContext
from .errors import (
    NO_FIELDS_TO_UPDATE,
    USER_NOT_FOUND,
    NotFoundError,
    ValidationError,
)
from .transportation_service import TransportationService, current_legs


def _clean_trip_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationError("trip name required")
    return name


class TripQueryService(TripServiceBase):
    def list_trips(self, ctx: RequestContext) -> list[TripSummarySchema]:
        with self._transaction() as session:
            rows = TripRepository(session).list_summaries(user_id=ctx.user_id)
            return [
                TripSummarySchema.model_validate(
                    {
                        "id": trip.id,
                        "user_id": trip.user_id,
                        "name": trip.name,
                        "start_date": trip.start_date,
                        "created_at": trip.created_at,
                        "updated_at": trip.updated_at,
                        "city_count": int(city_count or 0),
                    }
                )
                for trip, city_count in rows
            ]

    def get_trip(self, ctx: RequestContext, trip_id: int) -> TripDetailSchema:
        with self._transaction() as session:
            trip = self._require_trip(session, ctx, trip_id)
            return self._build_detail(session, trip)

    def _build_detail(self, session: Session, trip: Trip) -> TripDetailSchema:
        cities = CityRepository(session).list_ordered(trip.id)
        legs = current_legs(session, trip.id)
        return TripDetailSchema.model_validate(
            {
                **TripSchema.model_validate(trip).model_dump(),
                "cities": [CitySchema.model_validate(city) for city in cities],
                "transportation": [
                    TransportationSchema.model_validate(leg) for leg in legs
                ],
            }
        )


class TripCommandService(TripServiceBase):
    def create_trip(self, ctx: RequestContext, payload: TripCreate) -> TripSchema:
        name = _clean_trip_name(payload.name)
        with self._transaction() as session:
            repo = TripRepository(session)
            if repo.get_user(ctx.user_id) is None:
                raise NotFoundError("user not found", code=USER_NOT_FOUND)
            trip = repo.add(
                Trip(user_id=ctx.user_id, name=name, start_date=payload.start_date)
            )
            schema = TripSchema.model_validate(trip)
        self.logger.info(
            "trip.created", extra={"trip_id": schema.id, "user_id": ctx.user_id}
        )
        return schema

    def update_trip(
        self,
        ctx: RequestContext,
        trip_id: int,
        payload: TripUpdate,
    ) -> TripSchema:
        with self._transaction() as session:
            trip = self._require_trip(session, ctx, trip_id)
            fields = payload.model_fields_set & {"name", "start_date"}
            if not fields:
                raise ValidationError("no fields to update", code=NO_FIELDS_TO_UPDATE)
            if "name" in fields:
                trip.name = _clean_trip_name(payload.name)
            if "start_date" in fields:
                trip.start_date = payload.start_date
            session.flush()
            schema = TripSchema.model_validate(trip)
        self.logger.info("trip.updated", extra={"trip_id": trip_id})
        return schema

    def delete_trip(self, ctx: RequestContext, trip_id: int) -> None:
        """Delete a trip; its cities and legs go with it via ON DELETE CASCADE."""

        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id, for_update=True)
            TripRepository(session).delete(trip_id)
        self.logger.info("trip.deleted", extra={"trip_id": trip_id})


class TripStateService(TripQueryService):
    """Whole-account snapshot and first-login bulk import."""

    def get_state(self, ctx: RequestContext) -> StateSchema | None:
        with self._transaction() as session:
            trips = TripRepository(session).list_for_user(user_id=ctx.user_id)
            if not trips:
                return None
            return StateSchema(
                trips=[self._build_detail(session, trip) for trip in trips]
            )

    def import_state(
        self,
        ctx: RequestContext,
        payload: StateImportPayload,
    ) -> StateSchema | None:
        with self._transaction() as session:
            repo = TripRepository(session)
            if repo.get_user(ctx.user_id) is None:
                raise NotFoundError("user not found", code=USER_NOT_FOUND)
            city_repo = CityRepository(session)
            for trip_payload in payload.trips:
                trip = repo.add(
                    Trip(
                        user_id=ctx.user_id,
                        name=_clean_trip_name(trip_payload.name),
                        start_date=trip_payload.start_date,
                    )
                )
                for position, city_payload in enumerate(trip_payload.cities):
                    nights = (
                        settings.city_default_nights
                        if city_payload.nights is None
                        else clean_nights(city_payload.nights)
                    )
                    city_repo.add(
                        City(
                            trip_id=trip.id,
                            name=clean_city_name(city_payload.name),
                            nights=nights,
                            notes=clean_notes(city_payload.notes),
                            sort_order=position,
                            latitude=clean_coordinate(
                                city_payload.latitude, limit=90, label="latitude"
                            ),
                            longitude=clean_coordinate(
                                city_payload.longitude, limit=180, label="longitude"
                            ),
                        )
                    )
        self.logger.info(
            "state.imported",
            extra={"user_id": ctx.user_id, "trip_count": len(payload.trips)},
        )
        return self.get_state(ctx)


class TripService:
    """Facade used by API layer to interact with specialized services."""

    def __init__(self) -> None:
        self.query_service = TripQueryService()
        self.command_service = TripCommandService()
        self.state_service = TripStateService()
        self.city_service = CitySequenceService()
        self.adjacency_service = AdjacencyService()
        self.transportation_service = TransportationService()

    def list_trips(self, ctx: RequestContext) -> list[TripSummarySchema]:
        return self.query_service.list_trips(ctx)

    def get_trip(self, ctx: RequestContext, trip_id: int) -> TripDetailSchema:
        return self.query_service.get_trip(ctx, trip_id)

    def create_trip(self, ctx: RequestContext, payload: TripCreate) -> TripSchema:
        return self.command_service.create_trip(ctx, payload)

    def update_trip(
        self, ctx: RequestContext, trip_id: int, payload: TripUpdate
    ) -> TripSchema:
        return self.command_service.update_trip(ctx, trip_id, payload)

    def delete_trip(self, ctx: RequestContext, trip_id: int) -> None:
        self.command_service.delete_trip(ctx, trip_id)

    def get_state(self, ctx: RequestContext) -> StateSchema | None:
        return self.state_service.get_state(ctx)

    def import_state(
        self, ctx: RequestContext, payload: StateImportPayload
    ) -> StateSchema | None:
        return self.state_service.import_state(ctx, payload)

    def list_cities(self, ctx: RequestContext, trip_id: int) -> list[CitySchema]:
        return self.city_service.list_cities(ctx, trip_id)

    def append_city(
        self, ctx: RequestContext, trip_id: int, payload: CityCreate
    ) -> CitySchema:
        return self.city_service.append_city(ctx, trip_id, payload)

    def update_city(
        self,
        ctx: RequestContext,
        trip_id: int,
        city_id: int,
        payload: CityUpdate,
    ) -> CitySchema:
        return self.city_service.update_city(ctx, trip_id, city_id, payload)

    def reorder_cities(
        self, ctx: RequestContext, trip_id: int, city_ids: Sequence[int]
    ) -> list[CitySchema]:
        return self.city_service.reorder_cities(ctx, trip_id, city_ids)

    def delete_city(self, ctx: RequestContext, trip_id: int, city_id: int) -> None:
        self.city_service.delete_city(ctx, trip_id, city_id)

    def next_city(
        self, ctx: RequestContext, trip_id: int, city_id: int
    ) -> CitySchema | None:
        return self.adjacency_service.next_city(ctx, trip_id, city_id)

    def list_transportation(
        self,
        ctx: RequestContext,
        trip_id: int,
        *,
        include_stale: bool = False,
    ) -> list[TransportationSchema]:
        return self.transportation_service.list_legs(
            ctx, trip_id, include_stale=include_stale
        )

    def upsert_transportation(
        self,
        ctx: RequestContext,
        trip_id: int,
        from_city_id: int,
        payload: TransportationUpsert,
    ) -> TransportationSchema:
        return self.transportation_service.upsert_leg(
            ctx, trip_id, from_city_id, payload
        )

    def delete_transportation(
        self, ctx: RequestContext, trip_id: int, from_city_id: int
    ) -> bool:
        return self.transportation_service.delete_leg(ctx, trip_id, from_city_id)


__all__ = [
    "TripService",
    "TripQueryService",
    "TripCommandService",
    "TripStateService",
]
