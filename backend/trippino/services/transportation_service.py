from __future__ import annotations

from sqlalchemy.orm import Session

from trippino.models.orm import Transportation, TransportMode
from trippino.models.schemas import TransportationSchema, TransportationUpsert
from trippino.repositories import TransportationRepository

from .adjacency import AdjacencyResolver
from .base import TripServiceBase
from .context import RequestContext
from .errors import INVALID_MODE, NO_NEXT_CITY, NOT_NEXT_CITY, ValidationError

ALLOWED_MODES = frozenset(mode.value for mode in TransportMode)


def _parse_mode(value: str | None) -> TransportMode:
    if not value or not isinstance(value, str):
        raise ValidationError("mode is required", code=INVALID_MODE)
    if value not in ALLOWED_MODES:
        raise ValidationError("invalid mode", code=INVALID_MODE)
    return TransportMode(value)


def _clean_notes(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


def current_legs(session: Session, trip_id: int) -> list[Transportation]:
    """Legs whose (from, to) pair is adjacent in the current city order."""

    pairs = set(AdjacencyResolver(session).adjacent_pairs(trip_id))
    legs = TransportationRepository(session).list_for_trip(trip_id)
    return [leg for leg in legs if (leg.from_city_id, leg.to_city_id) in pairs]


def prune_stale_legs(session: Session, trip_id: int) -> int:
    """Delete every leg of the trip that no longer joins adjacent cities."""

    repo = TransportationRepository(session)
    pairs = set(AdjacencyResolver(session).adjacent_pairs(trip_id))
    stale_ids = [
        leg.id
        for leg in repo.list_for_trip(trip_id)
        if (leg.from_city_id, leg.to_city_id) not in pairs
    ]
    return repo.delete_ids(stale_ids)


class TransportationService(TripServiceBase):
    def upsert_leg(
        self,
        ctx: RequestContext,
        trip_id: int,
        from_city_id: int,
        payload: TransportationUpsert,
    ) -> TransportationSchema:
        mode = _parse_mode(payload.mode)
        notes = _clean_notes(payload.notes)
        with self._transaction() as session:
            # Lock so the adjacency checked below cannot shift before the write.
            self._require_trip(session, ctx, trip_id, for_update=True)
            self._require_city(session, trip_id, from_city_id)
            next_city = AdjacencyResolver(session).next_city_of(trip_id, from_city_id)
            if next_city is None or next_city.id != payload.to_city_id:
                raise ValidationError(
                    "transportation can only be set to the next city in the trip",
                    code=NOT_NEXT_CITY,
                )

            repo = TransportationRepository(session)
            leg = repo.get_leg(trip_id, from_city_id, next_city.id)
            inserted = leg is None
            if leg is None:
                leg = repo.add(
                    Transportation(
                        trip_id=trip_id,
                        from_city_id=from_city_id,
                        to_city_id=next_city.id,
                        mode=mode,
                        notes=notes,
                    )
                )
            else:
                leg.mode = mode
                leg.notes = notes
                session.flush()
            schema = TransportationSchema.model_validate(leg)
        self.logger.info(
            "transportation.upserted",
            extra={
                "trip_id": trip_id,
                "from_city_id": from_city_id,
                "to_city_id": schema.to_city_id,
                "mode": mode.value,
                "inserted": inserted,
            },
        )
        return schema

    def delete_leg(
        self,
        ctx: RequestContext,
        trip_id: int,
        from_city_id: int,
    ) -> bool:
        """Remove the leg to the current successor; False when none was stored."""

        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id, for_update=True)
            self._require_city(session, trip_id, from_city_id)
            next_city = AdjacencyResolver(session).next_city_of(trip_id, from_city_id)
            if next_city is None:
                raise ValidationError("no next city for this leg", code=NO_NEXT_CITY)
            removed = TransportationRepository(session).delete_leg(
                trip_id, from_city_id, next_city.id
            )
        self.logger.info(
            "transportation.deleted",
            extra={
                "trip_id": trip_id,
                "from_city_id": from_city_id,
                "to_city_id": next_city.id,
                "removed": removed,
            },
        )
        return removed > 0

    def list_legs(
        self,
        ctx: RequestContext,
        trip_id: int,
        *,
        include_stale: bool = False,
    ) -> list[TransportationSchema]:
        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id)
            if include_stale:
                legs = TransportationRepository(session).list_for_trip(trip_id)
            else:
                legs = current_legs(session, trip_id)
            return [TransportationSchema.model_validate(leg) for leg in legs]


__all__ = [
    "ALLOWED_MODES",
    "TransportationService",
    "current_legs",
    "prune_stale_legs",
]
