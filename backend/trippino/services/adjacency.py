from __future__ import annotations

from sqlalchemy.orm import Session

from trippino.models.orm import City
from trippino.models.schemas import CitySchema
from trippino.repositories import CityRepository

from .base import TripServiceBase
from .context import RequestContext


class AdjacencyResolver:
    """Derives "which city follows which" from the current sort order.

    Results are recomputed from storage on every call; any reorder, append or
    delete changes them.
    """

    def __init__(self, session: Session) -> None:
        self.repo = CityRepository(session)

    def ordered_cities(self, trip_id: int) -> list[City]:
        return self.repo.list_ordered(trip_id)

    def next_city_of(self, trip_id: int, city_id: int) -> City | None:
        cities = self.ordered_cities(trip_id)
        for position, city in enumerate(cities):
            if city.id == city_id:
                if position + 1 < len(cities):
                    return cities[position + 1]
                return None
        return None

    def adjacent_pairs(self, trip_id: int) -> list[tuple[int, int]]:
        cities = self.ordered_cities(trip_id)
        return [(left.id, right.id) for left, right in zip(cities, cities[1:])]


class AdjacencyService(TripServiceBase):
    def next_city(
        self,
        ctx: RequestContext,
        trip_id: int,
        city_id: int,
    ) -> CitySchema | None:
        with self._transaction() as session:
            self._require_trip(session, ctx, trip_id)
            self._require_city(session, trip_id, city_id)
            next_city = AdjacencyResolver(session).next_city_of(trip_id, city_id)
            if next_city is None:
                return None
            return CitySchema.model_validate(next_city)


__all__ = ["AdjacencyResolver", "AdjacencyService"]
