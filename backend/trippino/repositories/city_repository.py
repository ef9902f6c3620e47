from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy import func, select

from trippino.models.orm import City

from .base import BaseRepository


class CityRepository(BaseRepository):
    """Data access helpers for the ordered cities of a trip."""

    def get_in_trip(self, trip_id: int, city_id: int) -> City | None:
        return self.session.execute(
            select(City).where(City.id == city_id, City.trip_id == trip_id)
        ).scalar_one_or_none()

    def list_ordered(self, trip_id: int) -> list[City]:
        return list(
            self.session.execute(
                select(City)
                .where(City.trip_id == trip_id)
                .order_by(City.sort_order.asc(), City.id.asc())
            ).scalars()
        )

    def ids_in_trip(self, trip_id: int, city_ids: list[int]) -> set[int]:
        if not city_ids:
            return set()
        rows = self.session.execute(
            select(City.id).where(City.trip_id == trip_id, City.id.in_(city_ids))
        ).scalars()
        return set(rows)

    def max_sort_order(self, trip_id: int) -> int | None:
        return self.session.execute(
            select(func.max(City.sort_order)).where(City.trip_id == trip_id)
        ).scalar()

    def set_sort_order(self, city_id: int, sort_order: int) -> None:
        self.session.execute(
            sa.update(City).where(City.id == city_id).values(sort_order=sort_order)
        )

    def delete(self, city_id: int) -> int:
        result = self.session.execute(sa.delete(City).where(City.id == city_id))
        return result.rowcount or 0
