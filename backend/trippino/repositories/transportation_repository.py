from __future__ import annotations

from typing import Iterable

import sqlalchemy as sa
from sqlalchemy import select

from trippino.models.orm import Transportation

from .base import BaseRepository


class TransportationRepository(BaseRepository):
    """Data access helpers for transportation legs."""

    def get_leg(
        self,
        trip_id: int,
        from_city_id: int,
        to_city_id: int,
    ) -> Transportation | None:
        return self.session.execute(
            select(Transportation).where(
                Transportation.trip_id == trip_id,
                Transportation.from_city_id == from_city_id,
                Transportation.to_city_id == to_city_id,
            )
        ).scalar_one_or_none()

    def list_for_trip(self, trip_id: int) -> list[Transportation]:
        return list(
            self.session.execute(
                select(Transportation)
                .where(Transportation.trip_id == trip_id)
                .order_by(Transportation.id)
            ).scalars()
        )

    def delete_leg(self, trip_id: int, from_city_id: int, to_city_id: int) -> int:
        result = self.session.execute(
            sa.delete(Transportation).where(
                Transportation.trip_id == trip_id,
                Transportation.from_city_id == from_city_id,
                Transportation.to_city_id == to_city_id,
            )
        )
        return result.rowcount or 0

    def delete_ids(self, leg_ids: Iterable[int]) -> int:
        ids = list(leg_ids)
        if not ids:
            return 0
        result = self.session.execute(
            sa.delete(Transportation).where(Transportation.id.in_(ids))
        )
        return result.rowcount or 0
