from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy import func, select

from trippino.models.orm import City, Trip, User, UserSession

from .base import BaseRepository


class TripRepository(BaseRepository):
    """Encapsulates Trip level data operations."""

    def get(self, trip_id: int) -> Trip | None:
        return self.session.get(Trip, trip_id)

    def get_owned(
        self,
        trip_id: int,
        user_id: int,
        *,
        for_update: bool = False,
    ) -> Trip | None:
        stmt = select(Trip).where(Trip.id == trip_id, Trip.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.execute(stmt).scalars().one_or_none()

    def list_summaries(self, *, user_id: int) -> list[tuple[Trip, int]]:
        query = (
            self.session.query(Trip, func.count(City.id).label("city_count"))
            .outerjoin(City, City.trip_id == Trip.id)
            .filter(Trip.user_id == user_id)
            .group_by(Trip.id)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        return query.all()

    def list_for_user(self, *, user_id: int) -> list[Trip]:
        return (
            self.session.query(Trip)
            .filter(Trip.user_id == user_id)
            .order_by(Trip.id)
            .all()
        )

    def delete(self, trip_id: int) -> int:
        result = self.session.execute(sa.delete(Trip).where(Trip.id == trip_id))
        return result.rowcount or 0

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_session_owner(self, sid: str) -> int | None:
        return self.session.execute(
            select(UserSession.user_id).where(UserSession.sid == sid)
        ).scalar_one_or_none()
