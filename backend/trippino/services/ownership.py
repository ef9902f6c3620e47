from __future__ import annotations

from sqlalchemy.orm import Session

from trippino.core.db import session_scope
from trippino.models.orm import Trip
from trippino.models.schemas import is_row_id
from trippino.repositories import TripRepository

from .errors import TRIP_NOT_FOUND, NotFoundError


class OwnershipGuard:
    """Checks that a trip, and so its cities and legs, belongs to the caller."""

    def __init__(self, session: Session) -> None:
        self.repo = TripRepository(session)

    def verify_trip_ownership(self, trip_id: int, user_id: int) -> bool:
        if not is_row_id(trip_id):
            return False
        return self.repo.get_owned(trip_id, user_id) is not None

    def require_trip(
        self,
        trip_id: int,
        user_id: int,
        *,
        for_update: bool = False,
    ) -> Trip:
        """Return the owned trip, optionally row-locked for this transaction.

        Missing and foreign trips raise the same NotFoundError so callers
        cannot probe for other users' trips.
        """

        trip = None
        if is_row_id(trip_id):
            trip = self.repo.get_owned(trip_id, user_id, for_update=for_update)
        if trip is None:
            raise NotFoundError("trip not found", code=TRIP_NOT_FOUND)
        return trip


def verify_trip_ownership(trip_id: int, user_id: int) -> bool:
    with session_scope() as session:
        return OwnershipGuard(session).verify_trip_ownership(trip_id, user_id)


__all__ = ["OwnershipGuard", "verify_trip_ownership"]
