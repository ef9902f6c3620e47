from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trippino.core.db import session_scope
from trippino.core.logging import get_logger
from trippino.models.orm import City, Trip
from trippino.models.schemas import is_row_id
from trippino.repositories import CityRepository

from .context import RequestContext
from .errors import CITY_NOT_FOUND, NotFoundError, StorageError
from .ownership import OwnershipGuard


class TripServiceBase:
    """Shared helpers used by specialized Trip services."""

    def __init__(self) -> None:
        self.logger = get_logger(self.__class__.__name__)

    @contextmanager
    def _transaction(self) -> Generator[Session, None, None]:
        """One session per operation; storage failures become StorageError."""

        try:
            with session_scope() as session:
                yield session
        except SQLAlchemyError as exc:
            self.logger.exception(
                "storage.failure",
                extra={"error_type": exc.__class__.__name__},
            )
            raise StorageError() from exc

    def _require_trip(
        self,
        session: Session,
        ctx: RequestContext,
        trip_id: int,
        *,
        for_update: bool = False,
    ) -> Trip:
        return OwnershipGuard(session).require_trip(
            trip_id, ctx.user_id, for_update=for_update
        )

    def _require_city(self, session: Session, trip_id: int, city_id: int) -> City:
        city = None
        if is_row_id(city_id):
            city = CityRepository(session).get_in_trip(trip_id, city_id)
        if city is None:
            raise NotFoundError("city not found", code=CITY_NOT_FOUND)
        return city
