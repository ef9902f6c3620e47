from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from trippino.models import Base

RowT = TypeVar("RowT", bound=Base)


class BaseRepository:
    """Session holder shared by the trip, city and leg repositories."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, row: RowT) -> RowT:
        """Insert and flush so the generated id is available to the caller."""
        self.session.add(row)
        self.session.flush()
        return row
