from __future__ import annotations

from datetime import date
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = PROJECT_ROOT / "backend"
for candidate in (PROJECT_ROOT, BACKEND_DIR):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from trippino.core.db import session_scope
from trippino.models.orm import (
    City,
    Transportation,
    TransportMode,
    Trip,
    User,
    UserSession,
)

DEMO_EMAIL = "demo@trippino.local"
DEMO_SID = "demo-session"
DEMO_TRIP = "Iberian loop"
DEMO_CITIES = (("Lisbon", 3), ("Porto", 2), ("Madrid", 2))


def seed() -> str:
    """Create the demo user, session and trip once; return the session id."""

    with session_scope() as session:
        user = session.query(User).filter_by(email=DEMO_EMAIL).one_or_none()
        if user is None:
            user = User(email=DEMO_EMAIL, name="Demo Traveller")
            session.add(user)
            session.flush()

        if session.get(UserSession, DEMO_SID) is None:
            session.add(UserSession(sid=DEMO_SID, user_id=user.id))

        trip = session.query(Trip).filter_by(user=user, name=DEMO_TRIP).one_or_none()
        if trip is None:
            trip = Trip(user=user, name=DEMO_TRIP, start_date=date.today())
            session.add(trip)
            session.flush()
            cities = [
                City(trip_id=trip.id, name=name, nights=nights, sort_order=index)
                for index, (name, nights) in enumerate(DEMO_CITIES)
            ]
            session.add_all(cities)
            session.flush()
            session.add(
                Transportation(
                    trip_id=trip.id,
                    from_city_id=cities[0].id,
                    to_city_id=cities[1].id,
                    mode=TransportMode.TRAIN,
                    notes="Alfa Pendular",
                )
            )
    return DEMO_SID


if __name__ == "__main__":
    sid = seed()
    print(f"Demo data ready. Authorization: Bearer {sid}")
