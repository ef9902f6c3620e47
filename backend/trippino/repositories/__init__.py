from .city_repository import CityRepository
from .transportation_repository import TransportationRepository
from .trip_repository import TripRepository

__all__ = [
    "TripRepository",
    "CityRepository",
    "TransportationRepository",
]
