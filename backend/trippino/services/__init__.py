from .adjacency import AdjacencyResolver
from .city_service import CitySequenceService
from .context import RequestContext
from .errors import NotFoundError, StorageError, TripServiceError, ValidationError
from .ownership import OwnershipGuard, verify_trip_ownership
from .transportation_service import TransportationService
from .trip_service import TripService

__all__ = [
    "AdjacencyResolver",
    "CitySequenceService",
    "NotFoundError",
    "OwnershipGuard",
    "RequestContext",
    "StorageError",
    "TransportationService",
    "TripService",
    "TripServiceError",
    "ValidationError",
    "verify_trip_ownership",
]
