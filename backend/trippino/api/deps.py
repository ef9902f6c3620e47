from __future__ import annotations

from fastapi.responses import JSONResponse

from trippino.core.logging import get_logger
from trippino.services.errors import TripServiceError
from trippino.services.trip_service import TripService
from trippino.utils.responses import error_response

LOGGER = get_logger(__name__)


def get_service() -> TripService:
    return TripService()


def handle_service_error(exc: TripServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        LOGGER.error("api.server_error", extra={"code": exc.code})
    return error_response(exc.status_code, exc.message, exc.code)
