from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from trippino.api import cities, health, state, transportation, trips
from trippino.api.deps import handle_service_error
from trippino.core.auth import AuthenticationError
from trippino.core.logging import get_logger, setup_logging
from trippino.core.settings import settings
from trippino.services.errors import TripServiceError
from trippino.utils.responses import error_response

LOGGER = get_logger(__name__)

UNAUTHENTICATED_CODE = 14010
INVALID_REQUEST_CODE = 14001


async def authentication_exception_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    return error_response(401, exc.message, UNAUTHENTICATED_CODE)


async def service_exception_handler(
    request: Request, exc: TripServiceError
) -> JSONResponse:
    # Routes render their own service errors; this covers dependencies.
    return handle_service_error(exc)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid request")
    LOGGER.info(
        "api.invalid_request",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return error_response(
        400,
        f"{location}: {message}" if location else message,
        INVALID_REQUEST_CODE,
    )


def create_app() -> FastAPI:
    """Application factory registering routers, handlers, and config."""

    setup_logging()
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    application.include_router(health.router)
    application.include_router(trips.router)
    application.include_router(cities.router)
    application.include_router(transportation.router)
    application.include_router(state.router)
    application.add_exception_handler(
        AuthenticationError,
        authentication_exception_handler,
    )
    application.add_exception_handler(
        TripServiceError,
        service_exception_handler,
    )
    application.add_exception_handler(
        RequestValidationError,
        request_validation_exception_handler,
    )
    return application
