from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from trippino.api.deps import get_service, handle_service_error
from trippino.core.auth import get_request_context
from trippino.models.schemas import MAX_ROW_ID, TripCreate, TripUpdate
from trippino.services.context import RequestContext
from trippino.services.errors import TripServiceError
from trippino.utils.responses import success_response

router = APIRouter(prefix="/api", tags=["trips"])


@router.get(
    "/trips",
    summary="List trips",
    description="Trips owned by the caller, newest first, with city counts.",
)
def list_trips(ctx: RequestContext = Depends(get_request_context)) -> dict:
    service = get_service()
    try:
        summaries = service.list_trips(ctx)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response([item.model_dump(mode="json") for item in summaries])


@router.post("/trips", summary="Create trip")
def create_trip(
    payload: TripCreate,
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        trip = service.create_trip(ctx, payload)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response({"trip_id": trip.id, "trip": trip.model_dump(mode="json")})


@router.get(
    "/trips/{trip_id}",
    summary="Trip detail",
    description="Trip with its cities in order and the legs between adjacent cities.",
)
def get_trip(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        trip = service.get_trip(ctx, trip_id)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(trip.model_dump(mode="json"))


@router.put("/trips/{trip_id}", summary="Update trip name or start date")
def update_trip(
    payload: TripUpdate,
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        trip = service.update_trip(ctx, trip_id, payload)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(trip.model_dump(mode="json"))


@router.delete(
    "/trips/{trip_id}",
    summary="Delete trip",
    description="Deletes the trip together with its cities and transportation.",
)
def delete_trip(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        service.delete_trip(ctx, trip_id)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response({"deleted": True})
