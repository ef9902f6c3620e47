from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from trippino.api.deps import get_service, handle_service_error
from trippino.core.auth import get_request_context
from trippino.models.schemas import (
    MAX_ROW_ID,
    CityCreate,
    CityReorderPayload,
    CityUpdate,
)
from trippino.services.context import RequestContext
from trippino.services.errors import TripServiceError
from trippino.utils.responses import success_response

router = APIRouter(prefix="/api/trips/{trip_id}/cities", tags=["cities"])


@router.get("", summary="List cities in trip order")
def list_cities(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        cities = service.list_cities(ctx, trip_id)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response([city.model_dump(mode="json") for city in cities])


@router.post(
    "",
    status_code=201,
    summary="Append city",
    description="Adds a city after the current last city of the trip.",
)
def append_city(
    payload: CityCreate,
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        city = service.append_city(ctx, trip_id, payload)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(city.model_dump(mode="json"))


@router.put(
    "",
    summary="Reorder cities",
    description="Assigns each listed city a sort key equal to its list position.",
)
def reorder_cities(
    payload: CityReorderPayload,
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        cities = service.reorder_cities(ctx, trip_id, payload.city_ids)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response([city.model_dump(mode="json") for city in cities])


@router.put("/{city_id}", summary="Update city")
def update_city(
    payload: CityUpdate,
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    city_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        city = service.update_city(ctx, trip_id, city_id, payload)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(city.model_dump(mode="json"))


@router.delete(
    "/{city_id}",
    summary="Delete city",
    description="Removes one city; the other cities keep their sort keys.",
)
def delete_city(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    city_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        service.delete_city(ctx, trip_id, city_id)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response({"deleted": True})


@router.get(
    "/{city_id}/next",
    summary="Next city",
    description="The city that currently follows this one, or null for the last.",
)
def next_city(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    city_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        city = service.next_city(ctx, trip_id, city_id)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(city.model_dump(mode="json") if city else None)
