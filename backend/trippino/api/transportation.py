from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query

from trippino.api.deps import get_service, handle_service_error
from trippino.core.auth import get_request_context
from trippino.models.schemas import MAX_ROW_ID, TransportationUpsert
from trippino.services.context import RequestContext
from trippino.services.errors import TripServiceError
from trippino.utils.responses import success_response

router = APIRouter(prefix="/api/trips/{trip_id}", tags=["transportation"])


@router.get(
    "/transportation",
    summary="List legs",
    description="Legs between currently adjacent cities; include_stale adds the rest.",
)
def list_transportation(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    include_stale: bool = Query(default=False),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        legs = service.list_transportation(ctx, trip_id, include_stale=include_stale)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response([leg.model_dump(mode="json") for leg in legs])


@router.put(
    "/cities/{from_city_id}/transportation",
    summary="Set leg to next city",
    description="Creates or updates the leg from a city to the city right after it.",
)
def upsert_transportation(
    payload: TransportationUpsert,
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    from_city_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        leg = service.upsert_transportation(ctx, trip_id, from_city_id, payload)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(leg.model_dump(mode="json"))


@router.delete(
    "/cities/{from_city_id}/transportation",
    summary="Remove leg to next city",
)
def delete_transportation(
    trip_id: int = Path(ge=1, le=MAX_ROW_ID),
    from_city_id: int = Path(ge=1, le=MAX_ROW_ID),
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        removed = service.delete_transportation(ctx, trip_id, from_city_id)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response({"deleted": removed})
