from __future__ import annotations

from fastapi import APIRouter, Depends

from trippino.api.deps import get_service, handle_service_error
from trippino.core.auth import get_request_context
from trippino.models.schemas import StateImportPayload
from trippino.services.context import RequestContext
from trippino.services.errors import TripServiceError
from trippino.utils.responses import success_response

router = APIRouter(prefix="/api/state", tags=["state"])


@router.get(
    "",
    summary="Account snapshot",
    description="Every trip of the caller with its ordered cities; null when empty.",
)
def get_state(ctx: RequestContext = Depends(get_request_context)) -> dict:
    service = get_service()
    try:
        state = service.get_state(ctx)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(state.model_dump(mode="json") if state else None)


@router.post(
    "/import",
    summary="Import local state",
    description="Saves trips kept client-side before the first login.",
)
def import_state(
    payload: StateImportPayload,
    ctx: RequestContext = Depends(get_request_context),
) -> dict:
    service = get_service()
    try:
        state = service.import_state(ctx, payload)
    except TripServiceError as exc:
        return handle_service_error(exc)
    return success_response(state.model_dump(mode="json") if state else None)
