from __future__ import annotations

from fastapi import Header, Request
from sqlalchemy.exc import SQLAlchemyError

from trippino.core.db import session_scope
from trippino.core.logging import get_logger
from trippino.core.settings import settings
from trippino.repositories import TripRepository
from trippino.services.context import RequestContext
from trippino.services.errors import StorageError

LOGGER = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when a request carries no valid session."""

    def __init__(self, message: str = "not authenticated") -> None:
        super().__init__(message)
        self.message = message


def _extract_sid(request: Request, authorization: str | None) -> str | None:
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    cookie = request.cookies.get(settings.session_cookie_name)
    return cookie or None


def resolve_user_id(sid: str | None) -> int | None:
    """Look the session id up; None when it is missing or unknown."""

    if not sid:
        return None
    try:
        with session_scope() as session:
            return TripRepository(session).get_session_owner(sid)
    except SQLAlchemyError as exc:
        LOGGER.exception(
            "storage.failure", extra={"error_type": exc.__class__.__name__}
        )
        raise StorageError() from exc


def get_request_context(
    request: Request,
    authorization: str | None = Header(default=None),
) -> RequestContext:
    sid = _extract_sid(request, authorization)
    user_id = resolve_user_id(sid)
    if user_id is None:
        LOGGER.info(
            "auth.rejected",
            extra={"path": request.url.path, "sid_provided": bool(sid)},
        )
        raise AuthenticationError()
    return RequestContext(user_id=user_id)


__all__ = ["AuthenticationError", "get_request_context", "resolve_user_id"]
