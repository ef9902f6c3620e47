"""The ``{"code", "msg", "data"}`` envelope every trippino route answers with."""

from typing import Any

from fastapi.responses import JSONResponse

OK_CODE = 0


def success_response(data: Any, msg: str = "ok") -> dict[str, Any]:
    return {"code": OK_CODE, "msg": msg, "data": data}


def error_response(status_code: int, msg: str, code: int) -> JSONResponse:
    """Failure envelope; ``data`` is always null so clients can branch on ``code``."""
    return JSONResponse(
        status_code=status_code,
        content={"code": code, "msg": msg, "data": None},
    )
