from __future__ import annotations

import logging
from typing import Any, Dict, Optional, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...engine.notation import Rejection


logger = logging.getLogger(__name__)

# Starlette renamed the 422 constant; the number is stable.
HTTP_422 = 422

_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    HTTP_422: "unprocessable_entity",
}


class MoveRejectedError(StarletteHTTPException):
    """A move request the engine turned down; rendered as 400 ``illegal_move``."""

    def __init__(self, reason: Optional[Rejection], detail: str = "illegal move") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.reason = reason


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    **extra: Any,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    payload["error"].update({k: v for k, v in extra.items() if v is not None})
    return payload


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def _status_to_code(status_code: int) -> str:
    if status_code in _CODES:
        return _CODES[status_code]
    if 500 <= status_code < 600:
        return "internal_error"
    return "error"


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    status_code = http_exc.status_code
    message = http_exc.detail if isinstance(http_exc.detail, str) else str(http_exc.detail)
    if isinstance(exc, MoveRejectedError):
        payload = error_envelope(
            code="illegal_move",
            message=message,
            err_type="client_error",
            request_id=_request_id(request),
            reason=exc.reason.value if exc.reason else None,
        )
    else:
        payload = error_envelope(
            code=_status_to_code(status_code),
            message=message,
            err_type="client_error" if 400 <= status_code < 500 else "server_error",
            request_id=_request_id(request),
        )
    return JSONResponse(status_code=status_code, content=payload, headers=http_exc.headers)


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    # Pydantic/FastAPI validation errors become field_errors with 422
    field_errors = []
    for e in cast(RequestValidationError, exc).errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        field_errors.append(
            {
                "field": loc,
                "code": e.get("type", "value_error"),
                "message": e.get("msg", "invalid value"),
            }
        )
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        err_type="client_error",
        request_id=_request_id(request),
        field_errors=field_errors or None,
    )
    return JSONResponse(status_code=HTTP_422, content=payload)


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    payload = error_envelope(
        code="internal_error",
        message="Internal Server Error",
        err_type="server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)
