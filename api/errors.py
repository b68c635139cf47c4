from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import ConfigurationError

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"
INVALID_REQUEST = "Invalid request"
INCOMPLETE_NFT_DATA = "Incomplete NFT data"
MINTING_FAILED = "Minting failed"


def error_response(
    status_code: int,
    error: str,
    details: str | None = None,
    *,
    code: str | None = None,
) -> JSONResponse:
    body: dict[str, str] = {"error": error}
    if details is not None:
        body["details"] = details
    if code is not None:
        body["code"] = code
    return JSONResponse(status_code=status_code, content=body)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc or 'body'}: {err.get('msg')}")
    return "; ".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _format_validation_errors(exc)
    logger.info("rejected %s %s: %s", request.method, request.url.path, details)
    return error_response(400, INVALID_REQUEST, details)


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("configuration error on %s: %s", request.url.path, exc)
    return error_response(500, SERVER_ERROR, str(exc), code="CONFIGURATION_ERROR")
