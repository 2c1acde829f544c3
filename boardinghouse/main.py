"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from boardinghouse.api.v1.router import get_api_router
from boardinghouse.core.config import get_config
from boardinghouse.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BoardingHouseError,
    ConflictError,
    NotFoundError,
    StateTransitionError,
    ValidationError,
)
from boardinghouse.schemas.common import ErrorEnvelope

logger = logging.getLogger(__name__)

# Most specific first; the first match wins.
ERROR_STATUS_CODES: list[tuple[type[BoardingHouseError], int]] = [
    (StateTransitionError, 409),
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
]


def status_code_for(exc: BoardingHouseError) -> int:
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return code
    return 500


def _error_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=envelope.model_dump(), headers=headers)


async def handle_domain_error(request: Request, exc: BoardingHouseError) -> JSONResponse:
    status_code = status_code_for(exc)
    log = logger.error if status_code >= 500 else logger.info
    log(
        "api.request_failed",
        extra={
            "event": "api.request_failed",
            "path": request.url.path,
            "status_code": status_code,
            "error_code": exc.error_code,
        },
    )
    return _error_response(
        status_code, ErrorEnvelope(error_code=exc.error_code, detail=exc.message, field=exc.field)
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    return _error_response(
        400,
        ErrorEnvelope(
            error_code=ValidationError.error_code,
            detail=first.get("msg", "Invalid request."),
            field=".".join(location) or None,
        ),
    )


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.add_exception_handler(BoardingHouseError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Exposed for `uvicorn boardinghouse.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    from boardinghouse.core.startup import bootstrap

    bootstrap()
    uvicorn.run(app, host="0.0.0.0", port=8000)
