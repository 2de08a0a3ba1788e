"""FastAPI application hosting the Tech World callable functions."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .core.config import settings
from .routers import rtc as rtc_router
from .schemas.rtc import CallableError, CallableErrorBody
from .services.identity import CallerUnauthenticated
from .services.rtc import SigningFailure

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Tech World Functions", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _callable_error(status_code: int, status: str, message: str) -> JSONResponse:
    envelope = CallableError(error=CallableErrorBody(status=status, message=message))
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


@app.exception_handler(RequestValidationError)
async def invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Callable clients expect INVALID_ARGUMENT for malformed envelopes."""

    logger.info("Rejected malformed callable request: %s", exc.errors())
    return _callable_error(400, "INVALID_ARGUMENT", "Bad Request")


@app.exception_handler(CallerUnauthenticated)
async def unauthenticated(_request: Request, _exc: CallerUnauthenticated) -> JSONResponse:
    return _callable_error(401, "UNAUTHENTICATED", "Unauthenticated")


@app.exception_handler(SigningFailure)
async def signing_failed(request: Request, exc: SigningFailure) -> JSONResponse:
    """Hide signing details from the client; the log keeps the cause."""

    logger.error("Callable %s failed: %s", request.url.path, exc, exc_info=exc)
    return _callable_error(500, "INTERNAL", "INTERNAL")


app.include_router(rtc_router.router, tags=["rtc"])


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok"}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)
