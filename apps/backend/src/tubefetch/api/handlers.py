"""Exception handlers turning service errors into JSON responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tubefetch.errors import (
    DownloadFailedError,
    InvalidRequestError,
    MetadataFetchError,
)

logger = logging.getLogger(__name__)


async def _invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request body",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def _download_failed(request: Request, exc: DownloadFailedError) -> JSONResponse:
    logger.error("Download failed: %s", exc.details)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.message, "details": exc.details},
    )


async def _metadata_failed(request: Request, exc: MetadataFetchError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": exc.message, "details": exc.details},
    )


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Server error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(InvalidRequestError, _invalid_request)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(DownloadFailedError, _download_failed)
    app.add_exception_handler(MetadataFetchError, _metadata_failed)
    app.add_exception_handler(Exception, _unhandled)
