"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from zhaiyao.logging import setup_logging
from zhaiyao.routes import (
    chat_router,
    summarize_router,
    transcription_router,
    uploads_router,
)

logger = setup_logging()


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    logger.info(
        "Rejected invalid request",
        extra={"path": request.url.path, "errors": len(errors)},
    )
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request payload: {location} {message}".strip()},
    )


def create_app() -> FastAPI:
    """Builds the API with every router and JSON ``{"error": ...}`` bodies."""
    app = FastAPI(title="ZhaiYao Transcription Service")
    app.include_router(transcription_router)
    app.include_router(summarize_router)
    app.include_router(chat_router)
    app.include_router(uploads_router)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    return app
