"""FastAPI application entry point."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cardclone.api import router as api_router
from cardclone.core.logging import get_logger
from cardclone.core.schemas_chat import ErrorResponse

logger = get_logger(__name__)

app = FastAPI(
    title="Business Card Clone",
    description="Digital business card backend: owner clone chat, voice and translation",
    version="0.1.0",
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"error": ...}`` bodies."""
    body = ErrorResponse(error=str(exc.detail))
    return JSONResponse(content=body.model_dump(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed bodies with 400 before any work is done."""
    logger.info(f"Rejected malformed request to {request.url.path}: {len(exc.errors())} errors")
    return JSONResponse(content=ErrorResponse(error="Invalid request").model_dump(), status_code=400)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "ok"}, status_code=200)


app.include_router(api_router, prefix="/api")
