import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hwms.api.v1.router import api_router
from hwms.core.config import get_settings
from hwms.core.errors import DomainError, ErrorCode, StoreError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Hospital Workforce Management Backend",
)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic issues into one readable message."""
    messages = []
    for issue in exc.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()) if part not in ("body", "query", "path"))
        message = issue.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return error_response(exc.status_code, exc.code.value, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, ErrorCode.VALIDATION_ERROR.value, format_validation_errors(exc))


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"Unhandled store failure on {request.method} {request.url.path}: {exc}")
    return error_response(500, ErrorCode.DEPENDENCY_ERROR.value, str(exc))


@app.get("/health", tags=["health"])
async def root_health() -> dict:
    """
    Global health check endpoint.
    """
    return {"status": "ok"}


# Mount versioned API router
app.include_router(api_router, prefix=settings.api_v1_prefix)
