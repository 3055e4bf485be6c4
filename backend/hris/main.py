import logging
import traceback
from datetime import datetime
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from hris.api.v1 import api_router
from hris.core.config import settings
from hris.core.exceptions import HRISError
from hris.core.logging_config import RequestLoggingMiddleware, setup_logging
from hris.core.rate_limiter import limiter, rate_limit_exceeded_handler
from hris.db.session import check_db_connection

# Configure structured logging (JSON in production, colored in development)
setup_logging()
logger = logging.getLogger("hris")

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    422: "UNPROCESSABLE_ENTITY",
    429: "RATE_LIMIT_EXCEEDED",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.
    """
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Attendance check-in reads the device location
        response.headers["Permissions-Policy"] = "geolocation=(self), microphone=(), camera=()"

        if "text/html" in response.headers.get("content-type", ""):
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "script-src 'self'; "
                "style-src 'self' 'unsafe-inline'; "
                "img-src 'self' data:; "
                "connect-src 'self'"
            )

        return response


class HealthResponse(BaseModel):
    """Health check response format."""
    status: str
    service: str
    version: str
    environment: str
    checks: Dict[str, bool]


app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Human resources and payroll management API",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

_default_dev_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
cors_origins = settings.ALLOWED_ORIGINS or _default_dev_origins


def get_cors_headers(request: Request) -> dict:
    """Get CORS headers based on request origin."""
    origin = request.headers.get("origin", "")
    if origin in cors_origins:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return {}


def error_response(
    status_code: int,
    message: str,
    code: str,
    errors: Optional[list] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    error = {"message": message, "code": code}
    if errors:
        error["errors"] = errors
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


@app.exception_handler(HRISError)
async def hris_error_handler(request: Request, exc: HRISError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.code, exc.errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = str(exc.detail)
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(exc.status_code, message, code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or "request", "message": err.get("msg", "Invalid value")})
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation failed",
        "VALIDATION_ERROR",
        errors,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler that returns consistent error responses.
    In production, sensitive details are hidden to prevent information leakage.
    """
    error_id = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")

    logger.error(
        f"Unhandled exception [{error_id}]: {exc}\n"
        f"Path: {request.url.path}\n"
        f"Method: {request.method}\n"
        f"Traceback: {traceback.format_exc()}"
    )

    headers = get_cors_headers(request)

    if settings.ENVIRONMENT.lower() == "production":
        message = f"An unexpected error occurred. Reference ID: {error_id}"
    else:
        message = f"{exc.__class__.__name__}: {exc} (Reference ID: {error_id})"
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message,
        "INTERNAL_SERVER_ERROR",
        headers=headers,
    )


# When credentials are needed, we must specify exact origins (not "*")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router, prefix=settings.API_V1_STR)

instrumentator = Instrumentator(
    should_group_status_codes=False,
    should_ignore_untemplated=True,
    should_respect_env_var=True,
    should_instrument_requests_inprogress=True,
    excluded_handlers=["/health", "/metrics"],
    inprogress_name="hris_inprogress_requests",
    inprogress_labels=True,
)
instrumentator.instrument(app).expose(app, include_in_schema=False)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Returns 503 when the database is unreachable."""
    db_healthy = await check_db_connection()
    response = HealthResponse(
        status="healthy" if db_healthy else "unhealthy",
        service="hris-backend",
        version="1.0.0",
        environment=settings.ENVIRONMENT,
        checks={"database": db_healthy},
    )
    if not db_healthy:
        logger.warning("Health check failed: database unreachable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )
    return response


@app.get("/")
async def root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}
