from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.constants import HEALTH_ENDPOINT, SERVICE_NAME, VERSION
from app.errors import (
    INVALID_REQUEST_MSG,
    PROCESSING_ERROR_MSG,
    ChallengeRejected,
    IssueFailed,
    error_body,
)
from app.logging_config import setup_logging
from app.middleware.logging import CORRELATION_HEADER, LoggingMiddleware, current_correlation_id
from app.routers import challenges, tokens
from app.schemas.common import HealthResponse
from app.services.key_provider import check_key_configuration, get_key_provider
from app.services.time_utils import now_ms

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and refuse to start without a usable key pair."""
    setup_logging()
    check_key_configuration(get_key_provider())
    logger.info("service_started", difficulty=settings.challenge_difficulty)
    yield
    logger.info("service_stopped")


app = FastAPI(
    title="IronShield API",
    description="Stateless proof-of-work challenge and token issuer",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ChallengeRejected)
async def challenge_rejected_handler(request: Request, exc: ChallengeRejected):
    logger.warning("challenge_rejected", path=request.url.path, reason=exc.reason.name)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.reason.value))


@app.exception_handler(IssueFailed)
async def issue_failed_handler(request: Request, exc: IssueFailed):
    # Full detail stays in the logs; the client only sees the opaque label
    logger.error(exc.log_event, path=request.url.path, error=exc.error.value, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=error_body(PROCESSING_ERROR_MSG))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info("request_invalid", path=request.url.path)
    return JSONResponse(status_code=400, content=error_body(f"{INVALID_REQUEST_MSG}: {problems}"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # Runs outside LoggingMiddleware, so the correlation header is added here
    headers = {}
    correlation_id = current_correlation_id()
    if correlation_id:
        headers[CORRELATION_HEADER] = correlation_id
    return JSONResponse(
        status_code=500, content=error_body("Internal server error"), headers=headers
    )


# Routers
app.include_router(challenges.router, tags=["challenge"])
app.include_router(tokens.router, tags=["token"])


@app.get(HEALTH_ENDPOINT, response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy", service=SERVICE_NAME, version=VERSION, timestamp=now_ms()
    )
