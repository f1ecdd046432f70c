"""Main FastAPI application entry point."""

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from app.config import Settings, get_settings, settings
from app.core.errors import INVALID_MESSAGE_ERROR, ErrorKind, ProxyError
from app.middleware.request_logging import RequestLoggingMiddleware
from app.models.chat import ChatErrorResponse
from app.models.status import HealthStatus, ServiceStatus
from fastapi.responses import JSONResponse
import logging
import uvicorn

from app.api.chat import error_response, outcome_line, router as chat_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

ENDPOINTS = ["POST /api/chat", "GET /health", "GET /"]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Logs the startup banner and warns when the proxy cannot reach OpenRouter."""
    # Startup
    logger.info("=" * 50)
    logger.info(f"Starting {settings.service_name}")
    logger.info(f"Port: {settings.port}")
    logger.info(f"Local: http://localhost:{settings.port}")
    logger.info(f"Chat endpoint: http://localhost:{settings.port}/api/chat")
    logger.info(f"Health check: http://localhost:{settings.port}/health")
    logger.info(f"Model: {settings.openrouter_model}")
    if not settings.api_key_configured:
        logger.warning(
            "OPENROUTER_API_KEY is not set; every chat request will fail until it is configured"
        )
    logger.info("=" * 50)

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.service_name}")


app = FastAPI(
    title="WhatsApp Bot Proxy",
    description="Forwards WhatsApp bot messages to OpenRouter and returns the reply",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Rejects malformed chat bodies with 400 instead of FastAPI's default 422."""
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in exc.errors()
    ]
    body = exc.body
    message = body.get("message") if isinstance(body, dict) else body
    logger.warning(
        outcome_line(
            getattr(request.state, "request_id", None),
            message,
            ErrorKind.INVALID_REQUEST.value,
            status=400,
            path=request.url.path,
            errors=errors,
        )
    )
    payload = ChatErrorResponse(
        error=INVALID_MESSAGE_ERROR,
        details={"kind": ErrorKind.INVALID_REQUEST.value, "errors": errors},
    )
    return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))


@app.exception_handler(ProxyError)
async def proxy_error_handler(request: Request, exc: ProxyError):
    """Renders errors raised before the upstream call (e.g. missing API key)."""
    return error_response(exc)


@app.get("/", response_model=ServiceStatus)
async def root(settings: Settings = Depends(get_settings)):
    """Provides basic information about the running proxy."""
    return ServiceStatus(
        status="running",
        service=settings.service_name,
        timestamp=_now(),
        openrouter="configured" if settings.api_key_configured else "not_configured",
        endpoints=ENDPOINTS,
    )


@app.get("/health", response_model=HealthStatus)
async def health_check(settings: Settings = Depends(get_settings)):
    """Reports the process as healthy; never touches OpenRouter."""
    return HealthStatus(
        status="healthy",
        service=settings.service_name,
        timestamp=_now(),
        openrouter="configured" if settings.api_key_configured else "not_configured",
    )


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level="info")
