"""Chat endpoint forwarding bot messages to OpenRouter."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.core.errors import ConfigurationError, ProxyError, UpstreamError
from app.core.openrouter_client import OpenRouterClient
from app.core.prompts import SYSTEM_PROMPT, fallback_response, preview
from app.models.chat import ChatErrorResponse, ChatRequest, ChatResponse

# --- Setup ---
router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)


def get_openrouter_client(settings: Settings = Depends(get_settings)) -> OpenRouterClient:
    """Dependency building the upstream client from the injected settings."""
    return OpenRouterClient.from_settings(settings)


def error_response(error: ProxyError, fallback: Optional[str] = None) -> JSONResponse:
    """Render a ProxyError as a ChatErrorResponse with its HTTP status."""
    body = ChatErrorResponse(
        error=error.message, details=error.details, fallback_response=fallback
    )
    return JSONResponse(
        status_code=error.status_code, content=body.model_dump(exclude_none=True)
    )


def outcome_line(request_id: Optional[str], message: Any, outcome: str, **fields: Any) -> str:
    """Single log line summarising one chat request: id, time, preview and outcome."""
    text = message if isinstance(message, str) else repr(message)
    extra = " ".join(f"{key}={value}" for key, value in fields.items() if value is not None)
    line = (
        f"Chat request {request_id} at={datetime.now(timezone.utc).isoformat()} "
        f"outcome={outcome} message='{preview(text)}'"
    )
    return f"{line} {extra}" if extra else line


# --- Chat Endpoint ---


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ChatErrorResponse, "description": "Invalid message"},
        401: {"model": ChatErrorResponse, "description": "Upstream authentication failed"},
        429: {"model": ChatErrorResponse, "description": "Upstream rate limit exceeded"},
        500: {"model": ChatErrorResponse, "description": "Not configured or upstream error"},
        502: {"model": ChatErrorResponse, "description": "Upstream unreachable"},
        504: {"model": ChatErrorResponse, "description": "Upstream timeout"},
    },
)
async def chat(
    request: Request,
    chat_request: ChatRequest,
    settings: Settings = Depends(get_settings),
    client: OpenRouterClient = Depends(get_openrouter_client),
):
    """Forwards one user message to OpenRouter and returns the generated reply."""
    request_id = getattr(request.state, "request_id", None)
    message = chat_request.message
    client_ip = request.client.host if request.client else "unknown"
    logger.debug(f"Chat request {request_id} received from {client_ip}")

    if not settings.api_key_configured:
        logger.error(
            outcome_line(request_id, message, ConfigurationError.kind.value,
                         status=ConfigurationError.status_code)
        )
        raise ConfigurationError()

    try:
        completion = await client.complete_chat(SYSTEM_PROMPT, message)
    except UpstreamError as e:
        logger.error(
            outcome_line(request_id, message, e.kind.value, status=e.status_code,
                         upstream_status=e.upstream_status, reason=e.reason)
        )
        return error_response(e, fallback=fallback_response(message))
    except Exception as e:
        error = UpstreamError()
        logger.error(
            outcome_line(request_id, message, error.kind.value, status=error.status_code,
                         reason=f"{type(e).__name__}: {e}"),
            exc_info=True,
        )
        return error_response(error, fallback=fallback_response(message))

    logger.info(
        outcome_line(request_id, message, "success", status=200, model=completion.model,
                     tokens=completion.total_tokens, reply=preview(completion.content, 80))
    )
    return ChatResponse(
        response=completion.content,
        model=completion.model,
        tokens_used=completion.total_tokens,
    )
