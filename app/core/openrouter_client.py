"""Client for the OpenRouter chat completion API."""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from app.config import Settings
from app.core.errors import (
    UpstreamAuthenticationError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)
from app.models.chat import Completion, UpstreamChatRequest, UpstreamMessage

logger = logging.getLogger(__name__)

MAX_TOKENS = 500
TEMPERATURE = 0.7


class OpenRouterClient:
    """A client to handle interactions with the OpenRouter API.

    ``complete_chat`` either returns a parsed ``Completion`` or raises one of
    the ``UpstreamError`` subclasses; httpx exceptions never leak out of it.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-3.5-turbo",
        timeout: float = 25.0,
        referer: Optional[str] = None,
        title: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.referer = referer
        self.title = title
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "OpenRouterClient":
        return cls(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.openrouter_model,
            timeout=settings.request_timeout_seconds,
            referer=settings.http_referer,
            title=settings.app_title,
            transport=transport,
        )

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_request(self, system_prompt: str, user_message: str) -> UpstreamChatRequest:
        """Build the two-message request body with the fixed sampling parameters."""
        return UpstreamChatRequest(
            model=self.model,
            messages=[
                UpstreamMessage(role="system", content=system_prompt),
                UpstreamMessage(role="user", content=user_message),
            ],
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    async def complete_chat(self, system_prompt: str, user_message: str) -> Completion:
        """Send one completion request and return the parsed answer."""
        payload = self.build_request(system_prompt, user_message)
        logger.info(f"Connecting to OpenRouter (model={self.model})")

        try:
            # wait_for bounds the whole exchange; httpx's timeout is per operation
            response = await asyncio.wait_for(self._post(payload), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(f"no response within {self.timeout:g}s") from e
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(str(e) or type(e).__name__) from e
        except httpx.ConnectError as e:
            raise UpstreamUnreachableError(str(e) or type(e).__name__) from e
        except httpx.HTTPStatusError as e:
            raise self._status_error(e.response) from e
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or type(e).__name__) from e

        return self._parse_completion(response)

    async def _post(self, payload: UpstreamChatRequest) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(
                self.completions_url,
                json=payload.model_dump(),
                headers=self._headers(),
            )
            response.raise_for_status()
            return response

    def _status_error(self, response: httpx.Response) -> UpstreamError:
        """Map a non-2xx OpenRouter response to the matching error kind."""
        reason = _error_reason(response)
        status = response.status_code
        if status == 401:
            return UpstreamAuthenticationError(reason, upstream_status=status)
        if status == 429:
            return UpstreamRateLimitError(reason, upstream_status=status)
        return UpstreamError(reason, upstream_status=status)

    def _parse_completion(self, response: httpx.Response) -> Completion:
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("upstream returned invalid JSON", response.status_code) from e

        # OpenRouter can report provider failures inside a 200 body
        if isinstance(data, dict) and data.get("error"):
            raise UpstreamError(_describe_error(data["error"]), response.status_code)

        try:
            return Completion.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(
                f"malformed completion: {e.error_count()} validation error(s)",
                response.status_code,
            ) from e


def _describe_error(error: Any) -> Optional[str]:
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return error
    return None


def _error_reason(response: httpx.Response) -> Optional[str]:
    """Best-effort extraction of OpenRouter's error message."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or None
    if isinstance(body, dict):
        return _describe_error(body.get("error"))
    return None
