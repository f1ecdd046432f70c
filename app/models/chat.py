"""Pydantic models for chat-related API requests and responses."""

from pydantic import BaseModel, StrictStr, field_validator
from typing import Any, List, Literal, Optional


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    message: StrictStr

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        # A byte-order mark alone is treated as blank
        if not value.replace("\ufeff", "").strip():
            raise ValueError("message must not be empty")
        # Forwarded unmodified; only the check uses the stripped value
        return value


class UpstreamMessage(BaseModel):
    """A single role-tagged message sent to the completion API."""

    role: Literal["system", "user", "assistant"]
    content: str


class UpstreamChatRequest(BaseModel):
    """Body of the OpenRouter chat completion call."""

    model: str
    messages: List[UpstreamMessage]
    max_tokens: int = 500
    temperature: float = 0.7


class CompletionMessage(BaseModel):
    role: Optional[str] = None
    content: str


class CompletionChoice(BaseModel):
    message: CompletionMessage


class CompletionUsage(BaseModel):
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class Completion(BaseModel):
    """Subset of the OpenRouter completion object the proxy relies on."""

    model: str
    choices: List[CompletionChoice]
    usage: Optional[CompletionUsage] = None

    @field_validator("choices")
    @classmethod
    def at_least_one_choice(cls, value: List[CompletionChoice]) -> List[CompletionChoice]:
        if not value:
            raise ValueError("completion has no choices")
        return value

    @property
    def content(self) -> str:
        return self.choices[0].message.content

    @property
    def total_tokens(self) -> Optional[int]:
        return self.usage.total_tokens if self.usage else None


class ChatResponse(BaseModel):
    """Response model for a successful chat completion."""

    success: Literal[True] = True
    response: str
    model: str
    tokens_used: Optional[int] = None


class ChatErrorResponse(BaseModel):
    """Response model for every failed chat request."""

    success: Literal[False] = False
    error: str
    details: Optional[Any] = None
    fallback_response: Optional[str] = None
