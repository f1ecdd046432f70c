"""Error taxonomy for the chat proxy.

Every failure the proxy reports is one of these exceptions. Each carries the
HTTP status and the stable, human-readable message sent back to the caller,
so the routes never have to inspect raw transport errors.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    # Client errors
    INVALID_REQUEST = "invalid_request"

    # Configuration errors
    NOT_CONFIGURED = "not_configured"

    # Upstream errors
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_ERROR = "upstream_error"


class ProxyError(Exception):
    """Base class for errors reported to the bot as a ChatErrorResponse."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    status_code: int = 500
    message: str = "error processing message"

    def __init__(self, reason: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(reason or self.message)
        self.reason = reason
        self.upstream_status = upstream_status

    @property
    def details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {"kind": self.kind.value}
        if self.upstream_status is not None:
            details["upstream_status"] = self.upstream_status
        if self.reason:
            details["reason"] = self.reason
        return details


class ConfigurationError(ProxyError):
    kind = ErrorKind.NOT_CONFIGURED
    status_code = 500
    message = "upstream API key not configured"


class UpstreamError(ProxyError):
    """Any upstream failure not covered by a more specific subclass."""


class UpstreamAuthenticationError(UpstreamError):
    kind = ErrorKind.AUTHENTICATION_FAILED
    status_code = 401
    message = "authentication with upstream API failed; check the API key"


class UpstreamRateLimitError(UpstreamError):
    kind = ErrorKind.RATE_LIMITED
    status_code = 429
    message = "upstream rate limit exceeded; try again later"


class UpstreamUnreachableError(UpstreamError):
    kind = ErrorKind.UPSTREAM_UNREACHABLE
    status_code = 502
    message = "cannot connect to upstream API"


class UpstreamTimeoutError(UpstreamError):
    kind = ErrorKind.UPSTREAM_TIMEOUT
    status_code = 504
    message = "upstream API timed out"


INVALID_MESSAGE_ERROR = "message is required and must be a non-empty string"
