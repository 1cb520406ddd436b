"""HTTP transport for the GitHub image host."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_MAX_RETRIES = 1  # single attempt
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 10  # seconds

# Only failures where the request never reached the server
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
)


class ReplyError(str, Enum):
    """Outcome of a request as seen by the image host."""

    NO_ERROR = "no_error"
    CONTENT_NOT_FOUND = "content_not_found"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    INVALID_REQUEST = "invalid_request"


@dataclass
class Reply:
    """Result of a single HTTP exchange."""

    error: ReplyError
    data: bytes = b""
    status_code: int = 0
    error_string: str = ""

    @property
    def ok(self) -> bool:
        return self.error is ReplyError.NO_ERROR

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "Reply":
        """Classify an HTTP response by status code."""
        status = response.status_code
        if 200 <= status < 300:
            error = ReplyError.NO_ERROR
            error_string = ""
        elif status == 404:
            error = ReplyError.CONTENT_NOT_FOUND
            error_string = f"HTTP {status} {response.reason_phrase}"
        else:
            error = ReplyError.HTTP_ERROR
            error_string = f"HTTP {status} {response.reason_phrase}"
        return cls(
            error=error,
            data=response.content,
            status_code=status,
            error_string=error_string,
        )


class Transport(Protocol):
    """Synchronous request/response capability used by the image host."""

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> Reply:
        ...


def create_retry_decorator(max_retries: int = DEFAULT_MAX_RETRIES):
    """Create a retry decorator with specified max attempts."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=1, min=DEFAULT_MIN_WAIT, max=DEFAULT_MAX_WAIT),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


class HttpxTransport:
    """Transport backed by httpx; never raises for network failures or malformed requests."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize transport.

        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum attempts for connection failures (1 disables retry)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self._transport = transport

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> Reply:
        @create_retry_decorator(self.max_retries)
        def do_request() -> httpx.Response:
            logger.debug("Request: %s %s", method, url)
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, headers=headers, content=body)
                logger.debug(
                    "Response: %s %s (status=%d)",
                    method,
                    url,
                    response.status_code,
                )
                return response

        try:
            response = do_request()
        except httpx.HTTPError as e:
            logger.warning("Request failed: %s %s: %s", method, url, e)
            return Reply(error=ReplyError.NETWORK_ERROR, error_string=str(e) or type(e).__name__)
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            # Rejected before anything was sent, e.g. control characters in the
            # path or a non-ASCII token in a header
            logger.warning("Invalid request: %s %s: %s", method, url, e)
            return Reply(error=ReplyError.INVALID_REQUEST, error_string=str(e) or type(e).__name__)
        return Reply.from_response(response)
