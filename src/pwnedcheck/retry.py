"""Retry-on-throttle policy for range API requests.

Each call walks a small state machine:

    PENDING -> SUCCESS
            -> THROTTLED -> PENDING (after the server's delay)
            -> TRANSPORT_FAILED | PROTOCOL_FAILED | UNEXPECTED_STATUS | EXHAUSTED

Only throttling is retried. Every other failure is terminal and raised
as an ApiError subclass.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import httpx
import structlog

from pwnedcheck.exceptions import (
    ApiError,
    ProtocolError,
    RetriesExhaustedError,
    TransportError,
    UnexpectedStatusError,
)

logger = structlog.get_logger()

THROTTLE_STATUS = 429


class RequestState(str, Enum):
    """States of a single execute() call."""

    PENDING = "pending"
    SUCCESS = "success"
    THROTTLED = "throttled"
    TRANSPORT_FAILED = "transport_failed"
    PROTOCOL_FAILED = "protocol_failed"
    UNEXPECTED_STATUS = "unexpected_status"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RangeReply:
    """What one HTTP attempt produced."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    text: str = ""


def classify_status(status_code: int) -> RequestState:
    """Map an HTTP status to the next state of the retry loop."""
    if 200 <= status_code < 300:
        return RequestState.SUCCESS
    if status_code == THROTTLE_STATUS:
        return RequestState.THROTTLED
    return RequestState.UNEXPECTED_STATUS


def parse_retry_after(value: str | None) -> int:
    """Parse a retry-after header as a whole number of seconds.

    Args:
        value: Raw header value, or None if the header was absent

    Returns:
        Seconds to wait before the next attempt

    Raises:
        ProtocolError: If the header is missing, not an integer, or negative
    """
    if value is None:
        raise ProtocolError("API sent a 429 response without a 'retry-after' header")

    try:
        seconds = int(value.strip())
    except ValueError as e:
        raise ProtocolError(
            "API sent an invalid 'retry-after' header on a 429 response",
            retry_after=value,
        ) from e

    if seconds < 0:
        raise ProtocolError(
            "API sent an invalid 'retry-after' header on a 429 response",
            retry_after=value,
        )
    return seconds


class RetryPolicy:
    """Bounded retry loop that honors server-requested delays.

    The first attempt is not a retry, so up to max_retries + 1 requests
    are made. A throttled attempt always waits the full retry-after delay;
    max_wait only produces a warning when the server asks for more.

    Example:
        policy = RetryPolicy(max_retries=2)
        body = await policy.execute(send, url=url)
    """

    def __init__(
        self,
        max_retries: int = 2,
        *,
        max_wait: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize retry policy.

        Args:
            max_retries: Retries allowed after the first attempt
            max_wait: Advisory ceiling on a single delay, in seconds
            sleep: Coroutine used to wait between attempts
        """
        if max_retries < 0:
            raise ValueError("max_retries must be 0 or greater")
        self.max_retries = max_retries
        self.max_wait = max_wait
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Total number of requests allowed per call."""
        return self.max_retries + 1

    async def execute(
        self,
        send: Callable[[], Awaitable[RangeReply]],
        *,
        url: str = "",
    ) -> str:
        """Run send() until it succeeds or fails terminally.

        Args:
            send: Coroutine function making one HTTP attempt
            url: Request URL, used for error context only

        Returns:
            Body text of the first successful response

        Raises:
            TransportError: On connection failure or timeout
            ProtocolError: On a 429 without a usable retry-after header
            UnexpectedStatusError: On any status other than 2xx or 429
            RetriesExhaustedError: If every attempt was throttled
        """
        for attempt in range(1, self.max_attempts + 1):
            state = RequestState.PENDING
            logger.debug("Range request", url=url, attempt=attempt, state=state.value)

            try:
                reply = await send()
            except httpx.TimeoutException as e:
                state = RequestState.TRANSPORT_FAILED
                raise self._failed(
                    TransportError(
                        "API failed to respond before the timeout",
                        url=url,
                        attempt=attempt,
                        state=state.value,
                    )
                ) from e
            except httpx.RequestError as e:
                state = RequestState.TRANSPORT_FAILED
                raise self._failed(
                    TransportError(
                        "Problem making a request to the API",
                        url=url,
                        attempt=attempt,
                        state=state.value,
                        detail=str(e),
                    )
                ) from e

            state = classify_status(reply.status_code)

            if state is RequestState.SUCCESS:
                logger.debug("Range request succeeded", url=url, attempt=attempt, state=state.value)
                return reply.text

            if state is RequestState.UNEXPECTED_STATUS:
                raise self._failed(
                    UnexpectedStatusError(
                        f"Received unexpected status code {reply.status_code} from API",
                        url=url,
                        status_code=reply.status_code,
                        state=state.value,
                    )
                )

            # Throttled: a bad header is fatal even with budget left
            try:
                delay = parse_retry_after(reply.headers.get("retry-after"))
            except ProtocolError as e:
                state = RequestState.PROTOCOL_FAILED
                e.context.update(url=url, state=state.value)
                raise self._failed(e)

            if attempt == self.max_attempts:
                break

            if self.max_wait is not None and delay > self.max_wait:
                logger.warning(
                    "API requested a wait longer than max_wait",
                    url=url,
                    retry_after=delay,
                    max_wait=self.max_wait,
                )

            logger.warning(
                "Range request throttled",
                url=url,
                attempt=attempt,
                retry_after=delay,
                state=state.value,
            )
            await self._sleep(delay)

        state = RequestState.EXHAUSTED
        raise self._failed(
            RetriesExhaustedError(
                f"Failed to receive a successful response, exhausted {self.max_retries} retries",
                url=url,
                status_code=THROTTLE_STATUS,
                attempts=self.max_attempts,
                state=state.value,
            )
        )

    @staticmethod
    def _failed(error: ApiError) -> ApiError:
        """Log a terminal failure and hand the error back for raising."""
        logger.warning("Range request failed", error=error.message, **error.context)
        return error
