"""Pwned Passwords range API client.

Checks passwords against the Pwned Passwords corpus using the
k-anonymity range endpoint: only the first five hex characters of the
password's SHA-1 are sent, and the returned suffixes are matched locally.
SHA-1 is a poor password hash, but a 5 character prefix still leaves
2**124 possible completions, so the API never learns which one we hold.

API Documentation: https://haveibeenpwned.com/API/v3#PwnedPasswords
Rate Limit: throttled requests get a 429 with a retry-after header

Note: The range endpoint is free. An API key is sent only if configured.
"""

import asyncio
import re
from collections.abc import Iterator
from dataclasses import dataclass

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from pwnedcheck import __version__
from pwnedcheck.exceptions import MalformedResponseError, PreconditionError, ProtocolError
from pwnedcheck.fingerprint import split_fingerprint
from pwnedcheck.retry import RangeReply, RetryPolicy

logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://api.pwnedpasswords.com/range/"
USER_AGENT_POSTFIX = "pwnedcheck API client"

# CR, LF and CRLF only; str.splitlines() also splits on form feeds etc.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class ClientConfig(BaseModel):
    """Configuration for the Pwned Passwords client.

    Immutable once built; every field is validated at construction.
    """

    model_config = ConfigDict(frozen=True)

    user_agent: str = Field(
        min_length=1,
        description="Identifying User-Agent for this application (required by the API)",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries after a 429 response; 0 disables retrying",
    )
    timeout: float = Field(
        default=5.0,
        gt=0,
        description="Request timeout in seconds",
    )
    max_wait: float = Field(
        default=2.0,
        ge=0,
        description="Advisory ceiling on a single retry-after delay in seconds",
    )
    max_response_size: int = Field(
        default=512000,
        gt=0,
        description="Largest response body accepted, in bytes",
    )
    api_key: str | None = Field(
        default=None,
        description="Optional HIBP API key, sent as hibp-api-key",
    )
    hide_client_version: bool = Field(
        default=True,
        description="Leave the library version out of the User-Agent header",
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Range endpoint; the prefix is appended directly",
    )


@dataclass(frozen=True)
class RangeLine:
    """One HEXSUFFIX:COUNT line of a range response."""

    suffix: str
    count: int


def parse_range_line(line: str) -> RangeLine:
    """Parse a single response line.

    Raises:
        MalformedResponseError: If the line is not HEXSUFFIX:COUNT
    """
    pieces = line.split(":")
    if len(pieces) != 2:
        raise MalformedResponseError("Malformed response from API", line=line)

    suffix, count = pieces
    count = count.strip()
    if not count.isdecimal():
        raise MalformedResponseError("Malformed response from API", line=line)

    try:
        occurrences = int(count)
    except ValueError as e:
        raise MalformedResponseError("Malformed response from API", line=line) from e

    return RangeLine(suffix=suffix.strip().upper(), count=occurrences)


def parse_range_body(body: str) -> Iterator[RangeLine]:
    """Lazily parse a range response body, skipping blank lines."""
    for line in _LINE_BREAK.split(body):
        if not line.strip():
            continue
        yield parse_range_line(line)


def build_user_agent(config: ClientConfig) -> str:
    """Build the User-Agent header for a config."""
    if config.hide_client_version:
        return f"{config.user_agent} ({USER_AGENT_POSTFIX})"
    return f"{config.user_agent} ({USER_AGENT_POSTFIX} {__version__})"


class PwnedPasswordsClient:
    """Async client for the Pwned Passwords range API.

    check_async() is the core operation; check() is a blocking wrapper
    around it. Both return True when the password has never been seen in
    a breach and False when it has (or is too short to bother checking).

    Example:
        async with PwnedPasswordsClient(ClientConfig(user_agent="My App")) as client:
            if not await client.check_async(password):
                print("Pick another password")
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Pwned Passwords client.

        Args:
            config: Client configuration with identifying User-Agent.
            transport: Optional httpx transport (used by tests).
        """
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._headers = {"User-Agent": build_user_agent(config)}
        if config.api_key is not None:
            self._headers["hibp-api-key"] = config.api_key
        self._retry = RetryPolicy(config.max_retries, max_wait=config.max_wait)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self._headers,
                timeout=httpx.Timeout(self.config.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "PwnedPasswordsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()

    async def _send(self, url: str) -> RangeReply:
        """Make one GET request, reading at most max_response_size bytes."""
        client = await self._get_client()
        limit = self.config.max_response_size

        async with client.stream("GET", url) as response:
            if not response.is_success:
                return RangeReply(status_code=response.status_code, headers=response.headers)

            content_length = response.headers.get("content-length")
            if content_length is not None and content_length.isdigit() and int(content_length) > limit:
                raise ProtocolError(
                    "API response exceeds the maximum size",
                    url=url,
                    content_length=int(content_length),
                    max_response_size=limit,
                )

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > limit:
                    raise ProtocolError(
                        "API response exceeds the maximum size",
                        url=url,
                        max_response_size=limit,
                    )

            text = bytes(body).decode(response.encoding or "utf-8", errors="replace")
            return RangeReply(status_code=response.status_code, headers=response.headers, text=text)

    async def fetch_range(self, prefix: str) -> str:
        """Fetch every suffix sharing a fingerprint prefix.

        Args:
            prefix: First five uppercase hex characters of a fingerprint

        Returns:
            Raw response body

        Raises:
            ApiError: If the request fails or retries are exhausted
        """
        url = f"{self.config.base_url}{prefix}"
        return await self._retry.execute(lambda: self._send(url), url=url)

    async def check_async(self, password: str) -> bool:
        """Check a password against the range API.

        Args:
            password: Password to check

        Returns:
            True if the password has not been seen in a breach, False if it
            has or if it is shorter than the minimum length

        Raises:
            ApiError: If the lookup cannot be completed
        """
        try:
            pair = split_fingerprint(password)
        except PreconditionError:
            logger.info("Password below minimum length, treated as insecure")
            return False

        body = await self.fetch_range(pair.prefix)

        for line in parse_range_body(body):
            if line.suffix == pair.suffix:
                logger.info("Password found in breach corpus", prefix=pair.prefix)
                return False

        logger.info("Password not found in breach corpus", prefix=pair.prefix)
        return True

    def check(self, password: str) -> bool:
        """Blocking variant of check_async().

        Runs on a fresh event loop with its own short-lived connection, so
        it must not be called from inside a running event loop.
        """

        async def run() -> bool:
            async with PwnedPasswordsClient(self.config, transport=self._transport) as client:
                return await client.check_async(password)

        return asyncio.run(run())
