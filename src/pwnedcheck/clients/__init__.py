"""pwnedcheck password range clients."""

from pwnedcheck.clients.base import PasswordChecker
from pwnedcheck.clients.pwned_passwords import (
    DEFAULT_BASE_URL,
    ClientConfig,
    PwnedPasswordsClient,
    RangeLine,
    build_user_agent,
    parse_range_body,
    parse_range_line,
)

__all__ = [
    # Base protocols
    "PasswordChecker",
    # Pwned Passwords
    "DEFAULT_BASE_URL",
    "ClientConfig",
    "PwnedPasswordsClient",
    "RangeLine",
    "build_user_agent",
    "parse_range_body",
    "parse_range_line",
]
