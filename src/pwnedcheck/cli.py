"""Command-line interface for pwnedcheck.

CLI for checking a password against the Pwned Passwords range API.
"""

import argparse
import asyncio
import getpass
import sys
from typing import TYPE_CHECKING

import structlog

from pwnedcheck import __version__

if TYPE_CHECKING:
    from pwnedcheck.clients.base import PasswordChecker

# Configure structlog for simple console output
structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.BoundLogger,
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    cache_logger_on_first_use=True,
)

EXIT_NOT_FOUND = 0
EXIT_FOUND = 1
EXIT_ERROR = 2


def get_logger(name: str):
    """Get a structured logger."""
    return structlog.get_logger(name)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pwnedcheck",
        description="pwnedcheck: check passwords against Pwned Passwords without revealing them",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check_parser = subparsers.add_parser("check", help="Check a password")
    check_parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read the password from the first line of stdin instead of prompting",
    )
    check_parser.add_argument(
        "--user-agent",
        default=None,
        help="Identifying User-Agent (default: PWNEDCHECK_USER_AGENT)",
    )
    check_parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Retries after a 429 response (default: 2)",
    )
    check_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: 5)",
    )
    check_parser.add_argument(
        "--api-key",
        default=None,
        help="Optional HIBP API key (default: PWNEDCHECK_API_KEY)",
    )
    check_parser.add_argument(
        "--show-version-header",
        action="store_true",
        help="Include the pwnedcheck version in the User-Agent header",
    )

    args = parser.parse_args(argv)

    if args.command == "check":
        return run_check(args)
    else:
        parser.print_help()
        return 0


def read_password(from_stdin: bool) -> str:
    """Read the password without echoing it."""
    if from_stdin:
        return sys.stdin.readline().rstrip("\r\n")
    return getpass.getpass("Password: ")


def run_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    log = get_logger("check")

    from pwnedcheck.config import get_settings
    from pwnedcheck.exceptions import ConfigurationError

    try:
        config = get_settings().client_config(
            user_agent=args.user_agent,
            max_retries=args.retries,
            timeout=args.timeout,
            api_key=args.api_key,
            hide_client_version=False if args.show_version_header else None,
        )
    except ConfigurationError as e:
        log.error("Failed to load configuration", error=str(e))
        return EXIT_ERROR

    password = read_password(args.stdin)
    return asyncio.run(run_with_client(config, password, log))


async def run_with_client(config, password: str, log) -> int:
    """Open a Pwned Passwords client for one check."""
    from pwnedcheck.clients.pwned_passwords import PwnedPasswordsClient

    async with PwnedPasswordsClient(config) as client:
        return await check_password(client, password, log)


async def check_password(checker: "PasswordChecker", password: str, log) -> int:
    """Look up one password with any checker and report the result."""
    from pwnedcheck.exceptions import ApiError
    from pwnedcheck.fingerprint import MIN_PASSWORD_LENGTH, meets_minimum_length

    if not meets_minimum_length(password):
        print(f"Password is shorter than {MIN_PASSWORD_LENGTH} characters; treat it as insecure")
        return EXIT_FOUND

    try:
        secure = await checker.check_async(password)
    except ApiError as e:
        log.error("Password check failed", error=str(e))
        return EXIT_ERROR

    if secure:
        print("Password not found in any known breach")
        return EXIT_NOT_FOUND

    print("Password found in a known breach; do not use it")
    return EXIT_FOUND


if __name__ == "__main__":
    sys.exit(main())
