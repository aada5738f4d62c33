"""Base protocols for pwnedcheck client implementations.

Defines interfaces for pluggable password range sources.
"""

from typing import Protocol


class PasswordChecker(Protocol):
    """Protocol for password breach checking clients.

    Any client implementing this protocol can be handed to code that only
    needs a yes/no answer about a password, e.g. cli.check_password(). This enables
    pluggable support for different range sources:
    - Pwned Passwords (HIBP) - free, k-anonymity range API
    - Self-hosted mirrors of the same corpus
    """

    async def check_async(self, password: str) -> bool:
        """Check a password without blocking the event loop.

        Args:
            password: Password to check

        Returns:
            True if the password was never seen in a breach

        Raises:
            ApiError: If the lookup fails
        """
        ...

    def check(self, password: str) -> bool:
        """Check a password, blocking until the answer is known.

        Args:
            password: Password to check

        Returns:
            True if the password was never seen in a breach

        Raises:
            ApiError: If the lookup fails
        """
        ...

    async def close(self) -> None:
        """Close client connections and cleanup resources."""
        ...
