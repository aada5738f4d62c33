"""Password fingerprinting for k-anonymity range lookups.

The fingerprint is the uppercase hex SHA-1 of the encoded password.
Only the first PREFIX_LENGTH characters are ever sent to the API; the
rest stays local and is matched against the returned candidates.
"""

import hashlib
from dataclasses import dataclass

from pwnedcheck.exceptions import PreconditionError

# NIST SP 800-63 floor. Callers may require longer passwords.
MIN_PASSWORD_LENGTH = 8

PREFIX_LENGTH = 5
FINGERPRINT_LENGTH = 40


@dataclass(frozen=True)
class PrefixSuffixPair:
    """A fingerprint split into its disclosed and withheld parts."""

    prefix: str
    suffix: str

    @property
    def fingerprint(self) -> str:
        """Reassemble the full fingerprint."""
        return self.prefix + self.suffix


def fingerprint(password: str, encoding: str = "utf-8") -> str:
    """Compute the SHA-1 fingerprint of a password.

    Args:
        password: Password to hash
        encoding: Codec used to turn the password into bytes

    Returns:
        40 uppercase hexadecimal characters
    """
    digest = hashlib.sha1(password.encode(encoding), usedforsecurity=False)
    # The API returns uppercase hex, so normalize once here
    return digest.hexdigest().upper()


def meets_minimum_length(password: str) -> bool:
    """Check the password is long enough to be looked up."""
    return len(password) >= MIN_PASSWORD_LENGTH


def split_fingerprint(password: str, encoding: str = "utf-8") -> PrefixSuffixPair:
    """Fingerprint a password and split it at the prefix boundary.

    Args:
        password: Password to split
        encoding: Codec used to turn the password into bytes

    Returns:
        Prefix to disclose and suffix to match locally

    Raises:
        PreconditionError: If the password is shorter than MIN_PASSWORD_LENGTH
    """
    if not meets_minimum_length(password):
        raise PreconditionError(
            "Password is shorter than the minimum length",
            min_length=MIN_PASSWORD_LENGTH,
        )

    value = fingerprint(password, encoding)
    return PrefixSuffixPair(prefix=value[:PREFIX_LENGTH], suffix=value[PREFIX_LENGTH:])
