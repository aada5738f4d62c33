"""pwnedcheck: k-anonymity password breach checks.

Checks whether a password appears in the Pwned Passwords corpus while
disclosing only a five character prefix of its SHA-1 to the API.
"""

__version__ = "0.1.0"

from pwnedcheck.clients import ClientConfig, PasswordChecker, PwnedPasswordsClient
from pwnedcheck.exceptions import ApiError, PwnedCheckError
from pwnedcheck.fingerprint import fingerprint, split_fingerprint

__all__ = [
    "__version__",
    "ApiError",
    "ClientConfig",
    "PasswordChecker",
    "PwnedCheckError",
    "PwnedPasswordsClient",
    "fingerprint",
    "split_fingerprint",
]
