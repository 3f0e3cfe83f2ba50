"""Password hashing backed by passlib.

`PasswordHasher` wraps a `CryptContext` configured with one scheme and
a fixed cost factor. Hashes embed their own salt and parameters, so
verification works for any hash the context recognises, including ones
created under an earlier cost factor.
"""

import logging
from typing import Optional

from passlib.context import CryptContext
from passlib.exc import PasswordSizeError

from .errors import HashingError

logger = logging.getLogger("eduportal.passwords")


class PasswordHasher:
    """Salted one-way hashing and constant-time verification."""

    def __init__(self, scheme: str = "pbkdf2_sha256", rounds: Optional[int] = None):
        options = {}
        if rounds is not None:
            options[f"{scheme}__rounds"] = rounds
        self.scheme = scheme
        self.rounds = rounds
        self._ctx = CryptContext(schemes=[scheme], deprecated="auto", **options)

    @classmethod
    def from_settings(cls, settings) -> "PasswordHasher":
        return cls(settings.PASSWORD_HASH_SCHEME, settings.PASSWORD_HASH_ROUNDS)

    def hash(self, plaintext: str) -> str:
        """Return a salted hash of `plaintext`.

        Raises `HashingError` if the backend cannot produce one (missing
        native backend, unsupported input).
        """
        try:
            return self._ctx.hash(plaintext)
        except (ValueError, TypeError, RuntimeError) as exc:
            raise HashingError() from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Compare `plaintext` against a stored hash.

        Uses passlib's constant-time digest comparison. A stored value
        that is not a recognisable hash, or a password longer than the
        scheme accepts, is treated as a mismatch.
        """
        try:
            return self._ctx.verify(plaintext, hashed)
        except PasswordSizeError:
            logger.info("rejected oversized password at verification")
            return False
        except ValueError:
            logger.warning("stored password hash could not be parsed")
            return False
