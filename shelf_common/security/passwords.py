"""Password hashing and verification.

Wraps a passlib ``CryptContext`` configured for bcrypt. Hashes embed their
own salt and cost factor, so verification needs nothing but the stored hash.
"""

import structlog
from passlib.context import CryptContext

logger = structlog.get_logger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12


class PasswordCodec:
    """Salted one-way password hashing (bcrypt)."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        """
        Initialize password codec.

        Args:
            rounds: BCrypt cost factor (log2 of the iteration count)
        """
        self.rounds = rounds
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password

        Raises:
            ValueError: If password is empty
        """
        if not password:
            raise ValueError("Password must not be empty")

        try:
            hashed = self.pwd_context.hash(password)
            logger.debug("password_hashed", rounds=self.rounds)
            return hashed
        except Exception as e:
            logger.error("password_hash_failed", error=str(e))
            raise

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Malformed, empty or foreign hashes never raise; they simply do not
        match.

        Args:
            password: Plain text password
            hashed_password: Stored hash

        Returns:
            True if password matches, False otherwise
        """
        if not password or not hashed_password:
            return False

        try:
            verified = self.pwd_context.verify(password, hashed_password)
            logger.debug("password_verified", verified=verified)
            return verified
        except (ValueError, TypeError) as e:
            logger.warning("password_verify_failed", error=str(e))
            return False
