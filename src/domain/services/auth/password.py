"""Password hashing and password policy.

Hashing uses bcrypt through passlib's `CryptContext`. Every hash carries its
own random salt and cost factor, so stored hashes stay verifiable after the
configured rounds change.
"""

from passlib.context import CryptContext
from structlog import get_logger

from src.core.exceptions import PasswordMismatchError, PasswordPolicyError
from src.domain.interfaces.services import IPasswordService

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def check_password_policy(password: str) -> None:
    """Validates a new password against the password policy.

    Raises:
        PasswordPolicyError: If the password is too short or too long.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordPolicyError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PasswordPolicyError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")


class PasswordService(IPasswordService):
    """bcrypt-backed implementation of `IPasswordService`.

    Both operations are CPU-bound and slow; async callers should
    run them in a worker thread.

    Attributes:
        rounds: bcrypt cost factor used for new hashes.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._dummy_hash = None

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, hashed: str, plaintext: str) -> None:
        try:
            matches = self._context.verify(plaintext, hashed)
        except (ValueError, TypeError):
            # Not a hash this context understands
            logger.warning("Unparseable password hash encountered")
            matches = False
        if not matches:
            raise PasswordMismatchError()

    def dummy_verify(self, plaintext: str) -> None:
        """Spends the same work as `verify` without any stored hash.

        Used when an identity label is unknown, so that "no such user" takes
        as long as "wrong password".
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._context.hash("tillgate-dummy-password")
        self._context.verify(plaintext, self._dummy_hash)
