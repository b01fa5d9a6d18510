import logging
from passlib.context import CryptContext

from ...application.ports.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


class BcryptPasswordHasher(PasswordHasher):
    """Salted bcrypt digests for account passwords and OTP codes alike."""

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify(self, plain: str, digest: str) -> bool:
        if not plain or not digest:
            return False
        try:
            return self._context.verify(plain, digest)
        except (ValueError, TypeError):
            logger.warning("Stored digest is not a valid bcrypt hash")
            return False
