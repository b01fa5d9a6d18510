from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable
import logging
import jwt

from .results import TokenCheck, TokenClaims, TokenStatus

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TokenIssuer:
    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = 60
    clock: Callable[[], datetime] = field(default=_utc_now)

    def issue(self, account_id: str, role: str) -> str:
        issued_at = self.clock()
        payload = {
            "sub": account_id,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenCheck:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenCheck(TokenStatus.EXPIRED)
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected session token: {e}")
            return TokenCheck(TokenStatus.INVALID)

        account_id = payload.get("sub")
        if not isinstance(account_id, str) or not account_id:
            return TokenCheck(TokenStatus.INVALID)
        return TokenCheck(TokenStatus.OK, TokenClaims(account_id=account_id, role=payload.get("role") or "user"))
