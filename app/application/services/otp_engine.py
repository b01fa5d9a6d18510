"""Password-reset OTP lifecycle.

A code moves through Issued -> Verified -> Consumed. Expiry is not stored;
it is checked against ``expires_at`` whenever a record is read.

* ``issue`` replaces any pending (unverified) code for the email.
* ``verify`` accepts only the latest pending code and marks it used.
* ``consume_for_reset`` accepts only the latest *verified* code, re-checks
  the same digits, and deletes the record so it cannot be replayed.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional
import logging
import secrets

from ..ports.otp_repo import OtpRepository
from ..ports.password_hasher import PasswordHasher
from .credential_store import CredentialStore, normalize_email
from .results import ConsumeResult, IssuedOtp, OtpStatus

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp() -> str:
    """Uniform 6-digit code in 100000..999999."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


@dataclass
class OtpEngine:
    otp_repo: OtpRepository
    credentials: CredentialStore
    hasher: PasswordHasher
    expire_minutes: int = 5
    delete_after_minutes: int = 10
    clock: Callable[[], datetime] = field(default=datetime.utcnow)
    code_generator: Callable[[], str] = field(default=generate_otp)

    def issue(self, email: str) -> Optional[IssuedOtp]:
        email = normalize_email(email)
        account = self.credentials.find_by_email(email)
        if not account:
            return None

        otp = self.code_generator()
        now = self.clock()
        self.otp_repo.replace_pending(
            account_id=account.id,
            email=email,
            otp_hash=self.hasher.hash(otp),
            created_at=now,
            expires_at=now + timedelta(minutes=self.expire_minutes),
            delete_at=now + timedelta(minutes=self.delete_after_minutes),
        )
        logger.info(f"Password reset OTP issued for account {account.id}")
        return IssuedOtp(account=account, otp=otp)

    def verify(self, email: str, code: str) -> OtpStatus:
        record = self.otp_repo.latest_unused(normalize_email(email))
        if not record:
            return OtpStatus.INVALID

        now = self.clock()
        if now >= record.expires_at:
            return OtpStatus.EXPIRED

        if not self.hasher.verify(code, record.otp_hash):
            return OtpStatus.INVALID

        if not self.otp_repo.mark_used(record.id, now):
            logger.warning(f"OTP {record.id} was verified concurrently")
            return OtpStatus.INVALID
        return OtpStatus.OK

    def consume_for_reset(self, email: str, code: str) -> ConsumeResult:
        email = normalize_email(email)
        record = self.otp_repo.latest_used(email)
        if not record:
            return ConsumeResult(OtpStatus.INVALID)

        if self.clock() >= record.expires_at:
            return ConsumeResult(OtpStatus.EXPIRED)

        if not self.hasher.verify(code, record.otp_hash):
            return ConsumeResult(OtpStatus.INVALID)

        account = self.credentials.find_by_email(email)
        if not account:
            return ConsumeResult(OtpStatus.INVALID)

        if not self.otp_repo.delete(record.id):
            logger.warning(f"OTP {record.id} was consumed concurrently")
            return ConsumeResult(OtpStatus.INVALID)
        return ConsumeResult(OtpStatus.OK, account)

    def purge_expired(self) -> int:
        count = self.otp_repo.purge_expired(self.clock())
        if count:
            logger.info(f"Purged {count} password reset OTP records")
        return count
