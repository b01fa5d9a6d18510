from typing import Protocol, Optional
from dataclasses import dataclass
from datetime import datetime


@dataclass
class OtpRecordDto:
    id: str
    account_id: str
    email: str
    otp_hash: str
    created_at: datetime
    expires_at: datetime
    delete_at: datetime
    used_at: Optional[datetime]


class OtpRepository(Protocol):
    def replace_pending(self, account_id: str, email: str, otp_hash: str, created_at: datetime,
                        expires_at: datetime, delete_at: datetime) -> OtpRecordDto:
        """Drop unconsumed records for the email and insert the new one in one transaction."""
        ...

    def latest_unused(self, email: str) -> Optional[OtpRecordDto]:
        ...

    def latest_used(self, email: str) -> Optional[OtpRecordDto]:
        ...

    def mark_used(self, record_id: str, used_at: datetime) -> bool:
        """Set used_at only if it is still null. False when another caller won."""
        ...

    def delete(self, record_id: str) -> bool:
        ...

    def purge_expired(self, now: datetime) -> int:
        ...
