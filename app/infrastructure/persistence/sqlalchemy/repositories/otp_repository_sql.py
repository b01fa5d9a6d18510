from datetime import datetime
from typing import Optional
from sqlalchemy import delete, update
from sqlmodel import Session, select, col

from .....db.models import PasswordResetOtp
from .....application.ports.otp_repo import OtpRepository, OtpRecordDto


class SqlOtpRepository(OtpRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, rec: PasswordResetOtp) -> OtpRecordDto:
        return OtpRecordDto(
            id=rec.id,
            account_id=rec.account_id,
            email=rec.email,
            otp_hash=rec.otp_hash,
            created_at=rec.created_at,
            expires_at=rec.expires_at,
            delete_at=rec.delete_at,
            used_at=rec.used_at,
        )

    def replace_pending(self, account_id: str, email: str, otp_hash: str, created_at: datetime,
                        expires_at: datetime, delete_at: datetime) -> OtpRecordDto:
        self.session.execute(
            delete(PasswordResetOtp)
            .where(col(PasswordResetOtp.email) == email)
            .where(col(PasswordResetOtp.used_at).is_(None))
        )
        rec = PasswordResetOtp(
            account_id=account_id,
            email=email,
            otp_hash=otp_hash,
            created_at=created_at,
            expires_at=expires_at,
            delete_at=delete_at,
        )
        self.session.add(rec)
        # Delete and insert commit together
        self.session.commit()
        self.session.refresh(rec)
        return self._to_dto(rec)

    def _latest(self, email: str, used: bool) -> Optional[OtpRecordDto]:
        used_at = col(PasswordResetOtp.used_at)
        query = (
            select(PasswordResetOtp)
            .where(PasswordResetOtp.email == email)
            .where(used_at.is_not(None) if used else used_at.is_(None))
            .order_by(col(PasswordResetOtp.created_at).desc())
        )
        rec = self.session.exec(query).first()
        return self._to_dto(rec) if rec else None

    def latest_unused(self, email: str) -> Optional[OtpRecordDto]:
        return self._latest(email, used=False)

    def latest_used(self, email: str) -> Optional[OtpRecordDto]:
        return self._latest(email, used=True)

    def mark_used(self, record_id: str, used_at: datetime) -> bool:
        result = self.session.execute(
            update(PasswordResetOtp)
            .where(col(PasswordResetOtp.id) == record_id)
            .where(col(PasswordResetOtp.used_at).is_(None))
            .values(used_at=used_at)
        )
        self.session.commit()
        return result.rowcount == 1

    def delete(self, record_id: str) -> bool:
        result = self.session.execute(
            delete(PasswordResetOtp).where(col(PasswordResetOtp.id) == record_id)
        )
        self.session.commit()
        return result.rowcount == 1

    def purge_expired(self, now: datetime) -> int:
        result = self.session.execute(
            delete(PasswordResetOtp).where(col(PasswordResetOtp.delete_at) <= now)
        )
        self.session.commit()
        return result.rowcount or 0
