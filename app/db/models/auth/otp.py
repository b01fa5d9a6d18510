# app/db/models/auth/otp.py
from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
import uuid

class PasswordResetOtp(SQLModel, table=True):
    __tablename__ = "password_reset_otps"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    account_id: str = Field(foreign_key="accounts.id", index=True)
    email: str = Field(max_length=254, index=True)
    otp_hash: str = Field(max_length=255)
    expires_at: datetime = Field(index=True)
    # Rows past this point are purged regardless of use
    delete_at: datetime = Field(index=True)
    used_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
