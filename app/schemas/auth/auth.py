# app/schemas/auth/auth.py
from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional, Dict, Any, Literal
from datetime import datetime


def _normalize_email(v: str) -> str:
    return v.strip().lower()


class EmailModel(BaseModel):
    email: EmailStr = Field(..., description="Account email address")

    class Config:
        populate_by_name = True

    @validator('email')
    def normalize_email(cls, v):
        return _normalize_email(v)


class SignupRequest(EmailModel):
    full_name: str = Field(..., min_length=1, max_length=150, alias="fullName")
    company_name: str = Field(..., max_length=150, alias="companyName")
    phone_number: str = Field(..., min_length=1, max_length=40, alias="phoneNumber")
    profile_photo: Optional[str] = Field(None, max_length=500, alias="profilePhoto")
    location: Optional[str] = Field(None, max_length=150)
    time_zone: Optional[str] = Field(None, max_length=64, alias="timeZone")
    signature: Optional[str] = None
    access_expires_at: Optional[datetime] = Field(None, alias="accessExpiresAt")
    plan_type: Optional[Literal["trial", "paid"]] = Field(None, alias="planType")

    @validator('full_name', 'phone_number')
    def strip_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Field cannot be empty')
        return v

    def to_profile(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class SigninRequest(EmailModel):
    password: str = Field(..., min_length=6)


class ForgotPasswordRequest(EmailModel):
    pass


class VerifyOtpRequest(EmailModel):
    otp: str = Field(..., min_length=6, max_length=6, description="6-digit OTP")

    @validator('otp')
    def validate_otp(cls, v):
        if not v.isdigit():
            raise ValueError('OTP must be 6 digits')
        return v


class ResetPasswordRequest(VerifyOtpRequest):
    new_password: str = Field(..., min_length=6, alias="newPassword")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=6, alias="currentPassword")
    new_password: str = Field(..., min_length=6, alias="newPassword")

    class Config:
        populate_by_name = True
