# app/db/models/accounts/account.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime
import uuid

class Account(SQLModel, table=True):
    __tablename__ = "accounts"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    full_name: str = Field(max_length=150)
    email: str = Field(max_length=254, unique=True, index=True)
    company_name: str = Field(max_length=150)
    phone_number: str = Field(max_length=40)
    location: Optional[str] = Field(max_length=150, default=None)
    time_zone: Optional[str] = Field(max_length=64, default=None)
    signature: Optional[str] = Field(default=None)
    profile_photo: Optional[str] = Field(max_length=500, default=None)
    role: str = Field(max_length=20, default="user")
    plan_type: str = Field(max_length=10, default="trial")
    access_expires_at: Optional[datetime] = Field(default=None)
    password_hash: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
