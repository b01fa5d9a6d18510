from typing import Protocol, Optional, Dict, Any
from dataclasses import dataclass
from datetime import datetime


@dataclass
class AccountDto:
    id: str
    email: str
    full_name: str
    company_name: str
    phone_number: str
    location: Optional[str]
    time_zone: Optional[str]
    signature: Optional[str]
    profile_photo: Optional[str]
    role: str
    plan_type: str
    access_expires_at: Optional[datetime]
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def public_dict(self) -> Dict[str, Any]:
        """Serializable view of the account without the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "fullName": self.full_name,
            "companyName": self.company_name,
            "phoneNumber": self.phone_number,
            "location": self.location,
            "timeZone": self.time_zone,
            "signature": self.signature,
            "profilePhoto": self.profile_photo,
            "role": self.role,
            "planType": self.plan_type,
            "accessExpiresAt": self.access_expires_at.isoformat() if self.access_expires_at else None,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class AccountRepository(Protocol):
    def create(self, fields: Dict[str, Any], password_hash: str) -> Optional[AccountDto]:
        """Insert a new account. Returns None when the email is already taken."""
        ...

    def get_by_email(self, email: str) -> Optional[AccountDto]:
        ...

    def get_by_id(self, account_id: str) -> Optional[AccountDto]:
        ...

    def update_fields(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        ...

    def set_password_hash(self, account_id: str, password_hash: str) -> bool:
        ...
