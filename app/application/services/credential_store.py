from dataclasses import dataclass
from typing import Optional, Dict, Any
import logging

from ..ports.account_repo import AccountRepository, AccountDto
from ..ports.password_hasher import PasswordHasher
from .results import RegisterResult, RegisterStatus

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "company_name", "phone_number", "location", "time_zone")


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class CredentialStore:
    account_repo: AccountRepository
    hasher: PasswordHasher

    def register(self, profile: Dict[str, Any], plain_password: str) -> RegisterResult:
        fields = dict(profile)
        fields["email"] = normalize_email(fields["email"])
        fields.pop("password", None)
        fields.pop("password_hash", None)
        if self.account_repo.get_by_email(fields["email"]):
            return RegisterResult(RegisterStatus.DUPLICATE_EMAIL)
        account = self.account_repo.create(fields, self.hasher.hash(plain_password))
        if account is None:
            # Lost a race against a concurrent registration
            return RegisterResult(RegisterStatus.DUPLICATE_EMAIL)
        logger.info(f"Account registered: {account.id}")
        return RegisterResult(RegisterStatus.OK, account)

    def find_by_email(self, email: str) -> Optional[AccountDto]:
        return self.account_repo.get_by_email(normalize_email(email))

    def find_by_id(self, account_id: str) -> Optional[AccountDto]:
        return self.account_repo.get_by_id(account_id)

    def verify_password(self, account: AccountDto, plain_password: str) -> bool:
        return self.hasher.verify(plain_password, account.password_hash)

    def update_profile(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        updates = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        return self.account_repo.update_fields(account_id, updates)

    def update_photo(self, account_id: str, photo_ref: Optional[str]) -> Optional[AccountDto]:
        return self.account_repo.update_fields(account_id, {"profile_photo": photo_ref})

    def set_password(self, account_id: str, new_plain_password: str) -> bool:
        return self.account_repo.set_password_hash(account_id, self.hasher.hash(new_plain_password))
