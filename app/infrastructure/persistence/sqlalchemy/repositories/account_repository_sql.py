from datetime import datetime
from typing import Optional, Dict, Any
import logging
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .....db.models import Account
from .....application.ports.account_repo import AccountRepository, AccountDto

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "full_name", "company_name", "phone_number", "location", "time_zone",
    "signature", "profile_photo", "plan_type", "access_expires_at",
}


class SqlAccountRepository(AccountRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, account: Account) -> AccountDto:
        return AccountDto(
            id=account.id,
            email=account.email,
            full_name=account.full_name,
            company_name=account.company_name,
            phone_number=account.phone_number,
            location=account.location,
            time_zone=account.time_zone,
            signature=account.signature,
            profile_photo=account.profile_photo,
            role=account.role,
            plan_type=account.plan_type,
            access_expires_at=account.access_expires_at,
            password_hash=account.password_hash,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    def _get(self, account_id: str) -> Optional[Account]:
        return self.session.exec(select(Account).where(Account.id == account_id)).first()

    def create(self, fields: Dict[str, Any], password_hash: str) -> Optional[AccountDto]:
        account = Account(**fields, password_hash=password_hash)
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info("Account insert rejected by unique email constraint")
            return None
        self.session.refresh(account)
        return self._to_dto(account)

    def get_by_email(self, email: str) -> Optional[AccountDto]:
        account = self.session.exec(select(Account).where(Account.email == email)).first()
        return self._to_dto(account) if account else None

    def get_by_id(self, account_id: str) -> Optional[AccountDto]:
        account = self._get(account_id)
        return self._to_dto(account) if account else None

    def update_fields(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        account = self._get(account_id)
        if not account:
            return None
        for key, value in fields.items():
            if key in UPDATABLE_FIELDS:
                setattr(account, key, value)
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        self.session.commit()
        self.session.refresh(account)
        return self._to_dto(account)

    def set_password_hash(self, account_id: str, password_hash: str) -> bool:
        account = self._get(account_id)
        if not account:
            return False
        account.password_hash = password_hash
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        self.session.commit()
        return True
