import os
import tempfile

# Configure the app for tests before anything imports app.core.config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("JWT_TOKEN_SECRET", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="uploads-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Any

import pytest

from app.application.ports.account_repo import AccountDto
from app.application.ports.otp_repo import OtpRecordDto
from app.application.services.auth_service import AuthService
from app.application.services.credential_store import CredentialStore
from app.application.services.otp_engine import OtpEngine
from app.application.services.token_issuer import TokenIssuer
from app.infrastructure.security.bcrypt_hasher import BcryptPasswordHasher


class FakeClock:
    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2026, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeAccountRepo:
    def __init__(self):
        self.accounts: Dict[str, AccountDto] = {}

    def create(self, fields: Dict[str, Any], password_hash: str) -> Optional[AccountDto]:
        if self.get_by_email(fields["email"]):
            return None
        now = datetime.utcnow()
        account = AccountDto(
            id=str(uuid.uuid4()),
            email=fields["email"],
            full_name=fields.get("full_name", ""),
            company_name=fields.get("company_name", ""),
            phone_number=fields.get("phone_number", ""),
            location=fields.get("location"),
            time_zone=fields.get("time_zone"),
            signature=fields.get("signature"),
            profile_photo=fields.get("profile_photo"),
            role=fields.get("role", "user"),
            plan_type=fields.get("plan_type", "trial"),
            access_expires_at=fields.get("access_expires_at"),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.accounts[account.id] = account
        return account

    def get_by_email(self, email: str) -> Optional[AccountDto]:
        return next((a for a in self.accounts.values() if a.email == email), None)

    def get_by_id(self, account_id: str) -> Optional[AccountDto]:
        return self.accounts.get(account_id)

    def update_fields(self, account_id: str, fields: Dict[str, Any]) -> Optional[AccountDto]:
        account = self.accounts.get(account_id)
        if not account:
            return None
        account = replace(account, **fields, updated_at=datetime.utcnow())
        self.accounts[account_id] = account
        return account

    def set_password_hash(self, account_id: str, password_hash: str) -> bool:
        if account_id not in self.accounts:
            return False
        self.accounts[account_id] = replace(self.accounts[account_id], password_hash=password_hash)
        return True


class FakeOtpRepo:
    def __init__(self):
        self.records: List[OtpRecordDto] = []

    def replace_pending(self, account_id, email, otp_hash, created_at, expires_at, delete_at) -> OtpRecordDto:
        self.records = [r for r in self.records if not (r.email == email and r.used_at is None)]
        rec = OtpRecordDto(str(uuid.uuid4()), account_id, email, otp_hash, created_at, expires_at, delete_at, None)
        self.records.append(rec)
        return rec

    def _latest(self, email: str, used: bool) -> Optional[OtpRecordDto]:
        # Later inserts win ties on created_at
        matches = [r for r in self.records if r.email == email and (r.used_at is not None) == used]
        return max(reversed(matches), key=lambda r: r.created_at, default=None)

    def latest_unused(self, email: str) -> Optional[OtpRecordDto]:
        return self._latest(email, used=False)

    def latest_used(self, email: str) -> Optional[OtpRecordDto]:
        return self._latest(email, used=True)

    def mark_used(self, record_id: str, used_at: datetime) -> bool:
        rec = next((r for r in self.records if r.id == record_id), None)
        if not rec or rec.used_at is not None:
            return False
        rec.used_at = used_at
        return True

    def delete(self, record_id: str) -> bool:
        before = len(self.records)
        self.records = [r for r in self.records if r.id != record_id]
        return len(self.records) < before

    def purge_expired(self, now: datetime) -> int:
        before = len(self.records)
        self.records = [r for r in self.records if r.delete_at > now]
        return before - len(self.records)

    def unused_for(self, email: str) -> List[OtpRecordDto]:
        return [r for r in self.records if r.email == email and r.used_at is None]


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.intents = []
        self.fail = fail

    def enqueue(self, intent) -> None:
        if self.fail:
            raise RuntimeError("queue unavailable")
        self.intents.append(intent)


class FakeAudit:
    def __init__(self):
        self.entries = []

    def log(self, action, email, account_id=None, success=True, details=None) -> None:
        self.entries.append((action, email, account_id, success))


PROFILE = {
    "email": "u@test.com",
    "full_name": "Una Tester",
    "company_name": "Acme",
    "phone_number": "+15550001111",
}


@pytest.fixture
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def account_repo():
    return FakeAccountRepo()


@pytest.fixture
def otp_repo():
    return FakeOtpRepo()


@pytest.fixture
def credentials(account_repo, hasher):
    return CredentialStore(account_repo=account_repo, hasher=hasher)


@pytest.fixture
def otp_engine(otp_repo, credentials, hasher, clock):
    return OtpEngine(otp_repo=otp_repo, credentials=credentials, hasher=hasher, clock=clock)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def auth_service(credentials, otp_engine, notifier):
    tokens = TokenIssuer(secret_key="unit-test-secret")
    return AuthService(credentials=credentials, otp_engine=otp_engine, tokens=tokens, notifier=notifier, audit_logger=FakeAudit())


@pytest.fixture
def profile():
    return dict(PROFILE)
