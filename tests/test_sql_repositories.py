from datetime import datetime, timedelta

import pytest
from sqlmodel import SQLModel, Session

from app.database import build_engine
from app.infrastructure.persistence.sqlalchemy.repositories.account_repository_sql import SqlAccountRepository
from app.infrastructure.persistence.sqlalchemy.repositories.otp_repository_sql import SqlOtpRepository

NOW = datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def session():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture
def account(session):
    repo = SqlAccountRepository(session)
    return repo.create(
        {"email": "u@test.com", "full_name": "Una", "company_name": "Acme", "phone_number": "1"},
        "hash",
    )


def _issue(repo, account, at, code_hash="h"):
    return repo.replace_pending(account.id, account.email, code_hash, at, at + timedelta(minutes=5), at + timedelta(minutes=10))


def test_account_defaults_and_unique_email(session, account):
    repo = SqlAccountRepository(session)
    assert account.role == "user"
    assert account.plan_type == "trial"
    assert repo.create({"email": "u@test.com", "full_name": "X", "company_name": "Y", "phone_number": "2"}, "h2") is None
    assert repo.get_by_email("u@test.com").full_name == "Una"


def test_account_update_fields_ignores_protected_columns(session, account):
    repo = SqlAccountRepository(session)
    updated = repo.update_fields(account.id, {"company_name": "Globex", "role": "admin", "password_hash": "x"})
    assert updated.company_name == "Globex"
    assert updated.role == "user"
    assert updated.password_hash == "hash"
    assert repo.update_fields("missing", {"company_name": "x"}) is None


def test_set_password_hash(session, account):
    repo = SqlAccountRepository(session)
    assert repo.set_password_hash(account.id, "new-hash") is True
    assert repo.get_by_id(account.id).password_hash == "new-hash"
    assert repo.set_password_hash("missing", "x") is False


def test_replace_pending_keeps_one_unused_record(session, account):
    repo = SqlOtpRepository(session)
    _issue(repo, account, NOW, "h1")
    second = _issue(repo, account, NOW + timedelta(seconds=5), "h2")
    latest = repo.latest_unused("u@test.com")
    assert latest.id == second.id
    assert latest.otp_hash == "h2"


def test_replace_pending_keeps_verified_records(session, account):
    repo = SqlOtpRepository(session)
    first = _issue(repo, account, NOW, "h1")
    assert repo.mark_used(first.id, NOW + timedelta(seconds=1))
    _issue(repo, account, NOW + timedelta(seconds=2), "h2")
    assert repo.latest_used("u@test.com").id == first.id
    assert repo.latest_unused("u@test.com").otp_hash == "h2"


def test_mark_used_is_compare_and_set(session, account):
    repo = SqlOtpRepository(session)
    rec = _issue(repo, account, NOW)
    assert repo.mark_used(rec.id, NOW) is True
    assert repo.mark_used(rec.id, NOW + timedelta(seconds=1)) is False
    assert repo.latest_unused("u@test.com") is None
    assert repo.latest_used("u@test.com").used_at == NOW


def test_delete_only_succeeds_once(session, account):
    repo = SqlOtpRepository(session)
    rec = _issue(repo, account, NOW)
    assert repo.delete(rec.id) is True
    assert repo.delete(rec.id) is False


def test_purge_expired_honours_deletion_horizon(session, account):
    repo = SqlOtpRepository(session)
    _issue(repo, account, NOW)
    assert repo.purge_expired(NOW + timedelta(minutes=9)) == 0
    assert repo.purge_expired(NOW + timedelta(minutes=10)) == 1
    assert repo.latest_unused("u@test.com") is None
