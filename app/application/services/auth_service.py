from dataclasses import dataclass
from typing import Optional, Dict, Any
import logging

from ..ports.audit_logger import AuditLogger
from ..ports.notifier import Notifier, NotificationIntent, NotificationKind
from .credential_store import CredentialStore
from .otp_engine import OtpEngine
from .token_issuer import TokenIssuer
from .results import (
    ChangePasswordStatus,
    ForgotStatus,
    LoginResult,
    LoginStatus,
    OtpStatus,
    RegisterResult,
    RegisterStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthService:
    credentials: CredentialStore
    otp_engine: OtpEngine
    tokens: TokenIssuer
    notifier: Notifier
    audit_logger: Optional[AuditLogger] = None

    def register_account(self, profile: Dict[str, Any], password: str) -> RegisterResult:
        result = self.credentials.register(profile, password)
        if result.status is RegisterStatus.OK:
            account = result.account
            self._audit("register", account.email, account.id)
            self._notify(NotificationIntent(NotificationKind.WELCOME, account.email, account.full_name, secret=password))
        else:
            self._audit("register", profile.get("email", ""), success=False, details={"reason": result.status.value})
        return result

    def login(self, email: str, password: str) -> LoginResult:
        account = self.credentials.find_by_email(email)
        if not account:
            self._audit("login", email, success=False, details={"reason": "not_found"})
            return LoginResult(LoginStatus.NOT_FOUND)
        if not self.credentials.verify_password(account, password):
            self._audit("login", email, account.id, success=False, details={"reason": "invalid_password"})
            return LoginResult(LoginStatus.INVALID_PASSWORD)

        token = self.tokens.issue(account.id, account.role)
        self._audit("login", email, account.id)
        return LoginResult(LoginStatus.OK, account=account, token=token)

    def forgot_password(self, email: str) -> ForgotStatus:
        issued = self.otp_engine.issue(email)
        if not issued:
            self._audit("forgot_password", email, success=False, details={"reason": "not_found"})
            return ForgotStatus.NOT_FOUND

        account = issued.account
        self._audit("forgot_password", email, account.id)
        self._notify(NotificationIntent(NotificationKind.PASSWORD_RESET_OTP, account.email, account.full_name, secret=issued.otp))
        return ForgotStatus.OK

    def verify_otp(self, email: str, code: str) -> OtpStatus:
        status = self.otp_engine.verify(email, code)
        self._audit("verify_otp", email, success=status is OtpStatus.OK, details={"status": status.value})
        return status

    def reset_password(self, email: str, code: str, new_password: str) -> OtpStatus:
        consumed = self.otp_engine.consume_for_reset(email, code)
        if consumed.status is not OtpStatus.OK:
            self._audit("reset_password", email, success=False, details={"status": consumed.status.value})
            return consumed.status

        account = consumed.account
        if not self.credentials.set_password(account.id, new_password):
            logger.error(f"Password reset for account {account.id} could not store the new password")
            self._audit("reset_password", email, account.id, success=False, details={"reason": "password_not_updated"})
            return OtpStatus.INVALID
        self._audit("reset_password", email, account.id)
        self._notify(NotificationIntent(NotificationKind.PASSWORD_RESET_CONFIRMATION, account.email, account.full_name))
        return OtpStatus.OK

    def change_password(self, account_id: str, current_password: str, new_password: str) -> ChangePasswordStatus:
        account = self.credentials.find_by_id(account_id)
        if not account:
            return ChangePasswordStatus.NOT_FOUND
        if not self.credentials.verify_password(account, current_password):
            self._audit("change_password", account.email, account.id, success=False)
            return ChangePasswordStatus.INVALID_PASSWORD

        self.credentials.set_password(account.id, new_password)
        self._audit("change_password", account.email, account.id)
        return ChangePasswordStatus.OK

    def _notify(self, intent: NotificationIntent) -> None:
        try:
            self.notifier.enqueue(intent)
        except Exception:
            logger.exception(f"Failed to enqueue {intent.kind.value} notification")

    def _audit(self, action: str, email: str, account_id: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        if self.audit_logger:
            self.audit_logger.log(action, email, account_id=account_id, success=success, details=details)
