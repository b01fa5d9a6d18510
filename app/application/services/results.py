from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..ports.account_repo import AccountDto


class RegisterStatus(str, Enum):
    OK = "ok"
    DUPLICATE_EMAIL = "duplicate_email"


class LoginStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_PASSWORD = "invalid_password"


class ForgotStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"


class OtpStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    EXPIRED = "expired"


class ChangePasswordStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_PASSWORD = "invalid_password"


class TokenStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    EXPIRED = "expired"


@dataclass
class RegisterResult:
    status: RegisterStatus
    account: Optional[AccountDto] = None


@dataclass
class LoginResult:
    status: LoginStatus
    account: Optional[AccountDto] = None
    token: Optional[str] = None


@dataclass
class IssuedOtp:
    account: AccountDto
    # Plaintext code for out-of-band delivery only
    otp: str


@dataclass
class ConsumeResult:
    status: OtpStatus
    account: Optional[AccountDto] = None


@dataclass
class TokenClaims:
    account_id: str
    role: str


@dataclass
class TokenCheck:
    status: TokenStatus
    claims: Optional[TokenClaims] = None
