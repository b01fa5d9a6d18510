# Models package (re-export feature modules for stable imports)
from .accounts.account import Account
from .auth.otp import PasswordResetOtp

__all__ = [
    "Account",
    "PasswordResetOtp",
]
