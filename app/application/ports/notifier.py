from typing import Protocol, Optional
from dataclasses import dataclass, field
from enum import Enum


class NotificationKind(str, Enum):
    WELCOME = "welcome"
    PASSWORD_RESET_OTP = "password_reset_otp"
    PASSWORD_RESET_CONFIRMATION = "password_reset_confirmation"


@dataclass
class NotificationIntent:
    kind: NotificationKind
    to_email: str
    to_name: str
    # Secret payload (temporary password or OTP); never logged
    secret: Optional[str] = field(default=None, repr=False)


class Notifier(Protocol):
    def enqueue(self, intent: NotificationIntent) -> None:
        ...


class EmailSender(Protocol):
    async def send(self, intent: NotificationIntent) -> None:
        ...
