import logging
import aiohttp

from ...application.ports.notifier import EmailSender, NotificationIntent
from .templates import render

logger = logging.getLogger(__name__)


class BrevoEmailSender(EmailSender):
    """Transactional email through Brevo's SMTP API."""

    def __init__(self, api_key: str, sender_email: str, sender_name: str, api_url: str, timeout_seconds: int = 15) -> None:
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.api_url = api_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.sender_email)

    async def send(self, intent: NotificationIntent) -> None:
        if not self.configured:
            logger.warning(f"Email not sent ({intent.kind.value}): missing Brevo API configuration")
            return

        subject, html = render(intent, self.sender_name)
        payload = {
            "sender": {"name": self.sender_name, "email": self.sender_email},
            "to": [{"email": intent.to_email, "name": intent.to_name}],
            "subject": subject,
            "htmlContent": html,
        }
        headers = {
            "api-key": self.api_key,
            "accept": "application/json",
            "content-type": "application/json",
        }
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.api_url, json=payload, headers=headers) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise RuntimeError(f"Brevo API responded {response.status}: {body[:200]}")
        logger.info(f"Sent {intent.kind.value} email")
