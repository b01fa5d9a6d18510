from datetime import datetime
from html import escape
from typing import Tuple

from ...application.ports.notifier import NotificationIntent, NotificationKind

_FRAME = """
<div style="font-family: Arial, Helvetica, sans-serif; background-color: #f5f7fb; padding: 30px;">
  <div style="max-width: 600px; margin: 0 auto; background: #ffffff; border-radius: 8px; padding: 30px;">
    {body}
    <p style="color: #555; font-size: 14px;">Cheers,<br/><strong>The {brand} Team</strong></p>
    <hr style="border:none;border-top:1px solid #eee;margin:30px 0"/>
    <p style="color:#999;font-size:12px;text-align:center;">&copy; {year} {brand}</p>
  </div>
</div>"""

_CODE_BOX = (
    '<div style="background:#f3f6ff;border:1px solid #d9e2ff;border-radius:6px;padding:12px 16px;margin:16px 0;">'
    '<p style="margin:0;color:#333;font-size:14px;">{label}: <strong style="font-size:16px;">{value}</strong></p>'
    '</div>'
)


def render(intent: NotificationIntent, brand: str) -> Tuple[str, str]:
    """Return (subject, html) for a notification."""
    name = escape(intent.to_name or "there")
    if intent.kind is NotificationKind.WELCOME:
        subject = f"Welcome to {brand}"
        body = (
            f'<h2 style="color: #333; margin-top: 0;">Welcome to {escape(brand)}, {name}!</h2>'
            '<p style="color: #555; font-size: 15px; line-height: 1.6;">'
            'Your account is ready. Use the temporary password below to sign in, then change it right away.</p>'
            + _CODE_BOX.format(label="Temporary password", value=escape(intent.secret or ""))
        )
    elif intent.kind is NotificationKind.PASSWORD_RESET_OTP:
        subject = "Your password reset code"
        body = (
            f'<h2 style="color: #333; margin-top: 0;">Hi {name},</h2>'
            '<p style="color: #555; font-size: 15px; line-height: 1.6;">'
            'Use the code below to reset your password. It expires in 5 minutes.</p>'
            + _CODE_BOX.format(label="Reset code", value=escape(intent.secret or ""))
            + '<p style="color: #555; font-size: 14px;">If you did not request this, you can ignore this email.</p>'
        )
    elif intent.kind is NotificationKind.PASSWORD_RESET_CONFIRMATION:
        subject = "Your password was changed"
        body = (
            f'<h2 style="color: #333; margin-top: 0;">Hi {name},</h2>'
            '<p style="color: #555; font-size: 15px; line-height: 1.6;">'
            'Your password has been reset successfully. If this was not you, contact support immediately.</p>'
        )
    else:
        raise ValueError(f"Unknown notification kind: {intent.kind}")
    html = _FRAME.format(body=body, brand=escape(brand), year=datetime.utcnow().year)
    return subject, html
