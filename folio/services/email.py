"""
Email Service using Resend

Handles transactional emails:
- "Your post was published" notifications (sent by the notification function)

The Mailer carries its own credentials so the notification function can be
built with injected configuration and tested without a live relay.
"""

from typing import Optional

import resend
import structlog

from folio.core.config import settings

logger = structlog.get_logger(__name__)


class MailRelayError(Exception):
    pass


def render_post_published_text(full_name: Optional[str], title: str, post_url: str) -> str:
    name = full_name or "there"
    return (
        f"Hello {name},\n\n"
        f'Your post "{title}" has been published successfully!\n\n'
        f"View it here: {post_url}"
    )


def render_post_published_html(full_name: Optional[str], title: str, post_url: str) -> str:
    name = full_name or "there"
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f9fafb; color: #111827; margin: 0; padding: 40px 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; border: 1px solid #e5e7eb; overflow: hidden;">
        <div style="padding: 40px 30px;">
            <h2 style="margin: 0 0 20px 0; font-size: 20px;">Hello {name},</h2>
            <p style="color: #4b5563; line-height: 1.6; margin: 0 0 20px 0;">
                Your post <strong>"{title}"</strong> has been published successfully!
            </p>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{post_url}" style="display: inline-block; background-color: #111827; color: #fff; padding: 14px 32px; text-decoration: none; font-weight: bold; font-size: 14px; border-radius: 4px;">VIEW YOUR POST</a>
            </div>
            <p style="color: #9ca3af; font-size: 12px; line-height: 1.6; margin: 20px 0 0 0;">
                You are receiving this because publish notifications are enabled on your profile.
            </p>
        </div>
    </div>
</body>
</html>
"""


class Mailer:
    """Sends mail through Resend with the given credentials."""

    def __init__(self, api_key: str, from_email: str):
        self.api_key = api_key
        self.from_email = from_email

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def send(self, to_email: str, subject: str, text: str, html: Optional[str] = None) -> str:
        """Send one email. Returns the relay's message id; raises MailRelayError on failure."""
        if not self.configured:
            raise MailRelayError("RESEND_API_KEY not configured")

        resend.api_key = self.api_key
        params = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "text": text,
        }
        if html:
            params["html"] = html

        try:
            result = resend.Emails.send(params)
        except Exception as e:
            raise MailRelayError(f"Relay rejected message to {to_email}: {e}") from e

        message_id = result.get("id", "") if isinstance(result, dict) else ""
        logger.info("Email sent", to=to_email, subject=subject, message_id=message_id)
        return message_id

    def send_post_published(self, to_email: str, full_name: Optional[str], title: str, post_url: str) -> str:
        return self.send(
            to_email,
            subject=f'Your post "{title}" has been published!',
            text=render_post_published_text(full_name, title, post_url),
            html=render_post_published_html(full_name, title, post_url),
        )


def get_mailer() -> Mailer:
    return Mailer(settings.RESEND_API_KEY, settings.FROM_EMAIL)
