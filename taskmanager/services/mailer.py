"""SMTP delivery of password reset emails."""

import logging
import smtplib
from email.message import EmailMessage
from functools import lru_cache

from taskmanager.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Password Reset Request"


def build_reset_link(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?token={token}"


def _reset_email_html(reset_link: str, ttl_minutes: int) -> str:
    expiry = "1 hour" if ttl_minutes == 60 else f"{ttl_minutes} minutes"
    return (
        "<p>You have requested a password reset.</p>"
        "<p>Please click on the following link to reset your password:</p>"
        f'<p><a href="{reset_link}">{reset_link}</a></p>'
        f"<p>This link will expire in {expiry}.</p>"
        "<p>If you did not request this, please ignore this email.</p>"
    )


class SmtpMailDispatcher:
    """
    Sends reset emails synchronously over SMTP.

    Delivery failures are logged and swallowed: callers must respond the same
    way whether or not the email went out.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def build_message(self, to_email: str, token: str) -> EmailMessage:
        s = self._settings
        reset_link = build_reset_link(s.FRONTEND_URL, token)
        msg = EmailMessage()
        msg["Subject"] = RESET_EMAIL_SUBJECT
        msg["From"] = s.SMTP_FROM
        msg["To"] = to_email.strip()
        msg.set_content(
            f"You have requested a password reset. Open this link to continue: {reset_link}"
        )
        msg.add_alternative(
            _reset_email_html(reset_link, s.PASSWORD_RESET_TOKEN_TTL_MINUTES),
            subtype="html",
        )
        return msg

    def send_password_reset_email(self, to_email: str, token: str) -> None:
        s = self._settings
        if not s.SMTP_HOST:
            logger.warning(
                "SMTP_HOST is not configured; password reset email not sent to %s",
                to_email,
            )
            return

        msg = self.build_message(to_email, token)
        logger.info("Sending password reset email from %s to %s", s.SMTP_FROM, msg["To"])
        try:
            with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as server:
                if s.SMTP_USE_TLS:
                    server.starttls()
                if s.SMTP_USERNAME and s.SMTP_PASSWORD is not None:
                    server.login(s.SMTP_USERNAME, s.SMTP_PASSWORD.get_secret_value())
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending password reset email to %s: %s", to_email, e)
            return
        logger.info("Password reset email sent to %s", to_email)


@lru_cache
def get_mail_dispatcher() -> SmtpMailDispatcher:
    """Process-wide SMTP dispatcher built from settings (cached)."""
    return SmtpMailDispatcher(get_settings())
