"""
Outbound email for one-time codes.

Sending never raises: a failed or unconfigured SMTP transport is logged and
reported as ``False`` so the calling operation can carry on. Outside
production the code itself is logged instead, which is how codes reach a
developer running without SMTP credentials.
"""

import logging
import smtplib
from email.message import EmailMessage

from healthvault.core.config import Settings
from healthvault.models.one_time_code import OtpPurpose

logger = logging.getLogger(__name__)

SUBJECTS = {
    OtpPurpose.EMAIL_VERIFICATION: "Verify your email",
    OtpPurpose.PHONE_VERIFICATION: "Verify your phone number",
    OtpPurpose.LOGIN: "Your login code",
    OtpPurpose.PASSWORD_RESET: "Reset your password",
}

HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #667eea; padding: 30px; text-align: center;">
    <h1 style="color: white; margin: 0;">{app}</h1>
  </div>
  <div style="padding: 30px; background: #f9f9f9;">
    <h2 style="color: #333;">Verification Code</h2>
    <p style="color: #666;">Your verification code is:</p>
    <div style="background: white; padding: 20px; text-align: center; border-radius: 8px;">
      <span style="font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #667eea;">{code}</span>
    </div>
    <p style="color: #666;">This code will expire in {minutes} minutes.</p>
    <p style="color: #999; font-size: 12px;">If you didn't request this code, please ignore this email.</p>
  </div>
</div>
"""


class EmailService:
    """Sends one-time codes over SMTP."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def configured(self) -> bool:
        return bool(self.settings.smtp_host and self.settings.smtp_user)

    def build_message(
        self, address: str, code: str, purpose: OtpPurpose
    ) -> EmailMessage:
        app = self.settings.mail_from_name
        minutes = self.settings.otp_expiry_minutes

        message = EmailMessage()
        message["From"] = f'"{app}" <{self.settings.smtp_user}>'
        message["To"] = address
        message["Subject"] = f"{app} - {SUBJECTS.get(purpose, 'Verification Code')}"
        message.set_content(
            f"Your verification code is {code}. It expires in {minutes} minutes."
        )
        message.add_alternative(
            HTML_TEMPLATE.format(app=app, code=code, minutes=minutes), subtype="html"
        )
        return message

    def send_otp(
        self,
        address: str,
        code: str,
        purpose: OtpPurpose = OtpPurpose.EMAIL_VERIFICATION,
    ) -> bool:
        """
        Deliver ``code`` to ``address``.

        Returns:
            True if the SMTP server accepted the message, False otherwise
        """
        if not self.configured:
            logger.warning("SMTP not configured, email to %s not sent", address)
            self._log_fallback(address, code, purpose)
            return False

        try:
            self._deliver(self.build_message(address, code, purpose))
            logger.info("Sent %s code to %s", purpose.value, address)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email sending failed for {address}: {e}")
            self._log_fallback(address, code, purpose)
            return False

    def _log_fallback(self, address: str, code: str, purpose: OtpPurpose) -> None:
        if not self.settings.is_production:
            logger.warning("OTP for %s (%s): %s", address, purpose.value, code)

    def _deliver(self, message: EmailMessage) -> None:
        """Open a connection and send one message."""
        with smtplib.SMTP(
            self.settings.smtp_host, self.settings.smtp_port, timeout=10
        ) as smtp:
            if self.settings.smtp_use_tls:
                smtp.starttls()
            if self.settings.smtp_password:
                smtp.login(self.settings.smtp_user, self.settings.smtp_password)
            smtp.send_message(message)
