"""
Email utilities for verification, password reset and account notifications.
Messages are delivered through fastapi-mail.
"""
import logging
from datetime import datetime

from fastapi import Request
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)

BRAND = "Health Programs"

PAGE_TEMPLATE = """
<html>
    <head>
        <title>{brand} - {title}</title>
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .header {{ background-color: {color}; color: white; padding: 10px; text-align: center; }}
            .content {{ padding: 20px; border: 1px solid #ddd; }}
            .button {{ display: inline-block; padding: 10px 20px; background-color: {color};
                    color: white; text-decoration: none; border-radius: 5px; margin: 20px 0; }}
            .footer {{ text-align: center; margin-top: 20px; font-size: 12px; color: #777; }}
        </style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <h1>{brand}</h1>
            </div>
            <div class="content">
                {body}
                <p>Best regards,<br>{brand} Team</p>
            </div>
            <div class="footer">
                &copy; {year} {brand}. All rights reserved.
            </div>
        </div>
    </body>
</html>
"""


def render_page(title: str, body: str, color: str = "#4CAF50") -> str:
    """Wrap an HTML fragment in the shared email layout."""
    return PAGE_TEMPLATE.format(
        brand=BRAND, title=title, body=body, color=color, year=datetime.now().year
    )


def build_connection_config(settings: Settings) -> ConnectionConfig:
    """
    Build the fastapi-mail connection configuration from application settings.

    With ``mail_suppress_send`` the message is built and dispatched to
    ``FastMail.record_messages`` listeners, but no SMTP connection is made.
    """
    return ConnectionConfig(
        MAIL_USERNAME=settings.mail_username,
        MAIL_PASSWORD=settings.mail_password,
        MAIL_FROM=settings.mail_from,
        MAIL_FROM_NAME=settings.mail_from_name,
        MAIL_PORT=settings.mail_port,
        MAIL_SERVER=settings.mail_server,
        MAIL_STARTTLS=settings.mail_starttls,
        MAIL_SSL_TLS=settings.mail_ssl_tls,
        USE_CREDENTIALS=settings.use_credentials,
        VALIDATE_CERTS=settings.validate_certs,
        SUPPRESS_SEND=int(settings.mail_suppress_send),
    )


class Mailer:
    """
    Sends the application's transactional emails.

    Attributes:
        fast_mail: Underlying FastMail client
        frontend_url: Base URL used to build links in emails
    """

    def __init__(self, settings: Settings):
        self.fast_mail = FastMail(build_connection_config(settings))
        self.frontend_url = settings.frontend_url.rstrip("/")

    async def send_email(self, recipient: str, subject: str, html_body: str) -> None:
        """
        Send one HTML email.

        Raises:
            Exception: Whatever the mail transport raises; callers decide whether
                a failed send aborts the operation.
        """
        message = MessageSchema(
            subject=subject,
            recipients=[recipient],
            body=html_body,
            subtype=MessageType.html,
        )
        await self.fast_mail.send_message(message)
        logger.info(f"Email '{subject}' sent to {recipient}")

    def verification_url(self, token: str) -> str:
        return f"{self.frontend_url}/verify-account?token={token}"

    def reset_url(self, token: str) -> str:
        return f"{self.frontend_url}/reset-password?token={token}"

    async def send_verification_email(self, email: str, token: str, expires_in_hours: int) -> None:
        """
        Send the account verification link.

        Args:
            email: Recipient address
            token: Verification token embedded in the link
            expires_in_hours: Lifetime of the token, shown to the user
        """
        url = self.verification_url(token)
        body = f"""
                <p>Hello,</p>
                <p>Thank you for registering with {BRAND}. Please verify your email address by clicking the button below:</p>
                <p style="text-align: center;"><a href="{url}" class="button">Verify Email</a></p>
                <p>If you can't click the button, copy and paste this link into your browser:</p>
                <p>{url}</p>
                <p>This link will expire in {expires_in_hours} hours.</p>
                <p>If you did not create an account, please ignore this email.</p>
        """
        await self.send_email(email, f"{BRAND} - Verify your email", render_page("Email Verification", body))

    async def send_password_reset_email(self, email: str, token: str, expires_at: datetime) -> None:
        """
        Send the password reset link.

        Args:
            email: Recipient address
            token: Reset token embedded in the link
            expires_at: When the reset token expires
        """
        url = self.reset_url(token)
        expiry = expires_at.strftime("%B %d, %Y at %I:%M %p UTC")
        body = f"""
                <p>Hello,</p>
                <p>We received a request to reset the password for your {BRAND} account. Click the button below to choose a new password:</p>
                <p style="text-align: center;"><a href="{url}" class="button">Reset Password</a></p>
                <p><strong>Important:</strong> This link will expire on {expiry}.</p>
                <p>If you can't click the button, copy and paste this link into your browser:</p>
                <p>{url}</p>
                <p>If you did not request a password reset, you can safely ignore this email.</p>
        """
        await self.send_email(
            email, f"{BRAND} - Password reset", render_page("Password Reset", body, color="#3498db")
        )

    async def send_password_changed_notification(self, email: str) -> None:
        body = f"""
                <p>Hello,</p>
                <p>The password for your {BRAND} account was just changed.</p>
                <p>If you did not make this change, reset your password immediately or contact support.</p>
        """
        await self.send_email(
            email, f"{BRAND} - Password changed", render_page("Password Changed", body, color="#3498db")
        )


def get_mailer(request: Request) -> Mailer:
    """Dependency returning the application's mailer."""
    return request.app.state.mailer
