import logging
import smtplib
from email.message import EmailMessage

from worktrack.config import settings

logger = logging.getLogger(__name__)


def send_invite_email(
    to_email: str,
    employee_id: str,
    temp_password: str,
    full_name: str | None,
):
    msg = EmailMessage()
    msg["Subject"] = "Your attendance account"
    msg["From"] = settings.SMTP_FROM_EMAIL
    msg["To"] = to_email

    msg.set_content(f"""
Hello {full_name or to_email},

An account has been created for you.

Employee ID: {employee_id}
Email: {to_email}
Temporary Password: {temp_password}

Sign in here:
{settings.FRONTEND_LOGIN_URL}

Please change your password immediately after first login.

Regards,
HR Team
""")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        server.starttls()
        if settings.SMTP_USERNAME:
            server.login(
                settings.SMTP_USERNAME,
                settings.SMTP_PASSWORD or ""
            )
        server.send_message(msg)


def send_invite_email_safely(**kwargs) -> None:
    try:
        send_invite_email(**kwargs)
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Invite email to %s failed: %s", kwargs.get("to_email"), exc)
