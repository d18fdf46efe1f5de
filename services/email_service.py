"""
services/email_service.py
-------------------------
Outgoing email over SMTP, plus the renewal reminder template.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import config
from models.subscription import Subscription
from models.user import User
from utils.formatters import format_amount, format_payment_date, lead_time_phrase
from utils.logger import get_logger

logger = get_logger(__name__)


class EmailSender:
    """
    Thin SMTP client. `send` never raises for transport problems:
    it logs and returns False so callers can carry on.
    """

    def __init__(
        self,
        host: str = config.SMTP_HOST,
        port: int = config.SMTP_PORT,
        username: str = config.SMTP_USER,
        password: str = config.SMTP_PASSWORD,
        sender: str = config.EMAIL_FROM,
        use_ssl: bool = config.SMTP_USE_SSL,
        timeout: int = config.SMTP_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.use_ssl = use_ssl
        self.timeout = timeout

    def send(self, to: str, subject: str, body: str, html: Optional[str] = None) -> bool:
        """
        Send one email.

        Args:
            to: Recipient address.
            subject: Subject line.
            body: Plain-text body.
            html: Optional HTML alternative.

        Returns:
            True if the SMTP server accepted the message, False otherwise.
        """
        if not self.username or not self.password:
            logger.error("Email credentials not configured. Set SMTP_USER and SMTP_PASSWORD.")
            return False

        message = MIMEMultipart("alternative")
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain"))
        if html:
            message.attach(MIMEText(html, "html"))

        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                    server.login(self.username, self.password)
                    server.send_message(message)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls()
                    server.login(self.username, self.password)
                    server.send_message(message)
            logger.info(f"Email sent to {to}: {subject}")
            return True
        except smtplib.SMTPException as e:
            logger.error(f"SMTP error sending email to {to}: {e}")
            return False
        except OSError as e:
            logger.error(f"Connection error sending email to {to}: {e}")
            return False


def build_reminder_email(user: User, subscription: Subscription, lead_days: int) -> tuple[str, str, str]:
    """
    Render the renewal reminder.

    Returns:
        (subject, plain-text body, HTML body)
    """
    when = lead_time_phrase(lead_days)
    amount = format_amount(subscription.amount, user.currency)
    payment_date = format_payment_date(subscription.next_payment_date)
    greeting = user.name or user.username or "there"

    subject = f"Reminder: {subscription.name} payment due {when}"

    body = f"""Hi {greeting},

This is a friendly reminder that your {subscription.name} payment is due {when}.

Details:
  Subscription: {subscription.name}
  Amount: {amount}
  Plan: {subscription.plan}
  Next Payment Date: {payment_date}

---
This is an automated notification. You can turn reminders off in your account settings.
"""

    html = f"""<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2>Subscription Payment Reminder</h2>
    <p>Hi {greeting},</p>
    <p>This is a friendly reminder that your {subscription.name} payment is due {when}.</p>
    <ul>
        <li>Subscription: {subscription.name}</li>
        <li>Amount: {amount}</li>
        <li>Plan: {subscription.plan}</li>
        <li>Next Payment Date: {payment_date}</li>
    </ul>
</div>"""

    return subject, body, html
