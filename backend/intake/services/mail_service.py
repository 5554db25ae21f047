"""
Form Intake Service — Notification Mail Service
================================================

What:  Emails a summary of each stored submission to a fixed recipient.
How:   Renders the submitted fields as an HTML table under a one-line intro,
       then sends it over SMTP (implicit TLS or STARTTLS) from a fixed sender.
Who:   Scheduled by the submission routes as a FastAPI background task after
       the row has been committed.
When:  Once per successful submission, after the HTTP response is sent.

Delivery contract:
    - At most one attempt per submission; no retry, no queue
    - smtplib blocks, so the exchange runs in a worker thread
    - dispatch() never raises: failures are logged and dropped, and the
      HTTP caller has already received its response
"""

import asyncio
import html
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Any, Mapping, Optional

from fastapi import Request

from intake.config import Settings
from intake.forms import InquiryForm

logger = logging.getLogger(__name__)


def format_as_table(fields: Mapping[str, Any]) -> str:
    """
    Render a mapping as a two-column HTML table.

    Keys and values are HTML-escaped; None renders as an empty cell.
    """
    rows = "".join(
        f'<tr><th align="left">{html.escape(str(key))}</th>'
        f"<td>{'' if value is None else html.escape(str(value))}</td></tr>"
        for key, value in fields.items()
    )
    return (
        '<table border="1" cellpadding="6" cellspacing="0" '
        f'style="border-collapse: collapse;">{rows}</table>'
    )


def render_notification(form: InquiryForm, fields: Mapping[str, Any]) -> str:
    return f"<p>{html.escape(form.email_intro)}</p>\n{format_as_table(fields)}"


class MailService:
    """
    Process-scoped SMTP client configuration.

    Built once at startup from Settings. When credentials or the recipient
    are missing the service is disabled and dispatch() only logs.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        recipient: str,
        use_ssl: bool = True,
        timeout: float = 20.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.recipient = recipient
        self.use_ssl = use_ssl
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailService":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            sender=settings.mail_sender,
            recipient=settings.email_receiver,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.username and self.password and self.recipient)

    def build_message(self, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = self.recipient
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        if self.use_ssl:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context) as smtp:
                smtp.login(self.username, self.password)
                smtp.send_message(message)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls(context=context)
                smtp.login(self.username, self.password)
                smtp.send_message(message)

    async def send(self, subject: str, html_body: str) -> None:
        """Send one HTML email. Raises on any SMTP or network failure."""
        message = self.build_message(subject, html_body)
        await asyncio.to_thread(self._deliver, message)

    async def dispatch(
        self,
        form: InquiryForm,
        fields: Mapping[str, Any],
        request_id: Optional[str] = None,
    ) -> bool:
        """
        Send the notification for one submission, swallowing every failure.

        Returns:
            True if the SMTP server accepted the message. Callers ignore it;
            it exists for logging and tests.
        """
        if not self.enabled:
            logger.info("[%s] Mail disabled; skipping %s notification", request_id or "-", form.kind)
            return False

        try:
            await self.send(form.email_subject, render_notification(form, fields))
        except Exception as e:
            logger.error(
                "[%s] Error sending %s notification email: %s",
                request_id or "-",
                form.kind,
                e,
                exc_info=True,
            )
            return False

        logger.info("[%s] Email sent: %s to %s", request_id or "-", form.email_subject, self.recipient)
        return True


# ── Dependency ────────────────────────────────────────────────────────────
def get_mail_service(request: Request) -> MailService:
    return request.app.state.mail_service
