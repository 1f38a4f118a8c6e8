"""
Email Service using Gmail SMTP or Resend (fallback)
Renders MJML templates and sends them without blocking the event loop
"""

import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import (
    EMAIL_FROM_ADDRESS,
    GMAIL_APP_PASSWORD,
    GMAIL_USER,
    RESEND_API_KEY,
    SMTP_HOST,
    SMTP_PORT,
)
from .shared.validators import is_placeholder_value

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = (
    "Email not configured. Set GMAIL_USER and a valid GMAIL_APP_PASSWORD, or RESEND_API_KEY."
)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict-like object with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


class EmailSender:
    """
    Sends transactional email through Gmail SMTP, or Resend when SMTP is not set up.

    Built once at startup and shared by all requests.
    """

    def __init__(
        self,
        smtp_user: str = "",
        smtp_password: str = "",
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        resend_api_key: Optional[str] = None,
        from_address: Optional[str] = None,
    ):
        self.smtp_user = (smtp_user or "").strip()
        self.smtp_password = smtp_password or ""
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.resend_api_key = resend_api_key
        self.from_address = from_address or self.smtp_user or EMAIL_FROM_ADDRESS

        if self.resend_api_key:
            resend.api_key = self.resend_api_key

    @classmethod
    def from_config(cls) -> "EmailSender":
        return cls(
            smtp_user=GMAIL_USER,
            smtp_password=GMAIL_APP_PASSWORD,
            smtp_host=SMTP_HOST,
            smtp_port=SMTP_PORT,
            resend_api_key=RESEND_API_KEY,
            from_address=GMAIL_USER or EMAIL_FROM_ADDRESS,
        )

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_user) and not is_placeholder_value(self.smtp_password)

    @property
    def configured(self) -> bool:
        return self.smtp_configured or bool(self.resend_api_key)

    def _send_via_smtp(
        self, recipients: list[str], subject: str, html_content: str, text_content: str
    ) -> dict:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = ", ".join(recipients)
        msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        context = ssl.create_default_context()
        if self.smtp_port == 465:
            server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, context=context, timeout=30)
        else:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30)
            server.starttls(context=context)

        try:
            server.login(self.smtp_user, self.smtp_password)
            server.sendmail(self.smtp_user, recipients, msg.as_string())
        finally:
            server.quit()

        logger.info(f"Email sent via SMTP {self.smtp_host} to {recipients}")
        return {"success": True, "provider": "smtp"}

    def _send_via_resend(
        self, recipients: list[str], subject: str, html_content: str, text_content: str
    ) -> dict:
        response = resend.Emails.send(
            {
                "from": self.from_address,
                "to": recipients,
                "subject": subject,
                "html": html_content,
                "text": text_content,
            }
        )
        logger.info(f"Email sent via Resend: {response}")
        return response

    async def send(
        self,
        to: Union[str, list[str]],
        subject: str,
        mjml_content: str,
        text_content: str = "",
    ) -> dict:
        """
        Send an email using SMTP (if configured) or Resend

        Args:
            to: Recipient email(s)
            subject: Email subject line
            mjml_content: MJML template content (will be compiled to HTML)
            text_content: Plain-text alternative body

        Returns:
            Send response dict

        Raises:
            Exception: If no provider is configured or the provider rejects the message
        """
        if not self.configured:
            raise Exception(NOT_CONFIGURED_MESSAGE)

        html_content = compile_mjml_to_html(mjml_content)
        recipients = [to] if isinstance(to, str) else to

        try:
            if self.smtp_configured:
                return await asyncio.to_thread(
                    self._send_via_smtp, recipients, subject, html_content, text_content
                )
            return await asyncio.to_thread(
                self._send_via_resend, recipients, subject, html_content, text_content
            )
        except Exception as e:
            logger.error(f"Email send error to {recipients}: {e}")
            raise Exception(f"Failed to send email: {str(e)}") from e
