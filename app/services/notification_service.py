"""
Booking Notification Service
Sends booking confirmations and status updates over email and WhatsApp.
Both channels run concurrently and report per-channel results; a failure
in one never blocks or fails the other.
"""

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, Field

from ..config import (
    ADMIN_NOTIFICATION_EMAIL,
    ADMIN_WHATSAPP_TO,
    DEFAULT_COUNTRY_CODE,
    GMAIL_USER,
)
from ..domain.bookings.schemas import BookingResponse
from ..email_service import EmailSender
from ..email_service import NOT_CONFIGURED_MESSAGE as EMAIL_NOT_CONFIGURED
from ..email_templates import booking_created_template, booking_status_template
from ..notification_templates import (
    created_message,
    created_subject,
    status_subject,
    status_update_text,
)
from ..shared.validators import clean_email, normalize_whatsapp_phone
from .twilio_service import NOT_CONFIGURED_MESSAGE as WHATSAPP_NOT_CONFIGURED
from .twilio_service import WhatsAppSender

logger = logging.getLogger(__name__)


class ChannelResult(BaseModel):
    configured: bool = False
    customerSent: bool = False
    adminSent: bool = False
    errors: list[str] = Field(default_factory=list)


class NotificationResult(BaseModel):
    email: ChannelResult = Field(default_factory=ChannelResult)
    whatsapp: ChannelResult = Field(default_factory=ChannelResult)

    def errors(self) -> list[str]:
        return [*self.email.errors, *self.whatsapp.errors]


class BookingNotifier:
    """Notification dispatcher injected into the booking routes"""

    def __init__(
        self,
        email_sender: EmailSender,
        whatsapp_sender: WhatsAppSender,
        admin_email: str = "",
        admin_whatsapp: str = "",
        default_country_code: str = "+91",
    ):
        self.email_sender = email_sender
        self.whatsapp_sender = whatsapp_sender
        self.admin_email = clean_email(admin_email)
        self.admin_whatsapp = normalize_whatsapp_phone(admin_whatsapp, default_country_code)
        self.default_country_code = default_country_code

    @classmethod
    def from_config(cls) -> "BookingNotifier":
        return cls(
            email_sender=EmailSender.from_config(),
            whatsapp_sender=WhatsAppSender.from_config(),
            admin_email=ADMIN_NOTIFICATION_EMAIL or GMAIL_USER,
            admin_whatsapp=ADMIN_WHATSAPP_TO,
            default_country_code=DEFAULT_COUNTRY_CODE,
        )

    async def aclose(self) -> None:
        await self.whatsapp_sender.aclose()

    def _customer_phone(self, booking: BookingResponse) -> str:
        return normalize_whatsapp_phone(booking.phone, self.default_country_code)

    # ------------------------------------------------------------------
    # Booking created
    # ------------------------------------------------------------------

    async def _email_created(self, booking: BookingResponse) -> ChannelResult:
        result = ChannelResult(configured=self.email_sender.configured)
        if not result.configured:
            result.errors.append(EMAIL_NOT_CONFIGURED)
            return result

        customer_email = clean_email(booking.email)
        if customer_email:
            try:
                await self.email_sender.send(
                    to=customer_email,
                    subject=created_subject(booking),
                    mjml_content=booking_created_template(booking),
                    text_content=f"Your booking is confirmed.\n\n{created_message(booking)}",
                )
                result.customerSent = True
            except Exception as e:
                result.errors.append(f"Customer email failed: {e}")

        if self.admin_email:
            try:
                await self.email_sender.send(
                    to=self.admin_email,
                    subject=created_subject(booking, for_admin=True),
                    mjml_content=booking_created_template(booking, for_admin=True),
                    text_content=created_message(booking, for_admin=True),
                )
                result.adminSent = True
            except Exception as e:
                result.errors.append(f"Admin email failed: {e}")

        return result

    async def _whatsapp_created(self, booking: BookingResponse) -> ChannelResult:
        result = ChannelResult(configured=self.whatsapp_sender.configured)
        if not result.configured:
            result.errors.append(WHATSAPP_NOT_CONFIGURED)
            return result

        customer_phone = self._customer_phone(booking)
        if customer_phone:
            sent, error = await self.whatsapp_sender.send(customer_phone, created_message(booking))
            result.customerSent = sent
            if error:
                result.errors.append(f"Customer WhatsApp failed: {error}")

        if self.admin_whatsapp:
            sent, error = await self.whatsapp_sender.send(
                self.admin_whatsapp, created_message(booking, for_admin=True)
            )
            result.adminSent = sent
            if error:
                result.errors.append(f"Admin WhatsApp failed: {error}")

        return result

    async def send_created(self, booking: BookingResponse) -> NotificationResult:
        """Confirm a new booking to the customer and alert the admin"""
        email, whatsapp = await asyncio.gather(
            self._email_created(booking),
            self._whatsapp_created(booking),
            return_exceptions=True,
        )
        return NotificationResult(
            email=_channel_or_error(email, "email"),
            whatsapp=_channel_or_error(whatsapp, "whatsapp"),
        )

    # ------------------------------------------------------------------
    # Status changed
    # ------------------------------------------------------------------

    async def _email_status(self, booking: BookingResponse, previous_status: str) -> ChannelResult:
        result = ChannelResult(configured=self.email_sender.configured)
        if not result.configured:
            result.errors.append(EMAIL_NOT_CONFIGURED)
            return result

        customer_email = clean_email(booking.email)
        if not customer_email:
            return result

        try:
            await self.email_sender.send(
                to=customer_email,
                subject=status_subject(booking.status, booking),
                mjml_content=booking_status_template(booking, previous_status),
                text_content=status_update_text(booking, previous_status),
            )
            result.customerSent = True
        except Exception as e:
            result.errors.append(f"Status email failed: {e}")

        return result

    async def _whatsapp_status(
        self, booking: BookingResponse, previous_status: str
    ) -> ChannelResult:
        result = ChannelResult(configured=self.whatsapp_sender.configured)
        if not result.configured:
            result.errors.append(WHATSAPP_NOT_CONFIGURED)
            return result

        customer_phone = self._customer_phone(booking)
        if not customer_phone:
            return result

        sent, error = await self.whatsapp_sender.send(
            customer_phone, status_update_text(booking, previous_status)
        )
        result.customerSent = sent
        if error:
            result.errors.append(f"Status WhatsApp failed: {error}")

        return result

    async def send_status_changed(
        self, booking: BookingResponse, previous_status: str = ""
    ) -> NotificationResult:
        """Tell the customer about a status or detail change"""
        email, whatsapp = await asyncio.gather(
            self._email_status(booking, previous_status),
            self._whatsapp_status(booking, previous_status),
            return_exceptions=True,
        )
        return NotificationResult(
            email=_channel_or_error(email, "email"),
            whatsapp=_channel_or_error(whatsapp, "whatsapp"),
        )


def _channel_or_error(outcome, channel: str) -> ChannelResult:
    """Turn an exception escaping a channel into a failed ChannelResult"""
    if isinstance(outcome, ChannelResult):
        return outcome
    logger.error(f"Unexpected {channel} notification error: {outcome}")
    return ChannelResult(errors=[f"Notification service error: {outcome}"])


def log_notification_errors(context: str, result: NotificationResult) -> None:
    errors = result.errors()
    if errors:
        logger.warning(f"{context} notification warnings: {' | '.join(errors)}")


async def notify_booking_created(
    notifier: "BookingNotifier", booking: BookingResponse, timeout: float
) -> NotificationResult:
    """
    Send the creation notifications and wait at most `timeout` seconds.

    The booking is already committed; a timeout or dispatcher error is
    recorded in the returned result instead of being raised.
    """
    try:
        result = await asyncio.wait_for(notifier.send_created(booking), timeout=timeout)
    except asyncio.TimeoutError:
        result = NotificationResult()
        result.email.errors.append(f"Notification service error: timed out after {timeout:g}s")
    except Exception as e:
        result = NotificationResult()
        result.email.errors.append(f"Notification service error: {e}")
    log_notification_errors("Booking created", result)
    return result


async def dispatch_status_notification(
    notifier: "BookingNotifier",
    booking: BookingResponse,
    previous_status: str,
    context: str = "Booking status",
) -> Optional[NotificationResult]:
    """
    Background-task entry point for status notifications.

    Never raises: failures are logged and the caller has already responded.
    """
    try:
        result = await notifier.send_status_changed(booking, previous_status)
    except Exception as e:
        logger.warning(f"{context} notification service error: {e}")
        return None
    log_notification_errors(context, result)
    return result
