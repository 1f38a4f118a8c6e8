"""Tests for BookingNotifier channel dispatch and failure isolation."""

import asyncio
import json
from urllib.parse import parse_qs

import httpx
import pytest

from app.email_service import EmailSender
from app.services.notification_service import (
    BookingNotifier,
    NotificationResult,
    dispatch_status_notification,
    notify_booking_created,
)
from app.services.twilio_service import WhatsAppSender

from .test_notification_templates import make_booking


class TwilioRecorder:
    """httpx.MockTransport handler that records Twilio message posts."""

    def __init__(self, status_code=201, body=None):
        self.status_code = status_code
        self.body = body if body is not None else {"sid": "SM123"}
        self.messages = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode())
        self.messages.append({key: values[0] for key, values in form.items()})
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode())


def make_whatsapp_sender(recorder: TwilioRecorder) -> WhatsAppSender:
    return WhatsAppSender(
        account_sid="AC123",
        auth_token="secret",
        from_number="+14155238886",
        client=httpx.AsyncClient(transport=httpx.MockTransport(recorder)),
    )


@pytest.fixture
def email_sender(mocker) -> EmailSender:
    sender = EmailSender(smtp_user="shop@gmail.com", smtp_password="abcd efgh ijkl mnop")
    mocker.patch.object(
        sender, "send", new=mocker.AsyncMock(return_value={"success": True, "provider": "smtp"})
    )
    return sender


@pytest.fixture
def twilio() -> TwilioRecorder:
    return TwilioRecorder()


@pytest.fixture
def notifier(email_sender, twilio) -> BookingNotifier:
    return BookingNotifier(
        email_sender=email_sender,
        whatsapp_sender=make_whatsapp_sender(twilio),
        admin_email="Owner@Shop.com",
        admin_whatsapp="9000000001",
    )


@pytest.mark.asyncio
async def test_unconfigured_channels_report_errors():
    notifier = BookingNotifier(email_sender=EmailSender(), whatsapp_sender=WhatsAppSender())

    result = await notifier.send_created(make_booking())

    assert result.email.configured is False
    assert result.whatsapp.configured is False
    assert result.email.errors[0].startswith("Email not configured")
    assert result.whatsapp.errors[0].startswith("WhatsApp not configured")
    await notifier.aclose()


@pytest.mark.asyncio
async def test_created_goes_to_customer_and_admin(notifier, email_sender, twilio):
    result = await notifier.send_created(make_booking())

    assert result.email.customerSent and result.email.adminSent
    assert result.whatsapp.customerSent and result.whatsapp.adminSent
    assert result.errors() == []

    recipients = [call.kwargs["to"] for call in email_sender.send.await_args_list]
    assert recipients == ["asha@example.com", "owner@shop.com"]

    assert [m["To"] for m in twilio.messages] == [
        "whatsapp:+919876543210",
        "whatsapp:+919000000001",
    ]
    assert twilio.messages[0]["From"] == "whatsapp:+14155238886"
    assert twilio.messages[0]["Body"].startswith("Booking Confirmed")


@pytest.mark.asyncio
async def test_email_failure_does_not_block_whatsapp(notifier, email_sender, twilio):
    email_sender.send.side_effect = Exception("SMTP down")

    result = await notifier.send_created(make_booking())

    assert result.email.configured is True
    assert not result.email.customerSent
    assert "Customer email failed: SMTP down" in result.email.errors
    assert result.whatsapp.customerSent is True
    assert len(twilio.messages) == 2


@pytest.mark.asyncio
async def test_twilio_error_is_reported(email_sender):
    recorder = TwilioRecorder(status_code=400, body={"code": 21211, "message": "Invalid 'To'"})
    notifier = BookingNotifier(
        email_sender=email_sender, whatsapp_sender=make_whatsapp_sender(recorder)
    )

    result = await notifier.send_status_changed(make_booking(status="Completed"), "In Progress")

    assert result.whatsapp.customerSent is False
    assert result.whatsapp.errors == ["Status WhatsApp failed: [21211] Invalid 'To'"]
    assert result.email.customerSent is True


@pytest.mark.asyncio
async def test_status_change_goes_to_customer_only(notifier, email_sender, twilio):
    result = await notifier.send_status_changed(make_booking(status="Completed"), "In Progress")

    assert result.email.customerSent and not result.email.adminSent
    assert result.whatsapp.customerSent and not result.whatsapp.adminSent
    email_sender.send.assert_awaited_once()
    assert email_sender.send.await_args.kwargs["subject"].startswith("Final Confirmation")
    assert len(twilio.messages) == 1
    assert "Previous Status: In Progress" in twilio.messages[0]["Body"]


@pytest.mark.asyncio
async def test_notify_booking_created_times_out(mocker):
    async def slow_send(booking):
        await asyncio.sleep(1)
        return NotificationResult()

    slow_notifier = mocker.Mock()
    slow_notifier.send_created = slow_send

    result = await notify_booking_created(slow_notifier, make_booking(), timeout=0.01)

    assert result.email.errors == ["Notification service error: timed out after 0.01s"]


@pytest.mark.asyncio
async def test_dispatch_status_notification_never_raises(mocker):
    broken = mocker.Mock()
    broken.send_status_changed = mocker.AsyncMock(side_effect=RuntimeError("boom"))

    result = await dispatch_status_notification(broken, make_booking(), "Pending")

    assert result is None
    broken.send_status_changed.assert_awaited_once()
