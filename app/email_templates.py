"""
MJML Email Templates
Booking confirmation and status update emails, compiled to HTML in email_service
"""

from html import escape
from typing import Optional

from .domain.bookings.schemas import BookingResponse
from .domain.bookings.status import DEFAULT_STATUS
from .notification_templates import (
    booking_summary_rows,
    status_message_line,
    status_update_rows,
)

THEME = {
    "primary": "#2563eb",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}

# Rows whose value is a link rendered as an anchor instead of raw text
LINK_LABELS = {
    "Live Location": "View Map",
    "Pickup Map": "Open Pickup Map",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{escape(cta_url)}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {escape(cta_label)}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{escape(title)}</mj-title>
        <mj-preview>{escape(preview_text)}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.5" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 40px 40px">
          <mj-column>
            <mj-text font-size="22px" font-weight="600" color="{THEME['text_primary']}" padding="0 0 16px 0">
              {escape(title)}
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="0 0 24px 0" />

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}
      </mj-body>
    </mjml>
    """


def _detail_value(label: str, value: str) -> str:
    if label in LINK_LABELS:
        return (
            f'<a href="{escape(value)}" target="_blank" rel="noreferrer">'
            f"{LINK_LABELS[label]}</a>"
        )
    return escape(value)


def details_table(rows: list[tuple[str, str]]) -> str:
    """Label/value rows as an mj-table"""
    body = "".join(
        f"<tr><td style=\"padding:6px;border:1px solid {THEME['border']};\"><strong>{escape(label)}</strong></td>"
        f"<td style=\"padding:6px;border:1px solid {THEME['border']};\">{_detail_value(label, value)}</td></tr>"
        for label, value in rows
    )
    return f"<mj-table>{body}</mj-table>"


def booking_created_template(booking: BookingResponse, for_admin: bool = False) -> str:
    """Booking confirmation for the customer, or new-booking alert for the admin"""
    if for_admin:
        intro = "A new repair booking has been received."
        closing = ""
    else:
        intro = "Your repair booking has been created successfully."
        closing = '<mj-text padding="24px 0 0 0">Thank you for booking with us.</mj-text>'

    content = f"""
    <mj-text>Hello,</mj-text>
    <mj-text padding="0 0 16px 0">{intro}</mj-text>
    {details_table(booking_summary_rows(booking))}
    {closing}
    """

    return get_base_template(
        title="Booking Confirmed" if not for_admin else "New Repair Booking",
        preview_text=f"Booking ID {booking.trackingId}",
        content_sections=content,
        cta_url=booking.pickupMapUrl or None,
        cta_label="Open Pickup Map" if booking.pickupMapUrl else None,
    )


def booking_status_template(booking: BookingResponse, previous_status: str = "") -> str:
    """Status update email sent to the customer"""
    current_status = booking.status or DEFAULT_STATUS
    content = f"""
    <mj-text padding="0 0 16px 0">{escape(status_message_line(current_status, booking))}</mj-text>
    {details_table(status_update_rows(booking, previous_status))}
    """

    return get_base_template(
        title=f"Repair Status: {current_status}",
        preview_text=status_message_line(current_status, booking),
        content_sections=content,
        cta_url=booking.mapUrl or None,
        cta_label="View Live Location" if booking.mapUrl else None,
    )
