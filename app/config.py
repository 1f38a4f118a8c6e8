import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./repair_bookings.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS - comma separated list of origins
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Gmail SMTP Configuration (primary email channel)
GMAIL_USER = os.getenv("GMAIL_USER", "")
GMAIL_APP_PASSWORD = os.getenv("GMAIL_APP_PASSWORD", "")
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))

# Falls back to GMAIL_USER when unset
ADMIN_NOTIFICATION_EMAIL = os.getenv("ADMIN_NOTIFICATION_EMAIL", "")

# Resend Email Configuration (fallback when SMTP is not configured)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Repair Bookings <noreply@example.com>")

# Twilio WhatsApp Configuration
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_WHATSAPP_FROM = os.getenv("TWILIO_WHATSAPP_FROM", "")
ADMIN_WHATSAPP_TO = os.getenv("ADMIN_WHATSAPP_TO", "")

# Prefixed to customer phone numbers entered without a country code
DEFAULT_COUNTRY_CODE = os.getenv("DEFAULT_COUNTRY_CODE", "+91")

# Upper bound on how long booking creation waits for the confirmation notification
NOTIFICATION_TIMEOUT_SECONDS = float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "15"))

# Attempts at generating a unique tracking ID before giving up with a 409
TRACKING_ID_MAX_ATTEMPTS = int(os.getenv("TRACKING_ID_MAX_ATTEMPTS", "5"))
