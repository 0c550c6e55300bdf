# utils/email.py
import logging
import requests

from config import APP_NAME, BREVO_API_KEY, EMAIL_SENDER

logger = logging.getLogger(__name__)

BREVO_URL = "https://api.brevo.com/v3/smtp/email"


def send_email(to_email: str, subject: str, text: str, html: str | None = None) -> bool:
     """
     Send a transactional email through Brevo.

     Returns False without sending when no API key is configured; the message
     is logged instead so local and test environments stay silent.
     """
     if not to_email:
          raise ValueError("Recipient email is required")

     if not BREVO_API_KEY:
          logger.info("Email to be sent (no BREVO_API_KEY): to=%s subject=%s", to_email, subject)
          return False

     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": BREVO_API_KEY,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": APP_NAME, "email": EMAIL_SENDER},
               "to": [{"email": to_email}],
               "subject": subject,
               "textContent": text,
               "htmlContent": html or text,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise Exception(f"Brevo error: {response.text}")
     return True
