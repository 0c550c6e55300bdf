"""
Plain-text and HTML bodies for workflow emails.

Each builder returns (subject, text, html).
"""
from datetime import date, datetime

from config import APP_NAME
from utils.dates import format_date
from utils.money import format_money


def _wrap(greeting_name: str, heading: str, intro: str, details: list[tuple[str, str]], closing: str):
     text_details = "\n".join(f"- {label}: {value}" for label, value in details)
     html_details = "".join(f"<li><strong>{label}:</strong> {value}</li>" for label, value in details)
     text = (
          f"Hello {greeting_name},\n\n"
          f"{intro}\n\n"
          f"Details:\n{text_details}\n\n"
          f"{closing}\n\n"
          f"Best regards,\nThe {APP_NAME} Team"
     )
     html = (
          f"<h2>{heading}</h2>"
          f"<p>Hello {greeting_name},</p>"
          f"<p>{intro}</p>"
          f"<h3>Details:</h3><ul>{html_details}</ul>"
          f"<p>{closing}</p>"
          f"<p>Best regards,<br>The {APP_NAME} Team</p>"
     )
     return f"{heading} - {APP_NAME}", text, html


def lease_expiring_email(
     recipient_name: str,
     counterpart_label: str,
     counterpart_name: str,
     address: str,
     end_date: date,
     days_until_expiration: int,
     rent_amount,
     is_landlord: bool,
):
     if is_landlord:
          closing = "Please contact your tenant to discuss lease renewal or make arrangements for the property handover."
     else:
          closing = "Please contact your landlord to discuss lease renewal or make arrangements for moving out."
     return _wrap(
          recipient_name,
          "Lease Expiring Soon",
          f"This is a reminder that your lease for the property at {address} "
          f"will expire in {days_until_expiration} days.",
          [
               ("Property", address),
               (counterpart_label, counterpart_name),
               ("End Date", format_date(end_date)),
               ("Monthly Rent", format_money(rent_amount)),
          ],
          closing,
     )


def commission_invoice_email(recipient_name: str, amount, due_date: datetime, property_count: int):
     return _wrap(
          recipient_name,
          "Monthly Commission Invoice",
          "Your monthly commission invoice has been generated.",
          [
               ("Amount", format_money(amount)),
               ("Due Date", format_date(due_date)),
               ("Number of Properties", str(property_count)),
          ],
          "Please log in to your dashboard to view the invoice details and make payment.",
     )


def overdue_invoice_email(recipient_name: str, amount, due_date: datetime, days_overdue: int):
     return _wrap(
          recipient_name,
          "Overdue Payment Reminder",
          "This is a reminder that your commission payment is overdue.",
          [
               ("Amount", format_money(amount)),
               ("Due Date", format_date(due_date)),
               ("Days Overdue", str(days_overdue)),
          ],
          "Please make payment as soon as possible to avoid any service interruptions.",
     )


def payment_received_email(
     recipient_name: str,
     amount,
     payment_method: str,
     reference: str,
     payment_date: datetime,
     remaining_balance,
):
     if remaining_balance <= 0:
          balance_line = "Your invoice has been fully paid. Thank you!"
     else:
          balance_line = f"Remaining balance: {format_money(remaining_balance)}"
     return _wrap(
          recipient_name,
          "Payment Received",
          "We have received your payment.",
          [
               ("Amount", format_money(amount)),
               ("Payment Method", payment_method),
               ("Reference", reference),
               ("Date", format_date(payment_date)),
          ],
          balance_line,
     )
