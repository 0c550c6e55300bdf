# services/payment_service.py
"""
Payment Service - recording payments and reconciling invoice status.

A payment is persisted first. Reconciliation then re-sums every payment on
the invoice and flips it to PAID once the total covers the amount. An invoice
never moves back out of PAID.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import InvoiceStatus, Invoice, NotificationPriority, NotificationType, Payment, PaymentMethod
from services.email_templates import payment_received_email
from services.exceptions import NotFoundError, ValidationError
from services.notification_service import NotificationSink, email_user, get_user_name, notify
from utils.dates import utcnow
from utils.money import format_money, to_money

logger = logging.getLogger(__name__)


def _validate_payment(amount, payment_method, reference, payment_date) -> tuple[Decimal, PaymentMethod]:
     try:
          value = Decimal(str(amount)) if amount is not None else None
     except ArithmeticError:
          value = None
     if value is None or not value.is_finite() or value <= 0:
          raise ValidationError("Payment amount must be greater than zero")
     if not payment_method:
          raise ValidationError("Payment method is required")
     try:
          method = PaymentMethod(payment_method)
     except ValueError:
          raise ValidationError(f"Unknown payment method: {payment_method}")
     if reference is None or not str(reference).strip():
          raise ValidationError("Payment reference is required")
     if payment_date is None:
          raise ValidationError("Payment date is required")
     return to_money(value), method


def record_payment(
     db: Session,
     sink: NotificationSink,
     invoice_id: str,
     amount,
     payment_method,
     reference: str,
     payment_date: datetime,
     now: Optional[datetime] = None,
) -> Payment:
     """
     Record a payment against an invoice and reconcile the invoice.

     Raises:
          ValidationError: invalid payment fields, or amount above the invoice amount
          NotFoundError: the invoice does not exist
     """
     value, method = _validate_payment(amount, payment_method, reference, payment_date)

     invoice = db.get(Invoice, invoice_id) if invoice_id else None
     if invoice is None:
          raise NotFoundError("Invoice not found")
     if value > to_money(invoice.amount):
          raise ValidationError("Payment amount cannot exceed invoice amount")

     payment = Payment(
          invoice_id=invoice.id,
          landlord_id=invoice.landlord_id,
          amount=value,
          payment_method=method,
          reference=str(reference).strip(),
          payment_date=payment_date,
          created_at=now or utcnow(),
     )
     try:
          db.add(payment)
          db.commit()
     except Exception:
          db.rollback()
          raise
     logger.info("Recorded payment %s of %s for invoice %s", payment.id, format_money(value), invoice.id)

     on_payment_created(db, sink, payment)
     return payment


def on_payment_created(db: Session, sink: NotificationSink, payment: Payment) -> dict:
     """
     Reconcile an invoice after one of its payments was persisted.

     Failures are logged and reported in the result; the payment itself
     stays recorded either way.
     """
     try:
          invoice = (
               db.query(Invoice)
               .filter(Invoice.id == payment.invoice_id)
               .with_for_update()
               .first()
          )
          if invoice is None:
               logger.error("Invoice not found for payment %s: %s", payment.id, payment.invoice_id)
               return {"success": False, "error": "Invoice not found"}

          amounts = [
               row[0] for row in db.query(Payment.amount).filter(Payment.invoice_id == invoice.id).all()
          ]
          total_paid = to_money(sum((Decimal(str(a)) for a in amounts), Decimal("0")))
          invoice_amount = to_money(invoice.amount)
          logger.info(
               "Total paid for invoice %s: %s / %s",
               invoice.id, format_money(total_paid), format_money(invoice_amount)
          )

          fully_paid = total_paid >= invoice_amount
          if fully_paid and invoice.status != InvoiceStatus.PAID:
               invoice.mark_as_paid()
               logger.info("Invoice %s marked as paid", invoice.id)
          db.commit()
     except Exception as e:
          db.rollback()
          logger.exception("Error reconciling payment %s", payment.id)
          return {"success": False, "error": str(e)}

     remaining = invoice_amount - total_paid
     if fully_paid:
          message = (
               f"Your payment of {format_money(payment.amount)} has been received and recorded. "
               "Your invoice has been fully paid."
          )
     else:
          message = (
               f"Your payment of {format_money(payment.amount)} has been received and recorded. "
               f"Remaining balance: {format_money(remaining)}"
          )

     notify(
          sink,
          payment.landlord_id,
          NotificationType.PAYMENT_RECEIVED,
          "Payment Received",
          message,
          link=f"/invoices/{invoice.id}",
          priority=NotificationPriority.MEDIUM,
     )
     email_user(db, sink, payment.landlord_id, *payment_received_email(
          get_user_name(db, payment.landlord_id),
          payment.amount,
          payment.payment_method.value.replace("_", " "),
          payment.reference,
          payment.payment_date,
          remaining,
     ))

     return {
          "success": True,
          "invoice_id": invoice.id,
          "total_paid": total_paid,
          "status": invoice.status.value,
     }


def get_payment_history(
     db: Session,
     landlord_id: str,
     invoice_id: Optional[str] = None,
     limit: int = 100,
) -> list[Payment]:
     """Payments made by a landlord, newest first."""
     query = db.query(Payment).filter(Payment.landlord_id == landlord_id)
     if invoice_id:
          query = query.filter(Payment.invoice_id == invoice_id)
     return query.order_by(Payment.payment_date.desc(), Payment.created_at.desc()).limit(limit).all()
