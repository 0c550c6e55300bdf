# services/invoice_service.py
"""
Invoice Service - Business logic layer for commission invoices.

Once a month every landlord with active leases is billed a commission on each
lease. Invoices are keyed by (landlord, billing period) so a second run for
the same month creates nothing.
"""
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import COMMISSION_RATE, INVOICE_GRACE_DAYS, OVERDUE_THRESHOLD_DAYS
from models import (
     Invoice,
     InvoiceItem,
     InvoiceStatus,
     Lease,
     LeaseStatus,
     NotificationPriority,
     NotificationType,
     Payment,
)
from services.email_templates import commission_invoice_email, overdue_invoice_email
from services.exceptions import NotFoundError
from services.notification_service import NotificationSink, email_user, get_user_name, notify
from utils.dates import billing_period, days_between, utcnow
from utils.money import format_money, to_money

logger = logging.getLogger(__name__)


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def commission_for(rent_amount) -> Decimal:
          """Commission owed on one lease for one month, rounded to cents."""
          return to_money(Decimal(str(rent_amount)) * COMMISSION_RATE)

     @staticmethod
     def build_invoice(
          landlord_id: str,
          leases: list[Lease],
          period: str,
          now: datetime
     ) -> Invoice:
          """
          Build (but do not persist) a landlord's invoice for a billing period.

          Args:
               landlord_id: Landlord being billed
               leases: The landlord's active leases, in billing order
               period: Billing period key (YYYY-MM)
               now: Generation time; the due date is offset from it

          Returns:
               Transient Invoice with one item per lease
          """
          items = [
               InvoiceItem(
                    position=position,
                    lease_id=lease.id,
                    description=f"Commission for property {lease.property_id}",
                    amount=InvoiceService.commission_for(lease.rent_amount),
               )
               for position, lease in enumerate(leases)
          ]
          return Invoice(
               landlord_id=landlord_id,
               billing_period=period,
               amount=to_money(sum((item.amount for item in items), Decimal("0"))),
               due_date=now + timedelta(days=INVOICE_GRACE_DAYS),
               status=InvoiceStatus.PENDING,
               items=items,
               created_at=now,
          )

     @staticmethod
     def get_invoice_for_period(db: Session, landlord_id: str, period: str) -> Optional[Invoice]:
          return db.query(Invoice).filter(
               Invoice.landlord_id == landlord_id,
               Invoice.billing_period == period
          ).first()

     @staticmethod
     def generate_monthly_invoices(
          db: Session,
          sink: NotificationSink,
          now: Optional[datetime] = None,
          period: Optional[str] = None
     ) -> list[Invoice]:
          """
          Generate one commission invoice per landlord with active leases.

          This is called by the monthly scheduled job. Landlords already
          invoiced for the period are skipped, and each landlord's invoice is
          committed on its own so one failure does not block the rest.

          Args:
               db: SQLAlchemy database session
               sink: Notification destination
               now: Generation time (defaults to the current UTC time)
               period: Billing period key (defaults to the month of ``now``)

          Returns:
               List of created Invoice objects
          """
          now = now or utcnow()
          period = period or billing_period(now)

          active_leases = (
               db.query(Lease)
               .filter(Lease.status == LeaseStatus.ACTIVE)
               .order_by(Lease.landlord_id, Lease.start_date, Lease.id)
               .all()
          )
          logger.info("Found %d active leases", len(active_leases))

          leases_by_landlord: "OrderedDict[str, list[Lease]]" = OrderedDict()
          for lease in active_leases:
               leases_by_landlord.setdefault(lease.landlord_id, []).append(lease)

          created_invoices = []

          for landlord_id, leases in leases_by_landlord.items():
               if InvoiceService.get_invoice_for_period(db, landlord_id, period):
                    logger.warning("Landlord %s already invoiced for %s, skipping", landlord_id, period)
                    continue

               invoice = InvoiceService.build_invoice(landlord_id, leases, period, now)
               try:
                    db.add(invoice)
                    db.commit()
               except IntegrityError:
                    db.rollback()
                    logger.warning("Invoice for landlord %s, period %s created concurrently, skipping", landlord_id, period)
                    continue
               except Exception:
                    db.rollback()
                    logger.exception("Failed to create invoice for landlord %s", landlord_id)
                    continue

               logger.info(
                    "Created invoice %s for landlord %s: %s for %d leases",
                    invoice.id, landlord_id, format_money(invoice.amount), len(leases)
               )
               created_invoices.append(invoice)
               InvoiceService._send_new_invoice_notifications(db, sink, invoice, len(leases))

          logger.info("Generated %d invoices for %s", len(created_invoices), period)
          return created_invoices

     @staticmethod
     def _send_new_invoice_notifications(
          db: Session,
          sink: NotificationSink,
          invoice: Invoice,
          lease_count: int
     ) -> None:
          notify(
               sink,
               invoice.landlord_id,
               NotificationType.PAYMENT_DUE,
               "New Commission Invoice",
               f"Your monthly commission invoice of {format_money(invoice.amount)} is now due",
               link=f"/invoices/{invoice.id}",
               priority=NotificationPriority.HIGH,
          )
          email_user(db, sink, invoice.landlord_id, *commission_invoice_email(
               get_user_name(db, invoice.landlord_id),
               invoice.amount,
               invoice.due_date,
               lease_count,
          ))

     @staticmethod
     def send_overdue_payment_reminders(
          db: Session,
          sink: NotificationSink,
          now: Optional[datetime] = None
     ) -> list[Invoice]:
          """
          Mark pending invoices past the overdue threshold as OVERDUE and
          remind their landlords.

          Invoices already paid or already overdue are never picked up again.

          Returns:
               List of invoices marked overdue in this run
          """
          now = now or utcnow()
          cutoff = now - timedelta(days=OVERDUE_THRESHOLD_DAYS)

          overdue_invoices = (
               db.query(Invoice)
               .filter(
                    Invoice.status == InvoiceStatus.PENDING,
                    Invoice.due_date <= cutoff
               )
               .order_by(Invoice.due_date.asc())
               .all()
          )
          logger.info("Found %d overdue invoices", len(overdue_invoices))
          if not overdue_invoices:
               return []

          for invoice in overdue_invoices:
               invoice.mark_as_overdue()
          db.commit()

          for invoice in overdue_invoices:
               days_overdue = days_between(invoice.due_date, now)
               logger.info(
                    "Invoice %s for landlord %s is %d days overdue",
                    invoice.id, invoice.landlord_id, days_overdue
               )
               notify(
                    sink,
                    invoice.landlord_id,
                    NotificationType.PAYMENT_DUE,
                    "Overdue Payment Reminder",
                    f"Your commission payment of {format_money(invoice.amount)} is {days_overdue} days overdue",
                    link=f"/invoices/{invoice.id}",
                    priority=NotificationPriority.HIGH,
               )
               email_user(db, sink, invoice.landlord_id, *overdue_invoice_email(
                    get_user_name(db, invoice.landlord_id),
                    invoice.amount,
                    invoice.due_date,
                    days_overdue,
               ))

          return overdue_invoices

     # ------------------------------------------------------------------
     # Queries
     # ------------------------------------------------------------------

     @staticmethod
     def get_invoice(db: Session, invoice_id: str) -> Invoice:
          """
          Raises:
               NotFoundError: If the invoice doesn't exist
          """
          invoice = db.get(Invoice, invoice_id)
          if invoice is None:
               raise NotFoundError("Invoice not found")
          return invoice

     @staticmethod
     def list_invoices_for_landlord(
          db: Session,
          landlord_id: str,
          status: Optional[InvoiceStatus] = None,
          skip: int = 0,
          limit: int = 100
     ) -> list[Invoice]:
          query = db.query(Invoice).filter(Invoice.landlord_id == landlord_id)
          if status:
               query = query.filter(Invoice.status == status)
          return query.order_by(Invoice.created_at.desc(), Invoice.due_date.desc()).offset(skip).limit(limit).all()

     @staticmethod
     def count_invoices_for_landlord(
          db: Session,
          landlord_id: str,
          status: Optional[InvoiceStatus] = None
     ) -> int:
          query = db.query(Invoice).filter(Invoice.landlord_id == landlord_id)
          if status:
               query = query.filter(Invoice.status == status)
          return query.count()

     @staticmethod
     def total_paid(db: Session, invoice_id: str) -> Decimal:
          """Sum of every payment recorded against an invoice."""
          total = db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
               Payment.invoice_id == invoice_id
          ).scalar()
          return to_money(total)

     @staticmethod
     def get_outstanding_balance(db: Session, landlord_id: str) -> Decimal:
          """
          Amount still owed by a landlord across pending and overdue invoices,
          net of partial payments.
          """
          unpaid = db.query(Invoice).filter(
               Invoice.landlord_id == landlord_id,
               Invoice.status.in_([InvoiceStatus.PENDING, InvoiceStatus.OVERDUE])
          ).all()

          outstanding = Decimal("0")
          for invoice in unpaid:
               remaining = to_money(invoice.amount) - InvoiceService.total_paid(db, invoice.id)
               if remaining > 0:
                    outstanding += remaining
          return to_money(outstanding)

     @staticmethod
     def get_invoice_summary(db: Session, landlord_id: str) -> dict:
          """
          Calculate invoice totals for a landlord.

          Args:
               db: SQLAlchemy database session
               landlord_id: ID of the landlord

          Returns:
               Dictionary with counts and amounts per status
          """
          invoices = db.query(Invoice).filter(Invoice.landlord_id == landlord_id).all()

          pending = [inv for inv in invoices if inv.status == InvoiceStatus.PENDING]
          overdue = [inv for inv in invoices if inv.status == InvoiceStatus.OVERDUE]
          paid = [inv for inv in invoices if inv.status == InvoiceStatus.PAID]

          def total(group):
               return to_money(sum((inv.amount for inv in group), Decimal("0")))

          return {
               "landlord_id": landlord_id,
               "outstanding_balance": InvoiceService.get_outstanding_balance(db, landlord_id),
               "pending_amount": total(pending),
               "overdue_amount": total(overdue),
               "paid_amount": total(paid),
               "total_invoices": len(invoices),
               "pending_count": len(pending),
               "overdue_count": len(overdue),
               "paid_count": len(paid)
          }
