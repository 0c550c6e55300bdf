# workers/jobs.py
"""
Periodic jobs.

Each job opens its own session, runs one service operation and reports a
result dict. Errors are logged and returned, never raised, so a failing run
does not take the scheduler down.
"""
import logging
from datetime import datetime
from typing import Callable, ContextManager, Optional

from sqlalchemy.orm import Session

from database import get_session_context
from services.expiry_service import check_expiring_leases
from services.invoice_service import InvoiceService
from services.lease_service import LeaseService
from services.notification_service import DatabaseNotificationSink, delete_old_notifications
from workers.registry import run_cron

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def _failure(job: str, error: Exception) -> dict:
     logger.error("%s failed: %s", job, error)
     return {"success": False, "error": str(error)}


@run_cron("0 9 * * *")
def check_expiring_leases_job(
     session_factory: SessionFactory = get_session_context,
     now: Optional[datetime] = None,
) -> dict:
     logger.info("Starting expiring leases check...")
     try:
          with session_factory() as db:
               count = check_expiring_leases(db, DatabaseNotificationSink(db), now=now)
     except Exception as e:
          logger.exception("Error checking expiring leases")
          return _failure("check_expiring_leases", e)

     if count == 0:
          return {"success": True, "message": "No expiring leases found", "count": 0}
     logger.info("Sent expiration reminders for %d leases", count)
     return {
          "success": True,
          "message": f"Sent expiration reminders for {count} leases",
          "count": count,
     }


@run_cron("0 2 * * *")
def delete_old_notifications_job(
     session_factory: SessionFactory = get_session_context,
     now: Optional[datetime] = None,
) -> dict:
     logger.info("Starting old notifications cleanup...")
     try:
          with session_factory() as db:
               count = delete_old_notifications(db, now=now)
     except Exception as e:
          logger.exception("Error deleting old notifications")
          return _failure("delete_old_notifications", e)

     if count == 0:
          return {"success": True, "message": "No old notifications to delete", "count": 0}
     logger.info("Successfully deleted %d old notifications", count)
     return {
          "success": True,
          "message": f"Successfully deleted {count} old notifications",
          "count": count,
     }


@run_cron("0 9 1 * *")
def generate_monthly_invoices_job(
     session_factory: SessionFactory = get_session_context,
     now: Optional[datetime] = None,
) -> dict:
     logger.info("Starting monthly invoice generation...")
     try:
          with session_factory() as db:
               invoices = InvoiceService.generate_monthly_invoices(db, DatabaseNotificationSink(db), now=now)
               invoice_ids = [invoice.id for invoice in invoices]
     except Exception as e:
          logger.exception("Error generating monthly invoices")
          return _failure("generate_monthly_invoices", e)

     if not invoice_ids:
          return {"success": True, "message": "No invoices generated", "count": 0, "invoice_ids": []}
     return {
          "success": True,
          "message": f"Generated {len(invoice_ids)} invoices",
          "count": len(invoice_ids),
          "invoice_ids": invoice_ids,
     }


@run_cron("0 10 * * *")
def send_overdue_payment_reminders_job(
     session_factory: SessionFactory = get_session_context,
     now: Optional[datetime] = None,
) -> dict:
     logger.info("Starting overdue payment reminders check...")
     try:
          with session_factory() as db:
               invoices = InvoiceService.send_overdue_payment_reminders(db, DatabaseNotificationSink(db), now=now)
               invoice_ids = [invoice.id for invoice in invoices]
     except Exception as e:
          logger.exception("Error sending overdue payment reminders")
          return _failure("send_overdue_payment_reminders", e)

     if not invoice_ids:
          return {"success": True, "message": "No overdue invoices found", "count": 0, "invoice_ids": []}
     return {
          "success": True,
          "message": f"Sent overdue payment reminders for {len(invoice_ids)} invoices",
          "count": len(invoice_ids),
          "invoice_ids": invoice_ids,
     }


@run_cron("0 3 * * *")
def reconcile_occupancy_job(
     session_factory: SessionFactory = get_session_context,
     now: Optional[datetime] = None,
) -> dict:
     logger.info("Starting occupancy reconciliation...")
     try:
          with session_factory() as db:
               counts = LeaseService.reconcile_occupancy(db, DatabaseNotificationSink(db), now=now)
     except Exception as e:
          logger.exception("Error reconciling occupancy")
          return _failure("reconcile_occupancy", e)

     total = sum(counts.values())
     return {
          "success": True,
          "message": "Occupancy reconciled" if total else "Occupancy already consistent",
          "count": total,
          **counts,
     }
