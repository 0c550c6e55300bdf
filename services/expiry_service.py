"""
Expiry Service - daily reminders for leases nearing their end date.

Only notifies. Lease status is left untouched: nothing moves a lease to
``expired``, so an active lease stays active past its end date until the
landlord terminates it.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from config import LEASE_EXPIRY_WINDOW_DAYS
from models import Lease, LeaseStatus, NotificationPriority, NotificationType, Property
from services.email_templates import lease_expiring_email
from services.notification_service import NotificationSink, email_user, get_user_name, notify
from utils.dates import days_between, start_of_day, utcnow

logger = logging.getLogger(__name__)


def find_expiring_leases(db: Session, now: datetime) -> list[Lease]:
     """Active leases whose end date falls between today and the end of the window (inclusive)."""
     today = now.date()
     window_end = today + timedelta(days=LEASE_EXPIRY_WINDOW_DAYS)
     return (
          db.query(Lease)
          .filter(
               Lease.status == LeaseStatus.ACTIVE,
               Lease.end_date >= today,
               Lease.end_date <= window_end,
          )
          .order_by(Lease.end_date.asc())
          .all()
     )


def check_expiring_leases(
     db: Session,
     sink: NotificationSink,
     now: Optional[datetime] = None,
) -> int:
     """
     Send a "lease_expiring" notification (and email) to the landlord and the
     tenant of every active lease ending within the window.

     Returns:
          Number of leases processed
     """
     now = now or utcnow()
     leases = find_expiring_leases(db, now)
     logger.info("Found %d expiring leases", len(leases))

     for lease in leases:
          days_left = max(days_between(now, start_of_day(lease.end_date)), 0)
          prop = db.get(Property, lease.property_id)
          address = prop.address if prop is not None and prop.address else "a property"
          message = f"Your lease for {address} expires in {days_left} days"
          logger.info("Processing lease %s expiring in %d days", lease.id, days_left)

          for user_id in (lease.landlord_id, lease.tenant_id):
               notify(
                    sink,
                    user_id,
                    NotificationType.LEASE_EXPIRING,
                    "Lease Expiring Soon",
                    message,
                    link=f"/leases/{lease.id}",
                    priority=NotificationPriority.HIGH,
               )

          landlord_name = get_user_name(db, lease.landlord_id)
          tenant_name = get_user_name(db, lease.tenant_id)
          email_user(db, sink, lease.landlord_id, *lease_expiring_email(
               landlord_name, "Tenant", tenant_name, address, lease.end_date,
               days_left, lease.rent_amount, is_landlord=True,
          ))
          email_user(db, sink, lease.tenant_id, *lease_expiring_email(
               tenant_name, "Landlord", landlord_name, address, lease.end_date,
               days_left, lease.rent_amount, is_landlord=False,
          ))

     return len(leases)
