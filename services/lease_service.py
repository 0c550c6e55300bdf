"""
Lease Service - lease records, signatures, activation and termination.

State machine:

     draft --sign--> pending_signatures --(both signed)--> active --terminate--> terminated

Activation and termination update the lease and the bound property inside one
transaction. Notifications are sent only after that transaction commits and
never affect it.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Lease, LeaseStatus, NotificationPriority, NotificationType, Property, PropertyStatus, User
from services.exceptions import (
     AuthorizationError,
     ConflictError,
     IkhayaError,
     NotFoundError,
     ValidationError,
)
from services.notification_service import NotificationSink, notify
from utils.dates import utcnow
from utils.money import to_money

logger = logging.getLogger(__name__)

ACTIVATION_TITLE = "Lease Agreement Activated"
ACTIVATION_MESSAGE = "Your lease agreement has been fully signed and is now active."


def _is_blank(value) -> bool:
     return value is None or not str(value).strip()


def _as_decimal(value) -> Optional[Decimal]:
     if value is None:
          return None
     try:
          return Decimal(str(value))
     except (InvalidOperation, ValueError):
          return None


def _as_date(value) -> Optional[date]:
     if isinstance(value, datetime):
          return value.date()
     return value


class LeaseService:
     """Service class for lease-related business logic."""

     # ------------------------------------------------------------------
     # Record manager
     # ------------------------------------------------------------------

     @staticmethod
     def validate_lease_data(
          property_id: str,
          landlord_id: str,
          tenant_id: str,
          rent_amount,
          deposit,
          start_date,
          end_date,
          terms: str,
     ) -> None:
          """
          Check lease creation input. Checks run in a fixed order and the first
          failure wins.

          Raises:
               ValidationError: describing the first failed check
          """
          if _is_blank(property_id):
               raise ValidationError("Property ID is required")
          if _is_blank(landlord_id):
               raise ValidationError("Landlord ID is required")
          if _is_blank(tenant_id):
               raise ValidationError("Tenant ID is required")

          rent = _as_decimal(rent_amount)
          if rent is None or not rent.is_finite() or rent <= 0:
               raise ValidationError("Rent amount must be greater than zero")

          dep = _as_decimal(deposit)
          if dep is None or not dep.is_finite() or dep < 0:
               raise ValidationError("Deposit must be a non-negative number")

          if start_date is None:
               raise ValidationError("Start date is required")
          if end_date is None:
               raise ValidationError("End date is required")
          if _as_date(end_date) <= _as_date(start_date):
               raise ValidationError("End date must be after start date")

          if _is_blank(terms):
               raise ValidationError("Lease terms are required")

     @staticmethod
     def create_lease(
          db: Session,
          landlord_id: str,
          tenant_id: str,
          property_id: str,
          rent_amount,
          deposit,
          start_date: date,
          end_date: date,
          terms: str,
          now: Optional[datetime] = None,
     ) -> Lease:
          """
          Create a new lease in ``draft`` with no signatures.

          The deposit is not capped here; the 5000 ceiling shown in the lease
          form is a UI guideline only.

          Raises:
               ValidationError: if any input check fails (nothing is written)
               NotFoundError: if the property, landlord or tenant does not exist
               AuthorizationError: if the property belongs to another landlord
          """
          LeaseService.validate_lease_data(
               property_id, landlord_id, tenant_id, rent_amount, deposit, start_date, end_date, terms,
          )

          prop = db.get(Property, property_id)
          if prop is None:
               raise NotFoundError("Property not found")
          if db.get(User, landlord_id) is None:
               raise NotFoundError("Landlord not found")
          if db.get(User, tenant_id) is None:
               raise NotFoundError("Tenant not found")
          if prop.landlord_id != landlord_id:
               raise AuthorizationError("Property does not belong to this landlord")

          now = now or utcnow()

          lease = Lease(
               property_id=property_id,
               landlord_id=landlord_id,
               tenant_id=tenant_id,
               rent_amount=to_money(rent_amount),
               deposit=to_money(deposit),
               start_date=_as_date(start_date),
               end_date=_as_date(end_date),
               terms=terms,
               status=LeaseStatus.DRAFT,
               landlord_signature=None,
               tenant_signature=None,
               created_at=now,
               updated_at=now,
          )
          db.add(lease)
          db.commit()
          logger.info("Lease %s created for property %s", lease.id, property_id)
          return lease

     @staticmethod
     def get_lease(db: Session, lease_id: str) -> Optional[Lease]:
          return db.get(Lease, lease_id)

     @staticmethod
     def get_leases_for_landlord(db: Session, landlord_id: str) -> list[Lease]:
          return (
               db.query(Lease)
               .filter(Lease.landlord_id == landlord_id)
               .order_by(Lease.created_at.desc())
               .all()
          )

     @staticmethod
     def get_leases_for_tenant(db: Session, tenant_id: str) -> list[Lease]:
          return (
               db.query(Lease)
               .filter(Lease.tenant_id == tenant_id)
               .order_by(Lease.created_at.desc())
               .all()
          )

     @staticmethod
     def get_active_leases_for_landlord(db: Session, landlord_id: str) -> list[Lease]:
          return (
               db.query(Lease)
               .filter(Lease.landlord_id == landlord_id, Lease.status == LeaseStatus.ACTIVE)
               .order_by(Lease.end_date.asc())
               .all()
          )

     @staticmethod
     def get_active_leases_for_tenant(db: Session, tenant_id: str) -> list[Lease]:
          return (
               db.query(Lease)
               .filter(Lease.tenant_id == tenant_id, Lease.status == LeaseStatus.ACTIVE)
               .order_by(Lease.end_date.asc())
               .all()
          )

     @staticmethod
     def get_leases_for_property(db: Session, property_id: str) -> list[Lease]:
          return (
               db.query(Lease)
               .filter(Lease.property_id == property_id)
               .order_by(Lease.start_date.desc())
               .all()
          )

     # ------------------------------------------------------------------
     # Signatures and activation
     # ------------------------------------------------------------------

     @staticmethod
     def sign_lease(
          db: Session,
          sink: NotificationSink,
          lease_id: str,
          signer_user_id: str,
          signature: str,
          now: Optional[datetime] = None,
     ) -> Lease:
          """
          Record one party's signature.

          The first signature moves a draft to ``pending_signatures``. When the
          second signature lands the lease is activated and its property marked
          occupied in the same transaction, then both parties are notified.
          Signing order does not matter.

          Raises:
               NotFoundError: lease does not exist
               ValidationError: empty signature, or this party already signed
               AuthorizationError: signer is neither the landlord nor the tenant
               ConflictError: a concurrent request recorded this party's signature first
          """
          now = now or utcnow()
          try:
               lease = (
                    db.query(Lease)
                    .filter(Lease.id == lease_id)
                    .with_for_update()
                    .first()
               )
               if lease is None:
                    raise NotFoundError("Lease not found")

               if _is_blank(signature):
                    raise ValidationError("Signature is required")

               party = lease.party_for(signer_user_id)
               if party is None:
                    raise AuthorizationError("User is not authorized to sign this lease")

               column = Lease.landlord_signature if party == "landlord" else Lease.tenant_signature
               already_signed = f"{party.capitalize()} has already signed this lease"
               if getattr(lease, column.key):
                    raise ValidationError(already_signed)

               values = {column: signature, Lease.updated_at: now}
               if lease.status == LeaseStatus.DRAFT:
                    values[Lease.status] = LeaseStatus.PENDING_SIGNATURES

               # Check-and-set: only writes if this party's signature is still empty
               updated = (
                    db.query(Lease)
                    .filter(Lease.id == lease.id, column.is_(None))
                    .update(values, synchronize_session=False)
               )
               if updated != 1:
                    raise ConflictError(already_signed)

               db.refresh(lease)
               activated = LeaseService._activate_if_fully_signed(db, lease, now)
               db.commit()
          except IkhayaError:
               db.rollback()
               raise

          logger.info("Lease %s signed by %s (%s)", lease.id, party, signer_user_id)
          if activated:
               LeaseService._send_activation_notifications(sink, lease)
          return lease

     @staticmethod
     def _activate_if_fully_signed(db: Session, lease: Lease, now: datetime) -> bool:
          """
          Activate a fully signed lease awaiting signatures and mark its property
          occupied. Does not commit.
          """
          if not (lease.is_fully_signed() and lease.status == LeaseStatus.PENDING_SIGNATURES):
               return False

          lease.status = LeaseStatus.ACTIVE
          lease.updated_at = now
          LeaseService._set_property_status(db, lease.property_id, PropertyStatus.OCCUPIED, now)
          logger.info("Lease %s activated and property %s marked as occupied", lease.id, lease.property_id)
          return True

     @staticmethod
     def _send_activation_notifications(sink: NotificationSink, lease: Lease) -> None:
          for user_id in (lease.landlord_id, lease.tenant_id):
               notify(
                    sink,
                    user_id,
                    NotificationType.LEASE_EXPIRING,
                    ACTIVATION_TITLE,
                    ACTIVATION_MESSAGE,
                    link=f"/leases/{lease.id}",
                    priority=NotificationPriority.HIGH,
               )
          logger.info("Activation notifications sent for lease %s", lease.id)

     @staticmethod
     def _set_property_status(db: Session, property_id: str, status: PropertyStatus, now: datetime) -> bool:
          prop = db.get(Property, property_id)
          if prop is None:
               logger.warning("Property %s not found, cannot mark as %s", property_id, status.value)
               return False
          prop.status = status
          prop.updated_at = now
          return True

     # ------------------------------------------------------------------
     # Termination
     # ------------------------------------------------------------------

     @staticmethod
     def terminate_lease(
          db: Session,
          lease_id: str,
          requesting_user_id: str,
          now: Optional[datetime] = None,
     ) -> Lease:
          """
          Terminate an active lease and release its property.

          Raises:
               NotFoundError: lease does not exist
               ValidationError: lease is not active
               AuthorizationError: requester is not the lease's landlord
          """
          now = now or utcnow()
          try:
               lease = (
                    db.query(Lease)
                    .filter(Lease.id == lease_id)
                    .with_for_update()
                    .first()
               )
               if lease is None:
                    raise NotFoundError("Lease not found")
               if lease.status != LeaseStatus.ACTIVE:
                    raise ValidationError("Only active leases can be terminated")
               if requesting_user_id != lease.landlord_id:
                    raise AuthorizationError("Only the landlord can terminate this lease")

               lease.status = LeaseStatus.TERMINATED
               lease.updated_at = now
               LeaseService._set_property_status(db, lease.property_id, PropertyStatus.AVAILABLE, now)
               db.commit()
          except IkhayaError:
               db.rollback()
               raise

          logger.info("Lease %s terminated, property %s marked as available", lease.id, lease.property_id)
          return lease

     # ------------------------------------------------------------------
     # Reconciliation
     # ------------------------------------------------------------------

     @staticmethod
     def reconcile_occupancy(
          db: Session,
          sink: NotificationSink,
          now: Optional[datetime] = None,
     ) -> dict:
          """
          Re-derive lease activation and property occupancy from the lease records.

          - leases still ``pending_signatures`` with both signatures are activated
          - properties bound to an active lease are marked ``occupied``
          - ``occupied`` properties with leases but none active are marked ``available``

          Returns:
               Counts of activated leases, occupied and released properties
          """
          now = now or utcnow()

          stuck = (
               db.query(Lease)
               .filter(
                    Lease.status == LeaseStatus.PENDING_SIGNATURES,
                    Lease.landlord_signature.isnot(None),
                    Lease.tenant_signature.isnot(None),
               )
               .all()
          )
          activated = [lease for lease in stuck if LeaseService._activate_if_fully_signed(db, lease, now)]
          db.flush()

          active_property_ids = {
               row[0]
               for row in db.query(Lease.property_id).filter(Lease.status == LeaseStatus.ACTIVE).distinct()
          }
          leased_property_ids = select(Lease.property_id).distinct()

          occupied = 0
          if active_property_ids:
               for prop in (
                    db.query(Property)
                    .filter(Property.id.in_(active_property_ids), Property.status != PropertyStatus.OCCUPIED)
                    .all()
               ):
                    prop.status = PropertyStatus.OCCUPIED
                    prop.updated_at = now
                    occupied += 1

          released = 0
          for prop in (
               db.query(Property)
               .filter(Property.status == PropertyStatus.OCCUPIED, Property.id.in_(leased_property_ids))
               .all()
          ):
               if prop.id not in active_property_ids:
                    prop.status = PropertyStatus.AVAILABLE
                    prop.updated_at = now
                    released += 1

          db.commit()

          for lease in activated:
               LeaseService._send_activation_notifications(sink, lease)

          if activated or occupied or released:
               logger.warning(
                    "Occupancy reconciliation repaired drift: %d leases activated, %d properties occupied, %d released",
                    len(activated), occupied, released,
               )
          return {
               "activated": len(activated),
               "occupied": occupied,
               "released": released,
          }
