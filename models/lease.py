import enum
from sqlalchemy import Column, String, Numeric, Date, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class LeaseStatus(str, enum.Enum):
     """
     Lease lifecycle states.

     draft -> pending_signatures -> active -> terminated. ``expired`` is a
     declared state that no workflow operation currently enters.
     """
     DRAFT = "draft"
     PENDING_SIGNATURES = "pending_signatures"
     ACTIVE = "active"
     EXPIRED = "expired"
     TERMINATED = "terminated"


class Lease(Base):
     """
     Lease model - a tenancy agreement between one landlord and one tenant
     for one property.
     """
     __tablename__ = "leases"

     id = Column(String(36), primary_key=True, default=new_id)
     property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
     landlord_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
     tenant_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

     # Pricing
     rent_amount = Column(Numeric(12, 2), nullable=False)
     deposit = Column(Numeric(12, 2), nullable=False)

     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False, index=True)

     # Terms
     terms = Column(Text, nullable=False)

     # Signatures (set once, never overwritten)
     landlord_signature = Column(String(255), nullable=True)
     tenant_signature = Column(String(255), nullable=True)

     status = Column(
          Enum(LeaseStatus, name="lease_status", values_callable=lambda e: [m.value for m in e]),
          default=LeaseStatus.DRAFT,
          nullable=False,
          index=True,
     )

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, onupdate=utcnow, nullable=True)

     # Relationships
     property = relationship("Property", back_populates="leases")
     landlord = relationship("User", foreign_keys=[landlord_id])
     tenant = relationship("User", foreign_keys=[tenant_id])

     def __repr__(self):
          return f"<Lease(id={self.id}, status='{self.status.value}', property_id={self.property_id})>"

     def is_fully_signed(self) -> bool:
          """Both parties have signed."""
          return bool(self.landlord_signature) and bool(self.tenant_signature)

     def party_for(self, user_id: str) -> str | None:
          """Return "landlord" or "tenant" for a user bound to this lease, else None."""
          if user_id == self.landlord_id:
               return "landlord"
          if user_id == self.tenant_id:
               return "tenant"
          return None
