import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class PropertyStatus(str, enum.Enum):
     AVAILABLE = "available"
     OCCUPIED = "occupied"
     INACTIVE = "inactive"


class Property(Base):
     """
     Property model - a rental listing owned by a landlord.

     The listing subsystem owns most of a property's data; the lease workflow
     only ever reads or writes ``status`` and ``updated_at``.
     """
     __tablename__ = "properties"

     id = Column(String(36), primary_key=True, default=new_id)
     landlord_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
     address = Column(String(500), nullable=True)
     status = Column(
          Enum(PropertyStatus, name="property_status", values_callable=lambda e: [m.value for m in e]),
          default=PropertyStatus.AVAILABLE,
          nullable=False,
          index=True,
     )

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)
     updated_at = Column(DateTime, onupdate=utcnow, nullable=True)

     # Relationships
     leases = relationship("Lease", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, address='{self.address}', status='{self.status.value}')>"
