import enum
from datetime import datetime
from sqlalchemy import (
     Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class InvoiceStatus(str, enum.Enum):
     """Enumeration for invoice payment status."""
     PENDING = "pending"
     PAID = "paid"
     OVERDUE = "overdue"


class Invoice(Base):
     """
     Invoice model - a landlord's monthly commission bill.

     One invoice is generated per landlord per billing period and carries one
     line item per lease that was active at generation time. Status moves
     pending -> paid or pending -> overdue -> paid; it never returns to pending.
     """
     __tablename__ = "invoices"
     __table_args__ = (
          UniqueConstraint("landlord_id", "billing_period", name="uq_invoices_landlord_period"),
     )

     id = Column(String(36), primary_key=True, default=new_id)
     landlord_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
     billing_period = Column(String(7), nullable=False, index=True)  # YYYY-MM

     # Invoice details
     amount = Column(Numeric(12, 2), nullable=False)
     due_date = Column(DateTime, nullable=False, index=True)
     status = Column(
          Enum(InvoiceStatus, name="invoice_status", create_constraint=True,
               values_callable=lambda e: [m.value for m in e]),
          default=InvoiceStatus.PENDING,
          nullable=False,
          index=True
     )

     # Timestamps
     created_at = Column(DateTime, default=utcnow, nullable=False)

     # Relationships
     items = relationship(
          "InvoiceItem",
          back_populates="invoice",
          order_by="InvoiceItem.position",
          cascade="all, delete-orphan",
     )
     payments = relationship("Payment", back_populates="invoice", order_by="Payment.created_at")

     def __repr__(self):
          return f"<Invoice(id={self.id}, amount={self.amount}, status='{self.status.value}', due_date={self.due_date})>"

     @property
     def lease_ids(self) -> list[str]:
          """Lease ids billed by this invoice, in line item order."""
          return [item.lease_id for item in self.items]

     def is_overdue(self, now: datetime, threshold_days: int) -> bool:
          """Check if a pending invoice is at least ``threshold_days`` past its due date."""
          if self.status != InvoiceStatus.PENDING:
               return False
          return (now - self.due_date).total_seconds() >= threshold_days * 86400

     def mark_as_paid(self) -> None:
          """Mark the invoice as paid."""
          self.status = InvoiceStatus.PAID

     def mark_as_overdue(self) -> None:
          """Mark the invoice as overdue."""
          self.status = InvoiceStatus.OVERDUE


class InvoiceItem(Base):
     """Commission line item: one per lease billed on an invoice."""
     __tablename__ = "invoice_items"

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(
          String(36),
          ForeignKey("invoices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     position = Column(Integer, nullable=False, default=0)
     lease_id = Column(String(36), ForeignKey("leases.id"), nullable=False, index=True)
     description = Column(String(500), nullable=False)
     amount = Column(Numeric(12, 2), nullable=False)

     invoice = relationship("Invoice", back_populates="items")

     def __repr__(self):
          return f"<InvoiceItem(invoice_id={self.invoice_id}, lease_id={self.lease_id}, amount={self.amount})>"
