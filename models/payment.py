"""
Payment model - a single payment applied against one invoice.

Payments are append-only: they are created once and read back in aggregate
when an invoice's paid-to-date total is recomputed.
"""
import enum
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class PaymentMethod(str, enum.Enum):
     BANK_TRANSFER = "bank_transfer"
     CARD = "card"
     CASH = "cash"


class Payment(Base):
     __tablename__ = "payments"

     id = Column(String(36), primary_key=True, default=new_id)
     invoice_id = Column(
          String(36),
          ForeignKey("invoices.id", ondelete="RESTRICT"),  # Prevent delete if payments exist
          nullable=False,
          index=True
     )
     landlord_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
     amount = Column(Numeric(12, 2), nullable=False)
     payment_method = Column(
          Enum(PaymentMethod, name="payment_method", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
     )
     reference = Column(String(255), nullable=False)
     payment_date = Column(DateTime, nullable=False)
     created_at = Column(DateTime, default=utcnow, nullable=False)

     # Relationships
     invoice = relationship("Invoice", back_populates="payments")

     def __repr__(self):
          return f"<Payment(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
