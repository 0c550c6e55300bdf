"""
Pydantic schemas for payment API.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models import PaymentMethod


class PaymentCreate(BaseModel):
     """Request body for POST /api/payments."""

     invoice_id: str = Field(..., description="Invoice the payment is applied to")
     amount: Decimal = Field(..., description="Amount paid (may be partial)")
     payment_method: str = Field(..., description="bank_transfer, card or cash")
     reference: str = Field(..., max_length=255, description="Bank or provider reference")
     payment_date: Optional[datetime] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "invoice_id": "9c1d2e3f-4a5b-4c6d-8e7f-0a1b2c3d4e5f",
                    "amount": 1300.00,
                    "payment_method": "bank_transfer",
                    "reference": "EFT-20250305-001",
                    "payment_date": "2025-03-05T12:00:00",
               }
          }
     )


class PaymentResponse(BaseModel):
     """Recorded payment."""

     id: str
     invoice_id: str
     landlord_id: str
     amount: Decimal
     payment_method: PaymentMethod
     reference: str
     payment_date: datetime
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
