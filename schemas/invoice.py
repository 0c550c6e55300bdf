"""
Pydantic schemas for Invoice API responses.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from models import InvoiceStatus


class InvoiceItemResponse(BaseModel):
     """One commission line item."""
     lease_id: str
     description: str
     amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: str
     landlord_id: str
     billing_period: str
     amount: Decimal
     due_date: datetime
     status: InvoiceStatus
     lease_ids: List[str] = []
     items: List[InvoiceItemResponse] = []
     created_at: Optional[datetime] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": "9c1d2e3f-4a5b-4c6d-8e7f-0a1b2c3d4e5f",
                    "landlord_id": "b0d5d0f4-3f2e-4f0e-8d7b-7a1c6c1f2a11",
                    "billing_period": "2025-03",
                    "amount": 1300.00,
                    "due_date": "2025-03-16T09:00:00",
                    "status": "pending",
                    "lease_ids": ["lease-a", "lease-b"],
                    "items": [
                         {"lease_id": "lease-a", "description": "Commission for property prop-1", "amount": 500.00},
                         {"lease_id": "lease-b", "description": "Commission for property prop-2", "amount": 800.00}
                    ],
                    "created_at": "2025-03-01T09:00:00"
               }
          }
     )


class InvoiceListResponse(BaseModel):
     """Schema for paginated invoice list response."""
     invoices: List[InvoiceResponse]
     total: int
     page: int = 1
     page_size: int = 50

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "invoices": [],
                    "total": 0,
                    "page": 1,
                    "page_size": 50
               }
          }
     )


class InvoiceSummaryResponse(BaseModel):
     """Invoice totals for one landlord."""
     landlord_id: str
     outstanding_balance: Decimal
     pending_amount: Decimal
     overdue_amount: Decimal
     paid_amount: Decimal
     total_invoices: int
     pending_count: int
     overdue_count: int
     paid_count: int


class InvoiceJobResponse(BaseModel):
     """Result of a manually triggered invoicing run."""
     success: bool
     message: str
     count: int
     invoice_ids: List[str] = []
