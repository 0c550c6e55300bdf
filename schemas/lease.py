"""
Pydantic schemas for Lease API request/response validation.

Business rules (positive rent, end after start, ...) are checked by the
lease service so callers get its exact error messages.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models import LeaseStatus


class LeaseCreate(BaseModel):
     """Schema for creating a new lease (always starts as a draft)."""
     property_id: str = Field(..., description="Property being let")
     landlord_id: str = Field(..., description="Landlord user ID")
     tenant_id: str = Field(..., description="Tenant user ID")
     rent_amount: Decimal = Field(..., description="Monthly rent")
     deposit: Decimal = Field(..., description="Security deposit")
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     terms: str = Field(..., description="Contract body")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": "4f7c1a52-8a6e-4c55-9a37-0c1f5c2e9b10",
                    "landlord_id": "b0d5d0f4-3f2e-4f0e-8d7b-7a1c6c1f2a11",
                    "tenant_id": "e3a1c8b2-5d4f-4e6a-9b8c-2f1e0d9c8b7a",
                    "rent_amount": 5000.00,
                    "deposit": 5000.00,
                    "start_date": "2025-01-01",
                    "end_date": "2025-12-31",
                    "terms": "standard"
               }
          }
     )


class LeaseSignRequest(BaseModel):
     """Signature text entered by the signing party."""
     signature: str = Field(..., description="Signer-provided signature text")

     model_config = ConfigDict(
          json_schema_extra={"example": {"signature": "J. Smith"}}
     )


class LeaseResponse(BaseModel):
     """Schema for lease response."""
     id: str
     property_id: str
     landlord_id: str
     tenant_id: str
     rent_amount: Decimal
     deposit: Decimal
     start_date: date
     end_date: date
     terms: str
     landlord_signature: Optional[str] = None
     tenant_signature: Optional[str] = None
     status: LeaseStatus
     created_at: Optional[datetime] = None
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
