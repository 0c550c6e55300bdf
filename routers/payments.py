# routers/payments.py
"""
Payment API.

POST /api/payments: record a payment against a commission invoice. The
invoice is reconciled straight away and flips to paid once its payments
cover the amount.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import ensure_self_or_admin, verify_token
from routers.errors import http_error
from schemas.payment import PaymentCreate, PaymentResponse
from services.exceptions import IkhayaError
from services.invoice_service import InvoiceService
from services.notification_service import DatabaseNotificationSink
from services.payment_service import get_payment_history, record_payment

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
     "",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def create_payment(
     body: PaymentCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     """
     Record a (possibly partial) payment for an invoice.

     The payer must be the invoice's landlord or an admin. Payments larger
     than the invoice amount are rejected.
     """
     try:
          invoice = InvoiceService.get_invoice(db, body.invoice_id)
     except IkhayaError as e:
          raise http_error(e)
     if token.get("role") != "admin" and invoice.landlord_id != token.get("id"):
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="You do not have permission to pay this invoice"
          )

     try:
          return record_payment(
               db,
               DatabaseNotificationSink(db),
               invoice_id=body.invoice_id,
               amount=body.amount,
               payment_method=body.payment_method,
               reference=body.reference,
               payment_date=body.payment_date,
          )
     except IkhayaError as e:
          raise http_error(e)


@router.get(
     "/landlord/{landlord_id}",
     response_model=List[PaymentResponse],
     summary="Get payment history for a landlord"
)
def list_landlord_payments(
     landlord_id: str,
     invoice_id: Optional[str] = Query(None, description="Filter by invoice"),
     limit: int = Query(100, ge=1, le=500),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     ensure_self_or_admin(token, landlord_id)
     return get_payment_history(db, landlord_id, invoice_id=invoice_id, limit=limit)
