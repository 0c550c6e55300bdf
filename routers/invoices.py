# routers/invoices.py
"""
Invoice API routes for the IKHAYA backend.

Role-based access:
- Landlord: can only access own invoices
- Admin: can view every landlord's invoices and trigger the billing jobs by hand
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import ensure_self_or_admin, require_admin, verify_token
from models import InvoiceStatus
from routers.errors import http_error
from schemas.invoice import (
     InvoiceJobResponse,
     InvoiceListResponse,
     InvoiceResponse,
     InvoiceSummaryResponse,
)
from services.exceptions import NotFoundError
from services.invoice_service import InvoiceService
from services.notification_service import DatabaseNotificationSink

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get(
     "/landlord/{landlord_id}",
     response_model=InvoiceListResponse,
     summary="Get invoices for a landlord"
)
def get_invoices_by_landlord(
     landlord_id: str,
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     invoice_status: Optional[InvoiceStatus] = Query(None, alias="status", description="Filter by status"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Get a landlord's commission invoices, newest first.

     **Role-based access:**
     - **Landlord**: Can only access own invoices.
     - **Admin**: Can view any landlord's invoices.
     """
     ensure_self_or_admin(token, landlord_id)

     total = InvoiceService.count_invoices_for_landlord(db, landlord_id, status=invoice_status)
     invoices = InvoiceService.list_invoices_for_landlord(
          db,
          landlord_id,
          status=invoice_status,
          skip=(page - 1) * page_size,
          limit=page_size,
     )
     return InvoiceListResponse(
          invoices=[InvoiceResponse.model_validate(inv) for inv in invoices],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/landlord/{landlord_id}/summary",
     response_model=InvoiceSummaryResponse,
     summary="Get invoice summary for a landlord"
)
def get_landlord_invoice_summary(
     landlord_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Counts and amounts per status, plus the outstanding balance net of partial payments."""
     ensure_self_or_admin(token, landlord_id)
     return InvoiceService.get_invoice_summary(db, landlord_id)


@router.post(
     "/generate",
     response_model=InvoiceJobResponse,
     summary="Run monthly invoice generation now"
)
def generate_invoices(
     period: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="Billing period (YYYY-MM)"),
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     """Landlords already invoiced for the period are skipped."""
     invoices = InvoiceService.generate_monthly_invoices(db, DatabaseNotificationSink(db), period=period)
     return InvoiceJobResponse(
          success=True,
          message=f"Generated {len(invoices)} invoices",
          count=len(invoices),
          invoice_ids=[inv.id for inv in invoices],
     )


@router.post(
     "/mark-overdue",
     response_model=InvoiceJobResponse,
     summary="Run the overdue invoice check now"
)
def mark_overdue_invoices(
     db: Session = Depends(get_session),
     token: dict = Depends(require_admin)
):
     invoices = InvoiceService.send_overdue_payment_reminders(db, DatabaseNotificationSink(db))
     return InvoiceJobResponse(
          success=True,
          message=f"Marked {len(invoices)} invoices overdue",
          count=len(invoices),
          invoice_ids=[inv.id for inv in invoices],
     )


@router.get(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by ID"
)
def get_invoice(
     invoice_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          invoice = InvoiceService.get_invoice(db, invoice_id)
     except NotFoundError as e:
          raise http_error(e)

     if token.get("role") != "admin" and invoice.landlord_id != token.get("id"):
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="You do not have permission to view this invoice"
          )
     return invoice
