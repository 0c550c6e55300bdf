# routers/leases.py
"""
Lease API routes.

Access:
- Landlord: creates leases for own properties, signs and terminates them
- Tenant: views and signs own leases
- Admin: everything except signing on someone else's behalf
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import ensure_self_or_admin, verify_token
from models import Lease
from routers.errors import http_error
from schemas.lease import LeaseCreate, LeaseResponse, LeaseSignRequest
from services.exceptions import IkhayaError
from services.lease_service import LeaseService
from services.notification_service import DatabaseNotificationSink

router = APIRouter(prefix="/api/leases", tags=["leases"])


def _get_visible_lease(db: Session, token: dict, lease_id: str) -> Lease:
     lease = LeaseService.get_lease(db, lease_id)
     if lease is None:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lease not found")
     if token.get("role") != "admin" and lease.party_for(token.get("id")) is None:
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="You do not have permission to view this lease"
          )
     return lease


@router.post(
     "",
     response_model=LeaseResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new lease"
)
def create_lease(
     lease_data: LeaseCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Create a draft lease between a landlord and a tenant.

     - **rent_amount**: must be positive
     - **deposit**: must not be negative
     - **end_date**: must be after **start_date**
     """
     ensure_self_or_admin(token, lease_data.landlord_id)
     try:
          return LeaseService.create_lease(
               db,
               landlord_id=lease_data.landlord_id,
               tenant_id=lease_data.tenant_id,
               property_id=lease_data.property_id,
               rent_amount=lease_data.rent_amount,
               deposit=lease_data.deposit,
               start_date=lease_data.start_date,
               end_date=lease_data.end_date,
               terms=lease_data.terms,
          )
     except IkhayaError as e:
          raise http_error(e)


@router.get("/landlord/{landlord_id}", response_model=List[LeaseResponse], summary="List a landlord's leases")
def list_landlord_leases(
     landlord_id: str,
     active_only: bool = False,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     ensure_self_or_admin(token, landlord_id)
     if active_only:
          return LeaseService.get_active_leases_for_landlord(db, landlord_id)
     return LeaseService.get_leases_for_landlord(db, landlord_id)


@router.get("/tenant/{tenant_id}", response_model=List[LeaseResponse], summary="List a tenant's leases")
def list_tenant_leases(
     tenant_id: str,
     active_only: bool = False,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     ensure_self_or_admin(token, tenant_id)
     if active_only:
          return LeaseService.get_active_leases_for_tenant(db, tenant_id)
     return LeaseService.get_leases_for_tenant(db, tenant_id)


@router.get("/{lease_id}", response_model=LeaseResponse, summary="Get lease by ID")
def get_lease(
     lease_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return _get_visible_lease(db, token, lease_id)


@router.post("/{lease_id}/sign", response_model=LeaseResponse, summary="Sign a lease")
def sign_lease(
     lease_id: str,
     body: LeaseSignRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Record the caller's signature. The lease activates, and its property
     becomes occupied, once both parties have signed.
     """
     try:
          return LeaseService.sign_lease(
               db,
               DatabaseNotificationSink(db),
               lease_id=lease_id,
               signer_user_id=token["id"],
               signature=body.signature,
          )
     except IkhayaError as e:
          raise http_error(e)


@router.post("/{lease_id}/terminate", response_model=LeaseResponse, summary="Terminate an active lease")
def terminate_lease(
     lease_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     try:
          return LeaseService.terminate_lease(db, lease_id=lease_id, requesting_user_id=token["id"])
     except IkhayaError as e:
          raise http_error(e)
