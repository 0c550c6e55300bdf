# routers/notifications.py
"""Notification API: the caller's in-app notifications plus email and grouping helpers."""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from routers.errors import http_error
from schemas.notification import (
     EmailNotificationRequest,
     GroupedNotificationRequest,
     NotificationResponse,
)
from services.exceptions import IkhayaError
from services.notification_service import (
     DatabaseNotificationSink,
     create_grouped_notification,
     list_notifications,
     mark_all_as_read,
     mark_as_read,
     send_email_notification,
)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationResponse], summary="List my notifications")
def get_notifications(
     unread_only: bool = False,
     limit: int = Query(50, ge=1, le=200),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return list_notifications(db, token["id"], unread_only=unread_only, limit=limit)


@router.patch("/read-all", summary="Mark all my notifications as read")
def read_all_notifications(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     count = mark_all_as_read(db, token["id"])
     return {"success": True, "count": count}


@router.patch("/{notification_id}/read", response_model=NotificationResponse, summary="Mark a notification as read")
def read_notification(
     notification_id: str,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     try:
          return mark_as_read(db, token["id"], notification_id)
     except IkhayaError as e:
          raise http_error(e)


@router.post("/email", summary="Send an email notification if the user allows it")
def email_notification(
     body: EmailNotificationRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     try:
          return send_email_notification(
               db,
               DatabaseNotificationSink(db),
               user_id=body.user_id,
               type=body.type,
               subject=body.subject,
               text=body.text,
               html=body.html,
          )
     except IkhayaError as e:
          raise http_error(e)


@router.post("/grouped", summary="Create or extend a grouped notification")
def grouped_notification(
     body: GroupedNotificationRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     try:
          return create_grouped_notification(
               db,
               user_id=body.user_id,
               type=body.type,
               notifications=[entry.model_dump(exclude_none=True) for entry in body.notifications],
          )
     except IkhayaError as e:
          raise http_error(e)
