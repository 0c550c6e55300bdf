"""
Pydantic schemas for notification API.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from models import NotificationPriority, NotificationType


class NotificationResponse(BaseModel):
     id: str
     user_id: str
     type: NotificationType
     title: str
     message: str
     link: Optional[str] = None
     priority: NotificationPriority
     read: bool
     grouped_count: int = 1
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class EmailNotificationRequest(BaseModel):
     """Request body for POST /api/notifications/email."""
     user_id: Optional[str] = None
     type: Optional[str] = None
     subject: Optional[str] = None
     text: Optional[str] = None
     html: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "user_id": "b0d5d0f4-3f2e-4f0e-8d7b-7a1c6c1f2a11",
                    "type": "payment_due",
                    "subject": "Invoice reminder",
                    "text": "Your commission invoice is due soon."
               }
          }
     )


class GroupedNotificationEntry(BaseModel):
     title: Optional[str] = None
     message: Optional[str] = None
     link: Optional[str] = None
     priority: Optional[NotificationPriority] = None


class GroupedNotificationRequest(BaseModel):
     """Request body for POST /api/notifications/grouped."""
     user_id: Optional[str] = None
     type: Optional[str] = None
     notifications: List[GroupedNotificationEntry] = Field(default_factory=list)
