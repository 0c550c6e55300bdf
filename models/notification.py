import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from .base import Base, new_id, utcnow


class NotificationType(str, enum.Enum):
     NEW_LEAD = "new_lead"
     NEW_MESSAGE = "new_message"
     MAINTENANCE_REQUEST = "maintenance_request"
     LEASE_EXPIRING = "lease_expiring"
     PAYMENT_DUE = "payment_due"
     PAYMENT_RECEIVED = "payment_received"
     LISTING_APPROVED = "listing_approved"


class NotificationPriority(str, enum.Enum):
     LOW = "low"
     MEDIUM = "medium"
     HIGH = "high"


class Notification(Base):
     """
     In-app notification for a single user.
     """
     __tablename__ = "notifications"

     id = Column(String(36), primary_key=True, default=new_id)
     user_id = Column(String(36), nullable=False, index=True)
     type = Column(
          Enum(NotificationType, name="notification_type", values_callable=lambda e: [m.value for m in e]),
          nullable=False,
          index=True,
     )
     title = Column(String(255), nullable=False)
     message = Column(Text, nullable=False)
     link = Column(String(500), nullable=True)
     priority = Column(
          Enum(NotificationPriority, name="notification_priority", values_callable=lambda e: [m.value for m in e]),
          default=NotificationPriority.MEDIUM,
          nullable=False,
     )
     read = Column(Boolean, default=False, nullable=False)
     grouped_count = Column(Integer, default=1, nullable=False)

     created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
     updated_at = Column(DateTime, onupdate=utcnow, nullable=True)

     def __repr__(self):
          return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type.value}')>"


def default_type_preferences() -> dict:
     """Every notification type enabled."""
     return {t.value: True for t in NotificationType}


class UserPreference(Base):
     """
     Per-user notification preferences. Users without a row get the defaults:
     email and in-app enabled, SMS disabled, every type enabled.
     """
     __tablename__ = "user_preferences"

     user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
     email_enabled = Column(Boolean, default=True, nullable=False)
     sms_enabled = Column(Boolean, default=False, nullable=False)
     in_app_enabled = Column(Boolean, default=True, nullable=False)
     types = Column(JSON, default=default_type_preferences, nullable=False)
     updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

     user = relationship("User", back_populates="preferences")

     def __repr__(self):
          return f"<UserPreference(user_id={self.user_id}, email_enabled={self.email_enabled})>"
