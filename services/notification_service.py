"""
Notification Service - in-app notifications, email dispatch and preferences.

Workflow steps never talk to the notifications table or the mail transport
directly. They are handed a NotificationSink and go through ``notify`` and
``email_user``, which log and swallow delivery failures so a notification
problem can never undo or block the state change that triggered it.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Protocol

from sqlalchemy.orm import Session

from config import (
     NOTIFICATION_DELETE_BATCH_SIZE,
     NOTIFICATION_GROUPING_WINDOW_MINUTES,
     NOTIFICATION_RETENTION_DAYS,
)
from models import Notification, NotificationPriority, NotificationType, User, UserPreference
from models.notification import default_type_preferences
from services.exceptions import NotFoundError, ValidationError
from utils.dates import utcnow
from utils.email import send_email

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
     """Destination for fire-and-forget notifications and emails."""

     def send_notification(
          self,
          user_id: str,
          type: NotificationType,
          title: str,
          message: str,
          link: Optional[str] = None,
          priority: NotificationPriority = NotificationPriority.MEDIUM,
     ) -> None:
          ...

     def send_email(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
          ...


class DatabaseNotificationSink:
     """
     Production sink: persists in-app notifications in the notifications table
     and sends email through Brevo.

     Each notification is committed on its own, after the caller has already
     committed its primary write.
     """

     def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
          self.db = db
          self.clock = clock

     def send_notification(
          self,
          user_id: str,
          type: NotificationType,
          title: str,
          message: str,
          link: Optional[str] = None,
          priority: NotificationPriority = NotificationPriority.MEDIUM,
     ) -> None:
          notification = Notification(
               user_id=user_id,
               type=NotificationType(type),
               title=title,
               message=message,
               link=link,
               priority=NotificationPriority(priority),
               read=False,
               grouped_count=1,
               created_at=self.clock(),
          )
          try:
               self.db.add(notification)
               self.db.commit()
          except Exception:
               self.db.rollback()
               raise

     def send_email(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
          send_email(to, subject, text, html)


def notify(
     sink: NotificationSink,
     user_id: str,
     type: NotificationType,
     title: str,
     message: str,
     link: Optional[str] = None,
     priority: NotificationPriority = NotificationPriority.MEDIUM,
) -> bool:
     """Best-effort in-app notification. Returns False if delivery failed."""
     try:
          sink.send_notification(user_id, type, title, message, link=link, priority=priority)
          return True
     except Exception:
          logger.exception("Failed to send %s notification to user %s", getattr(type, "value", type), user_id)
          return False


def email_user(
     db: Session,
     sink: NotificationSink,
     user_id: str,
     subject: str,
     text: str,
     html: Optional[str] = None,
) -> bool:
     """Best-effort email to a user's address on file. Returns False if nothing was sent."""
     try:
          user = db.get(User, user_id)
          if user is None or not user.email:
               logger.warning("No email address on file for user %s, skipping email", user_id)
               return False
          sink.send_email(user.email, subject, text, html)
          return True
     except Exception:
          logger.exception("Failed to email user %s", user_id)
          return False


def get_user_name(db: Session, user_id: str, default: str = "there") -> str:
     user = db.get(User, user_id)
     return user.name if user and user.name else default


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

def get_preferences(db: Session, user_id: str) -> dict:
     """
     Notification preferences for a user, falling back to the defaults
     (email and in-app on, SMS off, every type on) when none are stored.
     """
     prefs = db.get(UserPreference, user_id)
     if prefs is None:
          return {
               "email": True,
               "sms": False,
               "in_app": True,
               "types": default_type_preferences(),
          }
     return {
          "email": prefs.email_enabled,
          "sms": prefs.sms_enabled,
          "in_app": prefs.in_app_enabled,
          "types": dict(prefs.types or {}),
     }


def send_email_notification(
     db: Session,
     sink: NotificationSink,
     user_id: str,
     type: str,
     subject: str,
     text: str,
     html: Optional[str] = None,
) -> dict:
     """
     Send an email to a user if their preferences allow it.

     Raises:
          ValidationError: if a required field is missing
          NotFoundError: if the user or their email address does not exist
     """
     if not user_id or not type or not subject or not text:
          raise ValidationError("Missing required fields: userId, type, subject, text")

     preferences = get_preferences(db, user_id)

     if not preferences["email"]:
          logger.info("Email notifications disabled for user %s", user_id)
          return {
               "success": False,
               "message": "Email notifications are disabled for this user",
          }

     types = preferences["types"]
     if types and not types.get(type, False):
          logger.info("Email notifications for type %s disabled for user %s", type, user_id)
          return {
               "success": False,
               "message": f"Email notifications for type {type} are disabled for this user",
          }

     user = db.get(User, user_id)
     if user is None:
          raise NotFoundError("User not found")
     if not user.email:
          raise NotFoundError("User email not found")

     sink.send_email(user.email, subject, text, html or text)

     return {
          "success": True,
          "message": "Email notification sent successfully",
          "email": user.email,
     }


# ---------------------------------------------------------------------------
# Grouping, listing and cleanup
# ---------------------------------------------------------------------------

def _type_words(type: NotificationType) -> str:
     return type.value.replace("_", " ")


def create_grouped_notification(
     db: Session,
     user_id: str,
     type: str,
     notifications: list[dict],
     now: Optional[datetime] = None,
) -> dict:
     """
     Fold a burst of similar notifications into a single one.

     If the user already has an unread notification of the same type created
     within the grouping window, its count and message are updated; otherwise
     a new grouped notification is created from the first entry.
     """
     if not user_id or not type or not isinstance(notifications, list) or not notifications:
          raise ValidationError("Missing required fields: userId, type, notifications (array)")
     try:
          notification_type = NotificationType(type)
     except ValueError:
          raise ValidationError(f"Unknown notification type: {type}")

     now = now or utcnow()
     window_start = now - timedelta(minutes=NOTIFICATION_GROUPING_WINDOW_MINUTES)

     existing = (
          db.query(Notification)
          .filter(
               Notification.user_id == user_id,
               Notification.type == notification_type,
               Notification.created_at >= window_start,
               Notification.read == False,  # noqa: E712
          )
          .order_by(Notification.created_at.desc())
          .first()
     )

     if existing is not None:
          grouped_count = (existing.grouped_count or 1) + len(notifications)
          existing.grouped_count = grouped_count
          existing.message = f"You have {grouped_count} new {_type_words(notification_type)} notifications"
          existing.updated_at = now
          db.commit()
          logger.info("Updated grouped notification for user %s, type %s", user_id, type)
          return {
               "success": True,
               "message": "Notification grouped with existing notification",
               "notification_id": existing.id,
               "grouped_count": grouped_count,
          }

     first = notifications[0]
     if len(notifications) > 1:
          message = f"You have {len(notifications)} new {_type_words(notification_type)} notifications"
     else:
          message = first.get("message") or ""
     grouped = Notification(
          user_id=user_id,
          type=notification_type,
          title=first.get("title") or f"New {_type_words(notification_type)}",
          message=message,
          link=first.get("link"),
          priority=NotificationPriority(first.get("priority") or NotificationPriority.MEDIUM),
          read=False,
          grouped_count=len(notifications),
          created_at=now,
     )
     db.add(grouped)
     db.commit()
     logger.info("Created grouped notification for user %s, type %s", user_id, type)
     return {
          "success": True,
          "message": "Grouped notification created successfully",
          "notification_id": grouped.id,
          "grouped_count": len(notifications),
     }


def list_notifications(
     db: Session,
     user_id: str,
     unread_only: bool = False,
     limit: int = 50,
) -> list[Notification]:
     query = db.query(Notification).filter(Notification.user_id == user_id)
     if unread_only:
          query = query.filter(Notification.read == False)  # noqa: E712
     return query.order_by(Notification.created_at.desc()).limit(limit).all()


def mark_as_read(db: Session, user_id: str, notification_id: str) -> Notification:
     notification = db.get(Notification, notification_id)
     if notification is None or notification.user_id != user_id:
          raise NotFoundError("Notification not found")
     notification.read = True
     db.commit()
     return notification


def mark_all_as_read(db: Session, user_id: str) -> int:
     count = (
          db.query(Notification)
          .filter(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
          .update({Notification.read: True}, synchronize_session=False)
     )
     db.commit()
     return count


def _chunks(items: list, size: int) -> Iterable[list]:
     for i in range(0, len(items), size):
          yield items[i:i + size]


def delete_old_notifications(db: Session, now: Optional[datetime] = None) -> int:
     """
     Delete notifications older than the retention period, in batches.

     Returns:
          Number of notifications deleted
     """
     now = now or utcnow()
     cutoff = now - timedelta(days=NOTIFICATION_RETENTION_DAYS)

     old_ids = [
          row[0]
          for row in db.query(Notification.id).filter(Notification.created_at <= cutoff).all()
     ]
     logger.info("Found %d old notifications to delete", len(old_ids))

     deleted = 0
     for batch in _chunks(old_ids, NOTIFICATION_DELETE_BATCH_SIZE):
          db.query(Notification).filter(Notification.id.in_(batch)).delete(synchronize_session=False)
          db.commit()
          deleted += len(batch)
          logger.info("Deleted batch of %d notifications", len(batch))

     return deleted
