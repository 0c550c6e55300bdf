from datetime import datetime, timedelta

from models import Base, Notification, NotificationPriority, NotificationType
from utils.dates import utcnow


class TestSchema:
    def test_table_names(self):
        assert set(Base.metadata.tables) == {
            "users",
            "properties",
            "leases",
            "invoices",
            "invoice_items",
            "payments",
            "notifications",
            "user_preferences",
        }

    def test_timestamps_default_to_naive_utc(self, db, landlord):
        before = utcnow()
        notification = Notification(
            user_id=landlord.id,
            type=NotificationType.NEW_MESSAGE,
            title="New message",
            message="Hi",
            priority=NotificationPriority.LOW,
            read=False,
            grouped_count=1,
        )
        db.add(notification)
        db.commit()

        assert landlord.created_at.tzinfo is None
        assert notification.created_at.tzinfo is None
        assert before <= notification.created_at <= utcnow() + timedelta(seconds=1)
        assert isinstance(notification.created_at, datetime)
