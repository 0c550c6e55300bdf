# services/__init__.py
from .exceptions import (
     AuthorizationError,
     ConflictError,
     IkhayaError,
     NotFoundError,
     ValidationError,
)
from .invoice_service import InvoiceService
from .lease_service import LeaseService
from .notification_service import DatabaseNotificationSink, NotificationSink

__all__ = [
     "AuthorizationError",
     "ConflictError",
     "IkhayaError",
     "NotFoundError",
     "ValidationError",
     "InvoiceService",
     "LeaseService",
     "DatabaseNotificationSink",
     "NotificationSink",
]
