from .base import Base
from .user import User, UserRole
from .property import Property, PropertyStatus
from .lease import Lease, LeaseStatus
from .invoice import Invoice, InvoiceItem, InvoiceStatus
from .payment import Payment, PaymentMethod
from .notification import (
     Notification,
     NotificationPriority,
     NotificationType,
     UserPreference,
)

__all__ = [
     "Base",
     "User",
     "UserRole",
     "Property",
     "PropertyStatus",
     "Lease",
     "LeaseStatus",
     "Invoice",
     "InvoiceItem",
     "InvoiceStatus",
     "Payment",
     "PaymentMethod",
     "Notification",
     "NotificationPriority",
     "NotificationType",
     "UserPreference",
]
