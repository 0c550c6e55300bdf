# schemas/__init__.py
from .lease import LeaseCreate, LeaseSignRequest, LeaseResponse
from .invoice import (
     InvoiceItemResponse,
     InvoiceResponse,
     InvoiceListResponse,
     InvoiceSummaryResponse,
     InvoiceJobResponse,
)
from .payment import PaymentCreate, PaymentResponse
from .notification import (
     NotificationResponse,
     EmailNotificationRequest,
     GroupedNotificationEntry,
     GroupedNotificationRequest,
)

__all__ = [
     "LeaseCreate",
     "LeaseSignRequest",
     "LeaseResponse",
     "InvoiceItemResponse",
     "InvoiceResponse",
     "InvoiceListResponse",
     "InvoiceSummaryResponse",
     "InvoiceJobResponse",
     "PaymentCreate",
     "PaymentResponse",
     "NotificationResponse",
     "EmailNotificationRequest",
     "GroupedNotificationEntry",
     "GroupedNotificationRequest",
]
