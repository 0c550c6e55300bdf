# routers/__init__.py
"""
API routers for the IKHAYA backend.

Import routers here for easy registration in main.py:
     from routers import leases_router, invoices_router, payments_router, notifications_router
     app.include_router(leases_router)
"""
from .leases import router as leases_router
from .invoices import router as invoices_router
from .payments import router as payments_router
from .notifications import router as notifications_router

__all__ = [
     "leases_router",
     "invoices_router",
     "payments_router",
     "notifications_router",
]
