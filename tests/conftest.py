"""
Shared fixtures: an in-memory SQLite database, a recording notification sink,
record factories and an authenticated TestClient.
"""
import os
import uuid

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.pop("BREVO_API_KEY", None)

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from jose import jwt
from sqlalchemy import event

import database
from models import (
    Base,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    Lease,
    LeaseStatus,
    Property,
    PropertyStatus,
    User,
    UserRole,
)

NOW = datetime(2025, 3, 1, 9, 0, 0)


@event.listens_for(database.engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class RecordingNotificationSink:
    """Collects notifications and emails instead of delivering them."""

    def __init__(self, fail: bool = False):
        self.notifications = []
        self.emails = []
        self.fail = fail

    def send_notification(self, user_id, type, title, message, link=None, priority=None):
        if self.fail:
            raise RuntimeError("notification backend down")
        self.notifications.append({
            "user_id": user_id,
            "type": type,
            "title": title,
            "message": message,
            "link": link,
            "priority": priority,
        })

    def send_email(self, to, subject, text, html=None):
        if self.fail:
            raise RuntimeError("mail transport down")
        self.emails.append({"to": to, "subject": subject, "text": text, "html": html})

    def for_user(self, user_id):
        return [n for n in self.notifications if n["user_id"] == user_id]


@pytest.fixture
def db():
    Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def failing_sink():
    return RecordingNotificationSink(fail=True)


@pytest.fixture
def make_user(db):
    def _make_user(name="Thandi Landlord", role=UserRole.LANDLORD, email=None, with_email=True):
        if with_email and email is None:
            email = f"{name.split()[0].lower()}.{uuid.uuid4().hex[:8]}@example.com"
        user = User(name=name, role=role, email=email if with_email else None)
        db.add(user)
        db.commit()
        return user
    return _make_user


@pytest.fixture
def landlord(make_user):
    return make_user("Thandi Landlord", UserRole.LANDLORD, email="thandi@example.com")


@pytest.fixture
def tenant(make_user):
    return make_user("Sipho Tenant", UserRole.TENANT, email="sipho@example.com")


@pytest.fixture
def make_property(db):
    def _make_property(landlord, address="12 Long Street, Cape Town", status=PropertyStatus.AVAILABLE):
        prop = Property(landlord_id=landlord.id, address=address, status=status)
        db.add(prop)
        db.commit()
        return prop
    return _make_property


@pytest.fixture
def make_lease(db, make_property):
    def _make_lease(
        landlord,
        tenant,
        prop=None,
        rent_amount=Decimal("5000.00"),
        status=LeaseStatus.DRAFT,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
        landlord_signature=None,
        tenant_signature=None,
    ):
        prop = prop or make_property(landlord)
        lease = Lease(
            property_id=prop.id,
            landlord_id=landlord.id,
            tenant_id=tenant.id,
            rent_amount=rent_amount,
            deposit=Decimal("5000.00"),
            start_date=start_date,
            end_date=end_date,
            terms="standard",
            landlord_signature=landlord_signature,
            tenant_signature=tenant_signature,
            status=status,
        )
        db.add(lease)
        db.commit()
        return lease
    return _make_lease


@pytest.fixture
def make_invoice(db):
    def _make_invoice(
        landlord,
        amount=Decimal("1300.00"),
        due_date=NOW + timedelta(days=15),
        status=InvoiceStatus.PENDING,
        period="2025-03",
        leases=(),
    ):
        invoice = Invoice(
            landlord_id=landlord.id,
            billing_period=period,
            amount=amount,
            due_date=due_date,
            status=status,
            items=[
                InvoiceItem(
                    position=i,
                    lease_id=lease.id,
                    description=f"Commission for property {lease.property_id}",
                    amount=Decimal("0.00"),
                )
                for i, lease in enumerate(leases)
            ],
        )
        db.add(invoice)
        db.commit()
        return invoice
    return _make_invoice


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id, role="landlord"):
        token = jwt.encode({"id": user_id, "role": role}, os.environ["JWT_SECRET"], algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from main import app

    def override_get_session():
        yield db

    app.dependency_overrides[database.get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
