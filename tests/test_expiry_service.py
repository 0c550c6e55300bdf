from datetime import date, datetime

import pytest

from models import LeaseStatus, NotificationPriority, NotificationType
from services.expiry_service import check_expiring_leases

NOW = datetime(2025, 3, 1, 9, 0, 0)


class TestCheckExpiringLeases:
    def test_notifies_landlord_and_tenant(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant, status=LeaseStatus.ACTIVE, end_date=date(2025, 3, 11))

        count = check_expiring_leases(db, sink, now=NOW)

        assert count == 1
        assert {n["user_id"] for n in sink.notifications} == {landlord.id, tenant.id}
        for notification in sink.notifications:
            assert notification["type"] == NotificationType.LEASE_EXPIRING
            assert notification["title"] == "Lease Expiring Soon"
            assert notification["message"] == "Your lease for 12 Long Street, Cape Town expires in 10 days"
            assert notification["priority"] == NotificationPriority.HIGH
            assert notification["link"] == f"/leases/{lease.id}"
        assert {e["to"] for e in sink.emails} == {"thandi@example.com", "sipho@example.com"}

    def test_does_not_change_lease_status(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant, status=LeaseStatus.ACTIVE, end_date=date(2025, 3, 2))

        check_expiring_leases(db, sink, now=NOW)

        db.refresh(lease)
        assert lease.status == LeaseStatus.ACTIVE

    @pytest.mark.parametrize(
        "end_date, expected_days",
        [
            (date(2025, 3, 1), 0),
            (date(2025, 3, 2), 1),
            (date(2025, 3, 31), 30),
        ],
    )
    def test_window_is_inclusive(self, db, sink, landlord, tenant, make_lease, end_date, expected_days):
        make_lease(landlord, tenant, status=LeaseStatus.ACTIVE, end_date=end_date)

        assert check_expiring_leases(db, sink, now=NOW) == 1
        assert sink.notifications[0]["message"].endswith(f"expires in {expected_days} days")

    @pytest.mark.parametrize("end_date", [date(2025, 2, 28), date(2025, 4, 1), date(2025, 12, 31)])
    def test_outside_window_is_ignored(self, db, sink, landlord, tenant, make_lease, end_date):
        make_lease(landlord, tenant, status=LeaseStatus.ACTIVE, start_date=date(2024, 1, 1), end_date=end_date)

        assert check_expiring_leases(db, sink, now=NOW) == 0
        assert sink.notifications == []

    @pytest.mark.parametrize("status", [LeaseStatus.DRAFT, LeaseStatus.PENDING_SIGNATURES, LeaseStatus.TERMINATED])
    def test_only_active_leases(self, db, sink, landlord, tenant, make_lease, status):
        make_lease(landlord, tenant, status=status, end_date=date(2025, 3, 10))

        assert check_expiring_leases(db, sink, now=NOW) == 0

    def test_property_without_address(self, db, sink, landlord, tenant, make_property, make_lease):
        prop = make_property(landlord, address=None)
        make_lease(landlord, tenant, prop=prop, status=LeaseStatus.ACTIVE, end_date=date(2025, 3, 6))

        check_expiring_leases(db, sink, now=NOW)

        assert sink.notifications[0]["message"] == "Your lease for a property expires in 5 days"

    def test_user_without_email_still_gets_in_app_notice(self, db, sink, landlord, make_user, make_lease):
        no_email = make_user("Nomsa Tenant", with_email=False)
        make_lease(landlord, no_email, status=LeaseStatus.ACTIVE, end_date=date(2025, 3, 20))

        check_expiring_leases(db, sink, now=NOW)

        assert len(sink.for_user(no_email.id)) == 1
        assert [e["to"] for e in sink.emails] == ["thandi@example.com"]
