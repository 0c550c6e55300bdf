from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

import database
from models import Lease, LeaseStatus, NotificationPriority, NotificationType, PropertyStatus, UserRole
from services.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from services.lease_service import LeaseService

NOW = datetime(2025, 3, 1, 9, 0, 0)

VALID = dict(
    rent_amount=Decimal("5000"),
    deposit=Decimal("5000"),
    start_date=date(2025, 1, 1),
    end_date=date(2025, 12, 31),
    terms="standard",
)


class TestCreateLease:
    def test_creates_draft_without_signatures(self, db, landlord, tenant, make_property):
        prop = make_property(landlord)

        lease = LeaseService.create_lease(
            db, landlord_id=landlord.id, tenant_id=tenant.id, property_id=prop.id, now=NOW, **VALID
        )

        assert lease.id
        assert lease.status == LeaseStatus.DRAFT
        assert lease.landlord_signature is None
        assert lease.tenant_signature is None
        assert lease.rent_amount == Decimal("5000.00")
        assert lease.created_at == NOW
        assert db.get(Lease, lease.id) is not None

    def test_deposit_above_form_ceiling_is_accepted(self, db, landlord, tenant, make_property):
        prop = make_property(landlord)
        data = dict(VALID, deposit=Decimal("12000"))

        lease = LeaseService.create_lease(
            db, landlord_id=landlord.id, tenant_id=tenant.id, property_id=prop.id, **data
        )

        assert lease.deposit == Decimal("12000.00")

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"property_id": ""}, "Property ID is required"),
            ({"landlord_id": None}, "Landlord ID is required"),
            ({"tenant_id": "  "}, "Tenant ID is required"),
            ({"rent_amount": Decimal("0")}, "Rent amount must be greater than zero"),
            ({"rent_amount": Decimal("-100")}, "Rent amount must be greater than zero"),
            ({"deposit": Decimal("-1")}, "Deposit must be a non-negative number"),
            ({"start_date": None}, "Start date is required"),
            ({"end_date": None}, "End date is required"),
            ({"end_date": date(2025, 1, 1)}, "End date must be after start date"),
            ({"end_date": date(2024, 12, 31)}, "End date must be after start date"),
            ({"terms": ""}, "Lease terms are required"),
        ],
    )
    def test_rejects_invalid_input_without_writing(self, db, landlord, tenant, make_property, overrides, message):
        prop = make_property(landlord)
        args = dict(VALID, landlord_id=landlord.id, tenant_id=tenant.id, property_id=prop.id)
        args.update(overrides)

        with pytest.raises(ValidationError, match=message):
            LeaseService.create_lease(db, **args)

        assert db.query(Lease).count() == 0

    def test_first_failing_check_wins(self, db):
        with pytest.raises(ValidationError, match="Property ID is required"):
            LeaseService.create_lease(
                db, landlord_id="", tenant_id="", property_id="",
                rent_amount=0, deposit=-1, start_date=None, end_date=None, terms="",
            )

    @pytest.mark.parametrize(
        "missing, message",
        [
            ("property_id", "Property not found"),
            ("landlord_id", "Landlord not found"),
            ("tenant_id", "Tenant not found"),
        ],
    )
    def test_rejects_unknown_references(self, db, landlord, tenant, make_property, missing, message):
        prop = make_property(landlord)
        args = dict(VALID, landlord_id=landlord.id, tenant_id=tenant.id, property_id=prop.id)
        args[missing] = "no-such-record"

        with pytest.raises(NotFoundError, match=message):
            LeaseService.create_lease(db, **args)

        assert db.query(Lease).count() == 0

    def test_rejects_property_of_another_landlord(self, db, landlord, tenant, make_user, make_property):
        other = make_user("Pieter Landlord")
        prop = make_property(other)

        with pytest.raises(AuthorizationError, match="Property does not belong to this landlord"):
            LeaseService.create_lease(
                db, landlord_id=landlord.id, tenant_id=tenant.id, property_id=prop.id, **VALID
            )

        assert db.query(Lease).count() == 0

    def test_database_enforces_lease_references(self, db, landlord, tenant):
        db.add(Lease(
            property_id="no-such-property",
            landlord_id=landlord.id,
            tenant_id=tenant.id,
            status=LeaseStatus.DRAFT,
            **VALID,
        ))

        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()


class TestSignLease:
    def test_first_signature_moves_draft_to_pending(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant)

        signed = LeaseService.sign_lease(db, sink, lease.id, landlord.id, "J. Smith", now=NOW)

        assert signed.status == LeaseStatus.PENDING_SIGNATURES
        assert signed.landlord_signature == "J. Smith"
        assert signed.tenant_signature is None
        assert sink.notifications == []

    @pytest.mark.parametrize("landlord_first", [True, False])
    def test_second_signature_activates_and_occupies_property(
        self, db, sink, landlord, tenant, make_property, make_lease, landlord_first
    ):
        prop = make_property(landlord)
        lease = make_lease(landlord, tenant, prop=prop)
        order = [(landlord.id, "J. Smith"), (tenant.id, "A. Jones")]
        if not landlord_first:
            order.reverse()

        for user_id, signature in order:
            lease = LeaseService.sign_lease(db, sink, lease.id, user_id, signature, now=NOW)

        assert lease.status == LeaseStatus.ACTIVE
        db.refresh(prop)
        assert prop.status == PropertyStatus.OCCUPIED

        assert {n["user_id"] for n in sink.notifications} == {landlord.id, tenant.id}
        assert len(sink.notifications) == 2
        for notification in sink.notifications:
            assert notification["title"] == "Lease Agreement Activated"
            assert notification["type"] == NotificationType.LEASE_EXPIRING
            assert notification["priority"] == NotificationPriority.HIGH
            assert notification["link"] == f"/leases/{lease.id}"

    def test_same_party_cannot_sign_twice(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant)
        LeaseService.sign_lease(db, sink, lease.id, landlord.id, "J. Smith")

        with pytest.raises(ValidationError, match="Landlord has already signed this lease"):
            LeaseService.sign_lease(db, sink, lease.id, landlord.id, "Someone Else")

        db.refresh(lease)
        assert lease.landlord_signature == "J. Smith"

    def test_tenant_double_sign_message(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant)
        LeaseService.sign_lease(db, sink, lease.id, tenant.id, "A. Jones")

        with pytest.raises(ValidationError, match="Tenant has already signed this lease"):
            LeaseService.sign_lease(db, sink, lease.id, tenant.id, "A. Jones")

    def test_concurrent_signature_loses_check_and_set(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant)

        # Another request signs first; this session still holds the unsigned row
        other = database.SessionLocal()
        try:
            other.query(Lease).filter(Lease.id == lease.id).update(
                {Lease.landlord_signature: "Other Request", Lease.status: LeaseStatus.PENDING_SIGNATURES},
                synchronize_session=False,
            )
            other.commit()
        finally:
            other.close()

        with pytest.raises(ConflictError, match="Landlord has already signed this lease"):
            LeaseService.sign_lease(db, sink, lease.id, landlord.id, "J. Smith")

        db.expire_all()
        assert db.get(Lease, lease.id).landlord_signature == "Other Request"

    def test_rejects_user_not_on_lease(self, db, sink, landlord, tenant, make_user, make_lease):
        lease = make_lease(landlord, tenant)
        stranger = make_user("Stranger Danger", UserRole.TENANT)

        with pytest.raises(AuthorizationError, match="User is not authorized to sign this lease"):
            LeaseService.sign_lease(db, sink, lease.id, stranger.id, "X")

    @pytest.mark.parametrize("signature", ["", "   ", None])
    def test_rejects_empty_signature(self, db, sink, landlord, tenant, make_lease, signature):
        lease = make_lease(landlord, tenant)

        with pytest.raises(ValidationError, match="Signature is required"):
            LeaseService.sign_lease(db, sink, lease.id, landlord.id, signature)

        db.refresh(lease)
        assert lease.status == LeaseStatus.DRAFT

    def test_missing_lease(self, db, sink, landlord):
        with pytest.raises(NotFoundError, match="Lease not found"):
            LeaseService.sign_lease(db, sink, "does-not-exist", landlord.id, "J. Smith")

    def test_notification_failure_does_not_block_activation(
        self, db, failing_sink, landlord, tenant, make_property, make_lease
    ):
        prop = make_property(landlord)
        lease = make_lease(landlord, tenant, prop=prop, status=LeaseStatus.PENDING_SIGNATURES,
                           landlord_signature="J. Smith")

        lease = LeaseService.sign_lease(db, failing_sink, lease.id, tenant.id, "A. Jones")

        assert lease.status == LeaseStatus.ACTIVE
        db.refresh(prop)
        assert prop.status == PropertyStatus.OCCUPIED

    def test_terminated_lease_is_not_reactivated(self, db, sink, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant, status=LeaseStatus.TERMINATED, landlord_signature="J. Smith")

        lease = LeaseService.sign_lease(db, sink, lease.id, tenant.id, "A. Jones")

        assert lease.status == LeaseStatus.TERMINATED
        assert sink.notifications == []


class TestTerminateLease:
    def test_landlord_terminates_active_lease(self, db, landlord, tenant, make_property, make_lease):
        prop = make_property(landlord, status=PropertyStatus.OCCUPIED)
        lease = make_lease(landlord, tenant, prop=prop, status=LeaseStatus.ACTIVE,
                           landlord_signature="J. Smith", tenant_signature="A. Jones")

        lease = LeaseService.terminate_lease(db, lease.id, landlord.id, now=NOW)

        assert lease.status == LeaseStatus.TERMINATED
        db.refresh(prop)
        assert prop.status == PropertyStatus.AVAILABLE
        assert prop.updated_at == NOW

    def test_tenant_cannot_terminate(self, db, landlord, tenant, make_lease):
        lease = make_lease(landlord, tenant, status=LeaseStatus.ACTIVE)

        with pytest.raises(AuthorizationError, match="Only the landlord can terminate this lease"):
            LeaseService.terminate_lease(db, lease.id, tenant.id)

        db.refresh(lease)
        assert lease.status == LeaseStatus.ACTIVE

    @pytest.mark.parametrize("status", [LeaseStatus.DRAFT, LeaseStatus.PENDING_SIGNATURES, LeaseStatus.TERMINATED])
    def test_only_active_leases(self, db, landlord, tenant, make_lease, status):
        lease = make_lease(landlord, tenant, status=status)

        with pytest.raises(ValidationError, match="Only active leases can be terminated"):
            LeaseService.terminate_lease(db, lease.id, landlord.id)

    def test_missing_lease(self, db, landlord):
        with pytest.raises(NotFoundError):
            LeaseService.terminate_lease(db, "nope", landlord.id)


class TestLeaseQueries:
    def test_landlord_and_tenant_listings(self, db, landlord, tenant, make_user, make_lease):
        other_tenant = make_user("Other Tenant", UserRole.TENANT)
        active = make_lease(landlord, tenant, status=LeaseStatus.ACTIVE)
        make_lease(landlord, other_tenant)

        assert len(LeaseService.get_leases_for_landlord(db, landlord.id)) == 2
        assert [l.id for l in LeaseService.get_active_leases_for_landlord(db, landlord.id)] == [active.id]
        assert [l.id for l in LeaseService.get_leases_for_tenant(db, tenant.id)] == [active.id]
        assert [l.id for l in LeaseService.get_active_leases_for_tenant(db, tenant.id)] == [active.id]
        assert LeaseService.get_leases_for_property(db, active.property_id)[0].id == active.id
        assert LeaseService.get_lease(db, "missing") is None


class TestReconcileOccupancy:
    def test_activates_stuck_fully_signed_lease(self, db, sink, landlord, tenant, make_property, make_lease):
        prop = make_property(landlord)
        lease = make_lease(landlord, tenant, prop=prop, status=LeaseStatus.PENDING_SIGNATURES,
                           landlord_signature="J. Smith", tenant_signature="A. Jones")

        counts = LeaseService.reconcile_occupancy(db, sink, now=NOW)

        assert counts["activated"] == 1
        db.refresh(lease)
        db.refresh(prop)
        assert lease.status == LeaseStatus.ACTIVE
        assert prop.status == PropertyStatus.OCCUPIED
        assert len(sink.notifications) == 2

    def test_repairs_property_status_drift(self, db, sink, landlord, tenant, make_property, make_lease):
        should_be_occupied = make_property(landlord, address="1 Active Rd", status=PropertyStatus.AVAILABLE)
        make_lease(landlord, tenant, prop=should_be_occupied, status=LeaseStatus.ACTIVE)
        should_be_free = make_property(landlord, address="2 Ended Rd", status=PropertyStatus.OCCUPIED)
        make_lease(landlord, tenant, prop=should_be_free, status=LeaseStatus.TERMINATED)
        unmanaged = make_property(landlord, address="3 Offline Rd", status=PropertyStatus.OCCUPIED)

        counts = LeaseService.reconcile_occupancy(db, sink, now=NOW)

        assert counts == {"activated": 0, "occupied": 1, "released": 1}
        for prop in (should_be_occupied, should_be_free, unmanaged):
            db.refresh(prop)
        assert should_be_occupied.status == PropertyStatus.OCCUPIED
        assert should_be_free.status == PropertyStatus.AVAILABLE
        assert unmanaged.status == PropertyStatus.OCCUPIED

    def test_consistent_state_is_left_alone(self, db, sink, landlord, tenant, make_property, make_lease):
        prop = make_property(landlord, status=PropertyStatus.OCCUPIED)
        make_lease(landlord, tenant, prop=prop, status=LeaseStatus.ACTIVE)

        assert LeaseService.reconcile_occupancy(db, sink, now=NOW) == {"activated": 0, "occupied": 0, "released": 0}
