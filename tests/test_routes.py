from decimal import Decimal

from models import InvoiceStatus, LeaseStatus, Notification, NotificationPriority, NotificationType, PropertyStatus

LEASE_BODY = {
    "rent_amount": "5000",
    "deposit": "5000",
    "start_date": "2025-01-01",
    "end_date": "2025-12-31",
    "terms": "standard",
}


class TestAuth:
    def test_missing_token(self, client):
        assert client.get("/api/notifications").status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/notifications", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 403

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestLeaseRoutes:
    def test_full_lifecycle(self, client, db, landlord, tenant, make_property, auth_headers):
        prop = make_property(landlord)
        body = dict(LEASE_BODY, property_id=prop.id, landlord_id=landlord.id, tenant_id=tenant.id)

        created = client.post("/api/leases", json=body, headers=auth_headers(landlord.id))
        assert created.status_code == 201
        lease_id = created.json()["id"]
        assert created.json()["status"] == "draft"

        signed = client.post(
            f"/api/leases/{lease_id}/sign", json={"signature": "J. Smith"}, headers=auth_headers(landlord.id)
        )
        assert signed.json()["status"] == "pending_signatures"

        activated = client.post(
            f"/api/leases/{lease_id}/sign", json={"signature": "A. Jones"}, headers=auth_headers(tenant.id, "tenant")
        )
        assert activated.status_code == 200
        assert activated.json()["status"] == "active"
        db.refresh(prop)
        assert prop.status == PropertyStatus.OCCUPIED
        assert db.query(Notification).filter(Notification.title == "Lease Agreement Activated").count() == 2

        terminated = client.post(f"/api/leases/{lease_id}/terminate", headers=auth_headers(landlord.id))
        assert terminated.status_code == 200
        assert terminated.json()["status"] == "terminated"
        db.refresh(prop)
        assert prop.status == PropertyStatus.AVAILABLE

    def test_validation_error_is_400_with_message(self, client, landlord, tenant, make_property, auth_headers):
        prop = make_property(landlord)
        body = dict(LEASE_BODY, property_id=prop.id, landlord_id=landlord.id, tenant_id=tenant.id,
                    end_date="2024-12-31")

        response = client.post("/api/leases", json=body, headers=auth_headers(landlord.id))

        assert response.status_code == 400
        assert response.json()["detail"] == "End date must be after start date"

    def test_cannot_create_lease_for_another_landlord(self, client, landlord, tenant, make_property, auth_headers):
        prop = make_property(landlord)
        body = dict(LEASE_BODY, property_id=prop.id, landlord_id=landlord.id, tenant_id=tenant.id)

        response = client.post("/api/leases", json=body, headers=auth_headers(tenant.id, "tenant"))

        assert response.status_code == 403

    def test_unknown_or_foreign_property(self, client, landlord, tenant, make_user, make_property, auth_headers):
        body = dict(LEASE_BODY, property_id="no-such-property", landlord_id=landlord.id, tenant_id=tenant.id)
        missing = client.post("/api/leases", json=body, headers=auth_headers(landlord.id))
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Property not found"

        foreign = make_property(make_user("Pieter Landlord"))
        body["property_id"] = foreign.id
        response = client.post("/api/leases", json=body, headers=auth_headers(landlord.id))
        assert response.status_code == 403
        assert response.json()["detail"] == "Property does not belong to this landlord"

    def test_double_sign_and_tenant_termination(self, client, landlord, tenant, make_lease, auth_headers):
        lease = make_lease(landlord, tenant, status=LeaseStatus.ACTIVE,
                           landlord_signature="J. Smith", tenant_signature="A. Jones")

        again = client.post(f"/api/leases/{lease.id}/sign", json={"signature": "X"}, headers=auth_headers(landlord.id))
        assert again.status_code == 400
        assert again.json()["detail"] == "Landlord has already signed this lease"

        response = client.post(f"/api/leases/{lease.id}/terminate", headers=auth_headers(tenant.id, "tenant"))
        assert response.status_code == 403
        assert response.json()["detail"] == "Only the landlord can terminate this lease"

    def test_get_and_list(self, client, landlord, tenant, make_user, make_lease, auth_headers):
        lease = make_lease(landlord, tenant)
        stranger = make_user("Stranger Danger")

        assert client.get(f"/api/leases/{lease.id}", headers=auth_headers(tenant.id, "tenant")).status_code == 200
        assert client.get(f"/api/leases/{lease.id}", headers=auth_headers(stranger.id)).status_code == 403
        assert client.get("/api/leases/missing", headers=auth_headers(landlord.id)).status_code == 404

        listed = client.get(f"/api/leases/landlord/{landlord.id}", headers=auth_headers(landlord.id))
        assert [l["id"] for l in listed.json()] == [lease.id]
        assert client.get(f"/api/leases/tenant/{tenant.id}", headers=auth_headers(landlord.id)).status_code == 403
        admin_view = client.get(f"/api/leases/tenant/{tenant.id}", headers=auth_headers("admin-1", "admin"))
        assert len(admin_view.json()) == 1


class TestInvoiceAndPaymentRoutes:
    def test_generate_requires_admin(self, client, landlord, auth_headers):
        response = client.post("/api/invoices/generate", headers=auth_headers(landlord.id))
        assert response.status_code == 403

    def test_generate_pay_and_summarize(self, client, db, landlord, tenant, make_lease, auth_headers):
        make_lease(landlord, tenant, rent_amount=Decimal("5000"), status=LeaseStatus.ACTIVE)
        make_lease(landlord, tenant, rent_amount=Decimal("8000"), status=LeaseStatus.ACTIVE)

        generated = client.post(
            "/api/invoices/generate", params={"period": "2025-03"}, headers=auth_headers("admin-1", "admin")
        )
        assert generated.status_code == 200
        assert generated.json()["count"] == 1
        invoice_id = generated.json()["invoice_ids"][0]

        invoice = client.get(f"/api/invoices/{invoice_id}", headers=auth_headers(landlord.id)).json()
        assert Decimal(invoice["amount"]) == Decimal("1300.00")
        assert invoice["status"] == "pending"
        assert len(invoice["items"]) == 2
        assert len(invoice["lease_ids"]) == 2

        listed = client.get(f"/api/invoices/landlord/{landlord.id}", headers=auth_headers(landlord.id)).json()
        assert listed["total"] == 1

        payment = client.post(
            "/api/payments",
            json={
                "invoice_id": invoice_id,
                "amount": "1300.00",
                "payment_method": "bank_transfer",
                "reference": "EFT-20250305-001",
                "payment_date": "2025-03-05T12:00:00",
            },
            headers=auth_headers(landlord.id),
        )
        assert payment.status_code == 201
        assert payment.json()["payment_method"] == "bank_transfer"

        paid = client.get(f"/api/invoices/{invoice_id}", headers=auth_headers(landlord.id)).json()
        assert paid["status"] == "paid"

        summary = client.get(f"/api/invoices/landlord/{landlord.id}/summary", headers=auth_headers(landlord.id)).json()
        assert summary["paid_count"] == 1
        assert Decimal(summary["outstanding_balance"]) == Decimal("0")

        history = client.get(f"/api/payments/landlord/{landlord.id}", headers=auth_headers(landlord.id)).json()
        assert [p["reference"] for p in history] == ["EFT-20250305-001"]

    def test_overpayment_rejected(self, client, landlord, make_invoice, auth_headers):
        invoice = make_invoice(landlord)

        response = client.post(
            "/api/payments",
            json={
                "invoice_id": invoice.id,
                "amount": "5000",
                "payment_method": "card",
                "reference": "CARD-1",
                "payment_date": "2025-03-05T12:00:00",
            },
            headers=auth_headers(landlord.id),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Payment amount cannot exceed invoice amount"

    def test_landlords_cannot_see_each_others_invoices(self, client, landlord, make_user, make_invoice, auth_headers):
        invoice = make_invoice(landlord)
        other = make_user("Pieter Landlord")

        assert client.get(f"/api/invoices/{invoice.id}", headers=auth_headers(other.id)).status_code == 403
        assert client.get(f"/api/invoices/landlord/{landlord.id}", headers=auth_headers(other.id)).status_code == 403
        assert client.get("/api/invoices/missing", headers=auth_headers(landlord.id)).status_code == 404

    def test_status_filter(self, client, landlord, make_invoice, auth_headers):
        make_invoice(landlord, period="2025-01", status=InvoiceStatus.PAID)
        make_invoice(landlord, period="2025-02")

        response = client.get(
            f"/api/invoices/landlord/{landlord.id}", params={"status": "paid"}, headers=auth_headers(landlord.id)
        )

        assert response.json()["total"] == 1
        assert response.json()["invoices"][0]["billing_period"] == "2025-01"


class TestNotificationRoutes:
    def test_list_and_read(self, client, db, landlord, auth_headers):
        db.add(Notification(
            user_id=landlord.id,
            type=NotificationType.PAYMENT_DUE,
            title="New Commission Invoice",
            message="Your monthly commission invoice of R1300.00 is now due",
            priority=NotificationPriority.HIGH,
            read=False,
            grouped_count=1,
        ))
        db.commit()

        listed = client.get("/api/notifications", headers=auth_headers(landlord.id)).json()
        assert len(listed) == 1

        read = client.patch(f"/api/notifications/{listed[0]['id']}/read", headers=auth_headers(landlord.id))
        assert read.json()["read"] is True

        assert client.patch("/api/notifications/read-all", headers=auth_headers(landlord.id)).json()["count"] == 0

    def test_email_endpoint_validates(self, client, landlord, auth_headers):
        response = client.post("/api/notifications/email", json={"user_id": landlord.id}, headers=auth_headers(landlord.id))

        assert response.status_code == 400

    def test_grouped_endpoint(self, client, landlord, auth_headers):
        response = client.post(
            "/api/notifications/grouped",
            json={"user_id": landlord.id, "type": "new_message", "notifications": [{"message": "a"}, {"message": "b"}]},
            headers=auth_headers(landlord.id),
        )

        assert response.status_code == 200
        assert response.json()["grouped_count"] == 2
