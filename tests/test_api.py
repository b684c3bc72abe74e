"""Tests for the request/response boundary."""

from unittest.mock import patch

import pytest

from estate_ledger.api import ApiResponse, LedgerAPI, api_operation
from estate_ledger.exceptions import StorageError
from estate_ledger.services.reminders import RecordingMailer


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def api(store, mailer: RecordingMailer, clock) -> LedgerAPI:
    return LedgerAPI(store, mailer=mailer, clock=clock)


@pytest.fixture
def payload(project, prop, tenant, rental) -> dict:
    return {
        "customerId": tenant.id,
        "propertyId": prop.id,
        "projectId": project.id,
        "rentalId": rental.id,
        "amount": 300,
        "type": "rent_payment",
    }


class TestApiOperation:
    """Tests for error mapping."""

    def test_unexpected_error_is_opaque(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that internal details do not leak into the response."""

        @api_operation("do things")
        def broken() -> ApiResponse:
            raise RuntimeError("secret connection string")

        response = broken()

        assert response.status == 500
        assert response.body == {"error": "Failed to do things"}
        assert "secret connection string" in caplog.text


class TestTransactions:
    """Tests for transaction endpoints."""

    def test_post_created(self, api: LedgerAPI, payload: dict, tenant) -> None:
        """Test that the created transaction is returned with its relations."""
        response = api.post_transaction(payload)

        assert response.status == 201
        assert response.ok
        assert response.body["transaction_no"] == "TPL-0001"
        assert response.body["amount"] == "300"
        assert response.body["customer"]["name"] == tenant.name
        assert response.body["rental"]["paid_until"] == "2024-02-01"

    def test_post_invalid(self, api: LedgerAPI) -> None:
        response = api.post_transaction({"category": "expense"})

        assert response.status == 400
        assert not response.ok
        assert response.body["errors"] == [
            "Paid To is required for expenses",
            "Property is required",
            "Project is required",
            "Valid amount is required",
        ]
        assert response.body["error"] == ", ".join(response.body["errors"])

    def test_post_storage_failure(self, api: LedgerAPI, payload: dict) -> None:
        with patch.object(api.recorder, "record", side_effect=StorageError("disk full")):
            response = api.post_transaction(payload)

        assert response.status == 500
        assert response.body == {"error": "Failed to create transaction"}

    def test_get_and_list(self, api: LedgerAPI, payload: dict, prop) -> None:
        created = api.post_transaction(payload).body

        assert api.get_transaction(created["id"]).body["id"] == created["id"]
        assert len(api.get_transactions({"propertyId": prop.id}).body) == 1
        assert api.get_transactions({"category": "expense"}).body == []
        assert api.get_transactions({"type": "bogus"}).status == 400

    def test_get_missing(self, api: LedgerAPI) -> None:
        response = api.get_transaction("nope")

        assert response.status == 404
        assert response.body == {"error": "Transaction nope not found"}

    def test_put(self, api: LedgerAPI, payload: dict) -> None:
        created = api.post_transaction(payload).body

        response = api.put_transaction(created["id"], {"reference": "INV-9"})

        assert response.status == 200
        assert response.body["reference"] == "INV-9"

    def test_delete(self, api: LedgerAPI, payload: dict) -> None:
        created = api.post_transaction(payload).body

        assert api.delete_transaction(created["id"]).body == {"message": "Transaction deleted successfully"}
        assert api.delete_transaction(created["id"]).status == 404


class TestDashboard:
    """Tests for the dashboard endpoint."""

    def test_default_period(self, api: LedgerAPI, payload: dict) -> None:
        api.post_transaction(payload)

        response = api.get_dashboard()

        assert response.status == 200
        assert response.body["period"] == "all"
        assert response.body["financial"]["revenue"] == "300"
        assert response.body["rentals"]["paid"] == 1

    def test_invalid_period(self, api: LedgerAPI) -> None:
        assert api.get_dashboard({"period": "fortnight"}).status == 400


class TestReminders:
    """Tests for reminder endpoints."""

    def test_send(self, api: LedgerAPI, mailer: RecordingMailer, rental) -> None:
        response = api.post_payment_reminder({"rentalId": rental.id})

        assert response.status == 200
        assert response.body == {
            "success": True,
            "message": "Payment reminder sent to jane@example.com",
            "email_id": "recorded-1",
        }
        assert len(mailer.sent) == 1

    def test_missing_id(self, api: LedgerAPI) -> None:
        response = api.post_payment_reminder({})

        assert response.status == 400
        assert response.body["error"] == "Rental ID is required"

    def test_unknown_rental(self, api: LedgerAPI) -> None:
        assert api.post_payment_reminder({"rentalId": "nope"}).status == 404

    def test_overdue_list(self, api: LedgerAPI, rental) -> None:
        response = api.get_overdue_rentals()

        assert response.status == 200
        assert response.body[0]["rental_id"] == rental.id
        assert response.body[0]["days_overdue"] == 14
        assert response.body[0]["paid_until"] == "2024-01-01"
