"""Tests for the transaction recorder."""

import threading
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from estate_ledger.exceptions import NotFoundError, StorageError, ValidationError
from estate_ledger.models import (
    PaymentMethod,
    PropertyStatus,
    RentalPaymentStatus,
    SalePaymentStatus,
    TransactionCategory,
    TransactionType,
)
from estate_ledger.services.transactions import TransactionRecorder, TransactionRequest
from estate_ledger.store import Collection


@pytest.fixture
def rent_payload(project, prop, tenant, rental) -> dict:
    """Payload for a 650 rent payment against the sample lease."""
    return {
        "category": "income",
        "type": "rent_payment",
        "customerId": tenant.id,
        "propertyId": prop.id,
        "projectId": project.id,
        "rentalId": rental.id,
        "amount": "650",
        "paymentMethod": "cash",
        "date": "2024-01-15",
    }


@pytest.fixture
def sale_payload(project, prop, buyer):
    """Build sale-payment payloads for the sample property."""

    def build(amount: str, total: str = "50000") -> dict:
        return {
            "category": "income",
            "type": "sale_payment",
            "customerId": buyer.id,
            "propertyId": prop.id,
            "projectId": project.id,
            "amount": amount,
            "paymentMethod": "bank_transfer",
            "saleDetails": {"totalPrice": total, "paymentTerms": "monthly"},
        }

    return build


class TestValidation:
    """Tests for request validation."""

    def test_every_violation_listed(self, recorder: TransactionRecorder) -> None:
        """Test that all violated rules are reported together."""
        with pytest.raises(ValidationError) as exc_info:
            recorder.record({})

        assert exc_info.value.errors == [
            "Customer is required for income",
            "Property is required",
            "Project is required",
            "Valid amount is required",
        ]

    def test_expense_requires_payee(self, recorder: TransactionRecorder, project, prop) -> None:
        """Test the expense payee rule."""
        with pytest.raises(ValidationError) as exc_info:
            recorder.record(
                {"category": "expense", "type": "utilities", "propertyId": prop.id, "projectId": project.id, "amount": 80}
            )

        assert exc_info.value.errors == ["Paid To is required for expenses"]

    def test_blank_payee_rejected(self, recorder: TransactionRecorder, project, prop) -> None:
        """Test that a whitespace payee counts as missing."""
        with pytest.raises(ValidationError, match="Paid To is required for expenses"):
            recorder.record(
                {"category": "expense", "paidBy": "   ", "propertyId": prop.id, "projectId": project.id, "amount": 80}
            )

    @pytest.mark.parametrize("amount", ["0", "-5", "abc", "NaN", None])
    def test_invalid_amount(self, recorder: TransactionRecorder, rent_payload: dict, amount) -> None:
        """Test that the amount must be a positive number."""
        rent_payload["amount"] = amount

        with pytest.raises(ValidationError) as exc_info:
            recorder.record(rent_payload)

        assert exc_info.value.errors == ["Valid amount is required"]

    def test_invalid_enum(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test that unknown enum values are rejected."""
        rent_payload["category"] = "refund"
        rent_payload["paymentMethod"] = "crypto"

        with pytest.raises(ValidationError) as exc_info:
            recorder.record(rent_payload)

        assert "Invalid category 'refund'; expected one of: income, expense" in exc_info.value.errors
        assert any(message.startswith("Invalid payment method 'crypto'") for message in exc_info.value.errors)

    def test_invalid_date(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        rent_payload["date"] = "15/01/2024"

        with pytest.raises(ValidationError, match="Invalid date"):
            recorder.record(rent_payload)

    def test_sale_details_need_total(self, recorder: TransactionRecorder, sale_payload) -> None:
        """Test that declared sale terms must include a total price."""
        payload = sale_payload("20000")
        payload["saleDetails"] = {"paymentTerms": "monthly"}

        with pytest.raises(ValidationError, match="Invalid sale details"):
            recorder.record(payload)

    def test_nothing_written_on_failure(self, recorder: TransactionRecorder, rent_payload: dict, rental) -> None:
        """Test that a rejected request changes nothing."""
        rent_payload["projectId"] = ""

        with pytest.raises(ValidationError):
            recorder.record(rent_payload)

        assert recorder.store.read_all(Collection.TRANSACTIONS) == []
        assert recorder.store.get(Collection.RENTALS, rental.id) == rental


class TestRecord:
    """Tests for recording transactions."""

    def test_defaults(self, recorder: TransactionRecorder, project, prop, tenant) -> None:
        """Test defaulted fields."""
        transaction = recorder.record(
            {"customerId": tenant.id, "propertyId": prop.id, "projectId": project.id, "amount": "100"}
        )

        assert transaction.transaction_no == "TPL-0001"
        assert transaction.category == TransactionCategory.INCOME
        assert transaction.transaction_type == TransactionType.RENT_PAYMENT
        assert transaction.payment_method == PaymentMethod.CASH
        assert transaction.date == date(2024, 1, 15)
        assert transaction.description == ""
        assert transaction.is_sale_transaction is False
        assert transaction.created_at == datetime(2024, 1, 15, 10, 0)

    def test_sequential_numbers(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test TPL numbering."""
        numbers = [recorder.record(rent_payload).transaction_no for _ in range(3)]

        assert numbers == ["TPL-0001", "TPL-0002", "TPL-0003"]

    def test_numbering_skips_deleted_gap(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test that numbering continues after the highest number on record."""
        first = recorder.record(rent_payload)
        recorder.record(rent_payload)
        recorder.delete(first.id)

        assert recorder.record(rent_payload).transaction_no == "TPL-0003"

    def test_payer_from_customer(self, recorder: TransactionRecorder, rent_payload: dict, tenant) -> None:
        """Test that an income payer defaults to the customer's name."""
        assert recorder.record(rent_payload).paid_by == tenant.name

    def test_explicit_payer_kept(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        rent_payload["paidBy"] = "Employer Ltd"

        assert recorder.record(rent_payload).paid_by == "Employer Ltd"

    def test_unknown_payer(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test the fallback for a customer that does not exist."""
        rent_payload["customerId"] = "ghost"

        assert recorder.record(rent_payload).paid_by == "Unknown"

    def test_expense(self, recorder: TransactionRecorder, project, prop) -> None:
        """Test recording an expense with its payee."""
        transaction = recorder.record(
            {
                "category": "expense",
                "type": "maintenance",
                "paidBy": "CoolAir Services",
                "propertyId": prop.id,
                "projectId": project.id,
                "amount": "1200.50",
                "paymentMethod": "cheque",
                "reference": "CHQ-881",
            }
        )

        assert transaction.category == TransactionCategory.EXPENSE
        assert transaction.paid_by == "CoolAir Services"
        assert transaction.amount == Decimal("1200.50")
        assert transaction.reference == "CHQ-881"

    def test_request_object(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test recording from a TransactionRequest."""
        request = TransactionRequest.from_dict({**rent_payload, "unexpected": "ignored"})

        assert request.transaction_type == "rent_payment"
        assert recorder.record(request).amount == Decimal("650")

    def test_persisted(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        transaction = recorder.record(rent_payload)

        assert recorder.store.get(Collection.TRANSACTIONS, transaction.id) == transaction


class TestSettlementOnRecord:
    """Tests for settlement applied while recording."""

    def test_rent_payment_advances_lease(self, recorder: TransactionRecorder, rent_payload: dict, rental) -> None:
        """Test 650 against 300/month paid up to 2024-01-01."""
        recorder.record(rent_payload)

        stored = recorder.store.get(Collection.RENTALS, rental.id)
        assert stored.paid_until == date(2024, 3, 1)
        assert stored.payment_status == RentalPaymentStatus.PAID

    def test_consecutive_rent_payments(self, recorder: TransactionRecorder, rent_payload: dict, rental) -> None:
        """Test that each payment extends from the previous paid-through date."""
        rent_payload["amount"] = "300"
        recorder.record(rent_payload)
        recorder.record(rent_payload)

        assert recorder.store.get(Collection.RENTALS, rental.id).paid_until == date(2024, 3, 1)

    def test_dangling_rental_still_recorded(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test that a missing rental skips settlement but keeps the transaction."""
        rent_payload["rentalId"] = "deleted-rental"

        transaction = recorder.record(rent_payload)

        assert recorder.store.get(Collection.TRANSACTIONS, transaction.id).rental_id == "deleted-rental"

    def test_sale_payments(self, recorder: TransactionRecorder, sale_payload, prop) -> None:
        """Test 20,000 then 30,000 against a 50,000 sale."""
        first = recorder.record(sale_payload("20000"))

        assert first.is_sale_transaction is True
        stored = recorder.store.get(Collection.PROPERTIES, prop.id)
        assert stored.status == PropertyStatus.SOLD
        assert stored.sale_info.paid_amount == Decimal("20000")
        assert stored.sale_info.remaining_amount == Decimal("30000")
        assert stored.sale_info.payment_status == SalePaymentStatus.PARTIAL

        recorder.record(sale_payload("30000"))

        stored = recorder.store.get(Collection.PROPERTIES, prop.id)
        assert stored.sale_info.paid_amount == Decimal("50000")
        assert stored.sale_info.remaining_amount == Decimal("0")
        assert stored.sale_info.payment_status == SalePaymentStatus.COMPLETED

    def test_later_total_price_not_reconciled(self, recorder: TransactionRecorder, sale_payload, prop) -> None:
        """Test that a different total on a later payment stays on that transaction only."""
        recorder.record(sale_payload("20000", total="50000"))
        second = recorder.record(sale_payload("10000", total="60000"))

        stored = recorder.store.get(Collection.PROPERTIES, prop.id)
        assert stored.sale_info.total_price == Decimal("50000")
        assert stored.sale_info.remaining_amount == Decimal("20000")
        assert recorder.store.get(Collection.TRANSACTIONS, second.id).sale_details.total_price == Decimal("60000")

    def test_storage_failure_rolls_back_everything(
        self, recorder: TransactionRecorder, rent_payload: dict, rental
    ) -> None:
        """Test that a failed insert also undoes the rental update."""
        store = recorder.store
        original_insert = store._insert

        def failing_insert(collection, record):
            if collection == Collection.TRANSACTIONS:
                raise StorageError("disk full")
            original_insert(collection, record)

        with patch.object(store, "_insert", side_effect=failing_insert):
            with pytest.raises(StorageError):
                recorder.record(rent_payload)

        assert store.read_all(Collection.TRANSACTIONS) == []
        stored = store.get(Collection.RENTALS, rental.id)
        assert stored.paid_until == date(2024, 1, 1)
        assert stored.payment_status == RentalPaymentStatus.UNPAID


class TestUpdateDelete:
    """Tests for editing and deleting transactions."""

    def test_update_fields(self, recorder: TransactionRecorder, rent_payload: dict, clock) -> None:
        """Test an explicit edit."""
        transaction = recorder.record(rent_payload)
        clock.now = datetime(2024, 1, 20, 9, 0)

        updated = recorder.update(transaction.id, {"description": "January and February", "amount": "600"})

        assert updated.description == "January and February"
        assert updated.amount == Decimal("600")
        assert updated.transaction_no == transaction.transaction_no
        assert updated.updated_at == datetime(2024, 1, 20, 9, 0)
        assert recorder.store.get(Collection.TRANSACTIONS, transaction.id) == updated

    def test_update_does_not_resettle(self, recorder: TransactionRecorder, rent_payload: dict, rental) -> None:
        """Test that editing the amount leaves the lease as recorded."""
        transaction = recorder.record(rent_payload)

        recorder.update(transaction.id, {"amount": "3000"})

        assert recorder.store.get(Collection.RENTALS, rental.id).paid_until == date(2024, 3, 1)

    def test_update_validation(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        transaction = recorder.record(rent_payload)

        with pytest.raises(ValidationError) as exc_info:
            recorder.update(transaction.id, {"amount": "-1", "projectId": ""})

        assert exc_info.value.errors == ["Project is required", "Valid amount is required"]

    def test_update_missing(self, recorder: TransactionRecorder) -> None:
        with pytest.raises(NotFoundError, match="Transaction nope not found"):
            recorder.update("nope", {"description": "x"})

    def test_update_cannot_drop_expense_payee(self, recorder: TransactionRecorder, project, prop) -> None:
        """Test that an expense keeps a payee after an edit."""
        expense = recorder.record(
            {"category": "expense", "paidBy": "Plumber", "propertyId": prop.id, "projectId": project.id, "amount": "75"}
        )

        with pytest.raises(ValidationError) as exc_info:
            recorder.update(expense.id, {"paidBy": ""})

        assert exc_info.value.errors == ["Paid To is required for expenses"]
        assert recorder.store.get(Collection.TRANSACTIONS, expense.id).paid_by == "Plumber"

    def test_update_cannot_drop_income_customer(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test that income keeps its customer after an edit."""
        transaction = recorder.record(rent_payload)

        with pytest.raises(ValidationError, match="Customer is required for income"):
            recorder.update(transaction.id, {"customerId": None})

        assert recorder.store.get(Collection.TRANSACTIONS, transaction.id).customer_id == rent_payload["customerId"]

    def test_update_category_checked_against_stored_fields(
        self, recorder: TransactionRecorder, project, prop
    ) -> None:
        """Test that turning an expense into income needs a customer on record."""
        expense = recorder.record(
            {"category": "expense", "paidBy": "Plumber", "propertyId": prop.id, "projectId": project.id, "amount": "75"}
        )

        with pytest.raises(ValidationError, match="Customer is required for income"):
            recorder.update(expense.id, {"category": "income"})

    def test_update_clearing_income_payer_resolves_customer(
        self, recorder: TransactionRecorder, rent_payload: dict, tenant
    ) -> None:
        """Test that a cleared income payer falls back to the customer name."""
        rent_payload["paidBy"] = "Employer Ltd"
        transaction = recorder.record(rent_payload)

        updated = recorder.update(transaction.id, {"paidBy": ""})

        assert updated.paid_by == tenant.name

    def test_delete_missing(self, recorder: TransactionRecorder) -> None:
        with pytest.raises(NotFoundError):
            recorder.delete("nope")

    def test_delete_keeps_rent_settlement(self, recorder: TransactionRecorder, rent_payload: dict, rental) -> None:
        """Test that deleting a rent payment does not roll the lease back."""
        transaction = recorder.record(rent_payload)

        recorder.delete(transaction.id)

        assert recorder.store.read_all(Collection.TRANSACTIONS) == []
        stored = recorder.store.get(Collection.RENTALS, rental.id)
        assert stored.paid_until == date(2024, 3, 1)
        assert stored.payment_status == RentalPaymentStatus.PAID

    def test_delete_keeps_sale_ledger(self, recorder: TransactionRecorder, sale_payload, prop) -> None:
        """Test that deleting a sale payment leaves the sale ledger as it was."""
        transaction = recorder.record(sale_payload("20000"))

        recorder.delete(transaction.id)

        stored = recorder.store.get(Collection.PROPERTIES, prop.id)
        assert stored.status == PropertyStatus.SOLD
        assert stored.sale_info.paid_amount == Decimal("20000")


class TestQueries:
    """Tests for get and list."""

    def test_get_joins_related_records(self, recorder: TransactionRecorder, rent_payload: dict, tenant, prop, project) -> None:
        transaction = recorder.record(rent_payload)

        view = recorder.get(transaction.id)

        assert view.transaction == transaction
        assert view.customer.id == tenant.id
        assert view.property.id == prop.id
        assert view.project.id == project.id
        assert view.rental.id == transaction.rental_id

    def test_get_with_dangling_references(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        rent_payload["rentalId"] = "gone"
        transaction = recorder.record(rent_payload)

        assert recorder.get(transaction.id).rental is None

    def test_get_missing(self, recorder: TransactionRecorder) -> None:
        with pytest.raises(NotFoundError):
            recorder.get("nope")

    def test_list_newest_first(self, recorder: TransactionRecorder, rent_payload: dict) -> None:
        """Test ordering by date, then number, descending."""
        for day in ("2024-01-03", "2024-01-10", "2024-01-03"):
            rent_payload["date"] = day
            recorder.record(rent_payload)

        numbers = [view.transaction.transaction_no for view in recorder.list()]

        assert numbers == ["TPL-0002", "TPL-0003", "TPL-0001"]

    def test_list_filters(self, recorder: TransactionRecorder, rent_payload: dict, project, prop) -> None:
        """Test category, type and property filters."""
        recorder.record(rent_payload)
        recorder.record(
            {
                "category": "expense",
                "type": "utilities",
                "paidBy": "DEWA",
                "propertyId": prop.id,
                "projectId": project.id,
                "amount": "90",
            }
        )
        recorder.record({**rent_payload, "propertyId": "other-property"})

        assert len(recorder.list()) == 3
        assert len(recorder.list(category="expense")) == 1
        assert len(recorder.list(category="INCOME", transaction_type="rent_payment")) == 2
        assert len(recorder.list(property_id=prop.id)) == 2
        assert recorder.list(transaction_type=TransactionType.SALE_PAYMENT) == []

    def test_list_invalid_filter(self, recorder: TransactionRecorder) -> None:
        with pytest.raises(ValidationError):
            recorder.list(category="refund")


class TestConcurrency:
    """Tests for recording from several threads against one store."""

    def test_parallel_records_keep_numbers_and_settlement(
        self, recorder: TransactionRecorder, rent_payload: dict, rental
    ) -> None:
        """Test that parallel rent payments get unique numbers and all advance the lease."""
        rent_payload["amount"] = "300"
        failures: list[Exception] = []

        def pay() -> None:
            try:
                for _ in range(20):
                    recorder.record(dict(rent_payload))
            except Exception as exc:
                failures.append(exc)

        threads = [threading.Thread(target=pay) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert failures == []
        stored = recorder.store.read_all(Collection.TRANSACTIONS)
        numbers = {t.transaction_no for t in stored}
        assert len(stored) == 160
        assert len(numbers) == 160
        assert numbers == {f"TPL-{n:04d}" for n in range(1, 161)}
        assert recorder.store.get(Collection.RENTALS, rental.id).paid_until == date(2037, 5, 1)
