"""Tests for domain models and enum parsing."""

from datetime import date
from decimal import Decimal

import pytest

from estate_ledger.exceptions import ValidationError
from estate_ledger.models import (
    DashboardPeriod,
    PaymentMethod,
    PropertyStatus,
    Rental,
    RentalPaymentStatus,
    Transaction,
    TransactionCategory,
    TransactionType,
    parse_enum,
)
from estate_ledger.models.enums import INCOME_TYPES


class TestParseEnum:
    """Tests for parse_enum."""

    def test_wire_value(self) -> None:
        """Test lower-case wire values."""
        assert parse_enum(TransactionType, "rent_payment", "type") == TransactionType.RENT_PAYMENT

    def test_legacy_upper_case(self) -> None:
        """Test the upper-case form older stores persisted."""
        assert parse_enum(PropertyStatus, "UNDER_MAINTENANCE", "status") == PropertyStatus.UNDER_MAINTENANCE
        assert parse_enum(PaymentMethod, " Bank_Transfer ", "payment method") == PaymentMethod.BANK_TRANSFER

    def test_member_passes_through(self) -> None:
        """Test that members are returned unchanged."""
        assert parse_enum(TransactionCategory, TransactionCategory.EXPENSE, "category") is TransactionCategory.EXPENSE

    def test_unknown_value(self) -> None:
        """Test that unknown values list the allowed ones."""
        with pytest.raises(ValidationError) as exc_info:
            parse_enum(TransactionCategory, "refund", "category")

        assert exc_info.value.errors == ["Invalid category 'refund'; expected one of: income, expense"]

    def test_non_string_rejected(self) -> None:
        """Test that non-string values are rejected."""
        with pytest.raises(ValidationError):
            parse_enum(DashboardPeriod, 7, "period")


class TestEnums:
    """Tests for enum values."""

    def test_enums_are_strings(self) -> None:
        """Test that enum members compare equal to their wire values."""
        assert RentalPaymentStatus.PARTIALLY_PAID == "partially_paid"
        assert DashboardPeriod.THIS_WEEK.value == "this_week"

    def test_income_types(self) -> None:
        """Test the income transaction types."""
        assert TransactionType.RENT_PAYMENT in INCOME_TYPES
        assert TransactionType.SALE_PAYMENT in INCOME_TYPES
        assert TransactionType.MAINTENANCE not in INCOME_TYPES


class TestModels:
    """Tests for model defaults."""

    def test_rental_defaults(self) -> None:
        """Test that a rental starts unpaid with due day 1."""
        rental = Rental(
            id="r1",
            rental_no="RNT-0001",
            property_id="p1",
            tenant_id="c1",
            monthly_rent=Decimal("300"),
            lease_start=date(2024, 1, 1),
            lease_end=date(2024, 12, 31),
            paid_until=date(2024, 1, 1),
        )

        assert rental.payment_status == RentalPaymentStatus.UNPAID
        assert rental.due_day == 1
        assert rental.deposit_amount == Decimal("0")

    def test_transaction_defaults(self) -> None:
        """Test transaction optional fields."""
        transaction = Transaction(
            id="t1",
            transaction_no="TPL-0001",
            project_id="prj",
            property_id="prp",
            category=TransactionCategory.EXPENSE,
            transaction_type=TransactionType.UTILITIES,
            amount=Decimal("120.50"),
            paid_by="Water Co",
            payment_method=PaymentMethod.CARD,
            date=date(2024, 1, 10),
        )

        assert transaction.description == ""
        assert transaction.is_sale_transaction is False
        assert transaction.sale_details is None
        assert transaction.customer_id is None
