"""Enumeration types for real-estate entities."""

from enum import Enum
from typing import Any, TypeVar

from estate_ledger.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


class TransactionCategory(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionType(str, Enum):
    # Income
    RENT_PAYMENT = "rent_payment"
    SALE_PAYMENT = "sale_payment"
    DEPOSIT = "deposit"
    DEPOSIT_REFUND = "deposit_refund"
    OTHER_INCOME = "other_income"
    # Expense
    LAND_PURCHASE = "land_purchase"
    MAINTENANCE = "maintenance"
    LEGAL_FEES = "legal_fees"
    COMMISSION = "commission"
    UTILITIES = "utilities"
    TAXES = "taxes"
    INSURANCE = "insurance"
    OTHER_EXPENSE = "other_expense"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"


class PaymentTerms(str, Enum):
    LUMP_SUM = "lump_sum"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    CUSTOM = "custom"


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    VILLA = "villa"
    SHOP = "shop"
    OFFICE = "office"
    LAND = "land"
    WAREHOUSE = "warehouse"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    RENTED = "rented"
    SOLD = "sold"
    UNDER_MAINTENANCE = "under_maintenance"


class RentalPaymentStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    OVERDUE = "overdue"


class SalePaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class CustomerType(str, Enum):
    BUYER = "buyer"
    TENANT = "tenant"
    LEAD = "lead"
    OWNER = "owner"


class ProjectStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class ReceiptType(str, Enum):
    RENT = "rent"
    DEPOSIT = "deposit"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class DocumentCategory(str, Enum):
    CONTRACTS = "contracts"
    RECEIPTS = "receipts"
    IDENTITIES = "identities"
    PROPERTY = "property"
    OTHER = "other"


class ContractType(str, Enum):
    SALE = "sale"
    RENTAL = "rental"


class ContractStatus(str, Enum):
    DRAFT = "draft"
    SIGNED = "signed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class DashboardPeriod(str, Enum):
    ALL = "all"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    THIS_YEAR = "this_year"


def parse_enum(enum_cls: type[E], value: Any, field: str) -> E:
    """Map a wire value onto a member of ``enum_cls``.

    Accepts the member itself, its lower-case wire value, or the
    upper-case form older stores persisted (``"RENT_PAYMENT"``).
    Anything else is rejected.

    Raises
    ------
    ValidationError
        If ``value`` does not name a member.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if member.value == normalized:
                return member
    allowed = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"Invalid {field} {value!r}; expected one of: {allowed}")


INCOME_TYPES = frozenset(
    {
        TransactionType.RENT_PAYMENT,
        TransactionType.SALE_PAYMENT,
        TransactionType.DEPOSIT,
        TransactionType.DEPOSIT_REFUND,
        TransactionType.OTHER_INCOME,
    }
)
