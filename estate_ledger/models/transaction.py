"""Financial transaction model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import (
    PaymentMethod,
    PaymentTerms,
    TransactionCategory,
    TransactionType,
)


@dataclass
class SaleDetails:
    """Sale terms declared by a sale-payment transaction."""

    total_price: Decimal
    paid_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    payment_terms: PaymentTerms = PaymentTerms.LUMP_SUM
    monthly_amount: Decimal | None = None
    next_due_date: date | None = None


@dataclass
class Transaction:
    """Income or expense event anchored to a project and a property.

    ``paid_by`` is the payer for income and the payee for expenses.
    """

    id: str
    transaction_no: str  # TPL-0001
    project_id: str
    property_id: str
    category: TransactionCategory
    transaction_type: TransactionType
    amount: Decimal
    paid_by: str
    payment_method: PaymentMethod
    date: date
    customer_id: str | None = None
    rental_id: str | None = None
    is_sale_transaction: bool = False
    sale_details: SaleDetails | None = None
    reference: str | None = None
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
