"""Legacy receipt model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import PaymentMethod, ReceiptType


@dataclass
class Receipt:
    """Standalone income receipt kept from before transactions existed."""

    id: str
    receipt_no: str  # RCP-0001
    receipt_type: ReceiptType
    amount: Decimal
    paid_by: str
    payment_method: PaymentMethod
    date: date
    customer_id: str | None = None
    property_id: str | None = None
    project_id: str | None = None
    rental_id: str | None = None
    reference: str | None = None
    description: str = ""
    created_at: datetime | None = None
