"""Rental (lease) model."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import RentalPaymentStatus


@dataclass
class Rental:
    """Lease between one property and one tenant.

    ``paid_until`` is the date up to which rent is considered settled.
    It starts at ``lease_start`` and only moves forward through rent
    payments or an explicit edit.
    """

    id: str
    rental_no: str  # RNT-0001
    property_id: str
    tenant_id: str
    monthly_rent: Decimal
    lease_start: date
    lease_end: date
    paid_until: date
    deposit_amount: Decimal = Decimal("0")
    due_day: int = 1
    payment_status: RentalPaymentStatus = RentalPaymentStatus.UNPAID
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
