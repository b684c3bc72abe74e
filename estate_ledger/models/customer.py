"""Customer model."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_ledger.models.enums import CustomerType


@dataclass
class Customer:
    """Buyer, tenant, lead or owner."""

    id: str
    customer_no: str  # CUS-0001
    name: str
    customer_type: CustomerType
    phone: str
    email: str | None = None
    alternate_phone: str | None = None
    address: str = ""
    emirates_id: str | None = None
    passport_no: str | None = None
    nationality: str | None = None
    notes: str | None = None
    assigned_property_ids: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
