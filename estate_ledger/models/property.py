"""Property model and its sale ledger."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import PropertyStatus, PropertyType, SalePaymentStatus


@dataclass
class SaleInfo:
    """Cumulative sale-payment progress of a property.

    Present only once a sale payment has been recorded against the
    property.
    """

    buyer_id: str | None
    sale_date: date
    total_price: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    payment_status: SalePaymentStatus


@dataclass
class Property:
    """Unit of real estate."""

    id: str
    property_no: str  # PRP-0001
    name: str
    property_type: PropertyType
    price: Decimal
    area: Decimal  # Square meters
    location: str
    status: PropertyStatus = PropertyStatus.AVAILABLE
    rental_price: Decimal | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    address: str = ""
    description: str = ""
    features: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    sale_info: SaleInfo | None = None
    project_id: str | None = None
    owner_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
