"""Reference documents, contracts and users."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import (
    ContractStatus,
    ContractType,
    DocumentCategory,
    PaymentFrequency,
    UserRole,
)


@dataclass
class Document:
    """Uploaded file, optionally tied to another record."""

    id: str
    name: str
    category: DocumentCategory
    file_type: str
    file_size: int
    file_url: str
    related_type: str | None = None  # property, customer, rental, contract
    related_id: str | None = None
    upload_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class RentalContract:
    """Rental contract with the details printed on the PDF."""

    id: str
    contract_number: str  # RC-YYYYMMDD-XXX
    landlord_name: str
    tenant_name: str
    valid_from: date
    valid_to: date
    monthly_rent: Decimal
    contract_type: ContractType = ContractType.RENTAL
    status: ContractStatus = ContractStatus.DRAFT
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    agreement_period: str = ""
    parties: dict[str, str] = field(default_factory=dict)  # CR, P.O. box, phone, ...
    landlord_signature: str = ""
    tenant_signature: str = ""
    pdf_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class SaleContract:
    """Sale contract with the details printed on the PDF."""

    id: str
    contract_number: str  # SC-YYYYMMDD-XXX
    seller_name: str
    buyer_name: str
    total_price: Decimal
    deposit_amount: Decimal
    remaining_amount: Decimal
    contract_type: ContractType = ContractType.SALE
    status: ContractStatus = ContractStatus.DRAFT
    seller_id: str | None = None
    buyer_id: str | None = None
    parties: dict[str, str] = field(default_factory=dict)  # nationality, address, phone, CR
    property_details: dict[str, str] = field(default_factory=dict)  # wilaya, phase, land number, ...
    deposit_date: date | None = None
    remaining_due_date: date | None = None
    notes: str | None = None
    pdf_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class User:
    """Staff account. Authentication happens outside this package."""

    id: str
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    created_at: datetime | None = None
    updated_at: datetime | None = None
