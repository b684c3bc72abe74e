"""Real-estate domain models."""

from estate_ledger.models.customer import Customer
from estate_ledger.models.documents import Document, RentalContract, SaleContract, User
from estate_ledger.models.enums import (
    ContractStatus,
    ContractType,
    CustomerType,
    DashboardPeriod,
    DocumentCategory,
    PaymentFrequency,
    PaymentMethod,
    PaymentTerms,
    ProjectStatus,
    PropertyStatus,
    PropertyType,
    ReceiptType,
    RentalPaymentStatus,
    SalePaymentStatus,
    TransactionCategory,
    TransactionType,
    UserRole,
    parse_enum,
)
from estate_ledger.models.project import Project, ProjectCosts
from estate_ledger.models.property import Property, SaleInfo
from estate_ledger.models.receipt import Receipt
from estate_ledger.models.rental import Rental
from estate_ledger.models.transaction import SaleDetails, Transaction

__all__ = [
    "ContractStatus",
    "ContractType",
    "Customer",
    "CustomerType",
    "DashboardPeriod",
    "Document",
    "DocumentCategory",
    "PaymentFrequency",
    "PaymentMethod",
    "PaymentTerms",
    "Project",
    "ProjectCosts",
    "ProjectStatus",
    "Property",
    "PropertyStatus",
    "PropertyType",
    "Receipt",
    "ReceiptType",
    "Rental",
    "RentalContract",
    "RentalPaymentStatus",
    "SaleContract",
    "SaleDetails",
    "SaleInfo",
    "SalePaymentStatus",
    "Transaction",
    "TransactionCategory",
    "TransactionType",
    "User",
    "UserRole",
    "parse_enum",
]
