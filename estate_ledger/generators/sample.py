"""Sample portfolio generator.

Everything is created through the catalog and transaction services, so
numbering, validation and settlement behave exactly as they do for real
input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable

from dateutil.relativedelta import relativedelta

from estate_ledger.generators.base import BaseGenerator
from estate_ledger.models import (
    Customer,
    CustomerType,
    PaymentMethod,
    Project,
    Property,
    PropertyStatus,
    PropertyType,
    Rental,
    TransactionType,
)
from estate_ledger.models.enums import INCOME_TYPES
from estate_ledger.services.catalog import CatalogService
from estate_ledger.services.transactions import TransactionRecorder
from estate_ledger.store.base import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class SampleData:
    """Records created by one :meth:`SampleDataGenerator.generate` run."""

    projects: list[Project] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)
    rentals: list[Rental] = field(default_factory=list)
    transactions: int = 0

    def counts(self) -> dict[str, int]:
        return {
            "projects": len(self.projects),
            "properties": len(self.properties),
            "customers": len(self.customers),
            "rentals": len(self.rentals),
            "transactions": self.transactions,
        }


class SampleDataGenerator(BaseGenerator):
    """Generate a small, consistent real-estate portfolio."""

    PROPERTY_TYPES = list(PropertyType)
    PROPERTY_WEIGHTS = [0.40, 0.15, 0.15, 0.15, 0.10, 0.05]

    # Price ranges by property type
    PRICE_RANGES = {
        PropertyType.APARTMENT: (150_000, 600_000),
        PropertyType.VILLA: (500_000, 2_500_000),
        PropertyType.SHOP: (100_000, 400_000),
        PropertyType.OFFICE: (200_000, 900_000),
        PropertyType.LAND: (80_000, 1_000_000),
        PropertyType.WAREHOUSE: (250_000, 1_200_000),
    }

    PROJECT_SUFFIXES = ["Heights", "Gardens", "Residences", "Park"]

    # Recurring running costs; land purchases are left out
    EXPENSE_TYPES = [
        t for t in TransactionType if t not in INCOME_TYPES and t != TransactionType.LAND_PURCHASE
    ]

    def __init__(
        self,
        store: RecordStore,
        seed: int | None = None,
        locale: str = "en_US",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(seed, locale)
        self.clock = clock
        self.catalog = CatalogService(store, clock=clock)
        self.recorder = TransactionRecorder(store, clock=clock)

    def generate(
        self,
        projects: int = 2,
        properties_per_project: int = 5,
        customers: int = 10,
        months: int = 6,
    ) -> SampleData:
        """Create projects, properties, customers, leases and their payments.

        Parameters
        ----------
        projects : int
            Number of projects.
        properties_per_project : int
            Properties created under each project.
        customers : int
            Number of customers; tenants and buyers are drawn from them.
        months : int
            Months of rent and expense history to record.

        Returns
        -------
        SampleData
            The created records.
        """
        data = SampleData()
        today = self.clock().date()
        history_start = today - relativedelta(months=months)

        for _ in range(projects):
            data.projects.append(self._create_project(history_start))
        for project in data.projects:
            for _ in range(properties_per_project):
                data.properties.append(self._create_property(project))
        for _ in range(customers):
            data.customers.append(self._create_customer())

        tenants = [c for c in data.customers if c.customer_type == CustomerType.TENANT]
        buyers = [c for c in data.customers if c.customer_type == CustomerType.BUYER]
        rentable = [p for p in data.properties if p.status == PropertyStatus.RENTED]

        for prop, tenant in zip(rentable, tenants):
            rental = self._create_rental(prop, tenant, history_start)
            data.rentals.append(rental)
            data.transactions += self._pay_rent(rental, today)

        for prop, buyer in zip(self._for_sale(data.properties), buyers):
            data.transactions += self._sell(prop, buyer, history_start, today)

        for prop in data.properties:
            if self.chance(0.5):
                data.transactions += self._record_expense(prop, history_start, today)

        logger.info("Generated sample data: %s", data.counts())
        return data

    def _create_project(self, history_start: date) -> Project:
        start = history_start - timedelta(days=self.rng.randint(30, 365))
        budget = self.money(1_000_000, 20_000_000, 50_000)
        return self.catalog.create_project(
            {
                "name": f"{self.fake.last_name()} {self.pick(self.PROJECT_SUFFIXES)}",
                "budget": budget,
                "startDate": start,
                "endDate": start + timedelta(days=self.rng.randint(365, 3 * 365)),
                "description": self.fake.catch_phrase(),
                "completion": self.rng.randint(10, 90),
                "costs": {
                    "materials": budget * Decimal("0.4"),
                    "labor": budget * Decimal("0.3"),
                    "overhead": budget * Decimal("0.1"),
                },
            }
        )

    def _create_property(self, project: Project) -> Property:
        property_type = self.pick(self.PROPERTY_TYPES, self.PROPERTY_WEIGHTS)
        low, high = self.PRICE_RANGES[property_type]
        price = self.money(low, high, 1_000)
        residential = property_type in (PropertyType.APARTMENT, PropertyType.VILLA)
        status = PropertyStatus.RENTED if self.chance(0.5) else PropertyStatus.AVAILABLE
        return self.catalog.create_property(
            {
                "name": f"{project.name} {property_type.value.title()} {self.rng.randint(1, 999)}",
                "type": property_type.value,
                "location": self.fake.city(),
                "address": self.fake.street_address(),
                "price": price,
                "area": self.money(60, 600),
                "status": status.value,
                "rentalPrice": (price / 200).quantize(Decimal("1")),
                "bedrooms": self.rng.randint(1, 5) if residential else None,
                "bathrooms": self.rng.randint(1, 4) if residential else None,
                "projectId": project.id,
            }
        )

    def _create_customer(self) -> Customer:
        customer_type = self.pick(
            [CustomerType.TENANT, CustomerType.BUYER, CustomerType.LEAD], [0.5, 0.3, 0.2]
        )
        return self.catalog.create_customer(
            {
                "name": self.fake.name(),
                "type": customer_type.value,
                "phone": self.fake.phone_number(),
                "email": self.fake.email(),
                "address": self.fake.address().replace("\n", ", "),
            }
        )

    def _create_rental(self, prop: Property, tenant: Customer, history_start: date) -> Rental:
        lease_start = history_start.replace(day=1)
        return self.catalog.create_rental(
            {
                "propertyId": prop.id,
                "tenantId": tenant.id,
                "monthlyRent": prop.rental_price,
                "depositAmount": prop.rental_price,
                "leaseStart": lease_start,
                "leaseEnd": lease_start + relativedelta(years=1),
                "dueDay": 1,
            }
        )

    def _pay_rent(self, rental: Rental, today: date) -> int:
        """Pay rent month by month; some tenants fall behind."""
        recorded = 0
        due = rental.lease_start
        behind = self.chance(0.3)
        while due <= today:
            if behind and due > today - relativedelta(months=2):
                break
            months = 2 if self.chance(0.15) else 1
            self.recorder.record(
                {
                    "category": "income",
                    "type": TransactionType.RENT_PAYMENT.value,
                    "customerId": rental.tenant_id,
                    "propertyId": rental.property_id,
                    "projectId": self._project_of(rental.property_id),
                    "rentalId": rental.id,
                    "amount": rental.monthly_rent * months,
                    "paymentMethod": self.pick(list(PaymentMethod)).value,
                    "date": due + timedelta(days=self.rng.randint(0, 5)),
                }
            )
            recorded += 1
            due += relativedelta(months=months)
        return recorded

    def _for_sale(self, properties: list[Property]) -> list[Property]:
        available = [p for p in properties if p.status == PropertyStatus.AVAILABLE]
        return available[: max(1, len(available) // 2)] if available else []

    def _sell(self, prop: Property, buyer: Customer, history_start: date, today: date) -> int:
        """Record a sale paid in one to three installments."""
        installments = self.rng.randint(1, 3)
        sale_date = self.fake.date_between(start_date=history_start, end_date=today)
        share = (prop.price / installments).quantize(Decimal("0.01"))
        for number in range(installments):
            self.recorder.record(
                {
                    "category": "income",
                    "type": TransactionType.SALE_PAYMENT.value,
                    "customerId": buyer.id,
                    "propertyId": prop.id,
                    "projectId": prop.project_id,
                    "amount": share,
                    "paymentMethod": PaymentMethod.BANK_TRANSFER.value,
                    "date": min(today, sale_date + relativedelta(months=number)),
                    "saleDetails": {
                        "totalPrice": prop.price,
                        "paymentTerms": "lump_sum" if installments == 1 else "monthly",
                        "monthlyAmount": share if installments > 1 else None,
                    },
                }
            )
        return installments

    def _record_expense(self, prop: Property, history_start: date, today: date) -> int:
        expense_type = self.pick(self.EXPENSE_TYPES)
        self.recorder.record(
            {
                "category": "expense",
                "type": expense_type.value,
                "paidBy": self.fake.company(),
                "propertyId": prop.id,
                "projectId": prop.project_id,
                "amount": self.money(200, 15_000),
                "paymentMethod": self.pick(list(PaymentMethod)).value,
                "date": self.fake.date_between(start_date=history_start, end_date=today),
                "description": f"{expense_type.value.replace('_', ' ').title()} - {prop.name}",
            }
        )
        return 1

    def _project_of(self, property_id: str) -> str:
        prop = self.catalog.get("properties", property_id)
        return prop.project_id or ""
