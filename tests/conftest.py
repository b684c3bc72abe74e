"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from estate_ledger.models import Customer, Project, Property, Rental
from estate_ledger.services.catalog import CatalogService
from estate_ledger.services.transactions import TransactionRecorder
from estate_ledger.store import InMemoryRecordStore


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed at 2024-01-15 10:00."""
    return FixedClock(datetime(2024, 1, 15, 10, 0))


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Create a fresh store for each test."""
    return InMemoryRecordStore()


@pytest.fixture
def catalog(store: InMemoryRecordStore, clock: FixedClock) -> CatalogService:
    return CatalogService(store, clock=clock)


@pytest.fixture
def recorder(store: InMemoryRecordStore, clock: FixedClock) -> TransactionRecorder:
    return TransactionRecorder(store, clock=clock)


@pytest.fixture
def project(catalog: CatalogService) -> Project:
    """Create a sample project."""
    return catalog.create_project(
        {
            "name": "Marina Heights",
            "budget": "5000000",
            "startDate": "2023-01-01",
            "endDate": "2025-12-31",
        }
    )


@pytest.fixture
def prop(catalog: CatalogService, project: Project) -> Property:
    """Create a sample property priced at 50,000."""
    return catalog.create_property(
        {
            "name": "Tower A 101",
            "type": "apartment",
            "location": "Dubai Marina",
            "price": "50000",
            "area": "120",
            "projectId": project.id,
        }
    )


@pytest.fixture
def tenant(catalog: CatalogService) -> Customer:
    """Create a sample tenant with an e-mail address."""
    return catalog.create_customer(
        {
            "name": "Jane Tenant",
            "type": "tenant",
            "phone": "+971500000001",
            "email": "jane@example.com",
        }
    )


@pytest.fixture
def buyer(catalog: CatalogService) -> Customer:
    """Create a sample buyer."""
    return catalog.create_customer(
        {"name": "Omar Buyer", "type": "buyer", "phone": "+971500000002"}
    )


@pytest.fixture
def rental(catalog: CatalogService, prop: Property, tenant: Customer) -> Rental:
    """Create a lease at 300/month, paid up to 2024-01-01."""
    return catalog.create_rental(
        {
            "propertyId": prop.id,
            "tenantId": tenant.id,
            "monthlyRent": "300",
            "leaseStart": "2024-01-01",
            "leaseEnd": "2024-12-31",
        }
    )
