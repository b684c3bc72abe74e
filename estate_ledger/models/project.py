"""Development project model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from estate_ledger.models.enums import ProjectStatus


@dataclass
class ProjectCosts:
    """Cost breakdown of a project."""

    materials: Decimal = Decimal("0")
    labor: Decimal = Decimal("0")
    overhead: Decimal = Decimal("0")


@dataclass
class Project:
    """Development project that groups properties and their transactions."""

    id: str
    project_no: str  # PRJ-0001
    name: str
    budget: Decimal
    start_date: date
    end_date: date
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    description: str = ""
    spent: Decimal = Decimal("0")
    completion: int = 0  # Percent
    costs: ProjectCosts = field(default_factory=ProjectCosts)
    created_at: datetime | None = None
    updated_at: datetime | None = None
