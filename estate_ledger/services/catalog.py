"""Master data: projects, properties, customers, rentals and receipts,
plus uploaded documents and rental/sale contracts."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Mapping

from estate_ledger.identifiers import (
    DAILY_SEQUENCES,
    SEQUENCES,
    new_record_id,
    next_daily_number,
    next_sequence,
)
from estate_ledger.models import (
    ContractStatus,
    Customer,
    CustomerType,
    Document,
    DocumentCategory,
    PaymentFrequency,
    PaymentMethod,
    Project,
    ProjectCosts,
    ProjectStatus,
    Property,
    PropertyStatus,
    PropertyType,
    Receipt,
    ReceiptType,
    Rental,
    RentalContract,
    RentalPaymentStatus,
    SaleContract,
)
from estate_ledger.services.validation import FieldReader
from estate_ledger.store.base import Collection, RecordStore, as_collection

logger = logging.getLogger(__name__)

MIN_DUE_DAY = 1
MAX_DUE_DAY = 28

# Collections emptied by clean_data; user accounts are kept.
CLEANABLE = tuple(coll for coll in Collection if coll != Collection.USERS)

# camelCase acronyms ("tenantCR") snake-case letter by letter
CONTRACT_ALIASES = {
    "landlord_c_r": "landlord_cr",
    "landlord_p_o_box": "landlord_po_box",
    "tenant_c_r": "tenant_cr",
    "seller_c_r": "seller_cr",
    "buyer_c_r": "buyer_cr",
}

RENTAL_CONTRACT_PARTIES = (
    "landlord_cr",
    "landlord_po_box",
    "landlord_postal_code",
    "landlord_address",
    "tenant_id_passport",
    "tenant_labour_card",
    "tenant_phone",
    "tenant_email",
    "tenant_sponsor",
    "tenant_cr",
)
SALE_CONTRACT_PARTIES = (
    "seller_cr",
    "seller_nationality",
    "seller_address",
    "seller_phone",
    "buyer_cr",
    "buyer_nationality",
    "buyer_address",
    "buyer_phone",
)
# Read from ``property_<name>`` payload keys
SALE_PROPERTY_DETAILS = ("wilaya", "governorate", "phase", "land_number", "area")
SALE_AMOUNTS = ("total_price", "deposit_amount", "remaining_amount")

ReadFields = Callable[[FieldReader, Any], dict[str, Any]]


class CatalogService:
    """Create, edit, read and delete the records transactions refer to.

    Deleting a record never cascades: transactions and rentals that
    reference it keep the now-dangling id. Edits validate only the
    fields they carry, plus any rule that ties a sent field to a stored
    one (e.g. end date after start date).

    Parameters
    ----------
    store : RecordStore
        Backing record store.
    clock : Callable[[], datetime]
        Source of "now" for timestamps.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = datetime.now) -> None:
        self.store = store
        self.clock = clock

    def _create(self, collection: Collection, build: Callable[..., Any]) -> Any:
        with self.store.transaction():
            now = self.clock()
            ids = {"id": new_record_id(), "created_at": now, "updated_at": now}
            if collection.value in SEQUENCES:
                ids[_sequence_field(collection)] = next_sequence(self.store, collection)
            elif collection.value in DAILY_SEQUENCES:
                ids["contract_number"] = next_daily_number(self.store, collection, now.date())
            record = build(**ids)
            self.store.insert(collection, record)
        logger.info(
            "Created %s %s",
            collection.label.lower(),
            _display_number(collection, record),
            extra={"collection": collection.value},
        )
        return record

    def _update(
        self,
        collection: Collection,
        record_id: str,
        changes: Mapping[str, Any],
        read: ReadFields,
        aliases: Mapping[str, str] | None = None,
    ) -> Any:
        with self.store.transaction():
            current = self.store.get(collection, record_id)
            reader = FieldReader(changes, aliases)
            updates = read(reader, current)
            reader.raise_if_errors()

            updated = replace(current, **updates, updated_at=self.clock())
            self.store.update(collection, updated)

        logger.info(
            "Updated %s %s: %s",
            collection.label.lower(),
            _display_number(collection, updated),
            ", ".join(sorted(updates)) or "no fields",
            extra={"collection": collection.value},
        )
        return updated

    # Projects
    def create_project(self, payload: Mapping[str, Any]) -> Project:
        reader = FieldReader(payload)
        values = self._read_project(reader)
        reader.raise_if_errors()
        return self._create(Collection.PROJECTS, lambda **ids: Project(**values, **ids))

    def update_project(self, project_id: str, changes: Mapping[str, Any]) -> Project:
        """Edit the given fields of a project.

        Raises
        ------
        NotFoundError
            If the project does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(Collection.PROJECTS, project_id, changes, self._read_project)

    def _read_project(self, reader: FieldReader, current: Project | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("name"):
            values["name"] = reader.text("name", required="Project name is required")
        if wanted("budget"):
            values["budget"] = reader.decimal(
                "budget", required="Budget must be greater than 0", positive="Budget must be greater than 0"
            )
        if wanted("start_date"):
            values["start_date"] = reader.date("start_date", required="Start date is required")
        if wanted("end_date"):
            values["end_date"] = reader.date("end_date", required="End date is required")
        start = values.get("start_date", getattr(current, "start_date", None))
        end = values.get("end_date", getattr(current, "end_date", None))
        if start and end and end <= start:
            reader.error("End date must be after start date")

        if wanted("status"):
            values["status"] = reader.enum(ProjectStatus, "status", default=ProjectStatus.IN_PROGRESS)
        if wanted("costs"):
            values["costs"] = _read_costs(reader)
        if wanted("completion"):
            values["completion"] = reader.integer("completion", default=0)
        if wanted("description"):
            values["description"] = reader.text("description") or ""
        if wanted("spent"):
            values["spent"] = reader.decimal("spent") or Decimal("0")
        return values

    # Properties
    def create_property(self, payload: Mapping[str, Any]) -> Property:
        reader = FieldReader(payload, {"type": "property_type"})
        values = self._read_property(reader)
        reader.raise_if_errors()
        return self._create(Collection.PROPERTIES, lambda **ids: Property(**values, **ids))

    def update_property(self, property_id: str, changes: Mapping[str, Any]) -> Property:
        """Edit the given fields of a property.

        The sale ledger is not editable here; it only changes through
        sale payments.

        Raises
        ------
        NotFoundError
            If the property does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(
            Collection.PROPERTIES, property_id, changes, self._read_property, {"type": "property_type"}
        )

    def _read_property(self, reader: FieldReader, current: Property | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("name"):
            values["name"] = reader.text("name", required="Property name is required")
        if wanted("property_type"):
            values["property_type"] = reader.enum(
                PropertyType, "property_type", required="Property type is required"
            )
        if wanted("location"):
            values["location"] = reader.text("location", required="Location is required")
        if wanted("price"):
            values["price"] = reader.decimal(
                "price", required="Price must be greater than 0", positive="Price must be greater than 0"
            )
        if wanted("area"):
            values["area"] = reader.decimal(
                "area", required="Area must be greater than 0", positive="Area must be greater than 0"
            )
        if wanted("status"):
            values["status"] = reader.enum(PropertyStatus, "status", default=PropertyStatus.AVAILABLE)
        if wanted("rental_price"):
            values["rental_price"] = reader.decimal("rental_price")
        for name in ("bedrooms", "bathrooms"):
            if wanted(name):
                values[name] = reader.integer(name)
        for name in ("address", "description"):
            if wanted(name):
                values[name] = reader.text(name) or ""
        for name in ("features", "images"):
            if wanted(name):
                values[name] = reader.strings(name)
        for name in ("project_id", "owner_id"):
            if wanted(name):
                values[name] = reader.text(name)
        return values

    # Customers
    def create_customer(self, payload: Mapping[str, Any]) -> Customer:
        reader = FieldReader(payload, {"type": "customer_type"})
        values = self._read_customer(reader)
        reader.raise_if_errors()
        return self._create(Collection.CUSTOMERS, lambda **ids: Customer(**values, **ids))

    def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> Customer:
        """Edit the given fields of a customer.

        Raises
        ------
        NotFoundError
            If the customer does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(
            Collection.CUSTOMERS, customer_id, changes, self._read_customer, {"type": "customer_type"}
        )

    def _read_customer(self, reader: FieldReader, current: Customer | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("name"):
            values["name"] = reader.text("name", required="Customer name is required")
        if wanted("customer_type"):
            values["customer_type"] = reader.enum(
                CustomerType, "customer_type", required="Customer type is required"
            )
        if wanted("phone"):
            values["phone"] = reader.text("phone", required="Phone number is required")
        for name in ("email", "alternate_phone", "emirates_id", "passport_no", "nationality", "notes"):
            if wanted(name):
                values[name] = reader.text(name)
        if wanted("address"):
            values["address"] = reader.text("address") or ""
        if wanted("assigned_property_ids"):
            values["assigned_property_ids"] = reader.strings("assigned_property_ids")
        return values

    # Rentals
    def create_rental(self, payload: Mapping[str, Any]) -> Rental:
        """Create a lease.

        Rentals start ``unpaid`` with rent settled up to the lease start,
        unless the payload says otherwise.
        """
        reader = FieldReader(payload)
        fields = self._read_rental(reader)
        reader.raise_if_errors()

        fields.setdefault("paid_until", fields["lease_start"])
        return self._create(Collection.RENTALS, lambda **ids: Rental(**fields, **ids))

    def update_rental(self, rental_id: str, changes: Mapping[str, Any]) -> Rental:
        """Edit a lease, including manual payment-status overrides.

        Raises
        ------
        NotFoundError
            If the rental does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(Collection.RENTALS, rental_id, changes, self._read_rental)

    def _read_rental(self, reader: FieldReader, current: Rental | None = None) -> dict[str, Any]:
        """Read rental fields; on update only the fields present are read."""
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("property_id"):
            property_id = reader.text("property_id", required="Property is required")
            if property_id and self.store.find_by_id(Collection.PROPERTIES, property_id) is None:
                reader.error("Selected property does not exist")
            values["property_id"] = property_id
        if wanted("tenant_id"):
            tenant_id = reader.text("tenant_id", required="Tenant is required")
            if tenant_id and self.store.find_by_id(Collection.CUSTOMERS, tenant_id) is None:
                reader.error("Selected tenant does not exist")
            values["tenant_id"] = tenant_id
        if wanted("monthly_rent"):
            values["monthly_rent"] = reader.decimal(
                "monthly_rent",
                required="Monthly rent must be greater than 0",
                positive="Monthly rent must be greater than 0",
            )
        if wanted("lease_start"):
            values["lease_start"] = reader.date("lease_start", required="Lease start date is required")
        if wanted("lease_end"):
            values["lease_end"] = reader.date("lease_end", required="Lease end date is required")
        start = values.get("lease_start", getattr(current, "lease_start", None))
        end = values.get("lease_end", getattr(current, "lease_end", None))
        if start and end and end <= start:
            reader.error("Lease end date must be after start date")

        if wanted("due_day"):
            due_day = reader.integer("due_day", default=MIN_DUE_DAY)
            if due_day is not None and not MIN_DUE_DAY <= due_day <= MAX_DUE_DAY:
                reader.error(f"Due day must be between {MIN_DUE_DAY} and {MAX_DUE_DAY}")
            values["due_day"] = due_day
        if wanted("deposit_amount"):
            values["deposit_amount"] = reader.decimal("deposit_amount") or Decimal("0")
        if wanted("payment_status"):
            values["payment_status"] = reader.enum(
                RentalPaymentStatus, "payment_status", default=RentalPaymentStatus.UNPAID
            )
        if reader.has("paid_until"):
            values["paid_until"] = reader.date("paid_until", required="Paid until date is required")
        if wanted("notes"):
            values["notes"] = reader.text("notes")
        return values

    # Receipts
    def create_receipt(self, payload: Mapping[str, Any]) -> Receipt:
        reader = FieldReader(payload, {"type": "receipt_type"})
        receipt_type = reader.enum(ReceiptType, "receipt_type", required="Receipt type is required")
        amount = reader.decimal(
            "amount", required="Amount must be greater than 0", positive="Amount must be greater than 0"
        )
        paid_by = reader.text("paid_by", required="Paid by is required")
        payment_method = reader.enum(PaymentMethod, "payment_method", required="Payment method is required")
        receipt_date = reader.date("date")
        reader.raise_if_errors()

        return self._create(
            Collection.RECEIPTS,
            lambda id, created_at, updated_at, receipt_no: Receipt(
                id=id,
                receipt_no=receipt_no,
                receipt_type=receipt_type,
                amount=amount,
                paid_by=paid_by,
                payment_method=payment_method,
                date=receipt_date or created_at.date(),
                customer_id=reader.text("customer_id"),
                property_id=reader.text("property_id"),
                project_id=reader.text("project_id"),
                rental_id=reader.text("rental_id"),
                reference=reader.text("reference"),
                description=reader.text("description") or "",
                created_at=created_at,
            ),
        )

    # Documents
    def create_document(self, payload: Mapping[str, Any]) -> Document:
        """Register an uploaded file.

        The category defaults to ``other`` and the upload date to today.
        """
        reader = FieldReader(payload)
        values = self._read_document(reader)
        reader.raise_if_errors()

        def build(created_at: datetime, **ids: Any) -> Document:
            values["upload_date"] = values["upload_date"] or created_at.date()
            return Document(**values, created_at=created_at, **ids)

        return self._create(Collection.DOCUMENTS, build)

    def update_document(self, document_id: str, changes: Mapping[str, Any]) -> Document:
        """Edit the given fields of a document.

        Raises
        ------
        NotFoundError
            If the document does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(Collection.DOCUMENTS, document_id, changes, self._read_document)

    def _read_document(self, reader: FieldReader, current: Document | None = None) -> dict[str, Any]:
        """A ``property_id`` sent without a ``related_id`` ties the document to that property."""
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("name"):
            values["name"] = reader.text("name", required="Document name is required")
        if wanted("file_type"):
            values["file_type"] = reader.text("file_type", required="File type is required")
        if wanted("file_url"):
            values["file_url"] = reader.text("file_url", required="File URL is required")
        if wanted("file_size"):
            file_size = reader.integer("file_size")
            if file_size is None or file_size < 0:
                reader.error("Valid file size is required")
            values["file_size"] = file_size
        if wanted("category"):
            values["category"] = reader.enum(DocumentCategory, "category", default=DocumentCategory.OTHER)
        for name in ("related_type", "related_id"):
            if wanted(name):
                values[name] = reader.text(name)
        property_id = reader.text("property_id")
        if property_id and not reader.text("related_id"):
            values["related_type"], values["related_id"] = "property", property_id
        if wanted("upload_date"):
            values["upload_date"] = reader.date("upload_date")
        return values

    # Contracts
    def create_rental_contract(self, payload: Mapping[str, Any]) -> RentalContract:
        """Create a rental contract.

        Numbered ``RC-YYYYMMDD-NNN`` unless the payload carries a number.
        Contracts start as monthly drafts unless the payload says otherwise.
        """
        reader = FieldReader(payload, CONTRACT_ALIASES)
        values = self._read_rental_contract(reader)
        given_number = reader.text("contract_number")
        reader.raise_if_errors()

        return self._create(
            Collection.RENTAL_CONTRACTS,
            lambda contract_number, **ids: RentalContract(
                contract_number=given_number or contract_number, **values, **ids
            ),
        )

    def update_rental_contract(self, contract_id: str, changes: Mapping[str, Any]) -> RentalContract:
        """Edit the given terms of a rental contract; its number is fixed.

        Raises
        ------
        NotFoundError
            If the contract does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(
            Collection.RENTAL_CONTRACTS, contract_id, changes, self._read_rental_contract, CONTRACT_ALIASES
        )

    def _read_rental_contract(
        self, reader: FieldReader, current: RentalContract | None = None
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("landlord_name"):
            values["landlord_name"] = reader.text("landlord_name", required="Landlord name is required")
        if wanted("tenant_name"):
            values["tenant_name"] = reader.text("tenant_name", required="Tenant name is required")
        # Kept with the other party details
        if wanted("tenant_id_passport"):
            reader.text("tenant_id_passport", required="Tenant ID/Passport is required")
        if wanted("tenant_phone"):
            reader.text("tenant_phone", required="Tenant phone is required")
        if wanted("valid_from"):
            values["valid_from"] = reader.date("valid_from", required="Contract start date is required")
        if wanted("valid_to"):
            values["valid_to"] = reader.date("valid_to", required="Contract end date is required")
        if wanted("monthly_rent"):
            values["monthly_rent"] = reader.decimal(
                "monthly_rent",
                required="Monthly rent must be greater than 0",
                positive="Monthly rent must be greater than 0",
            )
        start = values.get("valid_from", getattr(current, "valid_from", None))
        end = values.get("valid_to", getattr(current, "valid_to", None))
        if start and end and end <= start:
            reader.error("Contract end date must be after start date")

        if wanted("status"):
            values["status"] = reader.enum(ContractStatus, "status", default=ContractStatus.DRAFT)
        if wanted("payment_frequency"):
            values["payment_frequency"] = reader.enum(
                PaymentFrequency, "payment_frequency", default=PaymentFrequency.MONTHLY
            )
        for name in ("agreement_period", "landlord_signature", "tenant_signature"):
            if wanted(name):
                values[name] = reader.text(name) or ""
        if wanted("pdf_url"):
            values["pdf_url"] = reader.text("pdf_url")
        if current is None or any(reader.has(name) for name in RENTAL_CONTRACT_PARTIES):
            values["parties"] = _read_details(
                reader, RENTAL_CONTRACT_PARTIES, getattr(current, "parties", None)
            )
        return values

    def create_sale_contract(self, payload: Mapping[str, Any]) -> SaleContract:
        """Create a sale contract.

        Numbered ``SC-YYYYMMDD-NNN`` unless the payload carries a number,
        and recorded as signed unless it says otherwise. Missing amounts
        are zero, except the remaining amount which defaults to the total
        less the deposit. The deposit date defaults to today.

        Raises
        ------
        ValidationError
            If a party is missing, a referenced customer does not exist,
            or an amount is invalid or negative.
        """
        reader = FieldReader(payload, CONTRACT_ALIASES)
        values = self._read_sale_contract(reader)
        given_number = reader.text("contract_number")
        reader.raise_if_errors()

        def build(contract_number: str, created_at: datetime, **ids: Any) -> SaleContract:
            values["deposit_date"] = values["deposit_date"] or created_at.date()
            return SaleContract(
                contract_number=given_number or contract_number, created_at=created_at, **values, **ids
            )

        return self._create(Collection.SALE_CONTRACTS, build)

    def update_sale_contract(self, contract_id: str, changes: Mapping[str, Any]) -> SaleContract:
        """Edit the given terms of a sale contract; its number is fixed.

        Raises
        ------
        NotFoundError
            If the contract does not exist.
        ValidationError
            If a provided field is invalid.
        """
        return self._update(
            Collection.SALE_CONTRACTS, contract_id, changes, self._read_sale_contract, CONTRACT_ALIASES
        )

    def _read_sale_contract(self, reader: FieldReader, current: SaleContract | None = None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        wanted = _fields_wanted(reader, current)

        if wanted("seller_name"):
            values["seller_name"] = reader.text("seller_name", required="Seller name is required")
        if wanted("buyer_name"):
            values["buyer_name"] = reader.text("buyer_name", required="Buyer name is required")
        for role in ("seller", "buyer"):
            name = f"{role}_id"
            if wanted(name):
                customer_id = reader.text(name)
                if customer_id and self.store.find_by_id(Collection.CUSTOMERS, customer_id) is None:
                    reader.error(f"Selected {role} does not exist")
                values[name] = customer_id

        for name in ("total_price", "deposit_amount"):
            if wanted(name):
                values[name] = reader.decimal(name) or Decimal("0")
        if wanted("remaining_amount"):
            remaining = reader.decimal("remaining_amount")
            if remaining is None:
                total = values.get("total_price", getattr(current, "total_price", Decimal("0")))
                deposit = values.get("deposit_amount", getattr(current, "deposit_amount", Decimal("0")))
                remaining = total - deposit
            values["remaining_amount"] = remaining
        if any(values[name] < 0 for name in SALE_AMOUNTS if name in values):
            reader.error("Contract amounts cannot be negative")

        if wanted("status"):
            values["status"] = reader.enum(ContractStatus, "status", default=ContractStatus.SIGNED)
        for name in ("deposit_date", "remaining_due_date"):
            if wanted(name):
                values[name] = reader.date(name)
        for name in ("notes", "pdf_url"):
            if wanted(name):
                values[name] = reader.text(name)
        if current is None or any(reader.has(name) for name in SALE_CONTRACT_PARTIES):
            values["parties"] = _read_details(
                reader, SALE_CONTRACT_PARTIES, getattr(current, "parties", None)
            )
        if current is None or any(reader.has(f"property_{name}") for name in SALE_PROPERTY_DETAILS):
            values["property_details"] = _read_details(
                reader, SALE_PROPERTY_DETAILS, getattr(current, "property_details", None), prefix="property_"
            )
        return values

    # Generic access
    def get(self, collection: Collection | str, record_id: str) -> Any:
        return self.store.get(collection, record_id)

    def list(self, collection: Collection | str) -> list[Any]:
        """Records of ``collection``, newest first."""
        records = self.store.read_all(collection)
        return sorted(records, key=_created_key, reverse=True)

    def delete(self, collection: Collection | str, record_id: str) -> None:
        coll = as_collection(collection)
        self.store.delete(coll, record_id)
        logger.info("Deleted %s %s", coll.label.lower(), record_id)

    def clean_data(self) -> dict[str, int]:
        """Empty every collection except users in one unit of work.

        Returns
        -------
        dict[str, int]
            Records removed per collection.
        """
        with self.store.transaction():
            removed = {coll.value: self.store.clear(coll) for coll in CLEANABLE}
        logger.warning("Cleaned all data: %s", removed)
        return removed


def _fields_wanted(reader: FieldReader, current: Any) -> Callable[[str], bool]:
    """On create every field is read; on update only the ones sent."""
    return lambda name: current is None or reader.has(name)


def _read_costs(reader: FieldReader) -> ProjectCosts:
    cost_reader = FieldReader(reader.mapping("costs") or {})
    costs = ProjectCosts(
        materials=cost_reader.decimal("materials") or Decimal("0"),
        labor=cost_reader.decimal("labor") or Decimal("0"),
        overhead=cost_reader.decimal("overhead") or Decimal("0"),
    )
    for message in cost_reader.errors:
        reader.error(f"Invalid costs: {message}")
    return costs


def _read_details(
    reader: FieldReader,
    names: tuple[str, ...],
    current: Mapping[str, str] | None = None,
    prefix: str = "",
) -> dict[str, str]:
    """Sent ``prefix + name`` fields keyed by ``name``, merged over ``current``.

    A blank value removes the entry.
    """
    details = dict(current or {})
    for name in names:
        value = reader.text(prefix + name)
        if value:
            details[name] = value
        elif reader.has(prefix + name):
            details.pop(name, None)
    return details


def _sequence_field(collection: Collection) -> str:
    return SEQUENCES[collection.value][0]


def _display_number(collection: Collection, record: Any) -> str:
    if collection.value in SEQUENCES:
        return getattr(record, _sequence_field(collection))
    return getattr(record, "contract_number", None) or record.id


def _created_key(record: Any) -> datetime:
    created = getattr(record, "created_at", None)
    if created is None:
        return datetime.min
    if isinstance(created, date) and not isinstance(created, datetime):
        return datetime(created.year, created.month, created.day)
    return created.replace(tzinfo=None)
