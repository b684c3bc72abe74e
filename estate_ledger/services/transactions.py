"""Transaction recorder: validation, numbering, settlement and persistence."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Callable, Mapping

from estate_ledger.exceptions import ValidationError
from estate_ledger.identifiers import new_record_id, next_sequence
from estate_ledger.models import (
    Customer,
    PaymentMethod,
    Project,
    Property,
    Rental,
    SaleDetails,
    Transaction,
    TransactionCategory,
    TransactionType,
    parse_enum,
)
from estate_ledger.services.settlement import SettlementEngine
from estate_ledger.services.validation import FieldReader
from estate_ledger.store.base import Collection, RecordStore
from estate_ledger.store.codec import decode_dataclass, normalize_keys

logger = logging.getLogger(__name__)

UNKNOWN_PAYER = "Unknown"

# Wire names accepted for ``paid_by`` and ``transaction_type``.
REQUEST_ALIASES = {"type": "transaction_type", "payer": "paid_by", "payee": "paid_by"}

EDITABLE_FIELDS = (
    "project_id",
    "property_id",
    "customer_id",
    "category",
    "transaction_type",
    "amount",
    "paid_by",
    "payment_method",
    "is_sale_transaction",
    "sale_details",
    "rental_id",
    "reference",
    "description",
    "date",
)


def party_errors(
    category: TransactionCategory | None,
    customer_id: str | None,
    paid_by: str | None,
) -> list[str]:
    """Rules tying the category to who paid: income needs a customer, expenses a payee."""
    errors = []
    if category == TransactionCategory.INCOME and not customer_id:
        errors.append("Customer is required for income")
    if category == TransactionCategory.EXPENSE and not (paid_by and paid_by.strip()):
        errors.append("Paid To is required for expenses")
    return errors


@dataclass
class TransactionRequest:
    """Fields of a transaction as submitted, before validation.

    Values are kept exactly as received (strings, numbers, nested
    mappings); :meth:`TransactionRecorder.record` parses them.
    """

    project_id: Any = None
    property_id: Any = None
    customer_id: Any = None
    category: Any = None
    transaction_type: Any = None
    amount: Any = None
    paid_by: Any = None
    payment_method: Any = None
    date: Any = None
    rental_id: Any = None
    is_sale_transaction: Any = None
    sale_details: Any = None
    reference: Any = None
    description: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransactionRequest:
        """Build a request from a wire payload; unknown keys are ignored."""
        normalized = normalize_keys(data, REQUEST_ALIASES)
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in normalized.items() if k in names})

    def to_payload(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass
class TransactionView:
    """A transaction joined with the records it references."""

    transaction: Transaction
    customer: Customer | None = None
    property: Property | None = None
    project: Project | None = None
    rental: Rental | None = None


class TransactionRecorder:
    """Record, edit and query financial transactions.

    Parameters
    ----------
    store : RecordStore
        Backing record store.
    settlement : SettlementEngine | None
        Engine applying rent and sale payments; built on ``store`` when
        omitted.
    clock : Callable[[], datetime]
        Source of "now".
    """

    def __init__(
        self,
        store: RecordStore,
        settlement: SettlementEngine | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.clock = clock
        self.settlement = settlement or SettlementEngine(store, clock=clock)

    def record(self, request: TransactionRequest | Mapping[str, Any]) -> Transaction:
        """Validate and store a new transaction, applying its settlement.

        Numbering, settlement and the insert happen in one unit of work:
        either the transaction and its derived rental/property changes are
        all stored, or none are.

        Raises
        ------
        ValidationError
            Listing every violated rule; nothing is written.
        """
        if isinstance(request, TransactionRequest):
            request = request.to_payload()
        values = self._parse_new(request)

        with self.store.transaction():
            now = self.clock()
            transaction = Transaction(
                id=new_record_id(),
                transaction_no=next_sequence(self.store, Collection.TRANSACTIONS),
                paid_by=self._resolve_payer(values.pop("paid_by"), values["customer_id"]),
                created_at=now,
                updated_at=now,
                **values,
            )
            self.settlement.settle(transaction)
            self.store.insert(Collection.TRANSACTIONS, transaction)

        logger.info(
            "Recorded %s: %s %s %s",
            transaction.transaction_no,
            transaction.category.value,
            transaction.transaction_type.value,
            transaction.amount,
            extra={"transaction_no": transaction.transaction_no},
        )
        return transaction

    def _parse_new(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        reader = FieldReader(payload, REQUEST_ALIASES)

        category = reader.enum(TransactionCategory, "category", default=TransactionCategory.INCOME)
        transaction_type = reader.enum(
            TransactionType, "transaction_type", default=TransactionType.RENT_PAYMENT
        )
        payment_method = reader.enum(PaymentMethod, "payment_method", default=PaymentMethod.CASH)
        customer_id = reader.text("customer_id")
        paid_by = reader.text("paid_by")

        for message in party_errors(category, customer_id, paid_by):
            reader.error(message)

        property_id = reader.text("property_id", required="Property is required")
        project_id = reader.text("project_id", required="Project is required")
        amount = reader.decimal(
            "amount", required="Valid amount is required", positive="Valid amount is required"
        )
        transaction_date = reader.date("date") or self.clock().date()
        sale_details = self._parse_sale_details(reader)

        reader.raise_if_errors()
        return {
            "project_id": project_id,
            "property_id": property_id,
            "customer_id": customer_id,
            "category": category,
            "transaction_type": transaction_type,
            "amount": amount,
            "paid_by": paid_by,
            "payment_method": payment_method,
            "date": transaction_date,
            "rental_id": reader.text("rental_id"),
            "is_sale_transaction": (
                reader.flag("is_sale_transaction") or transaction_type == TransactionType.SALE_PAYMENT
            ),
            "sale_details": sale_details,
            "reference": reader.text("reference"),
            "description": reader.text("description") or "",
        }

    def _parse_sale_details(self, reader: FieldReader) -> SaleDetails | None:
        raw = reader.mapping("sale_details")
        if raw is None:
            return None
        try:
            details = decode_dataclass(SaleDetails, normalize_keys(raw))
        except ValidationError as exc:
            for message in exc.errors:
                reader.error(f"Invalid sale details: {message}")
            return None
        except (ValueError, TypeError, ArithmeticError) as exc:
            reader.error(f"Invalid sale details: {exc}")
            return None
        if details.total_price is None:
            reader.error("Sale total price is required")
            return None
        return details

    def _resolve_payer(self, paid_by: str | None, customer_id: str | None) -> str:
        if paid_by:
            return paid_by
        if customer_id:
            customer = self.store.find_by_id(Collection.CUSTOMERS, customer_id)
            if customer is not None and customer.name:
                return customer.name
            logger.debug("Customer %s not found; payer recorded as %s", customer_id, UNKNOWN_PAYER)
        return UNKNOWN_PAYER

    def update(self, transaction_id: str, changes: Mapping[str, Any]) -> Transaction:
        """Edit the given fields of a stored transaction.

        The edit does not re-run settlement: rentals and properties keep
        whatever the original recording derived.

        Raises
        ------
        NotFoundError
            If the transaction does not exist.
        ValidationError
            If a provided field is invalid, or the edited transaction would
            be income without a customer or an expense without a payee.
        """
        updates = self._parse_changes(changes)

        with self.store.transaction():
            current = self.store.get(Collection.TRANSACTIONS, transaction_id)
            updated = replace(current, **updates, updated_at=self.clock())
            errors = party_errors(updated.category, updated.customer_id, updated.paid_by)
            if errors:
                raise ValidationError(errors)
            if not updated.paid_by:
                updated = replace(updated, paid_by=self._resolve_payer(None, updated.customer_id))
            self.store.update(Collection.TRANSACTIONS, updated)

        logger.info("Updated %s: %s", updated.transaction_no, ", ".join(sorted(updates)) or "no fields")
        return updated

    def _parse_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        reader = FieldReader(changes, REQUEST_ALIASES)
        updates: dict[str, Any] = {}

        for name in EDITABLE_FIELDS:
            if not reader.has(name):
                continue
            if name == "category":
                updates[name] = reader.enum(TransactionCategory, name, required="Category is required")
            elif name == "transaction_type":
                updates[name] = reader.enum(TransactionType, name, required="Type is required")
            elif name == "payment_method":
                updates[name] = reader.enum(PaymentMethod, name, required="Payment method is required")
            elif name == "amount":
                updates[name] = reader.decimal(
                    name, required="Valid amount is required", positive="Valid amount is required"
                )
            elif name == "date":
                updates[name] = reader.date(name, required="Date is required")
            elif name == "is_sale_transaction":
                updates[name] = reader.flag(name)
            elif name == "sale_details":
                updates[name] = self._parse_sale_details(reader)
            elif name in ("project_id", "property_id"):
                label = "Project" if name == "project_id" else "Property"
                updates[name] = reader.text(name, required=f"{label} is required")
            elif name == "description":
                updates[name] = reader.text(name) or ""
            else:
                updates[name] = reader.text(name)

        reader.raise_if_errors()
        return updates

    def delete(self, transaction_id: str) -> None:
        """Delete a transaction.

        Settlement is not reversed: a rental's paid-through date and a
        property's sale ledger stay as the transaction left them.

        Raises
        ------
        NotFoundError
            If the transaction does not exist.
        """
        self.store.delete(Collection.TRANSACTIONS, transaction_id)
        logger.info("Deleted transaction %s; derived rental/property state left unchanged", transaction_id)

    def get(self, transaction_id: str) -> TransactionView:
        """Return one transaction with its related records.

        Raises
        ------
        NotFoundError
            If the transaction does not exist.
        """
        return self._join(self.store.get(Collection.TRANSACTIONS, transaction_id))

    def list(
        self,
        category: TransactionCategory | str | None = None,
        transaction_type: TransactionType | str | None = None,
        property_id: str | None = None,
    ) -> list[TransactionView]:
        """Return transactions matching every given filter, newest first."""
        if category:
            category = parse_enum(TransactionCategory, category, "category")
        if transaction_type:
            transaction_type = parse_enum(TransactionType, transaction_type, "type")

        matches = [
            t
            for t in self.store.read_all(Collection.TRANSACTIONS)
            if (not category or t.category == category)
            and (not transaction_type or t.transaction_type == transaction_type)
            and (not property_id or t.property_id == property_id)
        ]
        matches.sort(key=lambda t: (t.date, t.transaction_no), reverse=True)
        return [self._join(t) for t in matches]

    def _join(self, transaction: Transaction) -> TransactionView:
        return TransactionView(
            transaction=transaction,
            customer=self.store.find_by_id(Collection.CUSTOMERS, transaction.customer_id),
            property=self.store.find_by_id(Collection.PROPERTIES, transaction.property_id),
            project=self.store.find_by_id(Collection.PROJECTS, transaction.project_id),
            rental=self.store.find_by_id(Collection.RENTALS, transaction.rental_id),
        )

