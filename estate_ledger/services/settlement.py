"""Settlement engine: derived rental and property state from transactions.

Recording a rent payment moves the rental's paid-through date forward by
the whole months the amount covers. Recording a sale payment opens or
advances the property's sale ledger. Both are computed by pure functions
here; :class:`SettlementEngine` looks the records up and writes the new
versions back inside the caller's unit of work.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from dateutil.relativedelta import relativedelta

from estate_ledger.exceptions import SettlementSkipped
from estate_ledger.models import (
    Property,
    PropertyStatus,
    Rental,
    RentalPaymentStatus,
    SaleInfo,
    SalePaymentStatus,
    Transaction,
    TransactionType,
)
from estate_ledger.store.base import Collection, RecordStore

logger = logging.getLogger(__name__)


def months_covered(amount: Decimal, monthly_rent: Decimal) -> int:
    """Whole months of rent paid by ``amount``; any remainder is dropped."""
    if monthly_rent <= 0:
        raise SettlementSkipped(f"monthly rent must be positive, got {monthly_rent}")
    return int(amount // monthly_rent)


def rent_status(paid_until: date, today: date) -> RentalPaymentStatus:
    return RentalPaymentStatus.PAID if paid_until >= today else RentalPaymentStatus.OVERDUE


def sale_status(remaining: Decimal) -> SalePaymentStatus:
    return SalePaymentStatus.COMPLETED if remaining <= 0 else SalePaymentStatus.PARTIAL


def apply_rent_payment(
    rental: Rental,
    amount: Decimal,
    today: date | None = None,
    now: datetime | None = None,
) -> Rental:
    """Return ``rental`` with a rent payment of ``amount`` applied.

    The paid-through date advances from its current value (not from the
    payment date) by whole calendar months; a day that does not exist in
    the target month is clamped to that month's last day. The payment
    status becomes ``paid`` when the new date is today or later,
    otherwise ``overdue``.
    """
    now = now or datetime.now()
    today = today or now.date()
    months = months_covered(amount, rental.monthly_rent)
    paid_until = (rental.paid_until or rental.lease_start) + relativedelta(months=months)
    return replace(
        rental,
        paid_until=paid_until,
        payment_status=rent_status(paid_until, today),
        updated_at=now,
    )


def apply_sale_payment(
    prop: Property,
    transaction: Transaction,
    first_payment: bool,
    now: datetime | None = None,
) -> Property:
    """Return ``prop`` with a sale payment applied to its sale ledger.

    The first payment marks the property sold and opens the ledger with
    the total price the transaction declares. Later payments only add to
    the paid amount; the ledger keeps its original total even if a later
    transaction declares a different one, and the property status is not
    touched again.
    """
    now = now or datetime.now()
    amount = transaction.amount

    if first_payment:
        if transaction.sale_details is None:
            raise SettlementSkipped(f"transaction {transaction.transaction_no} has no sale details")
        total = transaction.sale_details.total_price
        remaining = total - amount
        sale_info = SaleInfo(
            buyer_id=transaction.customer_id,
            sale_date=transaction.date,
            total_price=total,
            paid_amount=amount,
            remaining_amount=remaining,
            payment_status=sale_status(remaining),
        )
        return replace(prop, status=PropertyStatus.SOLD, sale_info=sale_info, updated_at=now)

    if prop.sale_info is None:
        raise SettlementSkipped(f"property {prop.property_no} has sale payments but no sale info")

    paid = prop.sale_info.paid_amount + amount
    remaining = prop.sale_info.total_price - paid
    sale_info = replace(
        prop.sale_info,
        paid_amount=paid,
        remaining_amount=remaining,
        payment_status=sale_status(remaining),
    )
    return replace(prop, sale_info=sale_info, updated_at=now)


class SettlementEngine:
    """Apply the financial effect of a transaction to its rental or property.

    Parameters
    ----------
    store : RecordStore
        Store holding rentals, properties and transactions.
    clock : Callable[[], datetime]
        Source of "now"; today's date is derived from it.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = datetime.now) -> None:
        self.store = store
        self.clock = clock

    def settle(self, transaction: Transaction) -> bool:
        """Apply ``transaction``'s side effect, if it has one.

        Must run inside ``store.transaction()`` and before ``transaction``
        itself is inserted. A dangling rental or property reference skips
        the settlement with a warning; the transaction is still recorded.

        Returns
        -------
        bool
            Whether any rental or property was changed.
        """
        try:
            if transaction.transaction_type == TransactionType.SALE_PAYMENT and transaction.sale_details:
                self._settle_sale(transaction)
                return True
            if transaction.transaction_type == TransactionType.RENT_PAYMENT and transaction.rental_id:
                self._settle_rent(transaction)
                return True
        except SettlementSkipped as exc:
            logger.warning("Settlement skipped for %s: %s", transaction.transaction_no, exc)
        return False

    def _settle_rent(self, transaction: Transaction) -> None:
        rental = self.store.find_by_id(Collection.RENTALS, transaction.rental_id)
        if rental is None:
            raise SettlementSkipped(f"rental {transaction.rental_id} not found")

        now = self.clock()
        updated = apply_rent_payment(rental, transaction.amount, today=now.date(), now=now)
        self.store.update(Collection.RENTALS, updated)
        logger.info(
            "Rental %s paid until %s (%s -> %s)",
            rental.rental_no,
            updated.paid_until,
            rental.payment_status.value,
            updated.payment_status.value,
            extra={"rental_no": rental.rental_no},
        )

    def _settle_sale(self, transaction: Transaction) -> None:
        prop = self.store.find_by_id(Collection.PROPERTIES, transaction.property_id)
        if prop is None:
            raise SettlementSkipped(f"property {transaction.property_id} not found")

        first = not self.has_sale_payments(transaction.property_id, exclude=transaction.id)
        updated = apply_sale_payment(prop, transaction, first_payment=first, now=self.clock())
        self.store.update(Collection.PROPERTIES, updated)
        logger.info(
            "Property %s sale ledger: paid %s, remaining %s (%s)",
            prop.property_no,
            updated.sale_info.paid_amount,
            updated.sale_info.remaining_amount,
            updated.sale_info.payment_status.value,
            extra={"property_no": prop.property_no},
        )

    def has_sale_payments(self, property_id: str, exclude: str | None = None) -> bool:
        """Whether any stored sale payment references ``property_id``."""
        return any(
            t.transaction_type == TransactionType.SALE_PAYMENT
            and t.property_id == property_id
            and t.id != exclude
            for t in self.store.read_all(Collection.TRANSACTIONS)
        )
