"""Request/response boundary used by the presentation layer.

Every operation takes plain dicts and returns an :class:`ApiResponse`.
Domain errors become client errors; anything else is logged and reported
as an opaque server error.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping

from estate_ledger.exceptions import NotFoundError, ValidationError
from estate_ledger.services.reminders import Mailer, PaymentReminderService, RecordingMailer
from estate_ledger.services.reporting import compute_dashboard
from estate_ledger.services.transactions import TransactionRecorder, TransactionView
from estate_ledger.store.base import RecordStore
from estate_ledger.store.codec import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    status: int
    body: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def api_operation(action: str) -> Callable:
    """Map exceptions raised by an operation onto HTTP-style responses."""

    def decorator(func: Callable[..., ApiResponse]) -> Callable[..., ApiResponse]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ApiResponse:
            try:
                return func(*args, **kwargs)
            except ValidationError as exc:
                return ApiResponse(400, {"error": str(exc), "errors": exc.errors})
            except NotFoundError as exc:
                return ApiResponse(404, {"error": str(exc)})
            except Exception:
                logger.exception("Failed to %s", action)
                return ApiResponse(500, {"error": f"Failed to {action}"})

        return wrapper

    return decorator


def view_to_dict(view: TransactionView) -> dict[str, Any]:
    """Transaction fields plus its related records (or ``None``)."""
    body = to_dict(view.transaction)
    for name in ("customer", "property", "project", "rental"):
        related = getattr(view, name)
        body[name] = to_dict(related) if related is not None else None
    return body


class LedgerAPI:
    """Operations exposed to the presentation layer.

    Parameters
    ----------
    store : RecordStore
        Backing record store.
    mailer : Mailer | None
        Used for payment reminders; messages are only recorded when omitted.
    clock : Callable[[], datetime]
        Source of "now" for every service.
    """

    def __init__(
        self,
        store: RecordStore,
        mailer: Mailer | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.clock = clock
        self.recorder = TransactionRecorder(store, clock=clock)
        self.reminders = PaymentReminderService(store, mailer or RecordingMailer(), clock=clock)

    # Transactions
    @api_operation("create transaction")
    def post_transaction(self, body: Mapping[str, Any]) -> ApiResponse:
        transaction = self.recorder.record(body)
        return ApiResponse(201, view_to_dict(self.recorder.get(transaction.id)))

    @api_operation("fetch transactions")
    def get_transactions(self, params: Mapping[str, Any] | None = None) -> ApiResponse:
        params = params or {}
        views = self.recorder.list(
            category=params.get("category"),
            transaction_type=params.get("type"),
            property_id=params.get("propertyId") or params.get("property_id"),
        )
        return ApiResponse(200, [view_to_dict(view) for view in views])

    @api_operation("fetch transaction")
    def get_transaction(self, transaction_id: str) -> ApiResponse:
        return ApiResponse(200, view_to_dict(self.recorder.get(transaction_id)))

    @api_operation("update transaction")
    def put_transaction(self, transaction_id: str, body: Mapping[str, Any]) -> ApiResponse:
        self.recorder.update(transaction_id, body)
        return ApiResponse(200, view_to_dict(self.recorder.get(transaction_id)))

    @api_operation("delete transaction")
    def delete_transaction(self, transaction_id: str) -> ApiResponse:
        self.recorder.delete(transaction_id)
        return ApiResponse(200, {"message": "Transaction deleted successfully"})

    # Dashboard
    @api_operation("fetch dashboard data")
    def get_dashboard(self, params: Mapping[str, Any] | None = None) -> ApiResponse:
        period = (params or {}).get("period") or "all"
        report = compute_dashboard(self.store, period, now=self.clock())
        return ApiResponse(200, report.to_dict())

    # Payment reminders
    @api_operation("send reminder")
    def post_payment_reminder(self, body: Mapping[str, Any]) -> ApiResponse:
        rental_id = body.get("rentalId") or body.get("rental_id")
        result = self.reminders.send_reminder(rental_id)
        if not result.sent:
            return ApiResponse(500, {"error": result.message})
        return ApiResponse(
            200, {"success": True, "message": result.message, "email_id": result.message_id}
        )

    @api_operation("fetch overdue rentals")
    def get_overdue_rentals(self) -> ApiResponse:
        overdue = self.reminders.list_overdue(self.clock().date())
        return ApiResponse(200, [to_dict(item) for item in overdue])
