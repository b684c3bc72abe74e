"""Domain services over a record store."""

from estate_ledger.services.catalog import CatalogService
from estate_ledger.services.reminders import (
    Mailer,
    PaymentReminderService,
    RecordingMailer,
    ReminderResult,
    SmtpMailer,
)
from estate_ledger.services.reporting import DashboardReport, compute_dashboard
from estate_ledger.services.settlement import SettlementEngine
from estate_ledger.services.transactions import (
    TransactionRecorder,
    TransactionRequest,
    TransactionView,
)

__all__ = [
    "CatalogService",
    "DashboardReport",
    "Mailer",
    "PaymentReminderService",
    "RecordingMailer",
    "ReminderResult",
    "SettlementEngine",
    "SmtpMailer",
    "TransactionRecorder",
    "TransactionRequest",
    "TransactionView",
    "compute_dashboard",
]
