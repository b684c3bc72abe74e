"""Custom exception hierarchy for estate-ledger."""


class EstateLedgerError(Exception):
    """Base exception for all estate-ledger errors."""


class ValidationError(EstateLedgerError):
    """Raised when input violates one or more field rules.

    Carries every violated rule, not just the first one found.
    """

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class NotFoundError(EstateLedgerError):
    """Raised when a referenced entity does not exist."""


class SettlementSkipped(EstateLedgerError):
    """Raised internally when a settlement cannot be applied.

    Never propagates past the settlement engine.
    """


class StorageError(EstateLedgerError):
    """Raised when the underlying record store fails."""


class ConfigurationError(EstateLedgerError):
    """Raised when configuration is invalid or missing."""


class DeliveryError(EstateLedgerError):
    """Raised when an outbound message cannot be delivered."""
