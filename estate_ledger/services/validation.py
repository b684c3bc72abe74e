"""Reading request payloads into typed values."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, TypeVar

from estate_ledger.exceptions import ValidationError
from estate_ledger.models import parse_enum
from estate_ledger.store.codec import normalize_keys, parse_date, parse_decimal

E = TypeVar("E", bound=Enum)


class FieldReader:
    """Read fields from a payload, collecting every problem found.

    Keys may be camelCase or snake_case. Nothing is raised until
    :meth:`raise_if_errors`, so one response can list every violated
    rule.

    Parameters
    ----------
    data : Mapping[str, Any]
        Request payload.
    aliases : Mapping[str, str] | None
        Extra key renames applied after snake-casing.
    """

    def __init__(self, data: Mapping[str, Any], aliases: Mapping[str, str] | None = None) -> None:
        self.data = normalize_keys(data, aliases)
        self.errors: list[str] = []

    def has(self, name: str) -> bool:
        return name in self.data

    def error(self, message: str) -> None:
        if message not in self.errors:
            self.errors.append(message)

    def raise_if_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)

    def _missing(self, name: str) -> bool:
        value = self.data.get(name)
        return value is None or (isinstance(value, str) and not value.strip())

    def text(self, name: str, required: str | None = None) -> str | None:
        """Stripped string, or ``None`` when absent or blank."""
        if self._missing(name):
            if required:
                self.error(required)
            return None
        return str(self.data[name]).strip()

    def decimal(
        self,
        name: str,
        required: str | None = None,
        positive: str | None = None,
    ) -> Decimal | None:
        """Exact decimal; ``positive`` is the message used when value <= 0."""
        if self._missing(name):
            if required:
                self.error(required)
            return None
        try:
            value = parse_decimal(self.data[name])
        except (InvalidOperation, ValueError):
            self.error(positive or f"Invalid {name.replace('_', ' ')}")
            return None
        if not value.is_finite():
            self.error(positive or f"Invalid {name.replace('_', ' ')}")
            return None
        if positive and value <= 0:
            self.error(positive)
            return None
        return value

    def integer(self, name: str, default: int | None = None) -> int | None:
        if self._missing(name):
            return default
        value = self.data[name]
        try:
            if isinstance(value, bool) or int(value) != Decimal(str(value)):
                raise ValueError(value)
            return int(value)
        except (ValueError, TypeError, InvalidOperation):
            self.error(f"Invalid {name.replace('_', ' ')}")
            return None

    def date(self, name: str, required: str | None = None) -> date | None:
        if self._missing(name):
            if required:
                self.error(required)
            return None
        try:
            return parse_date(self.data[name])
        except ValueError:
            self.error(f"Invalid {name.replace('_', ' ')} {self.data[name]!r}")
            return None

    def enum(
        self,
        enum_cls: type[E],
        name: str,
        required: str | None = None,
        default: E | None = None,
    ) -> E | None:
        if self._missing(name):
            if required:
                self.error(required)
            return default
        try:
            return parse_enum(enum_cls, self.data[name], name.replace("_", " "))
        except ValidationError as exc:
            for message in exc.errors:
                self.error(message)
            return None

    def flag(self, name: str, default: bool = False) -> bool:
        value = self.data.get(name)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    def strings(self, name: str) -> list[str]:
        value = self.data.get(name) or []
        if isinstance(value, str):
            value = [value]
        return [str(item) for item in value]

    def mapping(self, name: str) -> Mapping[str, Any] | None:
        value = self.data.get(name)
        if value is None:
            return None
        if not isinstance(value, Mapping):
            self.error(f"Invalid {name.replace('_', ' ')}")
            return None
        return value
