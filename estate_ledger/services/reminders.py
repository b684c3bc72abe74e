"""Late-payment reminders for tenants."""

from __future__ import annotations

import html
import logging
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Callable

from estate_ledger.config import SmtpConfig
from estate_ledger.exceptions import DeliveryError, NotFoundError, ValidationError
from estate_ledger.models import Rental
from estate_ledger.store.base import Collection, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    html: str
    message_id: str = ""


class Mailer(ABC):
    """Delivers an HTML e-mail; returns the message id."""

    @abstractmethod
    def send(self, to: str, subject: str, html_body: str) -> str:
        """Send one message.

        Raises
        ------
        DeliveryError
            If the message could not be handed to the mail server.
        """


class SmtpMailer(Mailer):
    """Send mail through an SMTP server, upgrading to TLS when configured."""

    def __init__(self, config: SmtpConfig) -> None:
        self.config = config

    def send(self, to: str, subject: str, html_body: str) -> str:
        message = EmailMessage()
        message["From"] = formataddr((self.config.from_name, self.config.from_address))
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout) as smtp:
                if self.config.use_tls:
                    smtp.starttls()
                if self.config.username:
                    smtp.login(self.config.username, self.config.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"Failed to send e-mail to {to}: {exc}") from exc

        logger.info("Sent %r to %s via %s", subject, to, self.config.host)
        return message["Message-ID"]


class RecordingMailer(Mailer):
    """Keep messages in memory instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[OutgoingEmail] = []

    def send(self, to: str, subject: str, html_body: str) -> str:
        message_id = f"recorded-{len(self.sent) + 1}"
        self.sent.append(OutgoingEmail(to=to, subject=subject, html=html_body, message_id=message_id))
        logger.debug("Recorded %r for %s", subject, to)
        return message_id


@dataclass
class OverdueRental:
    """A rental whose rent is settled only up to a date already past."""

    rental_id: str
    rental_no: str
    tenant_name: str | None
    tenant_email: str | None
    property_name: str | None
    monthly_rent: Decimal
    paid_until: date
    days_overdue: int


@dataclass
class ReminderResult:
    sent: bool
    recipient: str
    message: str
    message_id: str | None = None


@dataclass
class ReminderContent:
    """Values shown in a reminder e-mail."""

    tenant_name: str
    property_name: str
    amount_due: Decimal
    days_overdue: int
    due_date: str  # e.g. "01 March 2024"


def days_overdue(paid_until: date, today: date) -> int:
    return max(0, (today - paid_until).days)


def format_due_date(day: date) -> str:
    """``date(2024, 3, 1)`` -> ``"01 March 2024"``."""
    return day.strftime("%d %B %Y")


def _esc(value: object) -> str:
    return html.escape(str(value))


def render_reminder(content: ReminderContent) -> str:
    """Render the HTML body of a late-payment reminder."""
    return f"""\
<html>
  <body style="font-family: Arial, sans-serif; color: #1f2937;">
    <h2>Payment Reminder</h2>
    <p>Dear {_esc(content.tenant_name)},</p>
    <p>This is a reminder that the rent for <strong>{_esc(content.property_name)}</strong>
       was due on <strong>{_esc(content.due_date)}</strong> and is now
       <strong>{content.days_overdue} day(s)</strong> overdue.</p>
    <table cellpadding="6">
      <tr><td>Property</td><td>{_esc(content.property_name)}</td></tr>
      <tr><td>Amount due</td><td>{_esc(content.amount_due)}</td></tr>
      <tr><td>Due date</td><td>{_esc(content.due_date)}</td></tr>
      <tr><td>Days overdue</td><td>{content.days_overdue}</td></tr>
    </table>
    <p>Please arrange payment at your earliest convenience.
       If you have already paid, please disregard this message.</p>
    <p>Property Management</p>
  </body>
</html>
"""


class PaymentReminderService:
    """Find overdue rentals and e-mail their tenants.

    Parameters
    ----------
    store : RecordStore
        Store holding rentals, customers and properties.
    mailer : Mailer
        Delivery channel for reminders.
    clock : Callable[[], datetime]
        Source of "now"; today's date is derived from it.
    """

    def __init__(
        self,
        store: RecordStore,
        mailer: Mailer,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.mailer = mailer
        self.clock = clock

    def list_overdue(self, today: date | None = None) -> list[OverdueRental]:
        """Rentals paid up to a date before ``today``, most overdue first."""
        today = today or self.clock().date()
        overdue = []
        for rental in self.store.read_all(Collection.RENTALS):
            if rental.paid_until >= today:
                continue
            tenant = self.store.find_by_id(Collection.CUSTOMERS, rental.tenant_id)
            prop = self.store.find_by_id(Collection.PROPERTIES, rental.property_id)
            overdue.append(
                OverdueRental(
                    rental_id=rental.id,
                    rental_no=rental.rental_no,
                    tenant_name=tenant.name if tenant else None,
                    tenant_email=tenant.email if tenant else None,
                    property_name=prop.name if prop else None,
                    monthly_rent=rental.monthly_rent,
                    paid_until=rental.paid_until,
                    days_overdue=days_overdue(rental.paid_until, today),
                )
            )
        overdue.sort(key=lambda item: item.days_overdue, reverse=True)
        return overdue

    def send_reminder(self, rental_id: str | None) -> ReminderResult:
        """E-mail the tenant of ``rental_id`` about their overdue rent.

        Delivery failures are reported in the result, not raised.

        Raises
        ------
        ValidationError
            If no rental id is given.
        NotFoundError
            If the rental or its tenant does not exist, or the tenant has
            no e-mail address.
        """
        if not rental_id:
            raise ValidationError("Rental ID is required")
        rental: Rental = self.store.get(Collection.RENTALS, rental_id)
        tenant = self.store.find_by_id(Collection.CUSTOMERS, rental.tenant_id)
        if tenant is None:
            raise NotFoundError(f"Tenant {rental.tenant_id} not found")
        if not tenant.email:
            raise NotFoundError("Tenant has no email address")
        prop = self.store.find_by_id(Collection.PROPERTIES, rental.property_id)
        property_name = prop.name if prop else rental.property_id

        content = ReminderContent(
            tenant_name=tenant.name,
            property_name=property_name,
            amount_due=rental.monthly_rent,
            days_overdue=days_overdue(rental.paid_until, self.clock().date()),
            due_date=format_due_date(rental.paid_until),
        )
        subject = f"Payment Reminder - {property_name}"

        try:
            message_id = self.mailer.send(tenant.email, subject, render_reminder(content))
        except DeliveryError as exc:
            logger.error("Reminder for rental %s not delivered: %s", rental.rental_no, exc)
            return ReminderResult(sent=False, recipient=tenant.email, message=str(exc))

        logger.info(
            "Payment reminder for %s sent to %s (%d days overdue)",
            rental.rental_no,
            tenant.email,
            content.days_overdue,
        )
        return ReminderResult(
            sent=True,
            recipient=tenant.email,
            message=f"Payment reminder sent to {tenant.email}",
            message_id=message_id,
        )
