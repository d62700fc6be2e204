from datetime import date
from typing import Iterable, Optional

from app.schemas.enums import InvoiceStatus
from app.schemas.invoice import InvoiceRead

INVOICE_PREFIX = "INV"


def invoice_prefix(today: date) -> str:
    return f"{INVOICE_PREFIX}-{today.strftime('%Y%m%d')}"


def generate_invoice_number(today: date, last_invoice_number: Optional[str] = None) -> str:
    """
    Next invoice number in the form INV-YYYYMMDD-XXXX.

    The sequence continues from the last number issued today; a number from
    another day (or none) starts the sequence at 0001.
    """
    prefix = invoice_prefix(today)
    sequence = 1
    if last_invoice_number and last_invoice_number.startswith(prefix):
        tail = last_invoice_number.rsplit("-", 1)[-1]
        try:
            sequence = int(tail) + 1
        except ValueError:
            sequence = 1
    return f"{prefix}-{sequence:04d}"


def _sequence(number: str) -> int:
    try:
        return int(number.rsplit("-", 1)[-1])
    except ValueError:
        return -1


def next_invoice_number(today: date, existing_numbers: Iterable[str]) -> str:
    prefix = invoice_prefix(today)
    todays = [n for n in existing_numbers if n and n.startswith(prefix)]
    return generate_invoice_number(today, max(todays, key=_sequence) if todays else None)


def roll_overdue(invoices: Iterable[InvoiceRead], today: date) -> list[InvoiceRead]:
    """Pending invoices whose due date has passed, switched to overdue"""
    changed = []
    for invoice in invoices:
        if invoice.status == InvoiceStatus.PENDING and invoice.due_date is not None and invoice.due_date < today:
            invoice.status = InvoiceStatus.OVERDUE
            changed.append(invoice)
    return changed
