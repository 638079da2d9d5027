"""
Business events the poster translates into journal entries.

Each event is a frozen snapshot of what the originating subsystem
(purchasing, invoicing, payments) already committed.  Amounts may be
Decimal, int or numeric strings; the poster rounds every derived sum to
cents before building lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar
from uuid import UUID

from ledger_kernel.domain.money import Amount


@dataclass(frozen=True)
class ReceivedItem:
    """Quantity of one PO line newly received in this receipt."""

    quantity_received: Amount
    unit_price: Amount
    product_id: str | None = None


@dataclass(frozen=True)
class GoodsReceived:
    event_type: ClassVar[str] = "goods_received"

    po_number: str
    items: tuple[ReceivedItem, ...]
    actor_id: UUID
    received_on: date | None = None  # defaults to the clock's today


@dataclass(frozen=True)
class SaleItem:
    """
    One invoice line.

    unit_cost is the product's purchase price; None means the product could
    not be found, and the line contributes nothing to COGS.
    """

    quantity: Amount
    unit_cost: Amount | None
    product_id: str | None = None


@dataclass(frozen=True)
class SaleRecorded:
    event_type: ClassVar[str] = "sale_recorded"

    invoice_number: str
    invoice_date: date
    status: str
    sub_total: Amount
    tax_amount: Amount
    grand_total: Amount
    actor_id: UUID
    items: tuple[SaleItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PaymentRecorded:
    event_type: ClassVar[str] = "payment_recorded"

    payment_id: str
    invoice_number: str
    payment_date: date
    amount: Amount
    actor_id: UUID


@dataclass(frozen=True)
class PaymentAmountCorrected:
    event_type: ClassVar[str] = "payment_corrected"

    payment_id: str
    invoice_number: str
    old_amount: Amount
    new_amount: Amount
    actor_id: UUID
    original_entry_id: UUID | None = None


@dataclass(frozen=True)
class PaymentDeleted:
    event_type: ClassVar[str] = "payment_deleted"

    payment_id: str
    invoice_number: str
    amount: Amount
    actor_id: UUID
    original_entry_id: UUID | None = None


BusinessEvent = (
    GoodsReceived | SaleRecorded | PaymentRecorded | PaymentAmountCorrected | PaymentDeleted
)

