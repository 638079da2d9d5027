"""
Reconciliation rules for counters cached outside the ledger.

An invoice's paid total and a product's stock quantity are stored on
their own records for display, but they are read caches: the payment and
movement records are the truth, and these functions recompute the cache
from them on demand.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ledger_kernel.domain.money import ZERO, Amount, round2, sum2, to_decimal

PAID = "paid"
PARTIALLY_PAID = "partially_paid"
SENT = "sent"
DRAFT = "draft"


@dataclass(frozen=True)
class InvoiceSettlement:
    total_paid: Decimal
    balance_due: Decimal
    status: str


def recompute_invoice_settlement(
    grand_total: Amount,
    payment_amounts: Iterable[Amount],
    current_status: str,
) -> InvoiceSettlement:
    """
    Derive paid total, balance due and status from the payment records.

    Fully paid wins, then any payment at all; otherwise an invoice that had
    been sent stays sent and anything else falls back to draft.
    """
    total = round2(grand_total)
    paid = sum2(payment_amounts)
    if paid >= total:
        status = PAID
    elif paid > 0:
        status = PARTIALLY_PAID
    elif (current_status or "").lower() == SENT:
        status = SENT
    else:
        status = DRAFT
    return InvoiceSettlement(
        total_paid=paid,
        balance_due=round2(total - paid),
        status=status,
    )


def recompute_stock_level(
    opening: Amount,
    received: Iterable[Amount] = (),
    sold: Iterable[Amount] = (),
) -> Decimal:
    """Opening quantity plus everything received minus everything sold."""
    return (
        to_decimal(opening)
        + sum((to_decimal(q) for q in received), ZERO)
        - sum((to_decimal(q) for q in sold), ZERO)
    )
