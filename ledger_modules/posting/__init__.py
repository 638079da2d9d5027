"""Business-event posting: sales, receipts and payments into the journal."""

from ledger_modules.posting.events import (
    GoodsReceived,
    PaymentAmountCorrected,
    PaymentDeleted,
    PaymentRecorded,
    ReceivedItem,
    SaleItem,
    SaleRecorded,
)
from ledger_modules.posting.models import LedgerPostingStatus, PostingOutcome
from ledger_modules.posting.service import EventPoster
from ledger_modules.posting.settlement import (
    InvoiceSettlement,
    recompute_invoice_settlement,
    recompute_stock_level,
)

__all__ = [
    "EventPoster",
    "GoodsReceived",
    "InvoiceSettlement",
    "LedgerPostingStatus",
    "PaymentAmountCorrected",
    "PaymentDeleted",
    "PaymentRecorded",
    "PostingOutcome",
    "ReceivedItem",
    "SaleItem",
    "SaleRecorded",
    "recompute_invoice_settlement",
    "recompute_stock_level",
]
