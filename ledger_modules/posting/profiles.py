"""
Posting profiles -- how each business event maps onto account roles.

Profiles:
    GoodsReceived      -- PO receipt:        Dr Inventory            / Cr Accounts Payable
    SaleRecorded       -- Invoice finalized: Dr Accounts Receivable  / Cr Sales Revenue
                                             Dr Cost of Goods Sold   / Cr Inventory
                                                                     / Cr Sales Tax Payable
    PaymentRecorded    -- Payment received:  Dr Cash                 / Cr Accounts Receivable
    PaymentIncreased   -- Correction, up:    Dr Cash                 / Cr Accounts Receivable
    PaymentDecreased   -- Correction, down:  Dr Accounts Receivable  / Cr Cash
    PaymentDeleted     -- Payment reversed:  Dr Accounts Receivable  / Cr Cash

Every line names the amount it carries.  A line whose amount is zero is
left out of the entry; the profile's required roles must still resolve
unless the line is marked ``optional`` (sales tax is only needed when
there is tax to book).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Mapping

from ledger_kernel.domain.roles import AccountRole


class Side(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class LineMapping:
    role: AccountRole
    side: Side
    amount_key: str
    optional: bool = False


@dataclass(frozen=True)
class PostingProfile:
    name: str
    description: str  # str.format template
    lines: tuple[LineMapping, ...]

    def required_roles(self, amounts: Mapping[str, Decimal]) -> tuple[AccountRole, ...]:
        """Roles that must resolve for these amounts, in profile order."""
        roles: list[AccountRole] = []
        for line in self.lines:
            if line.optional and amounts.get(line.amount_key, Decimal("0")) == 0:
                continue
            if line.role not in roles:
                roles.append(line.role)
        return tuple(roles)


GOODS_RECEIVED = PostingProfile(
    name="GoodsReceived",
    description="Goods received for PO #{reference}",
    lines=(
        LineMapping(AccountRole.INVENTORY, Side.DEBIT, "total"),
        LineMapping(AccountRole.ACCOUNTS_PAYABLE, Side.CREDIT, "total"),
    ),
)

SALE_RECORDED = PostingProfile(
    name="SaleRecorded",
    description="Sale recorded for Invoice #{reference}",
    lines=(
        LineMapping(AccountRole.ACCOUNTS_RECEIVABLE, Side.DEBIT, "grand_total"),
        LineMapping(AccountRole.SALES_REVENUE, Side.CREDIT, "sub_total"),
        LineMapping(AccountRole.INVENTORY, Side.CREDIT, "cogs"),
        LineMapping(AccountRole.COST_OF_GOODS_SOLD, Side.DEBIT, "cogs"),
        LineMapping(AccountRole.SALES_TAX_PAYABLE, Side.CREDIT, "tax", optional=True),
    ),
)

PAYMENT_RECORDED = PostingProfile(
    name="PaymentRecorded",
    description="Payment received for Invoice #{reference}",
    lines=(
        LineMapping(AccountRole.CASH, Side.DEBIT, "amount"),
        LineMapping(AccountRole.ACCOUNTS_RECEIVABLE, Side.CREDIT, "amount"),
    ),
)

PAYMENT_INCREASED = PostingProfile(
    name="PaymentIncreased",
    description="Payment update for Invoice #{reference}. Net change: {change}",
    lines=(
        LineMapping(AccountRole.CASH, Side.DEBIT, "delta"),
        LineMapping(AccountRole.ACCOUNTS_RECEIVABLE, Side.CREDIT, "delta"),
    ),
)

PAYMENT_DECREASED = PostingProfile(
    name="PaymentDecreased",
    description="Payment update for Invoice #{reference}. Net change: {change}",
    lines=(
        LineMapping(AccountRole.ACCOUNTS_RECEIVABLE, Side.DEBIT, "delta"),
        LineMapping(AccountRole.CASH, Side.CREDIT, "delta"),
    ),
)

PAYMENT_DELETED = PostingProfile(
    name="PaymentDeleted",
    description="Payment deletion reversal for Invoice #{reference}. Amount: {amount}",
    lines=(
        LineMapping(AccountRole.ACCOUNTS_RECEIVABLE, Side.DEBIT, "amount"),
        LineMapping(AccountRole.CASH, Side.CREDIT, "amount"),
    ),
)

PROFILES: dict[str, PostingProfile] = {
    p.name: p
    for p in (
        GOODS_RECEIVED,
        SALE_RECORDED,
        PAYMENT_RECORDED,
        PAYMENT_INCREASED,
        PAYMENT_DECREASED,
        PAYMENT_DELETED,
    )
}
