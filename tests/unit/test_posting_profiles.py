"""
Unit tests for posting profiles.

Verifies:
- Each profile's lines balance for consistent amounts
- Optional lines drop out of the required roles when their amount is zero
"""

from decimal import Decimal

import pytest

from ledger_kernel.domain.roles import AccountRole
from ledger_modules.posting.profiles import (
    GOODS_RECEIVED,
    PAYMENT_DECREASED,
    PAYMENT_DELETED,
    PAYMENT_INCREASED,
    PAYMENT_RECORDED,
    PROFILES,
    SALE_RECORDED,
    Side,
)


def _side_totals(profile, amounts):
    debit = sum(
        (amounts.get(l.amount_key, Decimal("0")) for l in profile.lines if l.side == Side.DEBIT),
        Decimal("0"),
    )
    credit = sum(
        (amounts.get(l.amount_key, Decimal("0")) for l in profile.lines if l.side == Side.CREDIT),
        Decimal("0"),
    )
    return debit, credit


class TestProfileBalance:
    @pytest.mark.parametrize(
        "profile,amounts",
        [
            (GOODS_RECEIVED, {"total": Decimal("50")}),
            (PAYMENT_RECORDED, {"amount": Decimal("50")}),
            (PAYMENT_INCREASED, {"delta": Decimal("10")}),
            (PAYMENT_DECREASED, {"delta": Decimal("10")}),
            (PAYMENT_DELETED, {"amount": Decimal("58")}),
            (
                SALE_RECORDED,
                {
                    "grand_total": Decimal("108"),
                    "sub_total": Decimal("100"),
                    "tax": Decimal("8"),
                    "cogs": Decimal("60"),
                },
            ),
        ],
    )
    def test_balances(self, profile, amounts):
        debit, credit = _side_totals(profile, amounts)
        assert debit == credit

    def test_registry_is_complete(self):
        assert set(PROFILES) == {
            "GoodsReceived",
            "SaleRecorded",
            "PaymentRecorded",
            "PaymentIncreased",
            "PaymentDecreased",
            "PaymentDeleted",
        }


class TestRequiredRoles:
    def test_sale_without_tax_does_not_need_tax_account(self):
        roles = SALE_RECORDED.required_roles(
            {"grand_total": Decimal("100"), "sub_total": Decimal("100"), "tax": Decimal("0")}
        )
        assert AccountRole.SALES_TAX_PAYABLE not in roles
        assert AccountRole.ACCOUNTS_RECEIVABLE in roles

    def test_sale_with_tax_needs_tax_account(self):
        roles = SALE_RECORDED.required_roles({"tax": Decimal("8")})
        assert AccountRole.SALES_TAX_PAYABLE in roles

    def test_roles_are_unique_and_ordered(self):
        assert PAYMENT_RECORDED.required_roles({"amount": Decimal("1")}) == (
            AccountRole.CASH,
            AccountRole.ACCOUNTS_RECEIVABLE,
        )

    def test_description_templates(self):
        assert GOODS_RECEIVED.description.format(reference="PO-1") == "Goods received for PO #PO-1"
        assert (
            PAYMENT_INCREASED.description.format(reference="INV-1", change="+10.00")
            == "Payment update for Invoice #INV-1. Net change: +10.00"
        )
