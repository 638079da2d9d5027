"""
Unit tests for DateFilter and AccountBalance.

Verifies:
- Inclusive report ranges map to half-open date filters
- Signed balances follow each account type's normal side
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.models.account import AccountType, NormalBalance
from ledger_kernel.selectors.ledger_selector import AccountBalance, DateFilter


def _balance(account_type, debit, credit):
    return AccountBalance(
        account_id=uuid4(),
        account_code="1",
        account_name="x",
        account_type=account_type,
        total_debit=Decimal(debit),
        total_credit=Decimal(credit),
    )


class TestDateFilter:
    def test_between_includes_both_ends(self):
        f = DateFilter.between(date(2024, 1, 1), date(2024, 1, 31))
        assert f.contains(date(2024, 1, 1))
        assert f.contains(date(2024, 1, 31))
        assert not f.contains(date(2024, 2, 1))
        assert not f.contains(date(2023, 12, 31))
        assert f.end_exclusive == date(2024, 2, 1)

    def test_as_of_includes_the_day(self):
        f = DateFilter.as_of(date(2024, 3, 31))
        assert f.contains(date(2024, 3, 31))
        assert f.contains(date(1999, 1, 1))
        assert not f.contains(date(2024, 4, 1))

    def test_all_time(self):
        f = DateFilter.all_time()
        assert f.start is None and f.end_exclusive is None
        assert f.contains(date(1900, 1, 1))


class TestAccountBalance:
    @pytest.mark.parametrize(
        "account_type,expected",
        [
            (AccountType.ASSET, Decimal("60.00")),
            (AccountType.EXPENSE, Decimal("60.00")),
            (AccountType.LIABILITY, Decimal("-60.00")),
            (AccountType.EQUITY, Decimal("-60.00")),
            (AccountType.REVENUE, Decimal("-60.00")),
        ],
    )
    def test_balance_sign(self, account_type, expected):
        assert _balance(account_type, "100", "40").balance == expected

    def test_net_debit_ignores_type(self):
        assert _balance(AccountType.REVENUE, "10", "25").net_debit == Decimal("-15.00")

    def test_sums_are_not_rounded(self):
        b = _balance(AccountType.ASSET, "0.333", "0")
        assert b.total_debit == Decimal("0.333")
        assert b.balance == Decimal("0.333")

    def test_display_balance_rounds_half_up(self):
        assert _balance(AccountType.ASSET, "0.335", "0").display_balance == Decimal("0.34")
        assert _balance(AccountType.REVENUE, "0", "0.333").display_balance == Decimal("0.33")


class TestAccountType:
    def test_normal_balance(self):
        assert AccountType.ASSET.normal_balance == NormalBalance.DEBIT
        assert AccountType.EXPENSE.normal_balance == NormalBalance.DEBIT
        assert AccountType.LIABILITY.normal_balance == NormalBalance.CREDIT
        assert AccountType.EQUITY.normal_balance == NormalBalance.CREDIT
        assert AccountType.REVENUE.normal_balance == NormalBalance.CREDIT

    def test_parse_is_case_insensitive(self):
        assert AccountType.parse("Asset") is AccountType.ASSET
        assert AccountType.parse(" LIABILITY ") is AccountType.LIABILITY

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            AccountType.parse("Contra")

    def test_label(self):
        assert AccountType.REVENUE.label == "Revenue"
