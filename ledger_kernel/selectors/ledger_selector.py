"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: The balance aggregator.  Computes, per account, the total
    debits and credits of every journal line inside a date filter, and the
    signed balance implied by the account's type.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - No stored balances.  Every figure is summed from journal_lines at
      query time.
    - Sign convention: Asset and Expense balances are debit - credit;
      Liability, Equity and Revenue balances are credit - debit.
    - Per-account sums stay unrounded; callers round once per total.

Failure modes:
    - Lines whose account has been deleted are dropped by the join to
      accounts; they contribute to no balance.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.money import ZERO, round2
from ledger_kernel.models.account import Account, AccountType, NormalBalance
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class DateFilter:
    """
    Which entry dates a balance query covers.

    ``start`` is inclusive, ``end_exclusive`` is exclusive; either may be
    None for an open bound.  Build one with all_time(), between() or as_of().
    """

    start: date | None = None
    end_exclusive: date | None = None

    @classmethod
    def all_time(cls) -> "DateFilter":
        return cls()

    @classmethod
    def between(cls, start: date, end: date) -> "DateFilter":
        """Both dates inclusive: [start, end + 1 day)."""
        return cls(start=start, end_exclusive=end + timedelta(days=1))

    @classmethod
    def as_of(cls, as_of_date: date) -> "DateFilter":
        """Everything dated on or before as_of_date."""
        return cls(start=None, end_exclusive=as_of_date + timedelta(days=1))

    def contains(self, value: date) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end_exclusive is not None and value >= self.end_exclusive:
            return False
        return True


@dataclass(frozen=True)
class AccountBalance:
    """
    Aggregated position of one account inside a date filter.

    total_debit and total_credit are the exact sums of the stored line
    amounts.  Reports add these unrounded values and round once per total;
    display_balance is the per-row figure rounded to cents.
    """

    account_id: UUID
    account_code: str
    account_name: str
    account_type: AccountType
    total_debit: Decimal
    total_credit: Decimal

    @property
    def net_debit(self) -> Decimal:
        """debit - credit, regardless of type."""
        return self.total_debit - self.total_credit

    @property
    def balance(self) -> Decimal:
        """Signed balance in the account type's increasing direction."""
        if self.account_type.normal_balance == NormalBalance.DEBIT:
            return self.net_debit
        return -self.net_debit

    @property
    def display_balance(self) -> Decimal:
        return round2(self.balance)


class LedgerSelector(BaseSelector[JournalLine]):
    """
    Selector for balance queries.

    Contract:
        balances() returns one AccountBalance for every account touched by
        at least one line inside the filter, ordered by account code.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def balances(
        self,
        date_filter: DateFilter | None = None,
        account_types: Iterable[AccountType] | None = None,
    ) -> list[AccountBalance]:
        date_filter = date_filter or DateFilter.all_time()

        debit_sum = func.sum(JournalLine.debit).label("debit_total")
        credit_sum = func.sum(JournalLine.credit).label("credit_total")

        query = (
            select(
                Account.id,
                Account.code,
                Account.name,
                Account.account_type,
                debit_sum,
                credit_sum,
            )
            .select_from(JournalLine)
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .join(Account, JournalLine.account_id == Account.id)
            .group_by(Account.id, Account.code, Account.name, Account.account_type)
            .order_by(Account.code)
        )

        if date_filter.start is not None:
            query = query.where(JournalEntry.entry_date >= date_filter.start)
        if date_filter.end_exclusive is not None:
            query = query.where(JournalEntry.entry_date < date_filter.end_exclusive)
        if account_types is not None:
            query = query.where(
                Account.account_type.in_([AccountType.parse(t).value for t in account_types])
            )

        return [
            AccountBalance(
                account_id=row.id,
                account_code=row.code,
                account_name=row.name,
                account_type=AccountType.parse(row.account_type),
                total_debit=row.debit_total or ZERO,
                total_credit=row.credit_total or ZERO,
            )
            for row in self.session.execute(query).all()
        ]
