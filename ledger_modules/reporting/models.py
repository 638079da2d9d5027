"""
Financial Reporting Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for the three statements (trial balance,
income statement, balance sheet) and for their tabular projection
(``Cell`` / ``ReportTable``).

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Built by
``statements.py``, returned by ``ReportingService``.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields are ``Decimal`` rounded to cents -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ReportType(str, Enum):
    """Types of financial reports."""

    TRIAL_BALANCE = "trial_balance"
    INCOME_STATEMENT = "income_statement"
    BALANCE_SHEET = "balance_sheet"


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every financial report."""

    report_type: ReportType
    generated_at: str  # ISO format timestamp from injected clock
    as_of_date: date | None = None
    period_start: date | None = None
    period_end: date | None = None


# =========================================================================
# Trial Balance
# =========================================================================


@dataclass(frozen=True)
class TrialBalanceLineItem:
    """One account's row in the trial balance."""

    account_id: UUID
    account_code: str
    account_name: str
    account_type: str
    total_debit: Decimal
    total_credit: Decimal
    debit_balance: Decimal  # max(debit - credit, 0)
    credit_balance: Decimal  # max(credit - debit, 0)


@dataclass(frozen=True)
class TrialBalanceReport:
    metadata: ReportMetadata
    lines: tuple[TrialBalanceLineItem, ...]
    grand_total_debit: Decimal
    grand_total_credit: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.grand_total_debit == self.grand_total_credit


# =========================================================================
# Income Statement / Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class StatementLine:
    """
    One account's contribution to a statement section.

    account_id is None for synthetic lines (current-period net income).
    """

    account_code: str
    account_name: str
    account_type: str
    amount: Decimal
    account_id: UUID | None = None


@dataclass(frozen=True)
class IncomeStatementReport:
    """Revenue - Expenses = Net Income over an inclusive date range."""

    metadata: ReportMetadata
    start_date: date
    end_date: date
    revenue: tuple[StatementLine, ...]
    expenses: tuple[StatementLine, ...]
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class BalanceSheetReport:
    """
    Balance sheet as of a date.

    ``equity`` ends with the synthetic current-period net income line and
    ``total_equity`` includes it.
    """

    metadata: ReportMetadata
    as_of_date: date
    assets: tuple[StatementLine, ...]
    liabilities: tuple[StatementLine, ...]
    equity: tuple[StatementLine, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    current_period_net_income: Decimal
    # Rounded once from the unrounded sections, not from the rounded totals
    total_liabilities_and_equity: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.total_assets == self.total_liabilities_and_equity


# =========================================================================
# Tabular projection
# =========================================================================


class Alignment(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class CellStyle(str, Enum):
    NORMAL = "normal"
    HEADER = "header"
    SECTION = "section"
    TOTAL = "total"


@dataclass(frozen=True)
class Cell:
    """One rendered table cell: text plus presentation hints."""

    text: str
    alignment: Alignment = Alignment.LEFT
    style: CellStyle = CellStyle.NORMAL


@dataclass(frozen=True)
class ReportTable:
    """A report flattened to rows of cells for an external renderer."""

    title: str
    header: tuple[Cell, ...]
    rows: tuple[tuple[Cell, ...], ...]
