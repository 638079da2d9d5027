"""
Pure financial statement transformation functions.

These functions turn AccountBalance rows from the balance aggregator into
the three statements and their tabular projection.  ZERO I/O.

- No database access
- No clock access (metadata is built by the caller)
- Deterministic: same inputs always produce same outputs

Rows show each account rounded to cents.  Every total is summed from the
unrounded account balances and rounded once, so sub-cent line amounts
cannot push a balanced ledger out of balance.
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable
from uuid import UUID

from ledger_kernel.domain.money import ZERO, round2
from ledger_kernel.models.account import AccountType
from ledger_kernel.selectors.ledger_selector import AccountBalance
from ledger_modules.reporting.models import (
    Alignment,
    BalanceSheetReport,
    Cell,
    CellStyle,
    IncomeStatementReport,
    ReportMetadata,
    ReportTable,
    StatementLine,
    TrialBalanceLineItem,
    TrialBalanceReport,
)

NET_INCOME_CODE = "NI001"
NET_INCOME_NAME = "Net Income (Current Period)"


def _statement_line(balance: AccountBalance) -> StatementLine:
    return StatementLine(
        account_id=balance.account_id,
        account_code=balance.account_code,
        account_name=balance.account_name,
        account_type=balance.account_type.value,
        amount=balance.display_balance,
    )


def _of_type(
    balances: Iterable[AccountBalance], account_type: AccountType
) -> list[AccountBalance]:
    return sorted(
        (b for b in balances if b.account_type == account_type),
        key=lambda b: b.account_code,
    )


def _total(balances: Iterable[AccountBalance]) -> Decimal:
    return round2(sum((b.balance for b in balances), ZERO))


# =========================================================================
# 1. TRIAL BALANCE
# =========================================================================


def build_trial_balance(
    balances: Iterable[AccountBalance],
    metadata: ReportMetadata,
) -> TrialBalanceReport:
    """
    One row per account with activity, sorted by code.

    Grand totals are the sums of the net debit and net credit balances, so
    they agree whenever every posted entry balanced.
    """
    balances = sorted(balances, key=lambda b: b.account_code)
    lines = []
    for b in balances:
        net = round2(b.net_debit)
        lines.append(
            TrialBalanceLineItem(
                account_id=b.account_id,
                account_code=b.account_code,
                account_name=b.account_name,
                account_type=b.account_type.value,
                total_debit=round2(b.total_debit),
                total_credit=round2(b.total_credit),
                debit_balance=net if net > 0 else ZERO,
                credit_balance=-net if net < 0 else ZERO,
            )
        )
    return TrialBalanceReport(
        metadata=metadata,
        lines=tuple(lines),
        grand_total_debit=round2(sum((b.net_debit for b in balances if b.net_debit > 0), ZERO)),
        grand_total_credit=round2(
            sum((-b.net_debit for b in balances if b.net_debit < 0), ZERO)
        ),
    )


# =========================================================================
# 2. INCOME STATEMENT
# =========================================================================


def _net_income(balances: Iterable[AccountBalance]) -> Decimal:
    """Unrounded revenue minus expenses."""
    net = ZERO
    for b in balances:
        if b.account_type == AccountType.REVENUE:
            net += b.balance
        elif b.account_type == AccountType.EXPENSE:
            net -= b.balance
    return net


def compute_net_income(balances: Iterable[AccountBalance]) -> Decimal:
    """Revenue balances minus expense balances, rounded once."""
    return round2(_net_income(balances))


def build_income_statement(
    balances: Iterable[AccountBalance],
    start_date: date,
    end_date: date,
    metadata: ReportMetadata,
) -> IncomeStatementReport:
    """Revenue and expense sections from balances already filtered to the period."""
    balances = list(balances)
    revenue = _of_type(balances, AccountType.REVENUE)
    expenses = _of_type(balances, AccountType.EXPENSE)
    return IncomeStatementReport(
        metadata=metadata,
        start_date=start_date,
        end_date=end_date,
        revenue=tuple(_statement_line(b) for b in revenue),
        expenses=tuple(_statement_line(b) for b in expenses),
        total_revenue=_total(revenue),
        total_expenses=_total(expenses),
        net_income=compute_net_income(balances),
    )


# =========================================================================
# 3. BALANCE SHEET
# =========================================================================


def build_balance_sheet(
    balances: Iterable[AccountBalance],
    as_of_date: date,
    metadata: ReportMetadata,
) -> BalanceSheetReport:
    """
    Asset, liability and equity sections as of a date.

    ``balances`` must cover every account type up to the as-of date: the
    revenue and expense rows produce the current-period net income line.
    Asset and liability accounts whose balance rounds to zero are left out of the
    sections; equity accounts are always shown.
    """
    balances = list(balances)
    asset_rows = _of_type(balances, AccountType.ASSET)
    liability_rows = _of_type(balances, AccountType.LIABILITY)
    equity_rows = _of_type(balances, AccountType.EQUITY)
    net_income_exact = _net_income(balances)
    net_income = round2(net_income_exact)
    liabilities_exact = sum((b.balance for b in liability_rows), ZERO)
    equity_exact = sum((b.balance for b in equity_rows), ZERO) + net_income_exact

    def section(rows: list[AccountBalance], keep_zero: bool) -> tuple[StatementLine, ...]:
        return tuple(
            _statement_line(b) for b in rows if keep_zero or b.display_balance != 0
        )

    assets = section(asset_rows, keep_zero=False)
    liabilities = section(liability_rows, keep_zero=False)
    equity = section(equity_rows, keep_zero=True) + (
        StatementLine(
            account_code=NET_INCOME_CODE,
            account_name=NET_INCOME_NAME,
            account_type=AccountType.EQUITY.value,
            amount=net_income,
        ),
    )

    return BalanceSheetReport(
        metadata=metadata,
        as_of_date=as_of_date,
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        total_assets=_total(asset_rows),
        total_liabilities=round2(liabilities_exact),
        total_equity=round2(equity_exact),
        current_period_net_income=net_income,
        total_liabilities_and_equity=round2(liabilities_exact + equity_exact),
    )


# =========================================================================
# 4. TABULAR PROJECTION
# =========================================================================


def format_amount(amount: Decimal) -> str:
    return f"{round2(amount):,.2f}"


def _money(amount: Decimal, style: CellStyle = CellStyle.NORMAL) -> Cell:
    return Cell(format_amount(amount), Alignment.RIGHT, style)


def _header(*titles: str) -> tuple[Cell, ...]:
    return tuple(
        Cell(t, Alignment.RIGHT if i > 1 else Alignment.LEFT, CellStyle.HEADER)
        for i, t in enumerate(titles)
    )


def trial_balance_table(report: TrialBalanceReport) -> ReportTable:
    rows = [
        (
            Cell(line.account_code),
            Cell(line.account_name),
            _money(line.debit_balance),
            _money(line.credit_balance),
        )
        for line in report.lines
    ]
    rows.append(
        (
            Cell("", style=CellStyle.TOTAL),
            Cell("Grand Total", style=CellStyle.TOTAL),
            _money(report.grand_total_debit, CellStyle.TOTAL),
            _money(report.grand_total_credit, CellStyle.TOTAL),
        )
    )
    return ReportTable(
        title="Trial Balance",
        header=_header("Code", "Account", "Debit", "Credit"),
        rows=tuple(rows),
    )


def _section_rows(
    label: str,
    lines: tuple[StatementLine, ...],
    total_label: str,
    total: Decimal,
) -> list[tuple[Cell, ...]]:
    rows: list[tuple[Cell, ...]] = [
        (Cell(label, style=CellStyle.SECTION), Cell("", style=CellStyle.SECTION), Cell(""))
    ]
    rows.extend(
        (Cell(line.account_code), Cell(line.account_name), _money(line.amount))
        for line in lines
    )
    rows.append(
        (
            Cell("", style=CellStyle.TOTAL),
            Cell(total_label, style=CellStyle.TOTAL),
            _money(total, CellStyle.TOTAL),
        )
    )
    return rows


def income_statement_table(report: IncomeStatementReport) -> ReportTable:
    rows = _section_rows("Revenue", report.revenue, "Total Revenue", report.total_revenue)
    rows += _section_rows(
        "Expenses", report.expenses, "Total Expenses", report.total_expenses
    )
    rows.append(
        (
            Cell("", style=CellStyle.TOTAL),
            Cell("Net Income", style=CellStyle.TOTAL),
            _money(report.net_income, CellStyle.TOTAL),
        )
    )
    return ReportTable(
        title=f"Income Statement {report.start_date.isoformat()} to {report.end_date.isoformat()}",
        header=_header("Code", "Account", "Amount"),
        rows=tuple(rows),
    )


def balance_sheet_table(report: BalanceSheetReport) -> ReportTable:
    rows = _section_rows("Assets", report.assets, "Total Assets", report.total_assets)
    rows += _section_rows(
        "Liabilities", report.liabilities, "Total Liabilities", report.total_liabilities
    )
    rows += _section_rows("Equity", report.equity, "Total Equity", report.total_equity)
    rows.append(
        (
            Cell("", style=CellStyle.TOTAL),
            Cell("Total Liabilities and Equity", style=CellStyle.TOTAL),
            _money(report.total_liabilities_and_equity, CellStyle.TOTAL),
        )
    )
    return ReportTable(
        title=f"Balance Sheet as of {report.as_of_date.isoformat()}",
        header=_header("Code", "Account", "Balance"),
        rows=tuple(rows),
    )


def to_table(
    report: TrialBalanceReport | IncomeStatementReport | BalanceSheetReport,
) -> ReportTable:
    """Project any of the three reports to a ReportTable."""
    if isinstance(report, TrialBalanceReport):
        return trial_balance_table(report)
    if isinstance(report, IncomeStatementReport):
        return income_statement_table(report)
    if isinstance(report, BalanceSheetReport):
        return balance_sheet_table(report)
    raise TypeError(f"Cannot tabulate {type(report).__name__}")


# =========================================================================
# 5. RENDERER (dict/JSON output)
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Decimal -> str, UUID -> str, date -> ISO string, Enum -> value,
    tuples -> lists, nested dataclasses -> nested dicts.
    """
    if obj is None:
        return None
    if isinstance(obj, (Decimal, UUID)):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
