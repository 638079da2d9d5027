"""Financial statements: trial balance, income statement, balance sheet."""

from ledger_modules.reporting.models import (
    Alignment,
    BalanceSheetReport,
    Cell,
    CellStyle,
    IncomeStatementReport,
    ReportMetadata,
    ReportTable,
    ReportType,
    StatementLine,
    TrialBalanceLineItem,
    TrialBalanceReport,
)
from ledger_modules.reporting.service import ReportingService
from ledger_modules.reporting.statements import render_to_dict, to_table

__all__ = [
    "Alignment",
    "BalanceSheetReport",
    "Cell",
    "CellStyle",
    "IncomeStatementReport",
    "ReportMetadata",
    "ReportTable",
    "ReportType",
    "ReportingService",
    "StatementLine",
    "TrialBalanceLineItem",
    "TrialBalanceReport",
    "render_to_dict",
    "to_table",
]
