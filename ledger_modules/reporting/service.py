"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Validates report parameters, pulls account balances from the kernel's
``LedgerSelector`` and delegates to the pure builders in
``statements.py``.  Read-only: nothing is posted.

Failure modes
-------------
* Missing start/end/as-of date  -> ``MissingFieldError``.
* Unparseable date              -> ``ValidationError``.
* start after end               -> ``InvalidDateRangeError``.

Reports are point-in-time reads with no isolation guarantee against
concurrent posters; they never see a partially written entry because an
entry's header and lines are written by one flush.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.exceptions import (
    InvalidDateRangeError,
    MissingFieldError,
    ValidationError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.ledger_selector import DateFilter, LedgerSelector

from ledger_modules.reporting.models import (
    BalanceSheetReport,
    IncomeStatementReport,
    ReportMetadata,
    ReportTable,
    ReportType,
    TrialBalanceReport,
)
from ledger_modules.reporting.statements import (
    build_balance_sheet,
    build_income_statement,
    build_trial_balance,
    to_table,
)

logger = get_logger("modules.reporting.service")


def parse_report_date(value: date | str | None, field: str) -> date:
    """
    Accept a date, a datetime or an ISO ``YYYY-MM-DD`` string.

    Raises:
        MissingFieldError: value is None or blank.
        ValidationError: value is not a date.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(field, f"Please provide {field.replace('_', ' ')} for the report")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}") from None


class ReportingService:
    """
    Financial statement generation service.

    Contract
    --------
    * Every public method returns a frozen report DTO.
    * All methods are read-only.

    Non-goals
    ---------
    * No persistence of reports; every figure is re-derived per call.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()
        self._ledger = LedgerSelector(session)

    def _metadata(self, report_type: ReportType, **kwargs) -> ReportMetadata:
        return ReportMetadata(
            report_type=report_type,
            generated_at=self._clock.now().isoformat(),
            **kwargs,
        )

    def trial_balance(self) -> TrialBalanceReport:
        """All-time trial balance."""
        report = build_trial_balance(
            self._ledger.balances(DateFilter.all_time()),
            self._metadata(ReportType.TRIAL_BALANCE),
        )
        logger.info(
            "report_generated",
            extra={
                "report_type": ReportType.TRIAL_BALANCE.value,
                "account_count": len(report.lines),
                "grand_total_debit": str(report.grand_total_debit),
                "grand_total_credit": str(report.grand_total_credit),
            },
        )
        if not report.is_balanced:
            logger.error(
                "trial_balance_out_of_balance",
                extra={
                    "grand_total_debit": str(report.grand_total_debit),
                    "grand_total_credit": str(report.grand_total_credit),
                },
            )
        return report

    def income_statement(
        self,
        start_date: date | str | None,
        end_date: date | str | None,
    ) -> IncomeStatementReport:
        """Income statement over ``[start_date, end_date]``, both inclusive."""
        start = parse_report_date(start_date, "start_date")
        end = parse_report_date(end_date, "end_date")
        if start > end:
            raise InvalidDateRangeError(start.isoformat(), end.isoformat())

        report = build_income_statement(
            self._ledger.balances(DateFilter.between(start, end)),
            start,
            end,
            self._metadata(
                ReportType.INCOME_STATEMENT, period_start=start, period_end=end
            ),
        )
        logger.info(
            "report_generated",
            extra={
                "report_type": ReportType.INCOME_STATEMENT.value,
                "period_start": start,
                "period_end": end,
                "net_income": str(report.net_income),
            },
        )
        return report

    def balance_sheet(self, as_of_date: date | str | None) -> BalanceSheetReport:
        """Balance sheet including every entry dated on or before as_of_date."""
        as_of = parse_report_date(as_of_date, "as_of_date")

        report = build_balance_sheet(
            self._ledger.balances(DateFilter.as_of(as_of)),
            as_of,
            self._metadata(ReportType.BALANCE_SHEET, as_of_date=as_of),
        )
        logger.info(
            "report_generated",
            extra={
                "report_type": ReportType.BALANCE_SHEET.value,
                "as_of_date": as_of,
                "total_assets": str(report.total_assets),
                "total_liabilities_and_equity": str(report.total_liabilities_and_equity),
            },
        )
        if not report.is_balanced:
            logger.error(
                "balance_sheet_out_of_balance",
                extra={
                    "as_of_date": as_of,
                    "total_assets": str(report.total_assets),
                    "total_liabilities_and_equity": str(
                        report.total_liabilities_and_equity
                    ),
                },
            )
        return report

    def table(
        self,
        report: TrialBalanceReport | IncomeStatementReport | BalanceSheetReport,
    ) -> ReportTable:
        return to_table(report)
