"""
ledger_services.orchestrator -- Central DI container for the ledger.

Responsibility:
    Creates every service, selector and module service exactly once per
    session and exposes the ledger's public operations:

        chart of accounts   create / update / delete / list / get / resolve
        journal             post / list (paginated) / get
        reports             trial balance / income statement / balance sheet
        business events     goods received / sale / payment (+ corrections)

Architecture position:
    Services -- top of the stack.  May import kernel, modules and config.

Invariants enforced:
    - Single-instance lifecycle: one writer, one poster, one reporting
      service per orchestrator, all sharing the same Session and Clock.
    - bootstrap() fails hard (RoleResolutionError) if any account role the
      poster needs cannot be bound after seeding.

Non-goals:
    - Does NOT manage transaction boundaries.  Wrap calls in
      session_scope() or commit the session yourself.

Usage:
    with session_scope() as session:
        ledger = LedgerOrchestrator(session, config)
        ledger.bootstrap(actor_id=SYSTEM_ACTOR_ID)

    with session_scope() as session:
        ledger = LedgerOrchestrator(session, config, role_resolver=resolver)
        outcome = ledger.record_payment(PaymentRecorded(...))
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping
from uuid import UUID

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ledger_config.schema import LedgerConfig
from ledger_kernel.db.engine import create_tables, init_engine_from_url
from ledger_kernel.db.immutability import register_immutability_listeners
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountInfo,
    AccountView,
    JournalEntryDraft,
    JournalEntryView,
    JournalPage,
)
from ledger_kernel.exceptions import RoleResolutionError
from ledger_kernel.logging_config import configure_logging, get_logger
from ledger_kernel.models.account import AccountType
from ledger_kernel.selectors.account_selector import AccountSelector
from ledger_kernel.selectors.journal_selector import JournalSelector
from ledger_kernel.services.account_service import AccountService, SeedOutcome
from ledger_kernel.services.journal_writer import JournalWriter
from ledger_kernel.services.role_resolver import RoleResolver
from ledger_kernel.services.sequence_service import SequenceService
from ledger_modules.posting.events import (
    GoodsReceived,
    PaymentAmountCorrected,
    PaymentDeleted,
    PaymentRecorded,
    SaleRecorded,
)
from ledger_modules.posting.models import PostingOutcome
from ledger_modules.posting.service import EventPoster
from ledger_modules.reporting.models import (
    BalanceSheetReport,
    IncomeStatementReport,
    ReportTable,
    TrialBalanceReport,
)
from ledger_modules.reporting.service import ReportingService

logger = get_logger("services.orchestrator")


def initialize_database(config: LedgerConfig) -> Engine:
    """
    Configure logging, create the engine and the tables for ``config``.

    Call once per process before opening sessions.
    """
    configure_logging(level=config.logging.level)
    engine = init_engine_from_url(
        config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )
    create_tables()
    register_immutability_listeners()
    return engine


class LedgerOrchestrator:
    """Central factory and facade for ledger operations.

    Contract:
        Receives a Session, a LedgerConfig and optionally a pre-bound
        RoleResolver and a Clock.  Constructs every service once, in
        dependency order, and exposes the public operations as methods.

    Non-goals:
        - Does NOT commit or roll back.
    """

    def __init__(
        self,
        session: Session,
        config: LedgerConfig,
        role_resolver: RoleResolver | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._session = session
        self._config = config
        self._clock = clock or SystemClock()
        self.role_resolver = role_resolver or RoleResolver()

        self.sequence_service = SequenceService(session)
        self.account_service = AccountService(session)
        self.journal_writer = JournalWriter(session, self._clock, self.sequence_service)

        self.accounts = AccountSelector(session)
        self.journal = JournalSelector(session)

        self.poster = EventPoster(
            session, self.role_resolver, self._clock, self.journal_writer
        )
        self.reporting = ReportingService(session, self._clock)

    # =========================================================================
    # Startup
    # =========================================================================

    def bootstrap(self, actor_id: UUID) -> list[SeedOutcome]:
        """
        Prepare the ledger for posting.

        Seeds the system accounts, binds every account role and verifies the
        binding.  Idempotent.

        Raises:
            RoleResolutionError: a role's account could not be found.
        """
        register_immutability_listeners()
        self.sequence_service.initialize_sequences()
        outcomes = self.account_service.seed_system_accounts(
            self._config.system_accounts, actor_id
        )
        self.bind_roles()
        logger.info(
            "ledger_bootstrapped",
            extra={
                "config_id": self._config.config_id,
                "seeded": {o.code: o.result.value for o in outcomes},
            },
        )
        return outcomes

    def bind_roles(self) -> RoleResolver:
        """
        Bind each configured role to its account, by name then by code.

        Raises:
            RoleResolutionError: for the first role with no account.
        """
        for definition in self._config.system_accounts:
            info = self.accounts.resolve_by_name(definition.name)
            if info is None:
                info = self._find_by_code(definition.code)
            if info is None:
                logger.error(
                    "role_binding_failed",
                    extra={"role": definition.role.value, "account_name": definition.name},
                )
                raise RoleResolutionError(definition.role.value, definition.name)
            self.role_resolver.register_binding(
                definition.role,
                info.id,
                info.code,
                account_name=info.name,
                account_type=info.account_type,
            )
        self.role_resolver.verify()
        return self.role_resolver

    def _find_by_code(self, code: str) -> AccountInfo | None:
        for view in self.accounts.list():
            if view.code == code:
                return self.accounts.get_info(view.id)
        return None

    # =========================================================================
    # Chart of accounts
    # =========================================================================

    def create_account(
        self,
        name: str,
        code: str,
        account_type: AccountType | str,
        actor_id: UUID,
        description: str | None = None,
        is_active: bool = True,
        is_system: bool = False,
    ) -> AccountView:
        account = self.account_service.create_account(
            name=name,
            code=code,
            account_type=account_type,
            actor_id=actor_id,
            description=description,
            is_active=is_active,
            is_system=is_system,
        )
        return AccountView.from_model(account)

    def update_account(self, account_id: UUID | str, fields: Mapping[str, Any]) -> AccountView:
        return AccountView.from_model(self.account_service.update_account(account_id, fields))

    def delete_account(self, account_id: UUID | str) -> None:
        self.account_service.delete_account(account_id)

    def list_accounts(self, active_only: bool = False) -> list[AccountView]:
        return self.accounts.list(active_only=active_only)

    def get_account(self, account_id: UUID | str) -> AccountView:
        return self.accounts.get(account_id)

    def resolve_by_name(self, name: str) -> AccountInfo | None:
        return self.accounts.resolve_by_name(name)

    # =========================================================================
    # Journal
    # =========================================================================

    def post_journal_entry(self, draft: JournalEntryDraft) -> JournalEntryView:
        return JournalEntryView.from_model(self.journal_writer.post(draft))

    def list_journal_entries(self, page: int = 1, limit: int | None = None) -> JournalPage:
        return self.journal.list_entries(
            page=page, limit=limit if limit is not None else self._config.default_page_size
        )

    def get_journal_entry(self, entry_id: UUID | str) -> JournalEntryView:
        return self.journal.get_entry(entry_id)

    # =========================================================================
    # Reports
    # =========================================================================

    def get_trial_balance(self) -> TrialBalanceReport:
        return self.reporting.trial_balance()

    def get_income_statement(
        self, start_date: date | str | None, end_date: date | str | None
    ) -> IncomeStatementReport:
        return self.reporting.income_statement(start_date, end_date)

    def get_balance_sheet(self, as_of_date: date | str | None) -> BalanceSheetReport:
        return self.reporting.balance_sheet(as_of_date)

    def report_table(
        self, report: TrialBalanceReport | IncomeStatementReport | BalanceSheetReport
    ) -> ReportTable:
        return self.reporting.table(report)

    # =========================================================================
    # Business events
    # =========================================================================

    def record_goods_received(self, event: GoodsReceived) -> PostingOutcome:
        return self.poster.goods_received(event)

    def record_sale(self, event: SaleRecorded) -> PostingOutcome:
        return self.poster.sale_recorded(event)

    def record_payment(self, event: PaymentRecorded) -> PostingOutcome:
        return self.poster.payment_recorded(event)

    def correct_payment(self, event: PaymentAmountCorrected) -> PostingOutcome:
        return self.poster.payment_corrected(event)

    def delete_payment(self, event: PaymentDeleted) -> PostingOutcome:
        return self.poster.payment_deleted(event)
