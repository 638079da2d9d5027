"""
LedgerOrchestrator tests.

Verifies:
- bootstrap() seeds system accounts, binds every role and is idempotent
- Role binding falls back from name to code and fails hard otherwise
- The facade operations reach the underlying services
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import inspect

from ledger_kernel.db.engine import reset_engine
from ledger_kernel.domain.dtos import JournalEntryDraft, LineSpec
from ledger_kernel.domain.roles import AccountRole
from ledger_kernel.exceptions import RoleResolutionError
from ledger_kernel.models.account import AccountType
from ledger_kernel.services.account_service import SeedResult
from ledger_kernel.services.sequence_service import SequenceService
from ledger_modules.posting.events import PaymentRecorded
from ledger_modules.posting.models import LedgerPostingStatus
from ledger_services import LedgerOrchestrator, initialize_database


class TestBootstrap:
    def test_binds_every_role(self, ledger):
        bindings = ledger.role_resolver.bindings
        assert set(bindings) == set(AccountRole)
        assert bindings[AccountRole.CASH].account_code == "10000"

    def test_system_accounts_flagged(self, ledger):
        accounts = ledger.list_accounts()
        assert len(accounts) == 7
        assert all(a.is_system for a in accounts)

    def test_idempotent(self, ledger, test_actor_id):
        outcomes = ledger.bootstrap(test_actor_id)
        assert all(o.result == SeedResult.UNCHANGED for o in outcomes)
        assert len(ledger.list_accounts()) == 7

    def test_initializes_journal_sequence(self, ledger, session):
        assert SequenceService(session).current_value(SequenceService.JOURNAL_ENTRY) == 0

    def test_logs_bootstrap(
        self, session, ledger_config, deterministic_clock, test_actor_id, captured_logs
    ):
        LedgerOrchestrator(session, ledger_config, clock=deterministic_clock).bootstrap(
            test_actor_id
        )
        messages = [r["message"] for r in captured_logs()]
        assert "ledger_bootstrapped" in messages
        assert messages.count("system_account_seeded") == 7


class TestRoleBinding:
    def test_falls_back_to_code(self, session, ledger_config, deterministic_clock, test_actor_id):
        orchestrator = LedgerOrchestrator(session, ledger_config, clock=deterministic_clock)
        # Pre-existing account with the configured code but another name
        orchestrator.create_account("Bank", "10000", AccountType.ASSET, test_actor_id)

        orchestrator.bootstrap(test_actor_id)

        binding = orchestrator.role_resolver.resolve(AccountRole.CASH)
        assert binding.account_name == "Bank"
        assert binding.account_code == "10000"

    def test_unresolvable_role_fails_hard(self, ledger, ledger_config, session, deterministic_clock):
        cash = ledger_config.system_account_for(AccountRole.CASH)
        broken = replace(
            ledger_config,
            system_accounts=tuple(
                replace(d, name="Missing Cash", code="00000") if d is cash else d
                for d in ledger_config.system_accounts
            ),
        )
        orchestrator = LedgerOrchestrator(session, broken, clock=deterministic_clock)
        with pytest.raises(RoleResolutionError) as exc_info:
            orchestrator.bind_roles()
        assert exc_info.value.role == "cash"
        assert exc_info.value.account_name == "Missing Cash"


class TestFacade:
    def test_post_and_list_entries(self, ledger, system_accounts, test_actor_id):
        view = ledger.post_journal_entry(
            JournalEntryDraft(
                entry_date=date(2024, 1, 15),
                description="Owner deposit",
                lines=(
                    LineSpec.dr(system_accounts[AccountRole.CASH], Decimal("250")),
                    LineSpec.cr(system_accounts[AccountRole.SALES_REVENUE], Decimal("250")),
                ),
                actor_id=test_actor_id,
            )
        )
        assert view.total_debit == Decimal("250.00")

        page = ledger.list_journal_entries()
        assert page.limit == 10
        assert [e.id for e in page.items] == [view.id]

    def test_account_crud(self, ledger, test_actor_id):
        created = ledger.create_account("Rent", "60000", "Expense", test_actor_id)
        assert created.account_type == "expense"
        assert created.type_label == "Expense"

        updated = ledger.update_account(created.id, {"description": "Office rent"})
        assert updated.description == "Office rent"
        assert ledger.resolve_by_name("Rent").id == created.id

        ledger.delete_account(created.id)
        assert ledger.resolve_by_name("Rent") is None

    def test_record_payment(self, ledger, test_actor_id):
        outcome = ledger.record_payment(
            PaymentRecorded(
                payment_id="p1",
                invoice_number="INV-1",
                payment_date=date(2024, 1, 20),
                amount=Decimal("50.00"),
                actor_id=test_actor_id,
            )
        )
        assert outcome.status == LedgerPostingStatus.POSTED
        assert ledger.get_journal_entry(outcome.entry_id).reference_number == "INV-1"

    def test_reports_available(self, ledger):
        assert ledger.get_trial_balance().is_balanced
        assert ledger.get_balance_sheet(date(2024, 12, 31)).is_balanced
        statement = ledger.get_income_statement("2024-01-01", "2024-12-31")
        assert statement.net_income == Decimal("0.00")
        assert ledger.report_table(statement).title.startswith("Income Statement")


class TestInitializeDatabase:
    def test_creates_schema(self, ledger_config):
        config = replace(
            ledger_config, database=replace(ledger_config.database, url="sqlite:///:memory:")
        )
        engine = initialize_database(config)
        try:
            tables = set(inspect(engine).get_table_names())
            assert {"accounts", "journal_entries", "journal_lines", "sequence_counters"} <= tables
        finally:
            reset_engine()
