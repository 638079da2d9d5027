"""
Module: ledger_kernel.selectors.account_selector
Responsibility: Read access to the chart of accounts: get by id, list
    sorted by code, and exact-name resolution for well-known accounts.
Architecture position: Kernel > Selectors.

Failure modes:
    - get() raises AccountNotFoundError; resolve_by_name() returns None
      instead, so the caller can degrade gracefully.
"""

from uuid import UUID

from sqlalchemy import select

from ledger_kernel.domain.dtos import AccountInfo, AccountView
from ledger_kernel.domain.validation import parse_id
from ledger_kernel.exceptions import AccountNotFoundError
from ledger_kernel.models.account import Account
from ledger_kernel.selectors.base import BaseSelector


class AccountSelector(BaseSelector[Account]):
    """Selector for Account rows."""

    def get(self, account_id: UUID | str) -> AccountView:
        parsed = parse_id(account_id)
        account = self.session.get(Account, parsed) if parsed is not None else None
        if account is None:
            raise AccountNotFoundError(str(account_id))
        return AccountView.from_model(account)

    def list(self, active_only: bool = False) -> list[AccountView]:
        """All accounts, ordered by code."""
        query = select(Account).order_by(Account.code)
        if active_only:
            query = query.where(Account.is_active.is_(True))
        return [AccountView.from_model(a) for a in self.session.execute(query).scalars()]

    def resolve_by_name(self, name: str) -> AccountInfo | None:
        """Exact display-name lookup; None when no such account exists."""
        account = self.session.execute(
            select(Account).where(Account.name == name)
        ).scalar_one_or_none()
        return AccountInfo.from_model(account) if account is not None else None

    def get_info(self, account_id: UUID) -> AccountInfo | None:
        account = self.session.get(Account, account_id)
        return AccountInfo.from_model(account) if account is not None else None
