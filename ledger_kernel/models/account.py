"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the Chart of Accounts -- the target of
    every journal line.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - name and code are each unique (uq_account_name, uq_account_code).
    - account_type is one of ASSET, LIABILITY, EQUITY, REVENUE, EXPENSE.
    - Once is_system is True, name, code and account_type never change and
      the row is never deleted (AccountService checks; db/immutability.py
      listeners back it up).

Failure modes:
    - IntegrityError if a uniqueness check is bypassed.
    - ImmutableAccountError from the ORM listeners when a protected field
      of a system account reaches a flush.
"""

from enum import Enum

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        """Display label ("Asset", "Liability", ...)."""
        return self.value.capitalize()

    @property
    def normal_balance(self) -> "NormalBalance":
        """Side on which this type of account increases."""
        if self in (AccountType.ASSET, AccountType.EXPENSE):
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT

    @classmethod
    def parse(cls, value: "AccountType | str") -> "AccountType":
        """
        Accept an AccountType or its name/label in any case.

        Raises:
            ValueError: if value is not a known account type.
        """
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"


class Account(TrackedBase):
    """
    Chart of Accounts entry.

    Contract:
        Account.name is the lookup key used for well-known role resolution;
        Account.code is the sort key for every report.

    Non-goals:
        - No hierarchy, no currency restriction.
        - Deleting a non-system account does not check journal references;
          journal_lines.account_id carries no foreign key.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("code", name="uq_account_code"),
        UniqueConstraint("name", name="uq_account_name"),
        Index("idx_account_type", "account_type"),
        Index("idx_account_active", "is_active"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Sortable account code, e.g. "10200"
    code: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    account_type: Mapped[AccountType] = mapped_column(
        String(20),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    # Inactive accounts reject new postings
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Set only by seeding; protects name/code/type and blocks deletion
    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"

    @property
    def type(self) -> AccountType:
        """account_type coerced back to the enum (rows load it as str)."""
        return AccountType.parse(self.account_type)

    @property
    def normal_balance(self) -> NormalBalance:
        return self.type.normal_balance

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == NormalBalance.DEBIT
