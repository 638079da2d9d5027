"""
Module: ledger_kernel.models.journal
Responsibility: ORM persistence for journal entries and journal lines -- the
    single source of financial truth.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/ or outer layers.

Invariants enforced:
    - Balance (checked by JournalWriter before the single flush that
      persists header and lines; is_balanced is a read-side convenience).
    - Append-only: rows are inserted once and never updated or deleted
      (ORM listeners in db/immutability.py; no service exposes either).
    - seq is unique and monotonic, breaking ties between entries that share
      an entry_date and created_at.

Failure modes:
    - ImmutabilityViolationError on UPDATE/DELETE of an entry or a line.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase, UUIDString

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class JournalEntry(TrackedBase):
    """
    Journal entry header -- one balanced, dated transaction.

    Contract:
        Carries at least two lines whose rounded debit and credit totals are
        equal and positive.  created_by_id is the actor who posted it.

    Non-goals:
        - No status, no draft state: an entry exists only once it is posted.
        - No reversal in place: a correction is a new entry whose
          correction_of_id points at the entry it corrects.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        UniqueConstraint("seq", name="uq_journal_seq"),
        Index("idx_journal_entry_date", "entry_date"),
        Index("idx_journal_reference", "reference_number"),
    )

    # Accounting date of the transaction
    entry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )

    # Free-form correlation id (invoice number, PO number, PAY-EDIT-...)
    reference_number: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    # Entry this one corrects, if any
    correction_of_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=True,
    )

    # Monotonic store sequence
    seq: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        order_by="JournalLine.line_seq",
        lazy="selectin",
    )

    correction_of: Mapped["JournalEntry | None"] = relationship(
        remote_side="JournalEntry.id",
        foreign_keys=[correction_of_id],
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.entry_date} seq={self.seq}>"

    @property
    def actor_id(self) -> UUID:
        return self.created_by_id

    @property
    def total_debits(self) -> Decimal:
        """Sum of all debit amounts (unrounded)."""
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credits(self) -> Decimal:
        """Sum of all credit amounts (unrounded)."""
        return sum((line.credit for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


class JournalLine(TrackedBase):
    """
    One debit-or-credit movement against one account.

    Contract:
        Exactly one of debit/credit is strictly positive; the other is zero.
        Owned by exactly one JournalEntry; line_seq preserves input order.

    Non-goals:
        - account_id has no foreign key.  Deleting a non-system account
          leaves its historical lines pointing at nothing; readers treat
          the account as unknown.
    """

    __tablename__ = "journal_lines"

    __table_args__ = (
        Index("idx_line_entry", "journal_entry_id"),
        Index("idx_line_account", "account_id"),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    debit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    credit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        nullable=False,
        default=Decimal("0"),
    )

    line_seq: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines",
    )

    account: Mapped["Account | None"] = relationship(
        primaryjoin="foreign(JournalLine.account_id) == Account.id",
        viewonly=True,
        lazy="joined",
    )

    def __repr__(self) -> str:
        side = "Dr" if self.is_debit else "Cr"
        return f"<JournalLine {side} {self.amount} account={self.account_id}>"

    @property
    def is_debit(self) -> bool:
        return self.debit > 0

    @property
    def is_credit(self) -> bool:
        return self.credit > 0

    @property
    def amount(self) -> Decimal:
        """The strictly positive side's amount."""
        return self.debit if self.is_debit else self.credit

    @property
    def signed_amount(self) -> Decimal:
        """Debits positive, credits negative."""
        return self.debit - self.credit
