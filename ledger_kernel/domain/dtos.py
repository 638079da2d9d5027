"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that cross the kernel boundary:
    LineSpec and JournalEntryDraft (posting input), CorrectionOf (typed
    correction link), AccountInfo (what the validator needs to know about
    an account), and the read-side views returned by selectors
    (AccountView, JournalEntryView, JournalLineView, JournalPage).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from
    services and selectors, never from domain logic.

Invariants enforced:
    - Domain logic accepts and returns DTOs, never ORM entities.
    - Drafts are frozen; lines are stored as a tuple in input order.

Data flow:
    JournalEntryDraft -> validate_entry() -> ValidatedEntry -> JournalWriter
    JournalEntry (ORM) -> JournalEntryView -> caller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from ledger_kernel.domain.money import ZERO, round2

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account as AccountModel
    from ledger_kernel.models.journal import JournalEntry as JournalEntryModel
    from ledger_kernel.models.journal import JournalLine as JournalLineModel


@dataclass(frozen=True)
class CorrectionOf:
    """
    Typed link from a correcting entry to the entry it corrects.

    The reference number (PAY-EDIT-..., PAY-DEL-...) stays free-form; this
    is the machine-readable half of the link.
    """

    original_entry_id: UUID


@dataclass(frozen=True)
class LineSpec:
    """
    One proposed debit-or-credit movement.

    Amounts are kept as given (Decimal, int, str or None); the validator
    coerces and checks them, so a bad amount surfaces as a ValidationError
    naming the line instead of a constructor crash.
    """

    account_id: UUID | str | None
    debit: Any = ZERO
    credit: Any = ZERO

    @classmethod
    def dr(cls, account_id: UUID, amount: Decimal) -> LineSpec:
        return cls(account_id=account_id, debit=amount, credit=ZERO)

    @classmethod
    def cr(cls, account_id: UUID, amount: Decimal) -> LineSpec:
        return cls(account_id=account_id, debit=ZERO, credit=amount)


@dataclass(frozen=True)
class JournalEntryDraft:
    """
    A candidate journal entry, not yet validated or persisted.

    Contract:
        ``lines`` keeps input order; line numbers in error messages are
        1-based positions in this tuple.
    """

    entry_date: date | None
    description: str | None
    lines: tuple[LineSpec, ...]
    actor_id: UUID | None
    reference_number: str | None = None
    correction_of: CorrectionOf | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines or ()))


@dataclass(frozen=True)
class AccountInfo:
    """What the posting validator needs to know about one account."""

    id: UUID
    name: str
    code: str
    account_type: str
    is_active: bool
    is_system: bool = False

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountInfo:
        return cls(
            id=model.id,
            name=model.name,
            code=model.code,
            account_type=model.type.value,
            is_active=model.is_active,
            is_system=model.is_system,
        )


@dataclass(frozen=True)
class AccountView:
    """Read-side projection of an Account row."""

    id: UUID
    name: str
    code: str
    account_type: str
    description: str | None
    is_active: bool
    is_system: bool
    created_at: datetime | None = None

    @property
    def type_label(self) -> str:
        return self.account_type.capitalize()

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountView:
        return cls(
            id=model.id,
            name=model.name,
            code=model.code,
            account_type=model.type.value,
            description=model.description,
            is_active=model.is_active,
            is_system=model.is_system,
            created_at=model.created_at,
        )


@dataclass(frozen=True)
class JournalLineView:
    """
    One persisted line, with the account it points at.

    account_code/name/type are None when the account has been deleted
    since posting (journal_lines.account_id carries no foreign key).
    """

    account_id: UUID
    debit: Decimal
    credit: Decimal
    account_code: str | None = None
    account_name: str | None = None
    account_type: str | None = None

    @property
    def is_dangling(self) -> bool:
        return self.account_name is None

    @classmethod
    def from_model(cls, model: JournalLineModel) -> JournalLineView:
        account = model.account
        return cls(
            account_id=model.account_id,
            debit=round2(model.debit),
            credit=round2(model.credit),
            account_code=account.code if account is not None else None,
            account_name=account.name if account is not None else None,
            account_type=account.type.value if account is not None else None,
        )


@dataclass(frozen=True)
class JournalEntryView:
    """Read-side projection of a JournalEntry with its lines."""

    id: UUID
    entry_date: date
    description: str
    reference_number: str | None
    created_by_id: UUID
    created_at: datetime | None
    seq: int
    lines: tuple[JournalLineView, ...]
    correction_of_id: UUID | None = None

    @property
    def total_debit(self) -> Decimal:
        return round2(sum((line.debit for line in self.lines), ZERO))

    @property
    def total_credit(self) -> Decimal:
        return round2(sum((line.credit for line in self.lines), ZERO))

    @classmethod
    def from_model(cls, model: JournalEntryModel) -> JournalEntryView:
        return cls(
            id=model.id,
            entry_date=model.entry_date,
            description=model.description,
            reference_number=model.reference_number,
            created_by_id=model.created_by_id,
            created_at=model.created_at,
            seq=model.seq,
            lines=tuple(JournalLineView.from_model(line) for line in model.lines),
            correction_of_id=model.correction_of_id,
        )


@dataclass(frozen=True)
class JournalPage:
    """One page of journal entries, newest first."""

    items: tuple[JournalEntryView, ...]
    page: int
    limit: int
    total_entries: int
    total_pages: int = field(init=False)

    def __post_init__(self) -> None:
        pages = -(-self.total_entries // self.limit) if self.limit else 0
        object.__setattr__(self, "total_pages", pages)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
