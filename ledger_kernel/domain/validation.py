"""
Posting validation -- the gatekeeper in front of the Journal Store.

Pure checks with no I/O.  JournalWriter loads the accounts a draft
references and hands them in as a mapping; everything else is arithmetic
on the draft itself.

Rules, checked in this order (the first violation wins):

    0. date, description and actor are present
    1. at least two lines
    2. per line, in input order:
         account exists and is active
         debit >= 0 and credit >= 0
         not both positive
         not both zero
    3. total debit and total credit are each rounded to cents
    4. totals are equal, and not zero
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping
from uuid import UUID

from ledger_kernel.domain.dtos import AccountInfo, JournalEntryDraft, LineSpec
from ledger_kernel.domain.money import ZERO, round2, to_decimal
from ledger_kernel.exceptions import (
    InvalidAccountError,
    InvalidLineError,
    MissingFieldError,
    UnbalancedEntryError,
    ZeroValueEntryError,
)

MIN_LINES = 2


@dataclass(frozen=True)
class ValidatedLine:
    account_id: UUID
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class ValidatedEntry:
    """A draft that passed every rule, with amounts coerced to Decimal."""

    draft: JournalEntryDraft
    lines: tuple[ValidatedLine, ...]
    total_debit: Decimal
    total_credit: Decimal


def parse_id(value: UUID | str | None) -> UUID | None:
    """Ids arrive as UUIDs or strings; anything unparseable is unknown."""
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _amount(value, index: int, side: str) -> Decimal:
    try:
        return to_decimal(value, side)
    except ValueError:
        raise InvalidLineError(f"{side} is not a valid amount", index) from None


def validate_line(
    index: int,
    line: LineSpec,
    accounts: Mapping[UUID, AccountInfo],
) -> ValidatedLine:
    """Apply the per-line rules to one line (index is 0-based)."""
    account_id = parse_id(line.account_id)
    account = accounts.get(account_id) if account_id is not None else None
    if account is None:
        raise InvalidAccountError(index, str(line.account_id), "not found")
    if not account.is_active:
        raise InvalidAccountError(index, str(account.id), f"({account.name}) is inactive")

    debit = _amount(line.debit, index, "debit")
    credit = _amount(line.credit, index, "credit")

    if debit < 0 or credit < 0:
        raise InvalidLineError("Debit and credit cannot be negative", index)
    if debit > 0 and credit > 0:
        raise InvalidLineError("A line cannot have both a debit and a credit", index)
    if debit == 0 and credit == 0:
        raise InvalidLineError("A line must have either a debit or a credit", index)

    return ValidatedLine(account_id=account.id, debit=debit, credit=credit)


def validate_entry(
    draft: JournalEntryDraft,
    accounts: Mapping[UUID, AccountInfo],
) -> ValidatedEntry:
    """
    Validate a candidate journal entry.

    Raises:
        MissingFieldError: date, description or actor missing.
        InvalidLineError: too few lines, or a line's amounts break a rule.
        InvalidAccountError: a line's account is unknown or inactive.
        UnbalancedEntryError: rounded totals differ.
        ZeroValueEntryError: rounded totals are both zero.
    """
    if draft.entry_date is None:
        raise MissingFieldError("date")
    if not (draft.description or "").strip():
        raise MissingFieldError("description")
    if draft.actor_id is None:
        raise MissingFieldError("created_by")

    if len(draft.lines) < MIN_LINES:
        raise InvalidLineError("A journal entry must have at least two lines")

    lines = tuple(
        validate_line(index, line, accounts) for index, line in enumerate(draft.lines)
    )

    total_debit = round2(sum((line.debit for line in lines), ZERO))
    total_credit = round2(sum((line.credit for line in lines), ZERO))

    if total_debit != total_credit:
        raise UnbalancedEntryError(total_debit, total_credit)
    if total_debit == 0:
        raise ZeroValueEntryError()

    return ValidatedEntry(
        draft=draft,
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
    )
