"""
Pure domain layer.

DTOs, money arithmetic, posting validation, account roles and the clock.
No dependency on the ORM, the database or I/O (SystemClock excepted).
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountInfo,
    AccountView,
    CorrectionOf,
    JournalEntryDraft,
    JournalEntryView,
    JournalLineView,
    JournalPage,
    LineSpec,
)
from ledger_kernel.domain.money import ZERO, round2, sum2, to_decimal
from ledger_kernel.domain.roles import DEFAULT_ROLE_NAMES, AccountRole
from ledger_kernel.domain.validation import ValidatedEntry, validate_entry

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "AccountInfo",
    "AccountView",
    "CorrectionOf",
    "JournalEntryDraft",
    "JournalEntryView",
    "JournalLineView",
    "JournalPage",
    "LineSpec",
    "ZERO",
    "round2",
    "sum2",
    "to_decimal",
    "AccountRole",
    "DEFAULT_ROLE_NAMES",
    "ValidatedEntry",
    "validate_entry",
]
