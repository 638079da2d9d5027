"""
Module: ledger_kernel.selectors.journal_selector
Responsibility: Paginated, newest-first read access to journal entries.
Architecture position: Kernel > Selectors.

Ordering: entry_date DESC, then created_at DESC, then seq DESC.  seq breaks
ties between entries created within the same clock tick.
"""

from uuid import UUID

from sqlalchemy import func, select

from ledger_kernel.domain.dtos import JournalEntryView, JournalPage
from ledger_kernel.domain.validation import parse_id
from ledger_kernel.exceptions import JournalEntryNotFoundError, ValidationError
from ledger_kernel.models.journal import JournalEntry
from ledger_kernel.selectors.base import BaseSelector

DEFAULT_PAGE_SIZE = 10


class JournalSelector(BaseSelector[JournalEntry]):
    """Selector for journal entries and their lines."""

    def get_entry(self, entry_id: UUID | str) -> JournalEntryView:
        """
        Raises:
            JournalEntryNotFoundError: unknown (or unparseable) id.
        """
        parsed = parse_id(entry_id)
        entry = self.session.get(JournalEntry, parsed) if parsed is not None else None
        if entry is None:
            raise JournalEntryNotFoundError(str(entry_id))
        return JournalEntryView.from_model(entry)

    def list_entries(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> JournalPage:
        """
        One page of entries, newest first.

        Raises:
            ValidationError: page or limit below 1.
        """
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if limit < 1:
            raise ValidationError("limit must be 1 or greater")

        total = self.count()

        entries = self.session.execute(
            select(JournalEntry)
            .order_by(
                JournalEntry.entry_date.desc(),
                JournalEntry.created_at.desc(),
                JournalEntry.seq.desc(),
            )
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars()

        return JournalPage(
            items=tuple(JournalEntryView.from_model(e) for e in entries),
            page=page,
            limit=limit,
            total_entries=total,
        )

    def count(self) -> int:
        """Number of posted entries."""
        return self.session.execute(
            select(func.count()).select_from(JournalEntry)
        ).scalar_one()
