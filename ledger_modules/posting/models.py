"""
Posting outcome models.

The poster never raises into the business operation that triggered it.
Instead every call returns a PostingOutcome whose status tells the caller
whether the books now reflect the event.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class LedgerPostingStatus(str, Enum):
    """What happened to the accounting side of a business event."""

    POSTED = "posted"
    NOT_REQUIRED = "not_required"  # draft invoice, zero value, zero delta
    SKIPPED = "skipped"  # a required account role could not be resolved
    REJECTED = "rejected"  # the synthesized entry failed validation


@dataclass(frozen=True)
class PostingOutcome:
    status: LedgerPostingStatus
    event_type: str
    reference_number: str | None = None
    entry_id: UUID | None = None
    message: str | None = None
    missing_roles: tuple[str, ...] = ()

    @property
    def is_posted(self) -> bool:
        return self.status == LedgerPostingStatus.POSTED

    @property
    def books_diverge(self) -> bool:
        """True when the business record changed but the journal did not."""
        return self.status in (LedgerPostingStatus.SKIPPED, LedgerPostingStatus.REJECTED)
