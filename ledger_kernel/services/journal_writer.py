"""
JournalWriter -- the only way a journal entry becomes durable.

Responsibility:
    Validates a JournalEntryDraft against the current chart of accounts
    and persists the header and all of its lines in one flush.

Architecture position:
    Kernel > Services.  Called directly for manual entries and by the event
    poster for derived ones.  Delegates sequence allocation to
    SequenceService and the rules themselves to domain/validation.py.

Invariants enforced:
    - Balance: rounded debit total equals rounded credit total, and is > 0.
    - Every line's account exists and is active at post time.
    - All-or-nothing: every rule is checked before the first row is added,
      and header plus lines are written by a single flush.
    - Append-only: this class offers post() and nothing else.

Failure modes:
    - ValidationError subclasses for every rejected draft (nothing written).
    - JournalEntryNotFoundError if correction_of names an unknown entry.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import AccountInfo, JournalEntryDraft
from ledger_kernel.domain.validation import parse_id, validate_entry
from ledger_kernel.exceptions import JournalEntryNotFoundError, ValidationError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.journal import JournalEntry, JournalLine
from ledger_kernel.services.sequence_service import SequenceService

logger = get_logger("services.journal_writer")


class JournalWriter:
    """
    Service for atomic journal posting.

    Contract:
        post() returns the persisted JournalEntry with its lines loaded,
        or raises before anything is added to the session.

    Non-goals:
        - Does NOT commit; the caller owns the transaction.
        - Offers no update or delete.  Corrections are new entries.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        sequence_service: SequenceService | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._sequence_service = sequence_service or SequenceService(session)

    def _load_accounts(self, draft: JournalEntryDraft) -> dict[UUID, AccountInfo]:
        ids = {parse_id(line.account_id) for line in draft.lines}
        ids.discard(None)
        if not ids:
            return {}
        rows = self._session.execute(
            select(Account).where(Account.id.in_(ids))
        ).scalars()
        return {row.id: AccountInfo.from_model(row) for row in rows}

    def post(self, draft: JournalEntryDraft) -> JournalEntry:
        """
        Validate and persist a journal entry.

        Raises:
            ValidationError: the first violated posting rule.
            JournalEntryNotFoundError: unknown correction_of target.
        """
        with LogContext.bind(
            actor_id=draft.actor_id,
            reference_number=draft.reference_number,
        ):
            try:
                validated = validate_entry(draft, self._load_accounts(draft))
            except ValidationError as exc:
                logger.warning(
                    "posting_rejected",
                    extra={
                        "error_code": exc.code,
                        "reason": str(exc),
                        "line_count": len(draft.lines),
                    },
                )
                raise

            correction_of_id = None
            if draft.correction_of is not None:
                correction_of_id = draft.correction_of.original_entry_id
                if self._session.get(JournalEntry, correction_of_id) is None:
                    raise JournalEntryNotFoundError(str(correction_of_id))

            seq = self._sequence_service.next_value(SequenceService.JOURNAL_ENTRY)

            entry = JournalEntry(
                entry_date=draft.entry_date,
                description=draft.description.strip(),
                reference_number=draft.reference_number,
                correction_of_id=correction_of_id,
                seq=seq,
                created_by_id=draft.actor_id,
                created_at=self._clock.now(),
            )
            for line_seq, line in enumerate(validated.lines):
                entry.lines.append(
                    JournalLine(
                        account_id=line.account_id,
                        debit=line.debit,
                        credit=line.credit,
                        line_seq=line_seq,
                        created_by_id=draft.actor_id,
                    )
                )

            self._session.add(entry)
            self._session.flush()

            logger.info(
                "journal_entry_posted",
                extra={
                    "entry_id": str(entry.id),
                    "seq": seq,
                    "entry_date": draft.entry_date,
                    "line_count": len(validated.lines),
                    "total_debit": str(validated.total_debit),
                    "total_credit": str(validated.total_credit),
                    "correction_of_id": (
                        str(correction_of_id) if correction_of_id else None
                    ),
                },
            )
            return entry
