"""
ORM-level immutability enforcement for the ledger.

===============================================================================
WHAT THIS PROTECTS
===============================================================================

Entity          | When immutable                     | Blocked operations
----------------|------------------------------------|--------------------------
JournalEntry    | ALWAYS (from creation)             | UPDATE, DELETE
JournalLine     | ALWAYS (from creation)             | UPDATE, DELETE
Account         | While is_system is True            | name/code/account_type
                |                                    | change, un-flagging, DELETE

The services never issue these operations.  The listeners here catch any
code path that bypasses the services (a stray attribute assignment, a
session.delete() in a script) BEFORE the SQL is sent to the database.

===============================================================================
HOW IT WORKS
===============================================================================

    session.flush()
         |
         v
    [before_flush]   --> _check_system_account_deletion() --> ImmutableAccountError
         |
         v
    [before_update]  --> _check_*_immutability()         --> ImmutabilityViolationError
    [before_delete]  --> _check_*_delete()                    / ImmutableAccountError
         |
         v
    SQL sent to database (only if checks pass)

Account deletion is checked in Session.before_flush because mapper-level
before_delete fires after the flush plan is fixed.

===============================================================================
USAGE
===============================================================================

    from ledger_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # LedgerOrchestrator.bootstrap() does this

To temporarily disable (TESTS ONLY):

    unregister_immutability_listeners()
"""

from sqlalchemy import event
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import get_history

from ledger_kernel.exceptions import ImmutabilityViolationError, ImmutableAccountError
from ledger_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

# Account columns frozen once is_system is set
PROTECTED_ACCOUNT_FIELDS = ("name", "code", "account_type")


def _blocked(entity_type: str, entity_id, operation: str, reason: str) -> None:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "operation": operation,
            "reason": reason,
        },
    )


def _check_journal_entry_immutability(mapper, connection, target):
    """Journal entries are append-only: any UPDATE is rejected."""
    _blocked("JournalEntry", target.id, "UPDATE", "journal_is_append_only")
    raise ImmutabilityViolationError(
        entity_type="JournalEntry",
        entity_id=str(target.id),
        reason="Journal entries cannot be modified; post a correcting entry",
    )


def _check_journal_entry_delete(mapper, connection, target):
    _blocked("JournalEntry", target.id, "DELETE", "journal_is_append_only")
    raise ImmutabilityViolationError(
        entity_type="JournalEntry",
        entity_id=str(target.id),
        reason="Journal entries cannot be deleted; post a reversing entry",
    )


def _check_journal_line_immutability(mapper, connection, target):
    _blocked("JournalLine", target.id, "UPDATE", "journal_is_append_only")
    raise ImmutabilityViolationError(
        entity_type="JournalLine",
        entity_id=str(target.id),
        reason="Journal lines cannot be modified",
    )


def _check_journal_line_delete(mapper, connection, target):
    _blocked("JournalLine", target.id, "DELETE", "journal_is_append_only")
    raise ImmutabilityViolationError(
        entity_type="JournalLine",
        entity_id=str(target.id),
        reason="Journal lines cannot be deleted",
    )


def _was_system(target) -> bool:
    """True if the row was already a system account before this flush."""
    history = get_history(target, "is_system")
    if history.deleted:
        return bool(history.deleted[0])
    if history.unchanged:
        return bool(history.unchanged[0])
    return False


def _original_name(target) -> str:
    history = get_history(target, "name")
    if history.deleted:
        return history.deleted[0]
    return target.name


def _check_account_structural_immutability(mapper, connection, target):
    """
    Freeze name, code and type of a system account.

    The seeding transition (is_system False -> True) is allowed; the reverse
    is not.
    """
    if not _was_system(target):
        return

    if get_history(target, "is_system").has_changes() and not target.is_system:
        _blocked("Account", target.id, "UPDATE", "system_flag_cleared")
        raise ImmutableAccountError(target.name, "is_system")

    for field in PROTECTED_ACCOUNT_FIELDS:
        if get_history(target, field).has_changes():
            _blocked("Account", target.id, "UPDATE", f"system_account_{field}_changed")
            raise ImmutableAccountError(_original_name(target), field)


def _check_system_account_deletion(session, flush_context, instances):
    """Block session.delete() of a system account before the flush plan is built."""
    from ledger_kernel.models.account import Account

    for obj in list(session.deleted):
        if isinstance(obj, Account) and obj.is_system:
            _blocked("Account", obj.id, "DELETE", "system_account_delete")
            raise ImmutableAccountError(
                obj.name,
                "is_system",
                f"System account '{obj.name}' cannot be deleted",
            )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Call this after the models are imported and before any database
    operations begin.  Registering twice is harmless.
    """
    from ledger_kernel.models.account import Account
    from ledger_kernel.models.journal import JournalEntry, JournalLine

    unregister_immutability_listeners()

    event.listen(Session, "before_flush", _check_system_account_deletion)

    event.listen(JournalEntry, "before_update", _check_journal_entry_immutability)
    event.listen(JournalEntry, "before_delete", _check_journal_entry_delete)

    event.listen(JournalLine, "before_update", _check_journal_line_immutability)
    event.listen(JournalLine, "before_delete", _check_journal_line_delete)

    event.listen(Account, "before_update", _check_account_structural_immutability)

    logger.debug("immutability_listeners_registered")


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring it if it was never registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests that must set up forbidden states.
    """
    from ledger_kernel.models.account import Account
    from ledger_kernel.models.journal import JournalEntry, JournalLine

    _safe_remove_listener(Session, "before_flush", _check_system_account_deletion)

    _safe_remove_listener(JournalEntry, "before_update", _check_journal_entry_immutability)
    _safe_remove_listener(JournalEntry, "before_delete", _check_journal_entry_delete)

    _safe_remove_listener(JournalLine, "before_update", _check_journal_line_immutability)
    _safe_remove_listener(JournalLine, "before_delete", _check_journal_line_delete)

    _safe_remove_listener(Account, "before_update", _check_account_structural_immutability)
