"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger (HTTP handlers, business services, the event poster)
must map failures onto responses without parsing message text:

    try:
        writer.post(draft)
    except UnbalancedEntryError as e:
        return {"error": e.code, "debits": e.debits, "credits": e.credits}
    except ValidationError as e:
        return {"error": e.code, "message": str(e)}

Every class carries:
  1. a ``code`` CLASS attribute (machine-readable, API-safe)
  2. structured attributes describing the failure (never only a message)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- ValidationError                 -> surfaced as bad request
    |   +-- MissingFieldError
    |   +-- InvalidAccountTypeError
    |   +-- InvalidLineError
    |   +-- InvalidAccountError
    |   +-- UnbalancedEntryError
    |   +-- ZeroValueEntryError
    |   +-- InvalidDateRangeError
    |
    +-- DuplicateError                  -> surfaced as conflict
    |
    +-- NotFoundError                   -> surfaced as not found
    |   +-- AccountNotFoundError
    |   +-- JournalEntryNotFoundError
    |
    +-- ImmutableAccountError           -> surfaced as forbidden
    |   +-- SystemFlagError
    |
    +-- ImmutabilityViolationError      -> append-only journal was touched
    |
    +-- RoleResolutionError             -> startup failure, role unbound
    |
    +-- PostingSkipped                  -> internal, log-only

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                      | When Raised
----------------|---------------------------|-------------------------------------
Validation      | VALIDATION_ERROR          | Generic malformed input
                | MISSING_FIELD             | Required field absent or blank
                | INVALID_ACCOUNT_TYPE      | Type not in the five account types
                | INVALID_LINE              | Line count, sign or side violations
                | INVALID_ACCOUNT           | Line account missing or inactive
                | UNBALANCED_ENTRY          | Debits != Credits after rounding
                | ZERO_VALUE_ENTRY          | Debits == Credits == 0
                | INVALID_DATE_RANGE        | Report start after report end
----------------|---------------------------|-------------------------------------
Duplicate       | DUPLICATE                 | Account name or code collision
----------------|---------------------------|-------------------------------------
Not found       | ACCOUNT_NOT_FOUND         | Unknown account id
                | JOURNAL_ENTRY_NOT_FOUND   | Unknown journal entry id
----------------|---------------------------|-------------------------------------
Immutable       | ACCOUNT_IMMUTABLE         | System account name/code/type change
                |                           | or system account deletion
                | SYSTEM_FLAG_FORBIDDEN     | Caller tried to set is_system
----------------|---------------------------|-------------------------------------
Journal         | IMMUTABILITY_VIOLATION    | UPDATE/DELETE of a journal row
----------------|---------------------------|-------------------------------------
Roles           | ROLE_RESOLUTION_FAILED    | Well-known role has no account
                | POSTING_SKIPPED           | Poster could not resolve a role
"""

from decimal import Decimal


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Validation exceptions


class ValidationError(LedgerKernelError):
    """Malformed, incomplete or unbalanced input. Nothing was written."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required field was not provided."""

    code: str = "MISSING_FIELD"

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}")


class InvalidAccountTypeError(ValidationError):
    """Account type is not one of the five supported types."""

    code: str = "INVALID_ACCOUNT_TYPE"

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Invalid account type '{value}': expected one of "
            "Asset, Liability, Equity, Revenue, Expense"
        )


class InvalidLineError(ValidationError):
    """
    A journal line (or the line list itself) breaks a structural rule.

    ``line_index`` is None when the rule applies to the whole entry
    (e.g. fewer than two lines).
    """

    code: str = "INVALID_LINE"

    def __init__(self, reason: str, line_index: int | None = None):
        self.reason = reason
        self.line_index = line_index
        if line_index is None:
            super().__init__(reason)
        else:
            super().__init__(f"Line {line_index + 1}: {reason}")


class InvalidAccountError(ValidationError):
    """A line references an account that is unknown or inactive."""

    code: str = "INVALID_ACCOUNT"

    def __init__(self, line_index: int, account_id: str, reason: str):
        self.line_index = line_index
        self.account_id = account_id
        self.reason = reason
        super().__init__(f"Line {line_index + 1}: account {account_id} {reason}")


class UnbalancedEntryError(ValidationError):
    """Rounded debit total does not equal rounded credit total."""

    code: str = "UNBALANCED_ENTRY"

    def __init__(self, debits: Decimal, credits: Decimal):
        self.debits = debits
        self.credits = credits
        super().__init__(f"Debits ({debits}) must equal Credits ({credits})")


class ZeroValueEntryError(ValidationError):
    """Entry balances, but at zero."""

    code: str = "ZERO_VALUE_ENTRY"

    def __init__(self):
        super().__init__("Total debits and credits cannot both be zero")


class InvalidDateRangeError(ValidationError):
    """Report start date falls after its end date."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__(f"Start date {start} is after end date {end}")


# Registry exceptions


class DuplicateError(LedgerKernelError):
    """Account name or code already used by another account."""

    code: str = "DUPLICATE"

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"An account with this {field} already exists: {value}")


class NotFoundError(LedgerKernelError):
    """Base exception for unknown identifiers."""

    code: str = "NOT_FOUND"


class AccountNotFoundError(NotFoundError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class JournalEntryNotFoundError(NotFoundError):
    """Journal entry was not found."""

    code: str = "JOURNAL_ENTRY_NOT_FOUND"

    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Journal entry not found: {entry_id}")


class ImmutableAccountError(LedgerKernelError):
    """
    Protected field of a system account was changed, or a system account
    was deleted.
    """

    code: str = "ACCOUNT_IMMUTABLE"

    def __init__(self, account_name: str, field: str, message: str | None = None):
        self.account_name = account_name
        self.field = field
        super().__init__(
            message or f"System account '{account_name}' {field} cannot be changed"
        )


class SystemFlagError(ImmutableAccountError):
    """The is_system flag is managed by seeding only."""

    code: str = "SYSTEM_FLAG_FORBIDDEN"

    def __init__(self, account_name: str):
        super().__init__(
            account_name,
            "is_system",
            "Cannot manually set an account as a system account. "
            "This is managed internally.",
        )


# Journal exceptions


class ImmutabilityViolationError(LedgerKernelError):
    """An UPDATE or DELETE reached an append-only journal row."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"{entity_type} {entity_id}: {reason}")


# Role exceptions


class RoleResolutionError(LedgerKernelError):
    """A well-known account role has no active account bound to it."""

    code: str = "ROLE_RESOLUTION_FAILED"

    def __init__(self, role: str, account_name: str | None = None):
        self.role = role
        self.account_name = account_name
        if account_name:
            super().__init__(
                f"Cannot resolve role '{role}': no account named '{account_name}'"
            )
        else:
            super().__init__(f"Cannot resolve role '{role}': no binding registered")


class PostingSkipped(LedgerKernelError):
    """
    The event poster could not resolve every account it needs.

    Never surfaced to the caller of the business operation; the poster
    logs it and reports a SKIPPED posting status instead.
    """

    code: str = "POSTING_SKIPPED"

    def __init__(self, event_type: str, missing_roles: tuple[str, ...]):
        self.event_type = event_type
        self.missing_roles = missing_roles
        super().__init__(
            f"Posting for {event_type} skipped: unresolved account roles "
            f"{', '.join(missing_roles)}"
        )
