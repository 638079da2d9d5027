"""
AccountService -- write side of the Chart of Accounts.

Responsibility:
    Creates, updates and deletes accounts, and seeds the system accounts
    the event poster depends on.  Enforces uniqueness of name and code and
    the system-account protection rules before anything reaches a flush.

Architecture position:
    Kernel > Services.  Reads go through AccountSelector.

Invariants enforced:
    - name and code unique across all accounts (checked here, backed by
      uq_account_name / uq_account_code).
    - is_system is never set through create/update; only seeding sets it.
    - A system account's name, code and type never change, and it is never
      deleted (checked here, backed by db/immutability.py listeners).

Failure modes:
    - MissingFieldError, InvalidAccountTypeError: bad create/update input.
    - DuplicateError: name or code already used by another account.
    - AccountNotFoundError: unknown id.
    - ImmutableAccountError / SystemFlagError: protected change attempted.

Non-goals:
    - Deleting a non-system account does not look for journal lines that
      reference it.  Those lines keep a dangling account_id.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping
from uuid import UUID

from sqlalchemy import select

from ledger_kernel.domain.validation import parse_id
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    DuplicateError,
    ImmutableAccountError,
    InvalidAccountTypeError,
    MissingFieldError,
    SystemFlagError,
    ValidationError,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account, AccountType
from ledger_kernel.services.base import BaseService

logger = get_logger("services.account")

UPDATABLE_FIELDS = frozenset(
    {"name", "code", "account_type", "description", "is_active", "is_system"}
)
PROTECTED_FIELDS = ("name", "code", "account_type")


class SeedResult(str, Enum):
    CREATED = "created"
    FLAGGED = "flagged"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class SeedOutcome:
    """What seeding did for one system account."""

    name: str
    code: str
    account_id: UUID
    result: SeedResult


def _required_text(value: Any, field: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise MissingFieldError(field)
    return text


def _parse_type(value: Any) -> AccountType:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError("type")
    try:
        return AccountType.parse(value)
    except ValueError:
        raise InvalidAccountTypeError(str(value)) from None


class AccountService(BaseService[Account]):
    """
    Chart-of-accounts mutations.

    Contract:
        Every method flushes; none commits.
    """

    def _load(self, account_id: UUID | str) -> Account:
        parsed = parse_id(account_id)
        account = self.session.get(Account, parsed) if parsed is not None else None
        if account is None:
            raise AccountNotFoundError(str(account_id))
        return account

    def _check_unique(
        self,
        field: str,
        value: str,
        exclude_id: UUID | None = None,
    ) -> None:
        column = Account.code if field == "code" else Account.name
        query = select(Account.id).where(column == value)
        if exclude_id is not None:
            query = query.where(Account.id != exclude_id)
        if self.session.execute(query).first() is not None:
            logger.info(
                "account_duplicate_rejected",
                extra={"field": field, "value": value},
            )
            raise DuplicateError(field, value)

    def create_account(
        self,
        name: str,
        code: str,
        account_type: AccountType | str,
        actor_id: UUID,
        description: str | None = None,
        is_active: bool = True,
        is_system: bool = False,
    ) -> Account:
        """
        Create a non-system account.

        Raises:
            SystemFlagError: if is_system is True.
            MissingFieldError / InvalidAccountTypeError: bad input.
            DuplicateError: name or code already used.
        """
        name = _required_text(name, "name")
        code = _required_text(code, "code")
        parsed_type = _parse_type(account_type)
        if is_system:
            raise SystemFlagError(name)

        self._check_unique("code", code)
        self._check_unique("name", name)

        account = Account(
            name=name,
            code=code,
            account_type=parsed_type.value,
            description=description,
            is_active=bool(is_active),
            is_system=False,
            created_by_id=actor_id,
        )
        self.session.add(account)
        self.session.flush()

        logger.info(
            "account_created",
            extra={
                "account_id": str(account.id),
                "account_code": code,
                "account_type": parsed_type.value,
            },
        )
        return account

    def update_account(
        self,
        account_id: UUID | str,
        fields: Mapping[str, Any],
    ) -> Account:
        """
        Apply a partial update.

        For a system account only description and is_active may change;
        supplying the current value of a protected field is not a change.

        Raises:
            AccountNotFoundError, ValidationError, DuplicateError,
            ImmutableAccountError, SystemFlagError.
        """
        account = self._load(account_id)

        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown account fields: {', '.join(sorted(unknown))}")

        if "is_system" in fields and bool(fields["is_system"]) != account.is_system:
            raise SystemFlagError(account.name)

        changes: dict[str, Any] = {}
        if "name" in fields:
            changes["name"] = _required_text(fields["name"], "name")
        if "code" in fields:
            changes["code"] = _required_text(fields["code"], "code")
        if "account_type" in fields:
            changes["account_type"] = _parse_type(fields["account_type"]).value
        changes = {k: v for k, v in changes.items() if v != getattr(account, k)}

        if account.is_system:
            for field in PROTECTED_FIELDS:
                if field in changes:
                    logger.warning(
                        "system_account_change_rejected",
                        extra={"account_id": str(account.id), "field": field},
                    )
                    raise ImmutableAccountError(account.name, field)

        if "code" in changes:
            self._check_unique("code", changes["code"], exclude_id=account.id)
        if "name" in changes:
            self._check_unique("name", changes["name"], exclude_id=account.id)

        if "description" in fields:
            changes["description"] = fields["description"]
        if "is_active" in fields:
            changes["is_active"] = bool(fields["is_active"])

        for key, value in changes.items():
            setattr(account, key, value)
        self.session.flush()

        logger.info(
            "account_updated",
            extra={"account_id": str(account.id), "fields": sorted(changes)},
        )
        return account

    def delete_account(self, account_id: UUID | str) -> None:
        """
        Delete a non-system account.

        Raises:
            AccountNotFoundError, ImmutableAccountError.
        """
        account = self._load(account_id)
        if account.is_system:
            logger.warning(
                "system_account_delete_rejected",
                extra={"account_id": str(account.id), "account_name": account.name},
            )
            raise ImmutableAccountError(
                account.name,
                "is_system",
                f"System account '{account.name}' cannot be deleted",
            )

        self.session.delete(account)
        self.session.flush()
        logger.info(
            "account_deleted",
            extra={"account_id": str(account.id), "account_code": account.code},
        )

    def seed_system_accounts(
        self,
        definitions: Iterable[Any],
        actor_id: UUID,
    ) -> list[SeedOutcome]:
        """
        Ensure every configured system account exists and is flagged.

        Each definition needs ``name``, ``code``, ``account_type`` and
        ``description`` attributes.  An existing account is matched by code,
        then by name, and is never renamed.  Idempotent.
        """
        outcomes: list[SeedOutcome] = []
        for definition in definitions:
            account = self.session.execute(
                select(Account).where(Account.code == definition.code)
            ).scalar_one_or_none()
            if account is None:
                account = self.session.execute(
                    select(Account).where(Account.name == definition.name)
                ).scalar_one_or_none()

            if account is None:
                account = Account(
                    name=definition.name,
                    code=definition.code,
                    account_type=AccountType.parse(definition.account_type).value,
                    description=definition.description,
                    is_active=True,
                    is_system=True,
                    created_by_id=actor_id,
                )
                self.session.add(account)
                self.session.flush()
                result = SeedResult.CREATED
            elif not account.is_system:
                account.is_system = True
                self.session.flush()
                result = SeedResult.FLAGGED
            else:
                result = SeedResult.UNCHANGED

            logger.info(
                "system_account_seeded",
                extra={
                    "account_id": str(account.id),
                    "account_code": account.code,
                    "account_name": account.name,
                    "result": result.value,
                },
            )
            outcomes.append(
                SeedOutcome(
                    name=account.name,
                    code=account.code,
                    account_id=account.id,
                    result=result,
                )
            )
        return outcomes
