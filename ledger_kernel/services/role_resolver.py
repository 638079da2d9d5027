"""
RoleResolver -- binds well-known account roles to concrete accounts.

Responsibility:
    Holds the role -> account binding built once at bootstrap from the
    configured role names.  The event poster asks for roles, never for
    display names.

Architecture position:
    Kernel > Services.  Populated by LedgerOrchestrator.bootstrap();
    read by the event poster.

Failure modes:
    - RoleResolutionError from resolve() when a role has no binding.
      Bootstrap calls verify() so a missing system account fails startup
      instead of silently skipping postings later.
"""

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from ledger_kernel.domain.roles import AccountRole
from ledger_kernel.exceptions import RoleResolutionError
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.role_resolver")


@dataclass(frozen=True)
class BindingRecord:
    """Full provenance of one role binding."""

    role: AccountRole
    account_id: UUID
    account_code: str
    account_name: str
    account_type: str = ""


class RoleResolver:
    """In-memory role -> account binding table."""

    def __init__(self):
        self._bindings: dict[AccountRole, BindingRecord] = {}

    def register_binding(
        self,
        role: AccountRole,
        account_id: UUID,
        account_code: str,
        *,
        account_name: str = "",
        account_type: str = "",
    ) -> None:
        """Register (or replace) the binding for a role."""
        role = AccountRole(role)
        self._bindings[role] = BindingRecord(
            role=role,
            account_id=account_id,
            account_code=account_code,
            account_name=account_name,
            account_type=account_type,
        )
        logger.debug(
            "role_bound",
            extra={
                "role": role.value,
                "account_id": str(account_id),
                "account_code": account_code,
            },
        )

    def resolve(self, role: AccountRole) -> BindingRecord:
        """
        Resolve a role to its bound account.

        Raises:
            RoleResolutionError: if the role has no binding.
        """
        binding = self._bindings.get(AccountRole(role))
        if binding is None:
            raise RoleResolutionError(AccountRole(role).value)
        return binding

    def is_bound(self, role: AccountRole) -> bool:
        return AccountRole(role) in self._bindings

    def verify(self, roles: Iterable[AccountRole] = tuple(AccountRole)) -> None:
        """
        Fail if any of ``roles`` is unbound.

        Raises:
            RoleResolutionError: for the first unbound role.
        """
        for role in roles:
            self.resolve(role)

    @property
    def bindings(self) -> dict[AccountRole, BindingRecord]:
        return dict(self._bindings)

    def clear(self) -> None:
        """Clear all bindings. For testing only."""
        self._bindings.clear()
