"""
Ledger configuration schema.

Frozen dataclasses the YAML loader produces.  Nothing here reads files or
the environment.
"""

from __future__ import annotations

from dataclasses import dataclass

from ledger_kernel.domain.roles import AccountRole
from ledger_kernel.models.account import AccountType


class ConfigError(ValueError):
    """Configuration is malformed.  ``key`` names the offending entry."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


@dataclass(frozen=True)
class SystemAccountDef:
    """One protected account seeded at startup and bound to a role."""

    role: AccountRole
    code: str
    name: str
    account_type: AccountType
    description: str | None = None


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = "sqlite:///ledger.db"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 10


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class LedgerConfig:
    """The complete runtime configuration of one ledger."""

    config_id: str
    version: int
    database: DatabaseSettings
    logging: LoggingSettings
    default_page_size: int
    system_accounts: tuple[SystemAccountDef, ...]
    checksum: str = ""

    @property
    def role_names(self) -> dict[AccountRole, str]:
        return {d.role: d.name for d in self.system_accounts}

    def system_account_for(self, role: AccountRole) -> SystemAccountDef:
        for definition in self.system_accounts:
            if definition.role == role:
                return definition
        raise KeyError(role)
