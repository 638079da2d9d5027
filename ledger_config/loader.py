"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads the ledger YAML file, applies environment overrides and parses the
result into the frozen dataclasses in ``schema.py``.

Invariants enforced
-------------------
* Every role in ``AccountRole`` is bound to exactly one system account.
* System account codes and names are unique.
* Unknown roles and account types are rejected at load time.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML     -> ``yaml.YAMLError`` propagates.
* Invalid content    -> ``ConfigError`` naming the offending key.
"""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from ledger_config.schema import (
    ConfigError,
    DatabaseSettings,
    LedgerConfig,
    LoggingSettings,
    SystemAccountDef,
)
from ledger_kernel.domain.roles import AccountRole
from ledger_kernel.models.account import AccountType

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "ledger.yaml"

ENV_DATABASE_URL = "LEDGER_DATABASE_URL"
ENV_LOG_LEVEL = "LEDGER_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigError(f"{where}.{key}", "is required")
    return value


def parse_system_account(data: Mapping[str, Any], index: int) -> SystemAccountDef:
    where = f"system_accounts[{index}]"
    if not isinstance(data, Mapping):
        raise ConfigError(where, "must be a mapping")

    role_value = _require(data, "role", where)
    try:
        role = AccountRole(str(role_value).strip().lower())
    except ValueError:
        raise ConfigError(f"{where}.role", f"unknown account role {role_value!r}") from None

    type_value = _require(data, "type", where)
    try:
        account_type = AccountType.parse(type_value)
    except ValueError:
        raise ConfigError(f"{where}.type", f"unknown account type {type_value!r}") from None

    return SystemAccountDef(
        role=role,
        code=str(_require(data, "code", where)).strip(),
        name=str(_require(data, "name", where)).strip(),
        account_type=account_type,
        description=data.get("description"),
    )


def _check_system_accounts(accounts: tuple[SystemAccountDef, ...]) -> None:
    seen: dict[str, set[str]] = {"role": set(), "code": set(), "name": set()}
    for d in accounts:
        for key, value in (("role", d.role.value), ("code", d.code), ("name", d.name)):
            if value in seen[key]:
                raise ConfigError(f"system_accounts.{key}", f"duplicate value {value!r}")
            seen[key].add(value)

    missing = [r.value for r in AccountRole if r.value not in seen["role"]]
    if missing:
        raise ConfigError("system_accounts", f"no account bound to roles: {', '.join(missing)}")


def parse_ledger_config(
    data: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> LedgerConfig:
    """
    Parse an already-loaded YAML mapping.

    ``environ`` defaults to ``os.environ``; LEDGER_DATABASE_URL and
    LEDGER_LOG_LEVEL override the file values.
    """
    environ = os.environ if environ is None else environ

    raw_accounts = data.get("system_accounts")
    if not isinstance(raw_accounts, list) or not raw_accounts:
        raise ConfigError("system_accounts", "must be a non-empty list")
    accounts = tuple(parse_system_account(a, i) for i, a in enumerate(raw_accounts))
    _check_system_accounts(accounts)

    db = data.get("database") or {}
    database = DatabaseSettings(
        url=environ.get(ENV_DATABASE_URL) or db.get("url", DatabaseSettings.url),
        echo=bool(db.get("echo", False)),
        pool_size=int(db.get("pool_size", DatabaseSettings.pool_size)),
        max_overflow=int(db.get("max_overflow", DatabaseSettings.max_overflow)),
    )

    level = str(
        environ.get(ENV_LOG_LEVEL) or (data.get("logging") or {}).get("level", "INFO")
    ).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError("logging.level", f"unknown log level {level!r}")

    page_size = (data.get("journal") or {}).get("default_page_size", 10)
    if not isinstance(page_size, int) or page_size < 1:
        raise ConfigError("journal.default_page_size", "must be a positive integer")

    return LedgerConfig(
        config_id=str(data.get("config_id", "default")),
        version=int(data.get("version", 1)),
        database=database,
        logging=LoggingSettings(level=level),
        default_page_size=page_size,
        system_accounts=accounts,
        checksum=compute_checksum(dict(data)),
    )


def load_ledger_config(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> LedgerConfig:
    """Load and parse a ledger YAML file (the packaged default if path is None)."""
    return parse_ledger_config(
        load_yaml_file(Path(path) if path is not None else DEFAULT_CONFIG_PATH),
        environ=environ,
    )
