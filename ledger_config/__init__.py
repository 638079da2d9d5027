"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_config()`` returns the parsed LedgerConfig.  No other
    component reads the YAML file or the LEDGER_* environment variables.

Architecture position:
    Sits above ``ledger_kernel`` and below ``ledger_services``.  The kernel
    MUST NEVER import from ``ledger_config``.

Audit relevance:
    Every load emits a ``ledger_config_loaded`` log entry with the
    config_id, version and checksum.
"""

from __future__ import annotations

from pathlib import Path

from ledger_config.loader import compute_checksum, load_ledger_config
from ledger_config.schema import (
    ConfigError,
    DatabaseSettings,
    LedgerConfig,
    LoggingSettings,
    SystemAccountDef,
)
from ledger_kernel.logging_config import get_logger

_logger = get_logger("config")


def get_active_config(path: Path | str | None = None) -> LedgerConfig:
    """Load the ledger configuration (packaged defaults unless ``path`` is given)."""
    config = load_ledger_config(path)
    _logger.info(
        "ledger_config_loaded",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "system_account_count": len(config.system_accounts),
        },
    )
    return config


__all__ = [
    "ConfigError",
    "DatabaseSettings",
    "LedgerConfig",
    "LoggingSettings",
    "SystemAccountDef",
    "compute_checksum",
    "get_active_config",
    "load_ledger_config",
]
