"""
Configuration loader tests.

Verifies:
- The packaged defaults parse and bind every account role
- Environment overrides
- Bad content is rejected with the offending key named
"""

import copy
import logging

import pytest
import yaml

from ledger_config import ConfigError, get_active_config, load_ledger_config
from ledger_config.loader import (
    DEFAULT_CONFIG_PATH,
    ENV_DATABASE_URL,
    ENV_LOG_LEVEL,
    compute_checksum,
    load_yaml_file,
    parse_ledger_config,
)
from ledger_kernel.domain.roles import DEFAULT_ROLE_NAMES, AccountRole
from ledger_kernel.models.account import AccountType


@pytest.fixture
def raw_defaults() -> dict:
    return load_yaml_file(DEFAULT_CONFIG_PATH)


class TestDefaults:
    def test_loads(self):
        config = load_ledger_config(environ={})
        assert config.config_id == "default"
        assert config.default_page_size == 10
        assert config.database.url == "sqlite:///ledger.db"
        assert config.logging.level == "INFO"

    def test_every_role_bound(self):
        config = load_ledger_config(environ={})
        assert {d.role for d in config.system_accounts} == set(AccountRole)

    def test_names_match_role_defaults(self):
        config = load_ledger_config(environ={})
        assert config.role_names == DEFAULT_ROLE_NAMES

    def test_types(self):
        config = load_ledger_config(environ={})
        assert config.system_account_for(AccountRole.ACCOUNTS_PAYABLE).account_type == (
            AccountType.LIABILITY
        )
        assert config.system_account_for(AccountRole.COST_OF_GOODS_SOLD).code == "50100"

    def test_checksum_is_stable(self, raw_defaults):
        config = load_ledger_config(environ={})
        assert config.checksum == compute_checksum(raw_defaults)

    def test_get_active_config_logs(self, captured_logs):
        config = get_active_config()
        loaded = [r for r in captured_logs() if r["message"] == "ledger_config_loaded"]
        assert loaded and loaded[0]["checksum"] == config.checksum


class TestEnvironmentOverrides:
    def test_database_url(self, raw_defaults):
        config = parse_ledger_config(
            raw_defaults, environ={ENV_DATABASE_URL: "postgresql://u:p@db/ledger"}
        )
        assert config.database.url == "postgresql://u:p@db/ledger"

    def test_log_level(self, raw_defaults):
        config = parse_ledger_config(raw_defaults, environ={ENV_LOG_LEVEL: "debug"})
        assert config.logging.level == "DEBUG"
        assert logging.getLevelName(config.logging.level) == logging.DEBUG

    def test_bad_log_level(self, raw_defaults):
        with pytest.raises(ConfigError) as exc_info:
            parse_ledger_config(raw_defaults, environ={ENV_LOG_LEVEL: "LOUD"})
        assert exc_info.value.key == "logging.level"


class TestInvalidContent:
    def test_unknown_role(self, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        data["system_accounts"][0]["role"] = "petty_cash"
        with pytest.raises(ConfigError) as exc_info:
            parse_ledger_config(data, environ={})
        assert exc_info.value.key == "system_accounts[0].role"

    def test_unknown_type(self, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        data["system_accounts"][2]["type"] = "contra"
        with pytest.raises(ConfigError) as exc_info:
            parse_ledger_config(data, environ={})
        assert exc_info.value.key == "system_accounts[2].type"

    def test_duplicate_code(self, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        data["system_accounts"][1]["code"] = data["system_accounts"][0]["code"]
        with pytest.raises(ConfigError) as exc_info:
            parse_ledger_config(data, environ={})
        assert exc_info.value.key == "system_accounts.code"

    def test_missing_role(self, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        data["system_accounts"] = data["system_accounts"][:-1]
        with pytest.raises(ConfigError, match="cost_of_goods_sold"):
            parse_ledger_config(data, environ={})

    def test_missing_name(self, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        del data["system_accounts"][0]["name"]
        with pytest.raises(ConfigError) as exc_info:
            parse_ledger_config(data, environ={})
        assert exc_info.value.key == "system_accounts[0].name"

    def test_no_system_accounts(self):
        with pytest.raises(ConfigError):
            parse_ledger_config({"config_id": "x"}, environ={})

    def test_bad_page_size(self, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        data["journal"] = {"default_page_size": 0}
        with pytest.raises(ConfigError) as exc_info:
            parse_ledger_config(data, environ={})
        assert exc_info.value.key == "journal.default_page_size"

    def test_file_round_trip(self, tmp_path, raw_defaults):
        data = copy.deepcopy(raw_defaults)
        data["config_id"] = "custom"
        data["journal"] = {"default_page_size": 25}
        path = tmp_path / "ledger.yaml"
        path.write_text(yaml.safe_dump(data))

        config = load_ledger_config(path, environ={})
        assert config.config_id == "custom"
        assert config.default_page_size == 25

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_ledger_config(tmp_path / "nope.yaml", environ={})
