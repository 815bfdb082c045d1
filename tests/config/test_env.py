from __future__ import annotations

from pathlib import Path

import pytest

from flightcover.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_aviationstack_config,
    get_database_config,
    get_ledger_config,
    get_storage_config,
    require_env_var,
    require_env_vars,
)
from flightcover.config.ledger import SUI_TESTNET_RPC_URL


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_A", raising=False)
    monkeypatch.setenv("MISSING_B", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_ledger_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLIGHTCOVER_PACKAGE_ID", "0xpackage")
    monkeypatch.setenv("FLIGHTCOVER_POOL_ID", "0xpool")
    monkeypatch.delenv("SUI_RPC_URL", raising=False)
    monkeypatch.setenv("FLIGHTCOVER_VERIFY_CONCURRENCY", "3")

    config = get_ledger_config()

    assert config.rpc_url == SUI_TESTNET_RPC_URL
    assert config.verify_concurrency == 3
    assert config.policy_type_name == "flight_insurance::Policy"
    assert config.move_target("process_claim") == "0xpackage::flight_insurance::process_claim"
    assert config.event_type("PolicyCreated") == "0xpackage::flight_insurance::PolicyCreated"
    assert config.reader_resilience.cache is None
    assert config.executor_resilience.retry.total == 0


def test_ledger_config_requires_package_and_pool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLIGHTCOVER_PACKAGE_ID", raising=False)
    monkeypatch.delenv("FLIGHTCOVER_POOL_ID", raising=False)

    with pytest.raises(MissingConfigurationError, match="FLIGHTCOVER_POOL_ID"):
        get_ledger_config()


def test_invalid_concurrency_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLIGHTCOVER_PACKAGE_ID", "0xpackage")
    monkeypatch.setenv("FLIGHTCOVER_POOL_ID", "0xpool")
    monkeypatch.setenv("FLIGHTCOVER_VERIFY_CONCURRENCY", "many")

    with pytest.raises(ConfigurationError):
        get_ledger_config()


def test_aviationstack_config_caches_in_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AVIATIONSTACK_API_KEY", "key")
    monkeypatch.delenv("AVIATIONSTACK_BASE_URL", raising=False)

    config = get_aviationstack_config()

    assert config.api_key == "key"
    assert config.resilience.base_url == "http://api.aviationstack.com/v1"
    assert config.resilience.cache is not None
    assert config.resilience.cache.enabled
    assert config.resilience.cache.default_ttl_seconds == 300.0


def test_storage_and_database_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FLIGHTCOVER_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URI", raising=False)

    storage = get_storage_config()

    assert storage.policy_slot == "policies"
    assert get_database_config(storage=storage).uri == (
        f"sqlite+pysqlite:///{tmp_path.resolve() / 'flightcover.db'}"
    )

    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"
