"""Sui ledger configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, optional_int_env_var, require_env_vars
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig

SUI_TESTNET_RPC_URL = "https://fullnode.testnet.sui.io:443"
SUI_RPC_TIMEOUT_SECONDS = 15.0
DEFAULT_MODULE_NAME = "flight_insurance"
DEFAULT_POLICY_STRUCT = "Policy"
DEFAULT_POOL_MEMBERS_FIELD = "policies"
DEFAULT_POOL_BALANCE_FIELD = "balance"
DEFAULT_VERIFY_CONCURRENCY = 8


def _reader_resilience(rpc_url: str) -> ResilienceConfig:
    # ledger reads must never be served from an HTTP cache
    return ResilienceConfig(
        name="sui-reader",
        base_url=rpc_url,
        timeout_seconds=SUI_RPC_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        cache=None,
    )


def _executor_resilience(rpc_url: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="sui-executor",
        base_url=rpc_url,
        timeout_seconds=60.0,
        retry=NO_RETRY,
        cache=None,
    )


@dataclass(frozen=True, slots=True)
class LedgerConfig:
    """Holds the on-chain coordinates of the insurance package and pool."""

    package_id: str
    pool_id: str
    rpc_url: str = SUI_TESTNET_RPC_URL
    module_name: str = DEFAULT_MODULE_NAME
    policy_struct: str = DEFAULT_POLICY_STRUCT
    pool_members_field: str = DEFAULT_POOL_MEMBERS_FIELD
    pool_balance_field: str = DEFAULT_POOL_BALANCE_FIELD
    verify_concurrency: int = DEFAULT_VERIFY_CONCURRENCY
    reader_resilience: ResilienceConfig = field(
        default_factory=lambda: _reader_resilience(SUI_TESTNET_RPC_URL)
    )
    executor_resilience: ResilienceConfig = field(
        default_factory=lambda: _executor_resilience(SUI_TESTNET_RPC_URL)
    )

    @property
    def policy_type_name(self) -> str:
        return f"{self.module_name}::{self.policy_struct}"

    def move_target(self, function: str) -> str:
        return f"{self.package_id}::{self.module_name}::{function}"

    def event_type(self, event: str) -> str:
        return f"{self.package_id}::{self.module_name}::{event}"


def get_ledger_config() -> LedgerConfig:
    values = require_env_vars(("FLIGHTCOVER_PACKAGE_ID", "FLIGHTCOVER_POOL_ID"))
    rpc_url = optional_env_var("SUI_RPC_URL", SUI_TESTNET_RPC_URL)
    return LedgerConfig(
        package_id=values["FLIGHTCOVER_PACKAGE_ID"],
        pool_id=values["FLIGHTCOVER_POOL_ID"],
        rpc_url=rpc_url,
        module_name=optional_env_var("FLIGHTCOVER_MODULE_NAME", DEFAULT_MODULE_NAME),
        pool_members_field=optional_env_var(
            "FLIGHTCOVER_POOL_MEMBERS_FIELD", DEFAULT_POOL_MEMBERS_FIELD
        ),
        pool_balance_field=optional_env_var(
            "FLIGHTCOVER_POOL_BALANCE_FIELD", DEFAULT_POOL_BALANCE_FIELD
        ),
        verify_concurrency=optional_int_env_var(
            "FLIGHTCOVER_VERIFY_CONCURRENCY", DEFAULT_VERIFY_CONCURRENCY
        ),
        reader_resilience=_reader_resilience(rpc_url),
        executor_resilience=_executor_resilience(rpc_url),
    )
