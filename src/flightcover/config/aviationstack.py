"""AviationStack configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

AVIATIONSTACK_BASE_URL = "http://api.aviationstack.com/v1"
AVIATIONSTACK_TIMEOUT_SECONDS = 10.0
# flight schedules move slowly compared to how often the form is refilled
AVIATIONSTACK_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class AviationStackConfig:
    """Holds AviationStack API configuration values."""

    api_key: str
    resilience: ResilienceConfig


def get_aviationstack_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> AviationStackConfig:
    values = require_env_vars(("AVIATIONSTACK_API_KEY",))
    base_url = optional_env_var("AVIATIONSTACK_BASE_URL", AVIATIONSTACK_BASE_URL)
    return AviationStackConfig(
        api_key=values["AVIATIONSTACK_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="aviationstack",
            base_url=base_url,
            timeout_seconds=AVIATIONSTACK_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
            cache=CacheConfig(default_ttl_seconds=AVIATIONSTACK_CACHE_TTL_SECONDS),
        ),
    )
