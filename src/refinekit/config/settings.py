"""Library settings — env vars and init kwargs in one frozen object.

Priority chain (highest to lowest):
  1. Init kwargs  — passed to ``RefinekitSettings(...)`` directly
  2. Env vars     — ``REFINEKIT_*`` prefix
  3. Code defaults — baked into the model below
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RefinekitSettings(BaseSettings):
    """Runtime knobs for refinekit.

    Attributes:
        verbose: DEBUG output for the ``refinekit`` logger when logging is
            configured through :func:`refinekit.config.logging.configure_logging`.
        log_json: Emit JSON log lines instead of console rendering.
        regex_cache_size: How many compiled patterns ``regex_match`` keeps.
        check_enum_distinct: Warn when ``Enum.make`` receives values that
            render to the same string. Diagnostic only.
    """

    model_config = SettingsConfigDict(frozen=True, env_prefix="REFINEKIT_")

    verbose: bool = False
    log_json: bool = False
    regex_cache_size: int = Field(default=256, ge=1)
    check_enum_distinct: bool = False


@lru_cache(maxsize=1)
def get_settings() -> RefinekitSettings:
    """Process-wide settings, read from the environment on first use."""
    return RefinekitSettings()


def reset_settings() -> None:
    """Forget cached settings so the next ``get_settings()`` re-reads env vars."""
    get_settings.cache_clear()
