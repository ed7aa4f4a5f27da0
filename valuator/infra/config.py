"""Runtime configuration for the valuation worker.

Pure configuration data with defaults, overridable from VALUATOR_* environment
variables. No Temporal client is created here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final, final

from valuator.core.result import Err, Ok

TASK_QUEUE: Final = "valuation"

_LOG_LEVELS: Final = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# ---------------------------------------------------------------------------
# Config values
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class TemporalConfig:
    """Where the worker connects and which queue it serves."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = TASK_QUEUE


@final
@dataclass(frozen=True, slots=True)
class ValuationConfig:
    temporal: TemporalConfig = field(default_factory=TemporalConfig)
    activity_timeout_s: int = 60
    max_activity_attempts: int = 3
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.activity_timeout_s <= 0:
            raise TypeError(f"ValuationConfig.activity_timeout_s must be > 0, got {self.activity_timeout_s}")
        if self.max_activity_attempts <= 0:
            raise TypeError(
                f"ValuationConfig.max_activity_attempts must be > 0, got {self.max_activity_attempts}"
            )
        if self.log_level not in _LOG_LEVELS:
            raise TypeError(
                f"ValuationConfig.log_level must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}"
            )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _positive_int(environ: Mapping[str, str], name: str, default: int) -> Ok[int] | Err[str]:
    raw = environ.get(name)
    if raw is None or raw == "":
        return Ok(default)
    try:
        value = int(raw)
    except ValueError:
        return Err(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        return Err(f"{name} must be > 0, got {value}")
    return Ok(value)


def load_config(environ: Mapping[str, str]) -> Ok[ValuationConfig] | Err[str]:
    """Build config from environment variables, falling back to defaults.

    VALUATOR_TEMPORAL_HOST, VALUATOR_TEMPORAL_NAMESPACE, VALUATOR_TASK_QUEUE,
    VALUATOR_ACTIVITY_TIMEOUT_S, VALUATOR_MAX_ACTIVITY_ATTEMPTS, VALUATOR_LOG_LEVEL.
    """
    defaults = ValuationConfig()
    temporal = TemporalConfig(
        target_host=environ.get("VALUATOR_TEMPORAL_HOST") or defaults.temporal.target_host,
        namespace=environ.get("VALUATOR_TEMPORAL_NAMESPACE") or defaults.temporal.namespace,
        task_queue=environ.get("VALUATOR_TASK_QUEUE") or defaults.temporal.task_queue,
    )
    match _positive_int(environ, "VALUATOR_ACTIVITY_TIMEOUT_S", defaults.activity_timeout_s):
        case Err() as err:
            return err
        case Ok(timeout_s):
            pass
    match _positive_int(environ, "VALUATOR_MAX_ACTIVITY_ATTEMPTS", defaults.max_activity_attempts):
        case Err() as err:
            return err
        case Ok(attempts):
            pass
    log_level = (environ.get("VALUATOR_LOG_LEVEL") or defaults.log_level).upper()
    if log_level not in _LOG_LEVELS:
        return Err(f"VALUATOR_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")
    return Ok(ValuationConfig(
        temporal=temporal,
        activity_timeout_s=timeout_s,
        max_activity_attempts=attempts,
        log_level=log_level,
    ))


def configure_logging(config: ValuationConfig) -> None:
    """Root logging for the worker process; library modules only create loggers."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
