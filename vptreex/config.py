from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

_LOGGER = logging.getLogger("vptreex")

_DEFAULT_METRIC = "euclidean"
_DEFAULT_LOG_LEVEL = "INFO"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _bool_from_env(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_optional_int(raw: str | None, *, name: str) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value '{raw}' for {name}") from exc


def _normalise_log_level(raw: str | None) -> str:
    level = (raw or _DEFAULT_LOG_LEVEL).strip().upper() or _DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unsupported log level '{level}' for VPTREEX_LOG_LEVEL")
    return level


@dataclass(frozen=True)
class RuntimeConfig:
    enable_diagnostics: bool
    log_level: str
    metric: str
    seed: int | None

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        enable_diagnostics = _bool_from_env(
            os.getenv("VPTREEX_ENABLE_DIAGNOSTICS"), default=True
        )
        log_level = _normalise_log_level(os.getenv("VPTREEX_LOG_LEVEL"))
        metric = os.getenv("VPTREEX_METRIC", _DEFAULT_METRIC).strip().lower() or _DEFAULT_METRIC
        seed = _parse_optional_int(os.getenv("VPTREEX_SEED"), name="VPTREEX_SEED")
        return cls(
            enable_diagnostics=enable_diagnostics,
            log_level=log_level,
            metric=metric,
            seed=seed,
        )


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("vptreex")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)


@lru_cache(maxsize=None)
def runtime_config() -> RuntimeConfig:
    config = RuntimeConfig.from_env()
    _configure_logging(config.log_level)
    _LOGGER.debug("Loaded runtime config %s", config)
    return config


def reset_runtime_config_cache() -> None:
    runtime_config.cache_clear()


def describe_runtime() -> Dict[str, Any]:
    """Return a serialisable view of the active runtime configuration."""

    config = runtime_config()
    return {
        "enable_diagnostics": config.enable_diagnostics,
        "log_level": config.log_level,
        "metric": config.metric,
        "seed": config.seed,
    }


__all__ = [
    "RuntimeConfig",
    "describe_runtime",
    "reset_runtime_config_cache",
    "runtime_config",
]
