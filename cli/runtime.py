from __future__ import annotations

import os
from typing import Any, Mapping

from vptreex import config as vx_config


def _get_arg(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


_ENV_OVERRIDES = {
    "metric": "VPTREEX_METRIC",
    "log_level": "VPTREEX_LOG_LEVEL",
    "diagnostics": "VPTREEX_ENABLE_DIAGNOSTICS",
}


def runtime_from_args(args: Any) -> vx_config.RuntimeConfig:
    """Export CLI overrides as ``VPTREEX_*`` variables and reload the config."""

    for attr_name, env_name in _ENV_OVERRIDES.items():
        value = _get_arg(args, attr_name)
        if value is None:
            continue
        if isinstance(value, bool):
            value = "1" if value else "0"
        os.environ[env_name] = str(value)
    vx_config.reset_runtime_config_cache()
    return vx_config.runtime_config()


__all__ = ["runtime_from_args"]
