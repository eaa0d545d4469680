from __future__ import annotations

import logging

_ROOT = "vptreex"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``vptreex`` namespace."""

    if not name:
        return logging.getLogger(_ROOT)
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")


__all__ = ["get_logger"]
