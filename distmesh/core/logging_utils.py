"""Logging utilities for distmesh.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All distmesh code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')
_ROOT_NAME = 'distmesh'


def _ensure_package_root() -> logging.Logger:
    """Return the 'distmesh' logger, creating its stdout handler on first use.

    A NullHandler added by the package ``__init__`` is replaced so that log
    records are not swallowed once logging is explicitly configured.
    """
    pkg_root = logging.getLogger(_ROOT_NAME)
    has_real = any(not isinstance(h, logging.NullHandler) for h in pkg_root.handlers)
    if not has_real:
        for h in list(pkg_root.handlers):
            pkg_root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        pkg_root.addHandler(handler)
    # Do not propagate to the process root
    pkg_root.propagate = False
    return pkg_root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Configure the 'distmesh' logger family level and optional external noise suppression.

    This does NOT modify the process root logger.
    """
    pkg_root = _ensure_package_root()
    lvl = _to_level(level)
    pkg_root.setLevel(lvl)
    # numba and matplotlib are very chatty at DEBUG
    if mute_external and lvl <= logging.DEBUG:
        for noisy in ('matplotlib', 'matplotlib.font_manager', 'numba'):
            logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'distmesh' namespace.

    Unlike configure_logging() this never installs handlers: library modules
    call it at import time and must stay silent until the application opts in.
    If a level is provided it is set on the logger; otherwise the logger is
    NOTSET and inherits from the 'distmesh' parent.
    """
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
