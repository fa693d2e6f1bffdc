"""
Debug-mode switch for the solver's extra runtime checks.

While debug mode is on, every solve asserts that the Hessian is symmetric,
logs its KKT residuals and refuses a solution that violates ``A x = b``.
The switch starts from the ``EQQP_DEBUG`` environment variable.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

DEBUG_ENV_VAR = "EQQP_DEBUG"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


_state = {"enabled": _env_flag(DEBUG_ENV_VAR)}


def is_debug_enabled() -> bool:
    """Whether solves currently run the debug-mode checks."""
    return _state["enabled"]


def set_debug_enabled(enabled: bool) -> None:
    """Turn the debug-mode checks on or off for the whole process."""
    _state["enabled"] = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Run a block with debug mode forced to ``enabled``.

    The previous setting comes back when the block exits, also on error.

    Example
    -------
    >>> with debug_context(True):
    ...     EqualityConstrainedQPSolver().solve(program)
    """
    previous = is_debug_enabled()
    set_debug_enabled(enabled)
    try:
        yield
    finally:
        set_debug_enabled(previous)


__all__ = ["DEBUG_ENV_VAR", "is_debug_enabled", "set_debug_enabled", "debug_context"]
