"""Diagnostics and debugging utilities for eqqp."""

from .core import (
    assert_feasible,
    assert_symmetric,
    constraint_residual,
    is_symmetric,
)
from .debug_mode import (
    DEBUG_ENV_VAR,
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "is_symmetric",
    "assert_symmetric",
    "constraint_residual",
    "assert_feasible",
    "DEBUG_ENV_VAR",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
