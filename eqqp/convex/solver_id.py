"""Process-wide solver identity."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

EQUALITY_CONSTRAINED_QP_NAME = "Equality constrained QP"


@dataclass(frozen=True)
class SolverId:
    """Immutable label identifying a solver implementation."""

    name: str

    def __str__(self) -> str:
        return self.name


_solver_id: Optional[SolverId] = None
_solver_id_lock = threading.Lock()


def equality_constrained_qp_solver_id() -> SolverId:
    """
    Return the shared :class:`SolverId` of the equality-constrained QP solver.

    The id is built on first use and the same object is returned for the
    rest of the process lifetime.
    """

    global _solver_id
    if _solver_id is None:
        with _solver_id_lock:
            if _solver_id is None:
                _solver_id = SolverId(EQUALITY_CONSTRAINED_QP_NAME)
    return _solver_id


__all__ = ["SolverId", "EQUALITY_CONSTRAINED_QP_NAME", "equality_constrained_qp_solver_id"]
