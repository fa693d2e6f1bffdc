"""
Core problem and result dataclasses for the equality-constrained QP solver.

The solver works on the dense problem

    minimize   1/2 x^T G x + c^T x
    subject to A x = b

where ``G`` is the accumulated Hessian, ``c`` the accumulated linear term and
``(A, b)`` the stacked equality constraints. The containers below carry that
data from assembly through the KKT solve and back to the caller.

References:
    - Nocedal & Wright, *Numerical Optimization* (2006), Ch. 16
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

import numpy as np

# Primal residual (relative to max(1, |b|_inf)) above which a solve is logged
# as suspicious.
RESIDUAL_TOL = 1e-8


class SolutionResult(Enum):
    """Solution status reported by the solver.

    The equality-constrained QP core never detects infeasibility or
    unboundedness, so every solve ends with ``SOLUTION_FOUND``. The value is
    the return code written alongside the solver id.
    """

    SOLUTION_FOUND = 0


class KKTPath(Enum):
    """Algorithm used to solve the KKT system."""

    RANGE_SPACE = "range_space"
    FULL_KKT = "full_kkt"


class UnsupportedBindingError(ValueError):
    """Raised when a program holds bindings this solver cannot handle."""

    def __init__(self, kinds: Iterable[object]) -> None:
        self.kinds: Tuple[object, ...] = tuple(kinds)
        names = ", ".join(getattr(kind, "value", str(kind)) for kind in self.kinds)
        super().__init__(
            "Equality constrained QP solver only supports quadratic costs and "
            f"linear equality constraints; found unsupported binding kinds: {names}"
        )


@dataclass
class AssembledProblem:
    """
    Dense global problem gathered from a program's bindings.

    Attributes:
        hessian: Accumulated quadratic term ``G`` with shape ``(n, n)``.
        gradient: Accumulated linear term ``c`` with shape ``(n,)``.
        a_eq: Stacked equality constraint matrix ``A`` with shape ``(m, n)``.
        b_eq: Stacked equality targets ``b`` with shape ``(m,)``.
    """

    hessian: np.ndarray
    gradient: np.ndarray
    a_eq: np.ndarray
    b_eq: np.ndarray

    @property
    def num_vars(self) -> int:
        return int(self.gradient.shape[0])

    @property
    def num_constraints(self) -> int:
        return int(self.b_eq.shape[0])


@dataclass
class SolveOutcome:
    """
    Result of a single equality-constrained QP solve.

    Attributes:
        x: Primal solution vector.
        fun: Objective value ``1/2 x^T G x + c^T x`` at ``x``.
        status: Always :attr:`SolutionResult.SOLUTION_FOUND`.
        path: Which KKT algorithm produced ``x``.
        multipliers: Lagrange multipliers ``y`` (range-space path only).
        primal_residual: ``||A x - b||_inf``.
        dual_residual: ``||G x - A^T y + c||_inf`` when multipliers exist.
    """

    x: np.ndarray
    fun: float
    status: SolutionResult
    path: KKTPath
    multipliers: Optional[np.ndarray] = None
    primal_residual: Optional[float] = None
    dual_residual: Optional[float] = None


__all__ = [
    "RESIDUAL_TOL",
    "SolutionResult",
    "KKTPath",
    "UnsupportedBindingError",
    "AssembledProblem",
    "SolveOutcome",
]
