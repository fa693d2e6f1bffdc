"""
Equality-constrained quadratic programming.

Solves ``min 1/2 x^T G x + c^T x  s.t.  A x = b`` in a single pass. A Cholesky
factorization of ``G`` decides the algorithm:

* ``G`` positive definite: range-space (Schur complement) method, which only
  needs an ``m x m`` solve and also yields the multipliers.
* otherwise: SVD least squares on the full KKT system.

Neither path detects infeasibility or unboundedness; the returned status is
always :attr:`SolutionResult.SOLUTION_FOUND`. Callers that cannot guarantee a
well-posed problem should inspect ``SolveOutcome.primal_residual``.

Implementation follows Nocedal & Wright (2006), Ch. 16.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from ..diagnostics import assert_feasible, assert_symmetric, is_debug_enabled
from ..logging import get_logger
from ..program.utils import as_float_array
from .assemble import assemble_problem, check_supported_bindings
from .core import RESIDUAL_TOL, KKTPath, SolutionResult, SolveOutcome
from .kkt import kkt_residuals, solve_full_kkt, solve_range_space
from .solver_id import SolverId, equality_constrained_qp_solver_id
from .utils import quadratic_cost, try_cholesky

if TYPE_CHECKING:
    from ..program.core import ProgramModel

logger = get_logger(__name__)


def equality_constrained_qp(
    hessian: Any,
    g_vec: Any,
    a_mat: Optional[Any] = None,
    b_vec: Optional[Any] = None,
) -> SolveOutcome:
    """
    Solve an equality-constrained QP given as dense arrays.

    Args:
        hessian: Symmetric ``(n, n)`` quadratic term ``G``.
        g_vec: Linear term ``c`` of length ``n``.
        a_mat: Equality matrix ``A`` of shape ``(m, n)``; ``None`` for no
            constraints.
        b_vec: Equality targets ``b`` of length ``m``.

    Returns:
        A :class:`SolveOutcome`. ``multipliers`` and ``dual_residual`` are
        only set on the range-space path.

    Raises:
        ValueError: On shape mismatches. In debug mode also when ``G`` is
            not symmetric or the solution violates ``A x = b``.
    """

    g_vec = as_float_array(g_vec, ndim=1)
    n = g_vec.shape[0]
    hessian = as_float_array(hessian, ndim=2)
    if hessian.shape != (n, n):
        raise ValueError("G must be square and match the dimension of c")
    if a_mat is None:
        a_mat = np.zeros((0, n))
        b_vec = np.zeros(0)
    else:
        a_mat = as_float_array(a_mat, ndim=2)
        b_vec = as_float_array(b_vec, ndim=1)
        if a_mat.shape[1] != n or b_vec.shape[0] != a_mat.shape[0]:
            raise ValueError(
                f"Constraint dimension mismatch: A {a_mat.shape}, b {b_vec.shape}, n={n}"
            )

    if is_debug_enabled():
        assert_symmetric(hessian)

    factor = try_cholesky(hessian) if n else None
    multipliers: Optional[np.ndarray] = None
    if n == 0:
        path = KKTPath.RANGE_SPACE
        x = np.zeros(0)
        multipliers = np.zeros(a_mat.shape[0])
    elif factor is not None:
        path = KKTPath.RANGE_SPACE
        logger.debug(
            "Hessian is positive definite; using range-space method (n=%d, m=%d)",
            n,
            a_mat.shape[0],
        )
        x, multipliers = solve_range_space(factor, g_vec, a_mat, b_vec)
    else:
        path = KKTPath.FULL_KKT
        logger.info(
            "Hessian is not positive definite; solving full KKT system by SVD (n=%d, m=%d)",
            n,
            a_mat.shape[0],
        )
        x = solve_full_kkt(hessian, g_vec, a_mat, b_vec)

    residuals = kkt_residuals(hessian, g_vec, a_mat, b_vec, x, multipliers)
    tol = RESIDUAL_TOL * max(1.0, float(np.max(np.abs(b_vec), initial=0.0)))
    if residuals["primal_eq"] > tol:
        logger.warning(
            "Equality residual ||Ax - b||_inf = %.3e exceeds %.1e; the constraints "
            "may be inconsistent",
            residuals["primal_eq"],
            tol,
        )
    if is_debug_enabled():
        logger.debug("KKT residuals (%s): %s", path.value, residuals)
        assert_feasible(a_mat, b_vec, x, atol=tol)

    return SolveOutcome(
        x=x,
        fun=quadratic_cost(hessian, g_vec, x),
        status=SolutionResult.SOLUTION_FOUND,
        path=path,
        multipliers=multipliers,
        primal_residual=residuals["primal_eq"],
        dual_residual=residuals["dual"],
    )


class EqualityConstrainedQPSolver:
    """
    Solver for programs made only of quadratic costs and linear equality
    constraints.

    Instances hold no state; all of them share one :class:`SolverId`.
    """

    @staticmethod
    def id() -> SolverId:
        return equality_constrained_qp_solver_id()

    def solver_id(self) -> SolverId:
        return self.id()

    def available(self) -> bool:
        """Always True: the solver needs nothing beyond NumPy/SciPy."""
        return True

    def solve_outcome(self, program: "ProgramModel") -> SolveOutcome:
        """
        Check, assemble and solve ``program`` without writing back to it.

        Raises:
            UnsupportedBindingError: If the program holds any binding other
                than quadratic costs and linear equality constraints.
        """
        check_supported_bindings(program)
        problem = assemble_problem(program)
        return equality_constrained_qp(
            problem.hessian, problem.gradient, problem.a_eq, problem.b_eq
        )

    def solve(self, program: "ProgramModel") -> SolutionResult:
        """
        Solve ``program`` and store the solution, optimal cost and solver
        result on it.

        Raises:
            UnsupportedBindingError: If the program holds unsupported
                bindings. Nothing is written to the program in that case.
        """
        outcome = self.solve_outcome(program)
        program.set_decision_variable_values(outcome.x)
        program.set_optimal_cost(outcome.fun)
        program.set_solver_result(self.solver_id(), outcome.status.value)
        return outcome.status


__all__ = ["equality_constrained_qp", "EqualityConstrainedQPSolver"]
