"""
Equality-constrained convex quadratic programming.

This subpackage turns a :class:`~eqqp.program.ProgramModel` made of quadratic
costs and linear equality constraints into one dense KKT system and solves it
with either the range-space (Schur complement) method or, when the Hessian is
not positive definite, an SVD least-squares solve of the full system.
"""

from . import assemble, core, equality_qp, kkt, solver_id, utils
from .assemble import SUPPORTED_BINDING_KINDS, assemble_problem, check_supported_bindings
from .core import (
    RESIDUAL_TOL,
    AssembledProblem,
    KKTPath,
    SolutionResult,
    SolveOutcome,
    UnsupportedBindingError,
)
from .equality_qp import EqualityConstrainedQPSolver, equality_constrained_qp
from .kkt import (
    build_kkt_system,
    is_kkt_optimal,
    kkt_residuals,
    reduce_constraints,
    solve_full_kkt,
    solve_range_space,
)
from .solver_id import SolverId, equality_constrained_qp_solver_id
from .utils import (
    default_rtol,
    equilibrate_rows,
    independent_rows,
    pivoted_qr_lstsq,
    quadratic_cost,
    svd_lstsq,
    try_cholesky,
)

__all__ = [
    "assemble",
    "core",
    "equality_qp",
    "kkt",
    "solver_id",
    "utils",
    # Core types
    "RESIDUAL_TOL",
    "SolutionResult",
    "KKTPath",
    "UnsupportedBindingError",
    "AssembledProblem",
    "SolveOutcome",
    "SolverId",
    # Assembly
    "SUPPORTED_BINDING_KINDS",
    "check_supported_bindings",
    "assemble_problem",
    # KKT algorithms
    "try_cholesky",
    "default_rtol",
    "equilibrate_rows",
    "independent_rows",
    "reduce_constraints",
    "solve_range_space",
    "build_kkt_system",
    "solve_full_kkt",
    "kkt_residuals",
    "is_kkt_optimal",
    "pivoted_qr_lstsq",
    "svd_lstsq",
    "quadratic_cost",
    # Solver
    "equality_constrained_qp",
    "equality_constrained_qp_solver_id",
    "EqualityConstrainedQPSolver",
]
