"""eqqp - a dense equality-constrained quadratic programming core."""

__version__ = "0.1.0"

# Program model
from .program import (
    Binding,
    BindingKind,
    DecisionVariable,
    LinearEqualityConstraint,
    ProgramModel,
    QuadraticCost,
    SolverResult,
)

# Solver
from .convex import (
    AssembledProblem,
    EqualityConstrainedQPSolver,
    KKTPath,
    SolutionResult,
    SolveOutcome,
    SolverId,
    UnsupportedBindingError,
    assemble_problem,
    equality_constrained_qp,
    is_kkt_optimal,
    kkt_residuals,
)

# Diagnostics
from .diagnostics import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

__all__ = [
    "__version__",
    # Program model
    "DecisionVariable",
    "BindingKind",
    "Binding",
    "QuadraticCost",
    "LinearEqualityConstraint",
    "ProgramModel",
    "SolverResult",
    # Solver
    "SolverId",
    "SolutionResult",
    "KKTPath",
    "UnsupportedBindingError",
    "AssembledProblem",
    "SolveOutcome",
    "assemble_problem",
    "equality_constrained_qp",
    "EqualityConstrainedQPSolver",
    "kkt_residuals",
    "is_kkt_optimal",
    # Diagnostics
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
