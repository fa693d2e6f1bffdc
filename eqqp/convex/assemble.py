"""
Assembly of a program's bindings into one dense equality-constrained QP.

Each binding covers a subset of the program's variables. Its local data is
scattered into the global arrays through the binding's local-to-global index
map; contributions from different bindings (or repeated variables within one
binding) add up.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import numpy as np

from ..logging import get_logger
from ..program.bindings import Binding, BindingKind
from .core import AssembledProblem, UnsupportedBindingError

if TYPE_CHECKING:
    from ..program.core import ProgramModel

logger = get_logger(__name__)

SUPPORTED_BINDING_KINDS = frozenset(
    {BindingKind.QUADRATIC_COST, BindingKind.LINEAR_EQUALITY_CONSTRAINT}
)


def check_supported_bindings(program: "ProgramModel") -> None:
    """
    Raise :class:`UnsupportedBindingError` if ``program`` holds any binding
    other than quadratic costs and linear equality constraints.
    """

    present = program.binding_kinds()
    unsupported = [
        kind for kind in BindingKind if kind in present and kind not in SUPPORTED_BINDING_KINDS
    ]
    if unsupported:
        raise UnsupportedBindingError(unsupported)


def _global_indices(program: "ProgramModel", binding: Binding) -> np.ndarray:
    return np.array(
        [program.find_decision_variable_index(var) for var in binding.variables],
        dtype=int,
    )


def assemble_problem(program: "ProgramModel") -> AssembledProblem:
    """
    Gather the quadratic costs and equality constraints of ``program``.

    Returns:
        The dense problem ``(G, c, A, b)``. Equality bindings occupy
        contiguous row blocks of ``A`` in registration order.
    """

    n = program.num_vars
    hessian = np.zeros((n, n))
    gradient = np.zeros(n)

    costs = program.quadratic_costs()
    for binding in costs:
        cost = binding.evaluator
        idx = _global_indices(program, binding)
        np.add.at(hessian, np.ix_(idx, idx), cost.Q)
        np.add.at(gradient, idx, cost.b)

    constraints: List[Binding] = program.linear_equality_constraints()
    m = sum(binding.evaluator.num_constraints for binding in constraints)
    a_eq = np.zeros((m, n))
    b_eq = np.zeros(m)

    row = 0
    for binding in constraints:
        constraint = binding.evaluator
        rows = constraint.num_constraints
        idx = _global_indices(program, binding)
        for local, col in enumerate(idx):
            a_eq[row : row + rows, col] += constraint.A[:, local]
        b_eq[row : row + rows] = constraint.lower_bound
        row += rows

    logger.debug(
        "Assembled %d variables from %d quadratic costs and %d equality bindings (%d rows)",
        n,
        len(costs),
        len(constraints),
        m,
    )
    return AssembledProblem(hessian=hessian, gradient=gradient, a_eq=a_eq, b_eq=b_eq)


__all__ = ["SUPPORTED_BINDING_KINDS", "check_supported_bindings", "assemble_problem"]
