"""
Minimal mathematical program model.

:class:`ProgramModel` owns the decision variables and the cost/constraint
bindings of an optimization problem, and receives the solver's output
(primal values, optimal cost and a solver result record). Solvers read from
it and write back to it; they keep no reference to it after a solve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Union

import numpy as np
import torch

from ..convex.solver_id import SolverId
from .bindings import (
    Binding,
    BindingKind,
    BoundingBoxConstraint,
    GenericConstraint,
    GenericCost,
    LinearComplementarityConstraint,
    LinearConstraint,
    LinearEqualityConstraint,
    QuadraticCost,
    make_binding,
)
from .utils import as_float_array
from .variables import DecisionVariable

VariableArg = Union[DecisionVariable, Sequence[DecisionVariable]]


@dataclass(frozen=True)
class SolverResult:
    """Which solver produced the stored solution, and its return code."""

    solver_id: SolverId
    return_code: int


class ProgramModel:
    """
    Container for decision variables and bindings.

    Example:
        >>> prog = ProgramModel()
        >>> x = prog.new_continuous_variables(2, "x")
        >>> prog.add_quadratic_cost(np.eye(2), np.zeros(2), x)
        >>> prog.add_linear_equality_constraint([[1.0, 1.0]], [1.0], x)
    """

    def __init__(self) -> None:
        self._variables: List[DecisionVariable] = []
        self._index: Dict[int, int] = {}
        self._bindings: List[Binding] = []
        self._x_values = np.zeros(0)
        self._optimal_cost: Optional[float] = None
        self._solver_result: Optional[SolverResult] = None

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------
    def new_continuous_variables(self, count: int, name: str = "x") -> List[DecisionVariable]:
        """Create ``count`` scalar variables named ``name(i)``."""
        if count < 0:
            raise ValueError("count must be non-negative")
        start = len(self._variables)
        new_vars = [DecisionVariable(f"{name}({i})") for i in range(count)]
        for offset, var in enumerate(new_vars):
            self._index[var.id] = start + offset
        self._variables.extend(new_vars)
        self._x_values = np.concatenate([self._x_values, np.full(count, np.nan)])
        return new_vars

    @property
    def num_vars(self) -> int:
        return len(self._variables)

    @property
    def decision_variables(self) -> List[DecisionVariable]:
        return list(self._variables)

    def find_decision_variable_index(self, var: DecisionVariable) -> int:
        """Return the global index of ``var``; ``KeyError`` if it is not ours."""
        try:
            return self._index[var.id]
        except KeyError:
            raise KeyError(f"{var!r} is not a decision variable of this program") from None

    def _bind(self, evaluator: Any, variables: VariableArg) -> Binding:
        binding = make_binding(evaluator, variables)
        for var in binding.variables:
            self.find_decision_variable_index(var)
        self._bindings.append(binding)
        return binding

    # ------------------------------------------------------------------
    # Costs and constraints
    # ------------------------------------------------------------------
    def add_quadratic_cost(self, Q: Any, b: Any, variables: VariableArg) -> Binding:
        """Add the cost ``1/2 v^T Q v + b^T v`` over ``variables``."""
        return self._bind(QuadraticCost(Q, b), variables)

    def add_linear_equality_constraint(
        self, A: Any, beq: Any, variables: VariableArg
    ) -> Binding:
        """Add the constraint ``A v = beq`` over ``variables``."""
        return self._bind(LinearEqualityConstraint(A, beq), variables)

    def add_linear_constraint(
        self, A: Any, lb: Any, ub: Any, variables: VariableArg
    ) -> Binding:
        return self._bind(LinearConstraint(A, lb, ub), variables)

    def add_bounding_box_constraint(self, lb: Any, ub: Any, variables: VariableArg) -> Binding:
        return self._bind(BoundingBoxConstraint(lb, ub), variables)

    def add_cost(self, fn: Callable[[np.ndarray], float], variables: VariableArg) -> Binding:
        variables = (variables,) if isinstance(variables, DecisionVariable) else variables
        return self._bind(GenericCost(fn, len(variables)), variables)

    def add_constraint(
        self,
        fn: Callable[[np.ndarray], np.ndarray],
        lb: Any,
        ub: Any,
        variables: VariableArg,
    ) -> Binding:
        variables = (variables,) if isinstance(variables, DecisionVariable) else variables
        return self._bind(GenericConstraint(fn, lb, ub, len(variables)), variables)

    def add_linear_complementarity_constraint(
        self, M: Any, q: Any, variables: VariableArg
    ) -> Binding:
        return self._bind(LinearComplementarityConstraint(M, q), variables)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def bindings_of_kind(self, kind: BindingKind) -> List[Binding]:
        """Bindings of ``kind`` in registration order."""
        return [binding for binding in self._bindings if binding.kind is kind]

    def binding_kinds(self) -> Set[BindingKind]:
        return {binding.kind for binding in self._bindings}

    def quadratic_costs(self) -> List[Binding]:
        return self.bindings_of_kind(BindingKind.QUADRATIC_COST)

    def linear_equality_constraints(self) -> List[Binding]:
        return self.bindings_of_kind(BindingKind.LINEAR_EQUALITY_CONSTRAINT)

    # ------------------------------------------------------------------
    # Solution write-back
    # ------------------------------------------------------------------
    def set_decision_variable_values(self, values: Any) -> None:
        values = as_float_array(values, ndim=1)
        if values.shape != (self.num_vars,):
            raise ValueError(
                f"Expected {self.num_vars} decision variable values, got {values.shape[0]}"
            )
        self._x_values = values

    def get_solution(self, variables: Optional[VariableArg] = None) -> Union[float, np.ndarray]:
        """
        Return stored values.

        A single variable gives a float, a sequence gives an array in the
        sequence's order, and ``None`` gives the full vector. Variables that
        were never solved for read as ``nan``.
        """
        if variables is None:
            return self._x_values.copy()
        if isinstance(variables, DecisionVariable):
            return float(self._x_values[self.find_decision_variable_index(variables)])
        indices = [self.find_decision_variable_index(var) for var in variables]
        return self._x_values[indices]

    def get_solution_tensor(self, dtype: torch.dtype = torch.float64) -> torch.Tensor:
        """Full solution vector as a CPU tensor."""
        return torch.as_tensor(self._x_values.copy(), dtype=dtype)

    def set_optimal_cost(self, cost: float) -> None:
        self._optimal_cost = float(cost)

    def get_optimal_cost(self) -> Optional[float]:
        return self._optimal_cost

    def set_solver_result(self, solver_id: SolverId, return_code: int) -> None:
        self._solver_result = SolverResult(solver_id=solver_id, return_code=int(return_code))

    def get_solver_result(self) -> Optional[SolverResult]:
        return self._solver_result


__all__ = ["ProgramModel", "SolverResult"]
