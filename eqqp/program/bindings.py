"""
Costs, constraints and their bindings to decision variables.

An *evaluator* (cost or constraint) is defined over ``k`` local variables. A
:class:`Binding` attaches it to ``k`` decision variables of a program. The set
of evaluator kinds is closed and tagged by :class:`BindingKind`, so solvers
can check up front which kinds a program holds.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence, Tuple

import numpy as np

from .utils import as_float_array
from .variables import DecisionVariable


class BindingKind(Enum):
    """Every kind of cost or constraint a program can hold."""

    QUADRATIC_COST = "quadratic_cost"
    LINEAR_EQUALITY_CONSTRAINT = "linear_equality_constraint"
    LINEAR_CONSTRAINT = "linear_constraint"
    BOUNDING_BOX_CONSTRAINT = "bounding_box_constraint"
    GENERIC_COST = "generic_cost"
    GENERIC_CONSTRAINT = "generic_constraint"
    LINEAR_COMPLEMENTARITY_CONSTRAINT = "linear_complementarity_constraint"


class Evaluator(ABC):
    """A cost or constraint over ``num_vars`` local variables."""

    kind: BindingKind

    @property
    @abstractmethod
    def num_vars(self) -> int:
        """Local dimension ``k``."""

    @abstractmethod
    def eval(self, v: np.ndarray) -> Any:
        """Evaluate at the local point ``v``."""


def _check_bounds(lower: np.ndarray, upper: np.ndarray, rows: int) -> None:
    if lower.shape != (rows,) or upper.shape != (rows,):
        raise ValueError(
            f"Bounds must have shape ({rows},), got {lower.shape} and {upper.shape}"
        )
    if np.any(lower > upper):
        raise ValueError("Lower bound exceeds upper bound")


class QuadraticCost(Evaluator):
    """Cost ``1/2 v^T Q v + b^T v``."""

    kind = BindingKind.QUADRATIC_COST

    def __init__(self, Q: Any, b: Any) -> None:
        self.Q = as_float_array(Q, ndim=2)
        self.b = as_float_array(b, ndim=1)
        k = self.b.shape[0]
        if self.Q.shape != (k, k):
            raise ValueError(
                f"Q must be square and match b: got Q {self.Q.shape}, b ({k},)"
            )

    @property
    def num_vars(self) -> int:
        return int(self.b.shape[0])

    def eval(self, v: np.ndarray) -> float:
        v = as_float_array(v, ndim=1)
        return float(0.5 * v @ (self.Q @ v) + self.b @ v)


class LinearEqualityConstraint(Evaluator):
    """
    Constraint ``A v = beq``.

    Stored as lower/upper bounds like every other constraint; for an
    equality they are the same vector. Passing an ``upper_bound`` that
    differs from ``lower_bound`` raises ``ValueError``.
    """

    kind = BindingKind.LINEAR_EQUALITY_CONSTRAINT

    def __init__(self, A: Any, lower_bound: Any, upper_bound: Any = None) -> None:
        self.A = as_float_array(A, ndim=2)
        lower = as_float_array(lower_bound, ndim=1)
        upper = lower.copy() if upper_bound is None else as_float_array(upper_bound, ndim=1)
        if lower.shape != (self.A.shape[0],):
            raise ValueError(
                f"Equality target must have shape ({self.A.shape[0]},), got {lower.shape}"
            )
        if upper.shape != lower.shape or not np.array_equal(lower, upper):
            raise ValueError("Equality constraint requires lower_bound == upper_bound")
        self.lower_bound = lower
        self.upper_bound = upper

    @property
    def num_vars(self) -> int:
        return int(self.A.shape[1])

    @property
    def num_constraints(self) -> int:
        return int(self.A.shape[0])

    def eval(self, v: np.ndarray) -> np.ndarray:
        return self.A @ as_float_array(v, ndim=1)


class LinearConstraint(Evaluator):
    """Constraint ``lb <= A v <= ub``."""

    kind = BindingKind.LINEAR_CONSTRAINT

    def __init__(self, A: Any, lower_bound: Any, upper_bound: Any) -> None:
        self.A = as_float_array(A, ndim=2)
        self.lower_bound = as_float_array(lower_bound, ndim=1)
        self.upper_bound = as_float_array(upper_bound, ndim=1)
        _check_bounds(self.lower_bound, self.upper_bound, self.A.shape[0])

    @property
    def num_vars(self) -> int:
        return int(self.A.shape[1])

    def eval(self, v: np.ndarray) -> np.ndarray:
        return self.A @ as_float_array(v, ndim=1)


class BoundingBoxConstraint(Evaluator):
    """Constraint ``lb <= v <= ub``."""

    kind = BindingKind.BOUNDING_BOX_CONSTRAINT

    def __init__(self, lower_bound: Any, upper_bound: Any) -> None:
        self.lower_bound = as_float_array(lower_bound, ndim=1)
        self.upper_bound = as_float_array(upper_bound, ndim=1)
        _check_bounds(self.lower_bound, self.upper_bound, self.lower_bound.shape[0])

    @property
    def num_vars(self) -> int:
        return int(self.lower_bound.shape[0])

    def eval(self, v: np.ndarray) -> np.ndarray:
        return as_float_array(v, ndim=1)


class GenericCost(Evaluator):
    """Arbitrary scalar cost ``fn(v)``."""

    kind = BindingKind.GENERIC_COST

    def __init__(self, fn: Callable[[np.ndarray], float], num_vars: int) -> None:
        self.fn = fn
        self._num_vars = int(num_vars)

    @property
    def num_vars(self) -> int:
        return self._num_vars

    def eval(self, v: np.ndarray) -> float:
        return float(self.fn(as_float_array(v, ndim=1)))


class GenericConstraint(Evaluator):
    """Arbitrary constraint ``lb <= fn(v) <= ub``."""

    kind = BindingKind.GENERIC_CONSTRAINT

    def __init__(
        self,
        fn: Callable[[np.ndarray], np.ndarray],
        lower_bound: Any,
        upper_bound: Any,
        num_vars: int,
    ) -> None:
        self.fn = fn
        self.lower_bound = as_float_array(lower_bound, ndim=1)
        self.upper_bound = as_float_array(upper_bound, ndim=1)
        _check_bounds(self.lower_bound, self.upper_bound, self.lower_bound.shape[0])
        self._num_vars = int(num_vars)

    @property
    def num_vars(self) -> int:
        return self._num_vars

    def eval(self, v: np.ndarray) -> np.ndarray:
        return as_float_array(self.fn(as_float_array(v, ndim=1)), ndim=1)


class LinearComplementarityConstraint(Evaluator):
    """Constraint ``0 <= v``, ``0 <= M v + q`` and ``v^T (M v + q) = 0``."""

    kind = BindingKind.LINEAR_COMPLEMENTARITY_CONSTRAINT

    def __init__(self, M: Any, q: Any) -> None:
        self.M = as_float_array(M, ndim=2)
        self.q = as_float_array(q, ndim=1)
        k = self.q.shape[0]
        if self.M.shape != (k, k):
            raise ValueError(f"M must be square and match q: got M {self.M.shape}, q ({k},)")

    @property
    def num_vars(self) -> int:
        return int(self.q.shape[0])

    def eval(self, v: np.ndarray) -> np.ndarray:
        return self.M @ as_float_array(v, ndim=1) + self.q


@dataclass(frozen=True)
class Binding:
    """An evaluator attached to an ordered tuple of decision variables."""

    evaluator: Evaluator
    variables: Tuple[DecisionVariable, ...]

    def __post_init__(self) -> None:
        if len(self.variables) != self.evaluator.num_vars:
            raise ValueError(
                f"{type(self.evaluator).__name__} expects {self.evaluator.num_vars} "
                f"variables, got {len(self.variables)}"
            )

    @property
    def kind(self) -> BindingKind:
        return self.evaluator.kind


def make_binding(evaluator: Evaluator, variables: Sequence[DecisionVariable]) -> Binding:
    """Build a :class:`Binding`, accepting any sequence of variables."""
    if isinstance(variables, DecisionVariable):
        variables = (variables,)
    return Binding(evaluator=evaluator, variables=tuple(variables))


__all__ = [
    "BindingKind",
    "Evaluator",
    "QuadraticCost",
    "LinearEqualityConstraint",
    "LinearConstraint",
    "BoundingBoxConstraint",
    "GenericCost",
    "GenericConstraint",
    "LinearComplementarityConstraint",
    "Binding",
    "make_binding",
]
