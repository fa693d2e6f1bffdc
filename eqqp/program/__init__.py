"""Program model: decision variables, bindings and solution storage."""

from . import bindings, utils, variables
from .bindings import (
    Binding,
    BindingKind,
    BoundingBoxConstraint,
    Evaluator,
    GenericConstraint,
    GenericCost,
    LinearComplementarityConstraint,
    LinearConstraint,
    LinearEqualityConstraint,
    QuadraticCost,
    make_binding,
)
from .core import ProgramModel, SolverResult
from .utils import as_float_array
from .variables import DecisionVariable

__all__ = [
    "bindings",
    "utils",
    "variables",
    "DecisionVariable",
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
    "ProgramModel",
    "SolverResult",
    "as_float_array",
]
