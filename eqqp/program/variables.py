"""Scalar decision variables."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

_next_id = itertools.count()


@dataclass(frozen=True)
class DecisionVariable:
    """
    A scalar unknown of a program.

    Identity is the process-unique ``id``; two variables with the same name
    are still distinct. The variable's position in a program is looked up
    through :meth:`ProgramModel.find_decision_variable_index`.
    """

    name: str
    id: int = field(default_factory=lambda: next(_next_id))

    def __repr__(self) -> str:
        return f"DecisionVariable({self.name!r}, id={self.id})"


__all__ = ["DecisionVariable"]
