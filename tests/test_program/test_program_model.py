import numpy as np
import pytest
import torch

from eqqp.convex.solver_id import SolverId
from eqqp.program import BindingKind, DecisionVariable, ProgramModel, SolverResult


def test_variables_get_consecutive_indices():
    prog = ProgramModel()
    x = prog.new_continuous_variables(2, "x")
    y = prog.new_continuous_variables(3, "y")
    assert prog.num_vars == 5
    assert [prog.find_decision_variable_index(v) for v in x + y] == [0, 1, 2, 3, 4]
    assert prog.decision_variables == x + y
    assert x[1].name == "x(1)"


def test_variables_are_distinct_by_identity():
    a = DecisionVariable("v")
    b = DecisionVariable("v")
    assert a != b
    assert a.id != b.id


def test_foreign_variable_lookup_raises():
    prog = ProgramModel()
    prog.new_continuous_variables(1)
    other = ProgramModel().new_continuous_variables(1)[0]
    with pytest.raises(KeyError):
        prog.find_decision_variable_index(other)
    with pytest.raises(KeyError):
        prog.add_quadratic_cost([[1.0]], [0.0], [other])


def test_negative_variable_count_rejected():
    with pytest.raises(ValueError):
        ProgramModel().new_continuous_variables(-1)


def test_bindings_enumerated_by_kind_in_order():
    prog = ProgramModel()
    x = prog.new_continuous_variables(2)
    c1 = prog.add_quadratic_cost(np.eye(2), np.zeros(2), x)
    e1 = prog.add_linear_equality_constraint([[1.0, 0.0]], [1.0], x)
    c2 = prog.add_quadratic_cost([[1.0]], [0.0], x[0])
    e2 = prog.add_linear_equality_constraint([[0.0, 1.0]], [2.0], x)
    assert prog.quadratic_costs() == [c1, c2]
    assert prog.linear_equality_constraints() == [e1, e2]
    assert prog.binding_kinds() == {
        BindingKind.QUADRATIC_COST,
        BindingKind.LINEAR_EQUALITY_CONSTRAINT,
    }
    assert prog.bindings_of_kind(BindingKind.GENERIC_COST) == []


def test_solution_defaults_to_nan_and_is_written_back():
    prog = ProgramModel()
    x = prog.new_continuous_variables(3)
    assert np.all(np.isnan(prog.get_solution()))
    prog.set_decision_variable_values([1.0, 2.0, 3.0])
    assert prog.get_solution(x[2]) == 3.0
    assert np.array_equal(prog.get_solution([x[2], x[0]]), [3.0, 1.0])
    with pytest.raises(ValueError):
        prog.set_decision_variable_values([1.0, 2.0])


def test_get_solution_returns_copy():
    prog = ProgramModel()
    prog.new_continuous_variables(2)
    prog.set_decision_variable_values([1.0, 2.0])
    values = prog.get_solution()
    values[0] = 5.0
    assert prog.get_solution()[0] == 1.0


def test_solution_tensor():
    prog = ProgramModel()
    prog.new_continuous_variables(2)
    prog.set_decision_variable_values(torch.tensor([1.0, 2.0]))
    tensor = prog.get_solution_tensor(dtype=torch.float32)
    assert tensor.dtype == torch.float32
    assert torch.equal(tensor, torch.tensor([1.0, 2.0]))


def test_cost_and_solver_result_storage():
    prog = ProgramModel()
    assert prog.get_optimal_cost() is None
    assert prog.get_solver_result() is None
    prog.set_optimal_cost(2.5)
    ident = SolverId("test")
    prog.set_solver_result(ident, 0)
    assert prog.get_optimal_cost() == 2.5
    assert prog.get_solver_result() == SolverResult(solver_id=ident, return_code=0)
