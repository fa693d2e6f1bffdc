import logging
from io import StringIO

import numpy as np
import pytest
import torch

import eqqp.convex.equality_qp as eq_module
from eqqp.convex.core import KKTPath, SolutionResult
from eqqp.convex.equality_qp import equality_constrained_qp
from eqqp.diagnostics import debug_context
from eqqp.logging import configure_logging


def test_diagonal_hessian_single_constraint():
    G = np.diag([2.0, 2.0])
    c = np.zeros(2)
    A = np.array([[1.0, 1.0]])
    b = np.array([4.0])
    res = equality_constrained_qp(G, c, A, b)
    assert res.status is SolutionResult.SOLUTION_FOUND
    assert res.path is KKTPath.RANGE_SPACE
    assert np.allclose(res.x, [2.0, 2.0], atol=1e-12)
    assert pytest.approx(8.0, rel=1e-12) == res.fun


def test_redundant_consistent_rows_match_single_row():
    G = np.diag([2.0, 2.0])
    c = np.zeros(2)
    single = equality_constrained_qp(G, c, np.array([[1.0, 1.0]]), np.array([4.0]))
    redundant = equality_constrained_qp(
        G, c, np.array([[1.0, 1.0], [2.0, 2.0]]), np.array([4.0, 8.0])
    )
    assert redundant.path is KKTPath.RANGE_SPACE
    assert np.allclose(redundant.x, [2.0, 2.0], atol=1e-9)
    assert np.allclose(redundant.x, single.x, atol=1e-9)
    assert pytest.approx(8.0, rel=1e-9) == redundant.fun


def test_identity_hessian_cost_uses_half_quadratic_form():
    A = np.array([[1.0, 1.0]])
    b = np.array([1.0])
    res = equality_constrained_qp(np.eye(2), np.zeros(2), A, b)
    assert np.allclose(res.x, [0.5, 0.5], atol=1e-12)
    assert pytest.approx(0.25, rel=1e-12) == res.fun

    doubled = equality_constrained_qp(2.0 * np.eye(2), np.zeros(2), A, b)
    assert np.allclose(doubled.x, [0.5, 0.5], atol=1e-12)
    assert pytest.approx(0.5, rel=1e-12) == doubled.fun


def test_unconstrained_minimizer(random_spd, rng):
    G = random_spd(4)
    c = rng.standard_normal(4)
    res = equality_constrained_qp(G, c)
    expected = -np.linalg.solve(G, c)
    assert res.path is KKTPath.RANGE_SPACE
    assert res.multipliers.shape == (0,)
    assert np.allclose(res.x, expected, atol=1e-10)
    assert pytest.approx(-0.5 * c @ np.linalg.solve(G, c), rel=1e-9) == res.fun


def test_indefinite_hessian_uses_full_kkt():
    G = np.diag([1.0, -1.0])
    A = np.array([[1.0, -1.0]])
    b = np.array([0.0])
    res = equality_constrained_qp(G, np.zeros(2), A, b)
    assert res.status is SolutionResult.SOLUTION_FOUND
    assert res.path is KKTPath.FULL_KKT
    assert res.multipliers is None
    assert res.dual_residual is None
    assert np.linalg.norm(A @ res.x - b) <= 1e-10


def test_indefinite_hessian_nonzero_target():
    G = np.diag([1.0, -1.0])
    A = np.array([[1.0, 0.0]])
    b = np.array([2.0])
    res = equality_constrained_qp(G, np.zeros(2), A, b)
    assert res.path is KKTPath.FULL_KKT
    assert np.allclose(res.x, [2.0, 0.0], atol=1e-10)


def test_variable_without_cost_is_fixed_by_constraint():
    # Second variable has no quadratic term, so G is singular.
    G = np.diag([2.0, 0.0])
    c = np.array([-2.0, 0.0])
    A = np.array([[0.0, 1.0]])
    b = np.array([3.0])
    res = equality_constrained_qp(G, c, A, b)
    assert res.path is KKTPath.FULL_KKT
    assert np.allclose(res.x, [1.0, 3.0], atol=1e-10)
    assert pytest.approx(-1.0, abs=1e-10) == res.fun


def test_stationarity_on_range_space_path(random_spd, rng):
    n, m = 6, 3
    G = random_spd(n)
    c = rng.standard_normal(n)
    A = rng.standard_normal((m, n))
    b = rng.standard_normal(m)
    res = equality_constrained_qp(G, c, A, b)
    y = res.multipliers
    assert np.linalg.norm(G @ res.x - A.T @ y + c, ord=np.inf) <= 1e-9
    assert np.linalg.norm(A @ res.x - b, ord=np.inf) <= 1e-9
    assert res.dual_residual <= 1e-9
    assert res.primal_residual <= 1e-9


def test_range_space_agrees_with_direct_kkt(random_spd, rng):
    n, m = 5, 2
    G = random_spd(n)
    c = rng.standard_normal(n)
    A = rng.standard_normal((m, n))
    b = rng.standard_normal(m)
    kkt = np.block([[G, A.T], [A, np.zeros((m, m))]])
    expected = np.linalg.solve(kkt, np.concatenate([-c, b]))[:n]
    res = equality_constrained_qp(G, c, A, b)
    assert np.allclose(res.x, expected, atol=1e-9)


def test_scaled_duplicate_rows_random_problem(random_spd, rng):
    n = 5
    G = random_spd(n)
    c = rng.standard_normal(n)
    A = rng.standard_normal((2, n))
    b = rng.standard_normal(2)
    A_red = np.vstack([A, 2.0 * A[0], -0.5 * A[1]])
    b_red = np.concatenate([b, [2.0 * b[0], -0.5 * b[1]]])
    base = equality_constrained_qp(G, c, A, b)
    redundant = equality_constrained_qp(G, c, A_red, b_red)
    assert np.allclose(redundant.x, base.x, atol=1e-8)
    assert redundant.primal_residual <= 1e-8


def test_cost_matches_formula_exactly(random_spd, rng):
    G = random_spd(3)
    c = rng.standard_normal(3)
    A = rng.standard_normal((1, 3))
    b = rng.standard_normal(1)
    res = equality_constrained_qp(G, c, A, b)
    x = res.x
    assert res.fun == float(0.5 * x @ (G @ x) + c @ x)


def test_repeated_solves_are_identical(random_spd, rng):
    G = random_spd(4)
    c = rng.standard_normal(4)
    A = rng.standard_normal((2, 4))
    b = rng.standard_normal(2)
    first = equality_constrained_qp(G, c, A, b)
    second = equality_constrained_qp(G.copy(), c.copy(), A.copy(), b.copy())
    assert np.array_equal(first.x, second.x)
    assert first.fun == second.fun

    G_ind = np.diag([1.0, -1.0, 0.0, 2.0])
    one = equality_constrained_qp(G_ind, c, A, b)
    two = equality_constrained_qp(G_ind, c, A, b)
    assert np.array_equal(one.x, two.x)
    assert one.fun == two.fun


def test_accepts_torch_tensors():
    G = torch.diag(torch.tensor([2.0, 2.0]))
    res = equality_constrained_qp(G, torch.zeros(2), torch.tensor([[1.0, 1.0]]), torch.tensor([4.0]))
    assert np.allclose(res.x, [2.0, 2.0], atol=1e-6)


def test_empty_problem():
    res = equality_constrained_qp(np.zeros((0, 0)), np.zeros(0))
    assert res.x.shape == (0,)
    assert res.fun == 0.0
    assert res.status is SolutionResult.SOLUTION_FOUND


def test_dimension_mismatch_raises():
    with pytest.raises(ValueError):
        equality_constrained_qp(np.eye(3), np.zeros(2))
    with pytest.raises(ValueError):
        equality_constrained_qp(np.eye(2), np.zeros(2), np.ones((1, 3)), np.ones(1))
    with pytest.raises(ValueError):
        equality_constrained_qp(np.eye(2), np.zeros(2), np.ones((1, 2)), np.ones(2))


def test_debug_mode_rejects_asymmetric_hessian():
    G = np.array([[2.0, 1.0], [0.0, 2.0]])
    with debug_context(True):
        with pytest.raises(ValueError, match="symmetric"):
            equality_constrained_qp(G, np.zeros(2))
    # Outside debug mode only the lower triangle is read by the factorization.
    res = equality_constrained_qp(G, np.zeros(2))
    assert res.status is SolutionResult.SOLUTION_FOUND


def test_inconsistent_constraints_still_report_success_and_warn():
    stream = StringIO()
    configure_logging(level=logging.WARNING, stream=stream)
    try:
        res = equality_constrained_qp(
            np.eye(2), np.zeros(2), np.array([[1.0, 1.0], [1.0, 1.0]]), np.array([1.0, 3.0])
        )
    finally:
        configure_logging(level=logging.WARNING)
    assert res.status is SolutionResult.SOLUTION_FOUND
    assert res.primal_residual > 0.5
    assert "Equality residual" in stream.getvalue()


def test_cholesky_attempt_decides_path(monkeypatch):
    calls = []
    original = eq_module.try_cholesky

    def spy(hessian):
        calls.append(hessian.shape)
        return original(hessian)

    monkeypatch.setattr(eq_module, "try_cholesky", spy)
    equality_constrained_qp(np.eye(3), np.ones(3))
    assert calls == [(3, 3)]


def test_badly_scaled_rows_range_space():
    # Row norms differ by 1e6; both rows are independent and must hold.
    A = np.array([[1e3, 0.0], [0.0, 1e-3]])
    b = np.array([1e3, 1e-3])
    res = equality_constrained_qp(np.eye(2), np.zeros(2), A, b)
    assert res.path is KKTPath.RANGE_SPACE
    assert np.allclose(res.x, [1.0, 1.0], atol=1e-12)
    assert np.allclose(res.multipliers, [1e-3, 1e3], rtol=1e-12)
    assert res.primal_residual <= 1e-12
    assert res.dual_residual <= 1e-9


def test_badly_scaled_rows_full_kkt():
    G = np.diag([1.0, 0.0, 0.0])
    A = np.array([[0.0, 1e6, 0.0], [0.0, 0.0, 1e-7]])
    b = np.array([1e6, 1e-7])
    res = equality_constrained_qp(G, np.zeros(3), A, b)
    assert res.path is KKTPath.FULL_KKT
    assert np.allclose(res.x, [0.0, 1.0, 1.0], atol=1e-10)
    assert res.primal_residual <= 1e-8


def test_nearly_parallel_independent_rows_are_kept():
    eps = 1e-4
    A = np.array([[1.0, 1.0], [1.0, 1.0 + eps]])
    b = np.array([2.0, 2.0 + eps])
    res = equality_constrained_qp(np.eye(2), np.zeros(2), A, b)
    assert np.allclose(res.x, [1.0, 1.0], atol=1e-6)
    assert res.primal_residual <= 1e-8


def test_debug_mode_rejects_infeasible_solution():
    A = np.array([[1.0, 1.0], [1.0, 1.0]])
    b = np.array([1.0, 3.0])
    with debug_context(True):
        with pytest.raises(ValueError, match="violates equality constraints"):
            equality_constrained_qp(np.eye(2), np.zeros(2), A, b)
