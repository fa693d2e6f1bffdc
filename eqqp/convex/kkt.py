"""
Karush-Kuhn-Tucker system solvers and diagnostics for equality-constrained QPs.

The optimality conditions of ``min 1/2 x^T G x + c^T x  s.t.  A x = b`` are

    | G  -A^T | | x |   | -c |
    | A    0  | | y | = |  b |

Two ways of solving them are provided (Nocedal & Wright, Ch. 16):

* :func:`solve_range_space` eliminates ``x`` with a Cholesky factor of ``G``
  and solves the ``m x m`` Schur complement ``A G^{-1} A^T`` for ``y``.
  It requires ``G`` to be positive definite.
* :func:`solve_full_kkt` solves the whole ``(n + m) x (n + m)`` system by SVD
  least squares and works for any ``G``, including singular or indefinite
  Hessians and a singular KKT matrix.

Both first scale the constraint rows to unit norm and set aside rows that
depend on the others, so row scaling never decides which constraints count.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np
from scipy.linalg import cho_solve

from ..diagnostics import constraint_residual
from .utils import (
    CholeskyFactor,
    equilibrate_rows,
    independent_rows,
    pivoted_qr_lstsq,
    svd_lstsq,
)


def reduce_constraints(
    a_mat: np.ndarray, b_vec: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Equilibrate ``A x = b`` and pick an independent subset of its rows.

    Returns:
        ``(A_red, b_red, rows, norms)``: the scaled independent rows, their
        targets, their indices into ``A`` and the norms of all rows of ``A``.
    """

    scaled_a, scaled_b, norms = equilibrate_rows(a_mat, b_vec)
    rows = independent_rows(scaled_a)
    return scaled_a[rows], scaled_b[rows], rows, norms


def solve_range_space(
    factor: CholeskyFactor,
    g_vec: np.ndarray,
    a_mat: np.ndarray,
    b_vec: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Solve the KKT system with the Schur complement of a positive definite ``G``.

    Args:
        factor: Cholesky factor of ``G`` as returned by ``try_cholesky``.
        g_vec: Linear term ``c``.
        a_mat: Equality matrix ``A`` of shape ``(m, n)``; ``m`` may be zero.
        b_vec: Equality targets ``b``.

    Returns:
        ``(x, y)``: the primal solution and the equality multipliers. Rows
        found to be redundant get a zero multiplier.
    """

    m = a_mat.shape[0]
    if m == 0:
        return cho_solve(factor, -g_vec), np.zeros(0)

    a_red, b_red, rows, norms = reduce_constraints(a_mat, b_vec)
    y = np.zeros(m)
    if rows.size:
        # G is symmetric, so (G^{-1} A^T)^T = A G^{-1}.
        aig_t = cho_solve(factor, a_red.T)
        schur = a_red @ aig_t
        y[rows] = pivoted_qr_lstsq(schur, aig_t.T @ g_vec + b_red) / norms[rows]
    x = cho_solve(factor, a_mat.T @ y - g_vec)
    return x, y


def build_kkt_system(
    hessian: np.ndarray,
    g_vec: np.ndarray,
    a_mat: np.ndarray,
    b_vec: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return the augmented matrix ``[[G, -A^T], [A, 0]]`` and rhs ``[-c; b]``."""

    m = a_mat.shape[0]
    kkt_matrix = np.block([[hessian, -a_mat.T], [a_mat, np.zeros((m, m))]])
    rhs = np.concatenate([-g_vec, b_vec])
    return kkt_matrix, rhs


def solve_full_kkt(
    hessian: np.ndarray,
    g_vec: np.ndarray,
    a_mat: np.ndarray,
    b_vec: np.ndarray,
) -> np.ndarray:
    """
    Solve the full KKT system by thin-SVD least squares.

    Only the primal part of the solution is returned; the multipliers of the
    least-squares solution are not meaningful when the system is singular.
    """

    n = hessian.shape[0]
    a_red, b_red, _, _ = reduce_constraints(a_mat, b_vec)
    kkt_matrix, rhs = build_kkt_system(hessian, g_vec, a_red, b_red)
    sol = svd_lstsq(kkt_matrix, rhs)
    return sol[:n]


def kkt_residuals(
    hessian: np.ndarray,
    g_vec: np.ndarray,
    a_mat: np.ndarray,
    b_vec: np.ndarray,
    x: np.ndarray,
    y: Optional[np.ndarray] = None,
) -> Dict[str, Optional[float]]:
    """
    Compute infinity norms of the KKT residuals.

    ``primal_eq`` is ``||A x - b||``. ``dual`` is ``||G x - A^T y + c||`` and
    is ``None`` when no multipliers are supplied.
    """

    x = np.asarray(x, dtype=float).reshape(-1)
    a_mat = np.asarray(a_mat, dtype=float)
    primal_eq = constraint_residual(a_mat, b_vec, x)

    dual: Optional[float] = None
    if y is not None:
        stationarity = np.asarray(hessian, dtype=float) @ x + np.asarray(g_vec, dtype=float)
        if a_mat.shape[0]:
            stationarity -= a_mat.T @ np.asarray(y, dtype=float).reshape(-1)
        dual = float(np.linalg.norm(stationarity, ord=np.inf)) if stationarity.size else 0.0

    return {"primal_eq": primal_eq, "dual": dual}


def is_kkt_optimal(
    hessian: np.ndarray,
    g_vec: np.ndarray,
    a_mat: np.ndarray,
    b_vec: np.ndarray,
    x: np.ndarray,
    y: Optional[np.ndarray] = None,
    tol: float = 1e-6,
) -> bool:
    """
    Return True if all computed KKT residuals are below ``tol``.
    """

    residuals = kkt_residuals(hessian, g_vec, a_mat, b_vec, x, y)
    return all(value <= tol for value in residuals.values() if value is not None)


__all__ = [
    "reduce_constraints",
    "solve_range_space",
    "build_kkt_system",
    "solve_full_kkt",
    "kkt_residuals",
    "is_kkt_optimal",
]
