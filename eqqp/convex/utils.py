"""
Numerical helper routines for the equality-constrained QP solver.

The factorizations come from SciPy (Cholesky, column-pivoted QR) and NumPy
(thin SVD). Rank decisions follow LAPACK: unless an explicit ``rtol`` is
given, a pivot or singular value counts as zero when it falls below
``max(shape) * eps`` times the largest one.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
from scipy.linalg import cho_factor, qr, solve_triangular

CholeskyFactor = Tuple[np.ndarray, bool]


def default_rtol(shape: Tuple[int, ...]) -> float:
    """Relative rank cutoff used when none is given (``max(shape) * eps``)."""

    return max(shape) * np.finfo(float).eps


def quadratic_cost(hessian: np.ndarray, g_vec: np.ndarray, x: np.ndarray) -> float:
    """Evaluate ``1/2 x^T G x + c^T x``."""

    return float(0.5 * x @ (hessian @ x) + g_vec @ x)


def try_cholesky(hessian: np.ndarray) -> Optional[CholeskyFactor]:
    """
    Attempt a Cholesky factorization of ``hessian``.

    Returns:
        The ``(factor, lower)`` pair accepted by ``scipy.linalg.cho_solve``,
        or ``None`` if the matrix is not numerically positive definite.
    """

    try:
        return cho_factor(hessian, lower=True)
    except np.linalg.LinAlgError:
        return None


def equilibrate_rows(
    a_mat: np.ndarray, b_vec: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Scale every nonzero row of ``A x = b`` to unit 2-norm.

    Returns:
        ``(A_scaled, b_scaled, norms)``; zero rows keep a norm of 1. A
        multiplier ``y_scaled`` for the scaled system corresponds to
        ``y_scaled / norms`` for the original one.
    """

    norms = np.linalg.norm(a_mat, axis=1)
    norms[norms == 0.0] = 1.0
    return a_mat / norms[:, None], b_vec / norms, norms


def independent_rows(a_mat: np.ndarray, rtol: Optional[float] = None) -> np.ndarray:
    """
    Indices (ascending) of a maximal linearly independent subset of rows.

    Decided by a column-pivoted QR of ``a_mat.T``; rows whose pivot falls
    below ``rtol * |R_00|`` are dependent on the ones already chosen.
    Rows should be equilibrated first so the cutoff is scale free.
    """

    rows, cols = a_mat.shape
    if rows == 0 or cols == 0:
        return np.zeros(0, dtype=int)
    if rtol is None:
        rtol = default_rtol(a_mat.shape)

    _, r_mat, perm = qr(a_mat.T, mode="economic", pivoting=True)
    pivots = np.abs(np.diag(r_mat))
    rank = int(np.count_nonzero(pivots > pivots[0] * rtol))
    return np.sort(perm[:rank])


def pivoted_qr_lstsq(
    matrix: np.ndarray, rhs: np.ndarray, rtol: Optional[float] = None
) -> np.ndarray:
    """
    Least-squares solve of ``matrix @ y = rhs`` via column-pivoted QR.

    Columns whose pivot falls below ``rtol * |R_00|`` are treated
    as dependent and their entries of ``y`` set to zero (a basic solution).
    Rank-deficient but consistent systems are therefore solved exactly.
    """

    rows, cols = matrix.shape
    sol = np.zeros(cols)
    if rows == 0 or cols == 0:
        return sol
    if rtol is None:
        rtol = default_rtol(matrix.shape)

    q_mat, r_mat, perm = qr(matrix, mode="economic", pivoting=True)
    pivots = np.abs(np.diag(r_mat))
    rank = int(np.count_nonzero(pivots > pivots[0] * rtol))
    if rank == 0:
        return sol

    reduced = q_mat[:, :rank].T @ rhs
    sol[perm[:rank]] = solve_triangular(r_mat[:rank, :rank], reduced, lower=False)
    return sol


def svd_lstsq(
    matrix: np.ndarray, rhs: np.ndarray, rtol: Optional[float] = None
) -> np.ndarray:
    """
    Minimum-norm least-squares solve of ``matrix @ z = rhs`` via a thin SVD.

    Singular values below ``rtol * sigma_max`` are discarded.
    """

    if matrix.size == 0:
        return np.zeros(matrix.shape[1])
    if rtol is None:
        rtol = default_rtol(matrix.shape)

    u_mat, sing, vt_mat = np.linalg.svd(matrix, full_matrices=False)
    keep = sing > sing[0] * rtol
    inv = np.zeros_like(sing)
    inv[keep] = 1.0 / sing[keep]
    return vt_mat.T @ (inv * (u_mat.T @ rhs))


__all__ = [
    "CholeskyFactor",
    "default_rtol",
    "quadratic_cost",
    "try_cholesky",
    "equilibrate_rows",
    "independent_rows",
    "pivoted_qr_lstsq",
    "svd_lstsq",
]
