"""Core diagnostic checks for assembled QP data and computed points."""

from __future__ import annotations

import numpy as np


def is_symmetric(
    mat: np.ndarray,
    atol: float = 1e-9,
) -> bool:
    """
    Check whether a matrix is symmetric.

    Parameters
    ----------
    mat:
        Real array with shape (n, n).
    atol:
        Absolute tolerance for checking equality.

    Returns
    -------
    bool
        True if mat is square and symmetric within the tolerance, False
        otherwise (including non-finite entries).
    """
    mat = np.asarray(mat, dtype=float)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        return False
    if mat.size == 0:
        return True

    max_dev = np.max(np.abs(mat - mat.T))
    if not np.isfinite(max_dev):
        return False

    return bool(max_dev <= atol)


def assert_symmetric(
    mat: np.ndarray,
    atol: float = 1e-9,
) -> None:
    """
    Assert that a matrix is symmetric.

    Raises
    ------
    ValueError
        If the matrix is not symmetric within the tolerance.
    """
    if not is_symmetric(mat, atol=atol):
        raise ValueError(f"Matrix is not symmetric within tolerance {atol}.")


def constraint_residual(a_mat: np.ndarray, b_vec: np.ndarray, x: np.ndarray) -> float:
    """Return ``||A x - b||_inf`` (0.0 when there are no rows)."""
    a_mat = np.asarray(a_mat, dtype=float)
    if a_mat.shape[0] == 0:
        return 0.0
    residual = a_mat @ np.asarray(x, dtype=float) - np.asarray(b_vec, dtype=float)
    return float(np.linalg.norm(residual, ord=np.inf))


def assert_feasible(
    a_mat: np.ndarray,
    b_vec: np.ndarray,
    x: np.ndarray,
    atol: float = 1e-8,
) -> None:
    """
    Assert that ``x`` satisfies ``A x = b`` to within ``atol``.

    Raises
    ------
    ValueError
        If the infinity-norm residual exceeds the tolerance.
    """
    residual = constraint_residual(a_mat, b_vec, x)
    if not residual <= atol:
        raise ValueError(
            f"Point violates equality constraints: ||Ax - b||_inf = {residual:.3e} "
            f"exceeds tolerance {atol}."
        )
