"""
Array coercion for program data.

All problem data is normalised to ``float64`` NumPy arrays. PyTorch tensors
are accepted wherever an array is, so that Hessians or constraint Jacobians
produced with autograd can be registered directly.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np
import torch


def as_float_array(value: Any, ndim: Optional[int] = None) -> np.ndarray:
    """
    Convert ``value`` to a fresh ``float64`` NumPy array.

    Tensors are detached and moved to the CPU first. When ``ndim`` is given,
    scalars are promoted (and a vector becomes a single row for ``ndim=2``);
    anything else with the wrong rank raises ``ValueError``.
    """

    if isinstance(value, torch.Tensor):
        value = value.detach().cpu().numpy()
    arr = np.array(value, dtype=float)
    if ndim is None:
        return arr
    if ndim == 1 and arr.ndim == 0:
        arr = arr.reshape(1)
    elif ndim == 2 and arr.ndim < 2:
        arr = arr.reshape(1, -1)
    if arr.ndim != ndim:
        raise ValueError(f"Expected a {ndim}-D array, got shape {arr.shape}")
    return arr


__all__ = ["as_float_array"]
