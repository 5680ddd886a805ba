"""Vector utilities for NumPy arrays.

All vectors are expected to be shaped (..., 2).
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


ArrayF = NDArray[np.float64]

DIM = 2


def as_vec2(v: object, name: str = "vector") -> ArrayF:
    """Return a fresh float64 array of shape (2,)."""
    arr = np.array(v, dtype=np.float64)
    if arr.shape != (DIM,):
        raise ValueError(f"{name} must have shape ({DIM},)")
    return arr


def norm(v: ArrayF, axis: int = -1) -> ArrayF:
    """Return the L2 norm along an axis."""
    return np.linalg.norm(v, axis=axis)


def unit(v: ArrayF, axis: int = -1) -> ArrayF:
    """Return unit vectors with safe handling of zero vectors."""
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v, axis=axis, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        u = np.where(n > 0.0, v / n, 0.0)
    return u
