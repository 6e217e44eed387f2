"""Solving linear systems with a packed LDLᵀ factorization."""

from __future__ import annotations

import numpy as np

from ldlt.views import LdltView

__all__ = ["solve"]


def solve(x: np.ndarray, ld: LdltView, b: np.ndarray) -> np.ndarray:
    """Solve ``L D Lᵀ x = b`` writing the solution into ``x``.

    ``x`` and ``b`` may be the same array. Returns ``x``.
    """
    if not isinstance(ld, LdltView):
        raise TypeError(f"ld must be an LdltView, got {type(ld).__name__}")
    n = ld.dim()
    if x.shape != (n,) or b.shape != (n,):
        raise ValueError(
            f"x and b must be vectors of length {n}, got {x.shape} and {b.shape}"
        )
    x[...] = b
    if n == 0:
        return x
    l = ld.l()
    unit_lower = np.tril(l, -1) + np.eye(n, dtype=l.dtype)
    y = np.linalg.solve(unit_lower, x)
    y /= ld.d()
    x[...] = np.linalg.solve(unit_lower.T, y)
    return x