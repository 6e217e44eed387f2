"""Views over packed LDLᵀ storage and small helpers on layouts and strides."""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.lib.stride_tricks import as_strided

__all__ = [
    "Layout",
    "SIMD_STRIDE",
    "flip_layout",
    "round_up",
    "adjusted_stride",
    "LdltView",
]

# Number of float64 elements held by one natural SIMD register (256 bits).
SIMD_STRIDE = 4


class Layout(Enum):
    """Storage order of a dense matrix."""

    COLMAJOR = 0
    ROWMAJOR = 1


def flip_layout(layout: Layout) -> Layout:
    """Return the other storage order."""
    return Layout(1 - layout.value)


def round_up(n: int, k: int) -> int:
    """Round ``n`` up to the next multiple of ``k``."""
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")
    return (n + k - 1) // k * k


def adjusted_stride(n: int) -> int:
    """Outer stride used for an ``n``-row float64 matrix, padded to SIMD width."""
    return round_up(n, SIMD_STRIDE)


class LdltView:
    """An LDLᵀ factorization packed in one square matrix.

    The strictly lower part holds L (whose diagonal is implicitly one) and
    the diagonal holds D. The view shares memory with the array it is given,
    so writes through ``l()`` or ``d()`` change the underlying storage.
    """

    __slots__ = ("_ld",)

    def __init__(self, ld: np.ndarray) -> None:
        if not isinstance(ld, np.ndarray):
            raise TypeError("ld must be a numpy array")
        if ld.ndim != 2 or ld.shape[0] != ld.shape[1]:
            raise ValueError(f"ld must be a square matrix, got shape {ld.shape}")
        self._ld = ld

    def l(self) -> np.ndarray:  # noqa: E743
        """The packed storage; its strictly lower part is L."""
        return self._ld

    def d(self) -> np.ndarray:
        """The diagonal D as a view sharing memory with the storage."""
        ld = self._ld
        return as_strided(
            ld,
            shape=(ld.shape[0],),
            strides=(ld.strides[0] + ld.strides[1],),
            writeable=ld.flags.writeable,
        )

    def dim(self) -> int:
        """Dimension of the factorized matrix."""
        return self._ld.shape[0]

    def _check_k(self, k: int) -> None:
        if not 0 <= k <= self.dim():
            raise ValueError(f"k must lie in [0, {self.dim()}], got {k}")

    def head(self, k: int) -> LdltView:
        """Factorization of the leading ``k`` x ``k`` block."""
        self._check_k(k)
        return LdltView(self._ld[:k, :k])

    def tail(self, k: int) -> LdltView:
        """View of the trailing ``k`` x ``k`` block."""
        self._check_k(k)
        n = self.dim()
        return LdltView(self._ld[n - k:, n - k:])

    def __repr__(self) -> str:
        n = self.dim()
        unit_lower = np.tril(self._ld, -1) + np.eye(n, dtype=self._ld.dtype)
        return f"LdltView(d={self.d()!r}, l={unit_lower!r})"