"""LDLᵀ factorization of symmetric matrices and symmetric permutations."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ldlt.kernels import (
    apply_diag_inv_on_right,
    apply_diag_on_right,
    assign_cwise_prod,
    assign_scalar_prod,
    dot,
    noalias_mul_add,
    noalias_mul_sub_tr_lo,
    trans_tr_unit_up_solve_in_place_on_right,
)
from ldlt.views import LdltView

__all__ = [
    "Standard",
    "Blocked",
    "blocked",
    "compute_permutation",
    "apply_perm_rows",
    "apply_permutation_sym_work",
    "factorize_unblocked",
    "factorize_blocked",
    "factorize",
]


@dataclass(frozen=True)
class Standard:
    """Column-by-column factorization."""


@dataclass(frozen=True)
class Blocked:
    """Blocked factorization working on ``block_size`` columns at a time."""

    block_size: int

    def __post_init__(self) -> None:
        if self.block_size < 1:
            raise ValueError(f"block_size must be positive, got {self.block_size}")


def blocked(block_size: int) -> Blocked:
    """Strategy for blocked factorization."""
    return Blocked(block_size)


def _as_view(ld) -> LdltView:
    if isinstance(ld, LdltView):
        return ld
    if isinstance(ld, np.ndarray):
        return LdltView(ld)
    raise TypeError(f"expected an LdltView or a numpy array, got {type(ld).__name__}")


def compute_permutation(diagonal: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Order indices by decreasing magnitude of the diagonal.

    Ties keep increasing index order. Returns ``(perm, perm_inv)`` with
    ``perm_inv[perm[k]] == k``.
    """
    diagonal = np.asarray(diagonal)
    if diagonal.ndim != 1:
        raise ValueError(f"diagonal must be a vector, got shape {diagonal.shape}")
    perm = np.argsort(-np.abs(diagonal), kind="stable").astype(np.intp)
    perm_inv = np.empty_like(perm)
    perm_inv[perm] = np.arange(perm.shape[0], dtype=np.intp)
    return perm, perm_inv


def apply_perm_rows(
    out: np.ndarray, inp: np.ndarray, perm_indices, sym: int
) -> None:
    """Write ``inp[perm_indices[row], col]`` into ``out[row, col]``.

    ``sym`` picks the entries written: -1 the lower half (row >= col),
    1 the upper half (row <= col), 0 all of them. 1-D arrays are single
    columns.
    """
    out_m = out[:, np.newaxis] if out.ndim == 1 else out
    inp_m = inp[:, np.newaxis] if inp.ndim == 1 else inp
    if out_m.ndim != 2 or out_m.shape != inp_m.shape:
        raise ValueError(f"shape mismatch: out {out.shape}, inp {inp.shape}")
    perm = np.asarray(perm_indices, dtype=np.intp)
    nrows, ncols = out_m.shape
    if perm.shape != (nrows,):
        raise ValueError(f"perm_indices must have length {nrows}")
    permuted = inp_m[perm]
    if sym == 0:
        out_m[...] = permuted
        return
    ones = np.ones((nrows, ncols), dtype=bool)
    if sym == -1:
        mask = np.tril(ones)
    elif sym == 1:
        mask = np.triu(ones)
    else:
        raise ValueError(f"sym must be -1, 0 or 1, got {sym}")
    out_m[mask] = permuted[mask]


def apply_permutation_sym_work(
    mat: np.ndarray, perm_indices, work: np.ndarray, sym: int
) -> None:
    """Replace ``mat`` by ``P mat Pᵀ`` in place, using ``work`` as scratch.

    ``sym`` selects which half of the result is written (see
    :func:`apply_perm_rows`); the other half is left unspecified.
    """
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ValueError(f"mat must be square, got shape {mat.shape}")
    if work.shape != mat.shape:
        raise ValueError(f"work must have shape {mat.shape}, got {work.shape}")
    perm = np.asarray(perm_indices, dtype=np.intp)
    work[...] = mat[:, perm]
    apply_perm_rows(mat, work, perm, sym)


def factorize_unblocked(ld) -> None:
    """Factorize in place, one column at a time.

    Reads the lower half (diagonal included) of the storage and overwrites it
    with L (strictly lower) and D (diagonal). The strictly upper half is used
    as scratch space.
    """
    view = _as_view(ld)
    dim = view.dim()
    l = view.l()
    d = view.d()
    for i in range(dim):
        l01 = l[:i, i]
        l10 = l[i, :i]
        assign_cwise_prod(l01, l10, d[:i])
        d[i] -= dot(l10, l01)

        if i + 1 == dim:
            break

        l21 = l[i + 1:, i]
        noalias_mul_add(l21, l[i + 1:, :i], l01, -1.0)
        assign_scalar_prod(l21, 1 / d[i], l21)


def factorize_blocked(ld, block_size: int) -> None:
    """Factorize in place, ``block_size`` columns at a time.

    Same input and output conventions as :func:`factorize_unblocked`.
    """
    if block_size < 1:
        raise ValueError(f"block_size must be positive, got {block_size}")
    view = _as_view(ld)
    n = view.dim()
    if n <= 0:
        return
    l = view.l()
    d = view.d()
    i = 0
    while True:
        bs = min(n - i, block_size)
        l11 = l[i:i + bs, i:i + bs]
        d1 = d[i:i + bs]

        factorize_unblocked(LdltView(l11))

        if i + bs == n:
            break

        rem = n - i - bs
        l21 = l[i + bs:, i:i + bs]
        trans_tr_unit_up_solve_in_place_on_right(l11, l21)
        apply_diag_inv_on_right(l21, d1, l21)

        work_k = l[:rem, n - bs:]
        apply_diag_on_right(work_k, d1, l21)

        noalias_mul_sub_tr_lo(l[i + bs:, i + bs:], l21, work_k.T)
        i += bs


def factorize(ld, strategy=Standard()) -> None:
    """Factorize in place with the given strategy."""
    if isinstance(strategy, Standard):
        factorize_unblocked(ld)
    elif isinstance(strategy, Blocked):
        factorize_blocked(ld, strategy.block_size)
    else:
        raise TypeError(f"unknown factorization strategy: {strategy!r}")