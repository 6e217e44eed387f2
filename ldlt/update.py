"""Modifications of a packed LDLᵀ factorization without refactorizing.

The routines work on :class:`~ldlt.views.LdltView` objects, or on the square
numpy arrays behind them. They change the factorization in place:

* a symmetric rank-one update,
* appending a row and column,
* deleting a row and column.
"""

from __future__ import annotations

import numpy as np

from ldlt.views import LdltView

__all__ = [
    "rank1_update_clobber_z",
    "rank1_update",
    "row_append",
    "row_delete",
]


def _as_view(ld) -> LdltView:
    if isinstance(ld, LdltView):
        return ld
    if isinstance(ld, np.ndarray):
        return LdltView(ld)
    raise TypeError(f"expected an LdltView or a numpy array, got {type(ld).__name__}")


def _same_memory(a: np.ndarray, b: np.ndarray) -> bool:
    """True when both arrays start at the same address with the same layout."""
    return (
        a.__array_interface__["data"][0] == b.__array_interface__["data"][0]
        and a.strides == b.strides
    )


def rank1_update_clobber_z(ld, z: np.ndarray, alpha) -> None:
    """Update the factorization of ``A`` to that of ``A + alpha * z zᵀ``.

    The update is done in place. ``z`` is used as scratch space and holds
    unspecified values afterwards.
    """
    view = _as_view(ld)
    dim = view.dim()
    if z.ndim != 1 or z.shape[0] != dim:
        raise ValueError(f"z must be a vector of length {dim}, got shape {z.shape}")
    l = view.l()
    d = view.d()
    for j in range(dim):
        p = z[j]
        new_dj = d[j] + alpha * p * p
        mu = alpha * p / new_dj
        alpha -= new_dj * mu * mu

        w_tail = z[j + 1:]
        l_tail = l[j + 1:, j]
        w_tail -= p * l_tail
        l_tail += mu * w_tail

        d[j] = new_dj


def rank1_update(ld, z: np.ndarray, alpha) -> None:
    """Update the factorization of ``A`` to that of ``A + alpha * z zᵀ``.

    ``z`` is left unchanged.
    """
    view = _as_view(ld)
    work = np.array(z, dtype=view.l().dtype, copy=True)
    rank1_update_clobber_z(view, work, alpha)


def row_append(out, inp, a: np.ndarray) -> LdltView:
    """Factorize the matrix ``inp`` grown by one row and column.

    ``a`` is the new last column of the symmetric matrix (its last entry is
    the new diagonal element). ``out`` must have dimension ``inp.dim() + 1``;
    ``inp`` may be the leading block of ``out``, in which case the update is
    done in place. Returns the view of ``out``.
    """
    out_view = _as_view(out)
    in_view = _as_view(inp)
    n = in_view.dim()
    if out_view.dim() != n + 1:
        raise ValueError(
            f"output dimension must be {n + 1}, got {out_view.dim()}"
        )
    a = np.asarray(a)
    if a.ndim != 1 or a.shape[0] < n + 1:
        raise ValueError(f"a must be a vector of length at least {n + 1}")

    out_l = out_view.l()
    in_l = in_view.l()
    if not _same_memory(out_l, in_l):
        out_l[:n, :n] = in_l

    in_d = in_view.d()
    # The strictly upper part of the new column serves as scratch space.
    work = out_l[:n, n]
    if n > 0:
        unit_lower = np.tril(in_l, -1) + np.eye(n, dtype=in_l.dtype)
        work[...] = np.linalg.solve(unit_lower, a[:n])
        work /= in_d
    new_row = work.copy()
    out_view.d()[n] = a[n] - np.sum(new_row * new_row * in_d)
    out_l[n, :n] = new_row
    return out_view


def row_delete(ld, i: int) -> LdltView:
    """Remove row and column ``i`` from the factorized matrix, in place.

    The result occupies the leading ``dim - 1`` block of the storage, whose
    view is returned.
    """
    view = _as_view(ld)
    n = view.dim()
    if n < 1:
        raise ValueError("cannot delete a row from an empty factorization")
    if not 0 <= i < n:
        raise IndexError(f"row index {i} out of range for dimension {n}")

    out = view.head(n - 1)
    if i + 1 == n:
        return out

    l = view.l()
    # Bottom-left block moves up by one row.
    l[i:n - 1, :i] = l[i + 1:n, :i]

    rem_dim = n - i - 1
    d_i = view.d()[i]
    # Fold the removed column back into the trailing block.
    rank1_update_clobber_z(view.tail(rem_dim), l[i + 1:, i], d_i)
    # Bottom-right block moves up and left by one.
    l[i:n - 1, i:n - 1] = l[i + 1:n, i + 1:n]
    return out