"""Dense kernels used by the LDLᵀ factorization routines.

Every kernel works on numpy arrays and, where it has an output argument,
writes into that array in place. Views (slices, strided diagonals) are
accepted, so the kernels can update blocks of a larger matrix directly.
"""

from __future__ import annotations

import numpy as np

__all__ = [
    "noalias_mul_add",
    "dot",
    "assign_cwise_prod",
    "assign_scalar_prod",
    "trans_tr_unit_up_solve_in_place_on_right",
    "apply_diag_inv_on_right",
    "apply_diag_on_right",
    "noalias_mul_sub_tr_lo",
]


def _as_matrix(arr: np.ndarray) -> np.ndarray:
    """View a 1-D array as a single column; leave 2-D arrays alone."""
    if arr.ndim == 1:
        return arr[:, np.newaxis]
    if arr.ndim != 2:
        raise ValueError(f"expected a vector or a matrix, got {arr.ndim} dimensions")
    return arr


def _as_row(arr: np.ndarray) -> np.ndarray:
    """View a 1-D array as a single row; leave 2-D arrays alone."""
    if arr.ndim == 1:
        return arr[np.newaxis, :]
    if arr.ndim != 2:
        raise ValueError(f"expected a vector or a matrix, got {arr.ndim} dimensions")
    return arr


def _check_vector(name: str, arr: np.ndarray) -> None:
    if arr.ndim != 1:
        raise ValueError(f"{name} must be a vector, got shape {arr.shape}")


def noalias_mul_add(dst: np.ndarray, lhs: np.ndarray, rhs: np.ndarray, factor) -> None:
    """Accumulate ``dst += factor * lhs @ rhs`` in place.

    ``dst`` is a matrix (m, n) with ``rhs`` a matrix (k, n), or a vector (m,)
    with ``rhs`` a vector (k,); ``lhs`` is always (m, k).
    """
    if lhs.ndim != 2:
        raise ValueError(f"lhs must be a matrix, got shape {lhs.shape}")
    if dst.ndim != rhs.ndim or dst.ndim not in (1, 2):
        raise ValueError(
            f"dst and rhs must both be vectors or both matrices, "
            f"got shapes {dst.shape} and {rhs.shape}"
        )
    m, k = lhs.shape
    if dst.shape[0] != m or rhs.shape[0] != k or dst.shape[1:] != rhs.shape[1:]:
        raise ValueError(
            f"incompatible shapes: dst {dst.shape}, lhs {lhs.shape}, rhs {rhs.shape}"
        )
    if dst.size == 0 or k == 0:
        return
    dst += factor * (lhs @ rhs)


def dot(lhs: np.ndarray, rhs: np.ndarray):
    """Inner product of two vectors of equal length."""
    _check_vector("lhs", lhs)
    _check_vector("rhs", rhs)
    if lhs.shape != rhs.shape:
        raise ValueError(f"length mismatch: {lhs.shape[0]} and {rhs.shape[0]}")
    return np.dot(lhs, rhs)


def assign_cwise_prod(out: np.ndarray, lhs: np.ndarray, rhs: np.ndarray) -> None:
    """Write the element-wise product of two vectors into ``out``."""
    for name, arr in (("out", out), ("lhs", lhs), ("rhs", rhs)):
        _check_vector(name, arr)
    if not out.shape == lhs.shape == rhs.shape:
        raise ValueError(
            f"length mismatch: out {out.shape}, lhs {lhs.shape}, rhs {rhs.shape}"
        )
    out[...] = lhs * rhs


def assign_scalar_prod(out: np.ndarray, factor, inp: np.ndarray) -> None:
    """Write ``factor * inp`` into ``out``."""
    _check_vector("out", out)
    _check_vector("inp", inp)
    if out.shape != inp.shape:
        raise ValueError(f"length mismatch: out {out.shape}, inp {inp.shape}")
    out[...] = inp * factor


def trans_tr_unit_up_solve_in_place_on_right(tr: np.ndarray, rhs: np.ndarray) -> None:
    """Solve ``X @ U = rhs`` in place, where ``U`` is unit upper of ``tr.T``.

    Only the strictly lower part of ``tr`` is read; its diagonal is taken as
    ones. A 1-D ``rhs`` is treated as a single column.
    """
    if tr.ndim != 2 or tr.shape[0] != tr.shape[1]:
        raise ValueError(f"tr must be square, got shape {tr.shape}")
    x = _as_matrix(rhs)
    k = tr.shape[0]
    if x.shape[1] != k:
        raise ValueError(f"rhs has {x.shape[1]} columns, expected {k}")
    if x.size == 0:
        return
    unit_lower = np.tril(tr, -1) + np.eye(k, dtype=tr.dtype)
    # X @ Lᵀ = rhs  <=>  L @ Xᵀ = rhsᵀ
    x[...] = np.linalg.solve(unit_lower, x.T).T


def _check_diag_args(out: np.ndarray, d: np.ndarray, inp: np.ndarray):
    _check_vector("d", d)
    out_m = _as_matrix(out)
    inp_m = _as_matrix(inp)
    if out_m.shape != inp_m.shape:
        raise ValueError(f"shape mismatch: out {out.shape}, inp {inp.shape}")
    if inp_m.shape[1] != d.shape[0]:
        raise ValueError(
            f"inp has {inp_m.shape[1]} columns but d has length {d.shape[0]}"
        )
    return out_m, inp_m


def apply_diag_inv_on_right(out: np.ndarray, d: np.ndarray, inp: np.ndarray) -> None:
    """Write ``inp @ diag(d)^-1`` into ``out``; the two may alias."""
    out_m, inp_m = _check_diag_args(out, d, inp)
    out_m[...] = inp_m / d


def apply_diag_on_right(out: np.ndarray, d: np.ndarray, inp: np.ndarray) -> None:
    """Write ``inp @ diag(d)`` into ``out``; the two may alias."""
    out_m, inp_m = _check_diag_args(out, d, inp)
    out_m[...] = inp_m * d


def noalias_mul_sub_tr_lo(out: np.ndarray, lhs: np.ndarray, rhs: np.ndarray) -> None:
    """Subtract ``lhs @ rhs`` from the lower triangle of ``out`` only.

    A 1-D ``lhs`` is a single column and a 1-D ``rhs`` a single row.
    Entries strictly above the diagonal of ``out`` are left untouched.
    """
    if out.ndim != 2:
        raise ValueError(f"out must be a matrix, got shape {out.shape}")
    lhs_m = _as_matrix(lhs)
    rhs_m = _as_row(rhs)
    if (
        lhs_m.shape[0] != out.shape[0]
        or rhs_m.shape[1] != out.shape[1]
        or lhs_m.shape[1] != rhs_m.shape[0]
    ):
        raise ValueError(
            f"incompatible shapes: out {out.shape}, lhs {lhs.shape}, rhs {rhs.shape}"
        )
    if out.size == 0:
        return
    rows, cols = np.tril_indices(out.shape[0], 0, out.shape[1])
    product = lhs_m @ rhs_m
    out[rows, cols] -= product[rows, cols]