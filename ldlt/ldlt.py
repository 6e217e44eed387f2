"""An owning LDLᵀ factorization with symmetric pivoting and updates."""

from __future__ import annotations

import numpy as np

from ldlt.factorize import (
    apply_permutation_sym_work,
    compute_permutation,
    factorize,
)
from ldlt.solve import solve
from ldlt.update import rank1_update_clobber_z, row_append, row_delete
from ldlt.views import LdltView, adjusted_stride

__all__ = ["Ldlt"]


class Ldlt:
    """LDLᵀ factorization of a symmetric matrix, with diagonal pivoting.

    The factorized matrix is ``Pᵀ A P = L D Lᵀ`` where ``P`` is the
    permutation matrix returned by :meth:`p`. L and D are packed in one
    column-major buffer whose columns are ``stride`` elements apart, so the
    factorization can grow by a row and column without moving memory.
    """

    __slots__ = ("_storage", "_stride", "_perm", "_perm_inv")

    def __init__(self) -> None:
        self._storage = np.empty(0, dtype=np.float64)
        self._stride = 0
        self._perm = np.empty(0, dtype=np.intp)
        self._perm_inv = np.empty(0, dtype=np.intp)

    @property
    def stride(self) -> int:
        """Distance in elements between consecutive columns of the storage."""
        return self._stride

    def _needs_growth(self, cap: int, new_stride: int) -> bool:
        return not (cap <= self._stride and cap * new_stride <= self._storage.size)

    def _grow_storage(self, size: int) -> None:
        if size <= self._storage.size:
            return
        storage = np.zeros(size, dtype=np.float64)
        storage[: self._storage.size] = self._storage
        self._storage = storage

    def reserve_uninit(self, cap: int) -> None:
        """Make room for a ``cap``-dimensional factorization, discarding contents."""
        if cap < 0:
            raise ValueError(f"capacity must be non-negative, got {cap}")
        new_stride = adjusted_stride(cap)
        if not self._needs_growth(cap, new_stride):
            return
        self._grow_storage(cap * new_stride)
        self._stride = new_stride

    def reserve(self, cap: int) -> None:
        """Make room for a ``cap``-dimensional factorization, keeping contents."""
        if cap < 0:
            raise ValueError(f"capacity must be non-negative, got {cap}")
        new_stride = adjusted_stride(cap)
        if not self._needs_growth(cap, new_stride):
            return
        old = self.ld_col().copy()
        self._grow_storage(cap * new_stride)
        self._stride = new_stride
        self.ld_col()[...] = old

    def dim(self) -> int:
        """Dimension of the factorized matrix."""
        return int(self._perm.shape[0])

    def ld_col(self) -> np.ndarray:
        """The packed L and D, as a writable view of the storage."""
        n = self.dim()
        s = self._stride
        return self._storage[: n * s].reshape(n, s).T[:n]

    def _view(self) -> LdltView:
        return LdltView(self.ld_col())

    def l(self) -> np.ndarray:  # noqa: E743
        """The unit lower triangular factor L, as a new array."""
        ld = self.ld_col()
        return np.tril(ld, -1) + np.eye(self.dim(), dtype=ld.dtype)

    def lt(self) -> np.ndarray:
        """The unit upper triangular factor Lᵀ, as a new array."""
        return self.l().T

    def d(self) -> np.ndarray:
        """The diagonal D, as a view sharing memory with the storage."""
        return self._view().d()

    def _perm_matrix(self, indices: np.ndarray) -> np.ndarray:
        n = self.dim()
        mat = np.zeros((n, n), dtype=np.float64)
        mat[indices, np.arange(n)] = 1.0
        return mat

    def p(self) -> np.ndarray:
        """Permutation matrix P with ``P[perm[i], i] == 1``."""
        return self._perm_matrix(self._perm)

    def pt(self) -> np.ndarray:
        """Permutation matrix built from the inverse permutation; equals ``Pᵀ``."""
        return self._perm_matrix(self._perm_inv)

    def factor(self, mat) -> None:
        """Factorize the symmetric matrix ``mat``; only its lower half is read."""
        mat = np.asarray(mat, dtype=np.float64)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            raise ValueError(f"matrix must be square, got shape {mat.shape}")
        n = mat.shape[0]
        self.reserve_uninit(n)
        self._perm, self._perm_inv = compute_permutation(np.diagonal(mat))

        ld = self.ld_col()
        ld[...] = mat
        work = np.empty((n, n), dtype=np.float64)
        apply_permutation_sym_work(ld, self._perm, work, -1)
        factorize(LdltView(ld))

    def _check_vector(self, name: str, vec: np.ndarray, length: int) -> None:
        if vec.shape != (length,):
            raise ValueError(
                f"{name} must be a vector of length {length}, got shape {vec.shape}"
            )

    def solve_in_place(self, rhs: np.ndarray) -> np.ndarray:
        """Overwrite ``rhs`` with the solution of ``A x = rhs``; returns it."""
        self._check_vector("rhs", rhs, self.dim())
        work = np.array(rhs[self._perm], dtype=np.float64)
        solve(work, self._view(), work)
        rhs[...] = work[self._perm_inv]
        return rhs

    def rank_one_update(self, z, alpha) -> None:
        """Update the factorization of ``A`` to that of ``A + alpha z zᵀ``."""
        z = np.asarray(z, dtype=np.float64)
        self._check_vector("z", z, self.dim())
        work = z[self._perm].copy()
        rank1_update_clobber_z(self._view(), work, alpha)

    def dbg_reconstructed_matrix(self) -> np.ndarray:
        """The matrix ``A`` rebuilt from its factors."""
        l = self.l()
        a = (l * self.d()) @ l.T
        inv = self._perm_inv
        return a[inv][:, inv]

    def delete_at(self, i: int) -> None:
        """Remove row and column ``i`` of ``A`` from the factorization."""
        n = self.dim()
        if not 0 <= i < n:
            raise IndexError(f"index {i} out of range for dimension {n}")
        i_actual = int(self._perm_inv[i])

        row_delete(self._view(), i_actual)

        perm = np.delete(self._perm, i_actual)
        perm_inv = np.delete(self._perm_inv, i)
        perm[perm > i] -= 1
        perm_inv[perm_inv > i_actual] -= 1
        self._perm = perm
        self._perm_inv = perm_inv

    def insert_at(self, i: int, a) -> None:
        """Insert a row and column at index ``i`` of ``A``.

        ``a`` is the new column in the grown matrix's indexing, so ``a[i]``
        is the new diagonal entry.
        """
        n = self.dim()
        if not 0 <= i <= n:
            raise IndexError(f"index {i} out of range for insertion into dimension {n}")
        a = np.asarray(a, dtype=np.float64)
        self._check_vector("a", a, n + 1)

        self.reserve(n + 1)
        i_actual = n

        perm = self._perm.copy()
        perm_inv = self._perm_inv.copy()
        perm[perm >= i] += 1
        perm_inv[perm_inv >= i_actual] += 1

        old_view = self._view()
        self._perm = np.insert(perm, i_actual, i).astype(np.intp)
        self._perm_inv = np.insert(perm_inv, i, i_actual).astype(np.intp)
        new_view = self._view()

        permuted_a = a[self._perm]
        row_append(new_view, old_view, permuted_a)