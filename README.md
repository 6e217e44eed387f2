# ldlt

Dense `L D Lᵀ` factorization of symmetric matrices, built on NumPy.

`L` is unit lower triangular and `D` is diagonal. The two are packed into one
square array: `D` sits on the diagonal and the strict lower triangle holds `L`.
The unit diagonal of `L` is implied and not stored.

## Modules

- `ldlt.views`: `LdltView` wraps a square NumPy array holding a packed
  factorization. `l()` returns the storage and `d()` returns the diagonal as a
  writable view. `dim()` gives the size, and `head(k)` / `tail(k)` view the
  leading or trailing `k x k` block. The module also has the `Layout` enum,
  `flip_layout`, `round_up` and `adjusted_stride`.
- `ldlt.kernels`: the in-place dense kernels the factorization is built from.
  These are `noalias_mul_add`, `dot`, `assign_cwise_prod`, `assign_scalar_prod`,
  `trans_tr_unit_up_solve_in_place_on_right`, `apply_diag_inv_on_right`,
  `apply_diag_on_right` and `noalias_mul_sub_tr_lo`.
- `ldlt.factorize`: in-place factorization. The input is the lower half of the
  array, and the strict upper half is used as scratch space.
  `factorize(ld, strategy)` takes `Standard()` (column by column, the default)
  or `blocked(block_size)`. `factorize_unblocked` and `factorize_blocked` can
  also be called directly.
  - `compute_permutation(diagonal)` returns `(perm, perm_inv)`, with the
    diagonal ordered by decreasing magnitude; ties keep index order.
  - `apply_permutation_sym_work` replaces a matrix by its symmetrically
    permuted form. `apply_perm_rows` permutes rows, writing either the lower
    half, the upper half or both.
- `ldlt.solve`: `solve(x, ld, b)` solves `L D Lᵀ x = b` into `x`. `x` and `b`
  may be the same array.
- `ldlt.update`: changes a factorization in place without refactorizing.
  - `rank1_update(ld, z, alpha)` turns the factorization of `A` into that of
    `A + alpha z zᵀ`. `rank1_update_clobber_z` does the same but overwrites
    `z`.
  - `row_append(out, inp, a)` grows the factorization by one row and column.
  - `row_delete(ld, i)` removes row and column `i` and returns the view of the
    leading `dim - 1` block.
- `ldlt.ldlt`: `Ldlt` owns float64 storage and a diagonal pivoting permutation,
  so that `Pᵀ A P = L D Lᵀ`.
  - Building and solving: `factor(mat)` reads only the lower half of `mat`.
    `solve_in_place(rhs)` overwrites `rhs` with the solution.
  - Updating: `rank_one_update(z, alpha)`, `insert_at(i, a)` and
    `delete_at(i)`.
  - Inspecting: `dbg_reconstructed_matrix()` rebuilds `A`. `l()`, `lt()`,
    `d()`, `p()` and `pt()` return the factors and permutation matrices.
    `dim()` gives the size.
  - Storage: `reserve(cap)` and `reserve_uninit(cap)` grow the storage ahead
    of time.
- `ldlt.timing`: named timing sections grouped by an outer and an inner name.
  - `scope_timer(outer, inner)` returns a `ScopedTimer` context manager. It
    appends the elapsed seconds to that section's list.
  - `get_durations` returns one section's list, and `get_map` returns the
    whole registry.
  - `toggle_benchmarks(False)` makes timers created afterwards record nothing.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Example

```python
import numpy as np
from ldlt.ldlt import Ldlt

rng = np.random.default_rng(0)
m = rng.standard_normal((5, 5))
a = m @ m.T + 5 * np.eye(5)

fact = Ldlt()
fact.factor(a)

b = rng.standard_normal(5)
x = b.copy()
fact.solve_in_place(x)
assert np.allclose(a @ x, b)

# A <- A + 2 z zᵀ, without refactorizing
z = rng.standard_normal(5)
fact.rank_one_update(z, 2.0)
assert np.allclose(fact.dbg_reconstructed_matrix(), a + 2.0 * np.outer(z, z))
```

Working on a packed array directly:

```python
import numpy as np
from ldlt.factorize import blocked, factorize
from ldlt.solve import solve
from ldlt.views import LdltView

a = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 2.0]])
ld = LdltView(a.copy(order="F"))
factorize(ld, blocked(2))

b = np.array([1.0, 2.0, 3.0])
x = np.empty(3)
solve(x, ld, b)
assert np.allclose(a @ x, b)
```

## What it does not do

- Every matrix is dense. There is no sparse storage.
- The pivoting only reorders the diagonal by magnitude. The factorization
  does not check for zero or negative pivots, so it is meant for matrices
  whose `LDLᵀ` form exists.
- The package is a library only. It has no command-line tool.

## Tests

```
pytest
```