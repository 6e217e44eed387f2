import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ldlt.ldlt import Ldlt


def spd(n, seed=0):
    rng = np.random.default_rng(seed)
    m = rng.standard_normal((n, n))
    return m @ m.T + n * np.eye(n)


def factored(mat):
    ld = Ldlt()
    ld.factor(mat)
    return ld


@pytest.mark.parametrize("n", [1, 2, 5, 9, 17])
def test_factor_reconstructs(n):
    a = spd(n, n)
    ld = factored(a)
    assert ld.dim() == n
    np.testing.assert_allclose(ld.dbg_reconstructed_matrix(), a, rtol=1e-10, atol=1e-10)


def test_factor_empty():
    ld = factored(np.zeros((0, 0)))
    assert ld.dim() == 0
    assert ld.dbg_reconstructed_matrix().shape == (0, 0)


def test_factors_match_permutation():
    a = spd(6, 3)
    ld = factored(a)
    p = ld.p()
    l = ld.l()
    recon = p @ l @ np.diag(ld.d()) @ ld.lt() @ p.T
    np.testing.assert_allclose(recon, a, rtol=1e-10, atol=1e-10)
    np.testing.assert_allclose(ld.pt(), p.T)
    np.testing.assert_allclose(np.diag(l), np.ones(6))
    np.testing.assert_allclose(np.triu(l, 1), np.zeros((6, 6)))


def test_pivoting_orders_diagonal():
    a = np.diag([1.0, 5.0, 3.0])
    ld = factored(a)
    np.testing.assert_allclose(ld.d(), [5.0, 3.0, 1.0])


def test_factor_rejects_non_square():
    with pytest.raises(ValueError):
        Ldlt().factor(np.zeros((2, 3)))


def test_stride_padded():
    ld = factored(spd(5))
    assert ld.stride >= ld.dim()
    assert ld.stride % 4 == 0


def test_solve_in_place():
    a = spd(7, 1)
    x_true = np.random.default_rng(2).standard_normal(7)
    b = a @ x_true
    ld = factored(a)
    out = ld.solve_in_place(b)
    assert out is b
    np.testing.assert_allclose(b, x_true, rtol=1e-9, atol=1e-9)


def test_solve_wrong_length():
    ld = factored(spd(3))
    with pytest.raises(ValueError):
        ld.solve_in_place(np.zeros(4))


@settings(max_examples=25, deadline=None)
@given(n=st.integers(min_value=1, max_value=12), seed=st.integers(0, 10_000))
def test_solve_residual_property(n, seed):
    a = spd(n, seed)
    b = np.random.default_rng(seed + 1).standard_normal(n)
    x = b.copy()
    factored(a).solve_in_place(x)
    np.testing.assert_allclose(a @ x, b, rtol=1e-8, atol=1e-8)


def test_rank_one_update():
    a = spd(6, 4)
    z = np.random.default_rng(5).standard_normal(6)
    z_copy = z.copy()
    ld = factored(a)
    ld.rank_one_update(z, 0.7)
    np.testing.assert_allclose(z, z_copy)
    np.testing.assert_allclose(
        ld.dbg_reconstructed_matrix(), a + 0.7 * np.outer(z, z), rtol=1e-9, atol=1e-9
    )


def test_rank_one_update_wrong_length():
    with pytest.raises(ValueError):
        factored(spd(3)).rank_one_update(np.zeros(2), 1.0)


def test_reserve_preserves_factorization():
    a = spd(5, 6)
    ld = factored(a)
    ld.reserve(20)
    assert ld.stride >= 20
    np.testing.assert_allclose(ld.dbg_reconstructed_matrix(), a, rtol=1e-10, atol=1e-10)


def test_reserve_rejects_negative():
    with pytest.raises(ValueError):
        Ldlt().reserve(-1)


@pytest.mark.parametrize("i", [0, 2, 5])
def test_delete_at(i):
    a = spd(6, 7)
    ld = factored(a)
    ld.delete_at(i)
    expected = np.delete(np.delete(a, i, axis=0), i, axis=1)
    assert ld.dim() == 5
    np.testing.assert_allclose(
        ld.dbg_reconstructed_matrix(), expected, rtol=1e-9, atol=1e-9
    )
    assert sorted(ld.p().argmax(axis=0)) == list(range(5))


def test_delete_at_out_of_range():
    ld = factored(spd(3))
    with pytest.raises(IndexError):
        ld.delete_at(3)


@pytest.mark.parametrize("i", [0, 3, 6])
def test_insert_at(i):
    b = spd(7, 8)
    a = np.delete(np.delete(b, i, axis=0), i, axis=1)
    ld = factored(a)
    ld.insert_at(i, b[:, i])
    assert ld.dim() == 7
    np.testing.assert_allclose(ld.dbg_reconstructed_matrix(), b, rtol=1e-9, atol=1e-9)


def test_insert_into_empty():
    ld = Ldlt()
    ld.insert_at(0, np.array([4.0]))
    np.testing.assert_allclose(ld.dbg_reconstructed_matrix(), [[4.0]])


def test_insert_then_delete_roundtrip():
    b = spd(5, 9)
    a = np.delete(np.delete(b, 2, axis=0), 2, axis=1)
    ld = factored(a)
    ld.insert_at(2, b[:, 2])
    ld.delete_at(2)
    np.testing.assert_allclose(ld.dbg_reconstructed_matrix(), a, rtol=1e-9, atol=1e-9)


def test_insert_at_errors():
    ld = factored(spd(3))
    with pytest.raises(IndexError):
        ld.insert_at(5, np.zeros(4))
    with pytest.raises(ValueError):
        ld.insert_at(1, np.zeros(3))