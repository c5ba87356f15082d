"""Tests for the concrete edge kinds."""

import numpy as np
import pytest
from scipy.optimize import approx_fprime

from hypergrad import LookupParameters, NotEvaluatedError, Parameters
from hypergrad.ops import (
    CwiseMultiply, InputEdge, LookupEdge, MatrixMultiply, Negate,
    ParameterEdge, ScalarInputEdge, SquaredNorm, Sum, Tanh,
)


def _check_vjp(edge, xs, rng, tol=1e-4):
    """Compare edge.backward with finite differences of <dEdf, forward(xs)>."""
    fx = edge.forward(xs)
    dEdf = rng.normal(size=fx.shape)
    for i, x in enumerate(xs):
        def f(flat, i=i):
            moved = list(xs)
            moved[i] = flat.reshape(x.shape)
            return float(np.sum(dEdf * edge.forward(moved)))
        numeric = approx_fprime(x.ravel().copy(), f, 1e-6).reshape(x.shape)
        analytic = edge.backward(xs, fx, dEdf, i)
        assert analytic.shape == x.shape
        np.testing.assert_allclose(analytic, numeric, atol=tol)


# ============================================================================
# Arithmetic gradients
# ============================================================================

def test_sum_gradient(rng):
    xs = [rng.normal(size=(2, 3)) for _ in range(3)]
    _check_vjp(Sum([0, 1, 2]), xs, rng)


def test_negate_gradient(rng):
    _check_vjp(Negate([0]), [rng.normal(size=4)], rng)


def test_cwise_multiply_gradient(rng):
    _check_vjp(CwiseMultiply([0, 1]), [rng.normal(size=5), rng.normal(size=5)], rng)


def test_matrix_vector_gradient(rng):
    _check_vjp(MatrixMultiply([0, 1]), [rng.normal(size=(3, 4)), rng.normal(size=4)], rng)


def test_matrix_matrix_gradient(rng):
    _check_vjp(MatrixMultiply([0, 1]), [rng.normal(size=(3, 4)), rng.normal(size=(4, 2))], rng)


def test_tanh_gradient(rng):
    _check_vjp(Tanh([0]), [rng.normal(size=(2, 2))], rng)


def test_squared_norm_gradient(rng):
    _check_vjp(SquaredNorm([0]), [rng.normal(size=(3, 2))], rng)


@pytest.mark.parametrize("op,n", [(Negate, 2), (CwiseMultiply, 1), (MatrixMultiply, 3), (Tanh, 0)])
def test_wrong_arity_rejected(op, n):
    with pytest.raises(ValueError):
        op(list(range(n)))


def test_sum_needs_an_argument():
    with pytest.raises(ValueError):
        Sum([])


def test_as_string_renders_operands():
    assert Sum([0, 1]).as_string(["v0", "v1"]) == "v0 + v1"
    assert Tanh([0]).as_string(["v3"]) == "tanh(v3)"
    assert MatrixMultiply([0, 1]).as_string(["v0", "v1"]) == "v0 * v1"


# ============================================================================
# Inputs and parameter edges
# ============================================================================

def test_scalar_input_literal_and_bound():
    assert ScalarInputEdge(2.5).forward([]).tolist() == [2.5]
    buf = np.array([1.0])
    e = ScalarInputEdge(buf)
    buf[0] = 4.0
    assert e.forward([]).tolist() == [4.0]
    assert e.arity() == 0


def test_scalar_input_rejects_bad_payloads():
    with pytest.raises(ValueError):
        ScalarInputEdge(np.zeros(2))
    with pytest.raises(TypeError):
        ScalarInputEdge("1.0")


def test_input_edge_reshapes_to_dim():
    e = InputEdge((2, 2), np.arange(4.0))
    out = e.forward([])
    assert out.shape == (2, 2)
    assert e.as_string([]) == "constant(2x2)"


def test_input_edges_have_no_backward():
    with pytest.raises(NotImplementedError):
        InputEdge(2, [1.0, 2.0]).backward([], np.zeros(2), np.zeros(2), 0)
    assert not ScalarInputEdge(1.0).has_parameters()


def test_parameter_edge_copies_and_accumulates():
    p = Parameters(2, values=[1.0, 2.0])
    e = ParameterEdge(p)
    v = e.forward([])
    v[0] = 99.0
    assert p.values[0] == 1.0
    e.accumulate_grad(np.array([0.5, 0.5]))
    np.testing.assert_allclose(p.g, [0.5, 0.5])
    assert e.has_parameters()
    assert e.as_string([]) == "params(2)"


def test_const_lookup_refuses_to_accumulate():
    table = LookupParameters(2, 3)
    e = LookupEdge(table, 1, trainable=False)
    assert e.has_parameters()
    assert not e.has_optimizable_parameters
    with pytest.raises(RuntimeError):
        e.accumulate_grad(np.ones(3))


def test_lookup_rejects_bad_index_types():
    table = LookupParameters(2, 3)
    with pytest.raises(TypeError):
        LookupEdge(table, 1.5)
    with pytest.raises(ValueError):
        LookupEdge(table, np.array([0, 1]))


def test_lookup_accumulate_before_forward_raises():
    table = LookupParameters(3, 2)
    e = LookupEdge(table, 1)
    with pytest.raises(NotEvaluatedError):
        e.accumulate_grad(np.ones(2))
    e.forward([])
    e.accumulate_grad(np.ones(2))
    assert table.non_zero_grads == {1}


def test_sum_keeps_input_dtype():
    xs = [np.ones(3, dtype=np.float32), np.ones(3, dtype=np.float32)]
    out = Sum([0, 1]).forward(xs)
    assert out.dtype == np.float32
    assert out is not xs[0]
    np.testing.assert_array_equal(xs[0], np.ones(3))
