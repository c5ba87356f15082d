# hypergrad/ops/arithmetic.py
"""
A handful of differentiable operators, added through ``Hypergraph.add_function``:

    y = hg.add_function(Sum, [a, b])
    loss = hg.add_function(SquaredNorm, [y])

Local rules (dEdf is the head gradient):

    Sum            y = x0 + x1 + ...     dE/dxi = dEdf
    Negate         y = -x                dE/dx  = -dEdf
    CwiseMultiply  y = x0 * x1           dE/dx0 = dEdf * x1,  dE/dx1 = dEdf * x0
    MatrixMultiply y = x0 @ x1           dE/dx0 = dEdf @ x1^T, dE/dx1 = x0^T @ dEdf
    Tanh           y = tanh(x)           dE/dx  = dEdf * (1 - y^2)
    SquaredNorm    y = [sum(x^2)]        dE/dx  = 2 x dEdf
"""
import numpy as np
from ..core.edge import Edge


def _check_arity(edge, n):
    if edge.arity() != n:
        raise ValueError(f"{type(edge).__name__} takes {n} argument(s), got {edge.arity()}")


class Sum(Edge):

    def __init__(self, tail):
        super().__init__(tail)
        if not self.tail:
            raise ValueError("Sum needs at least one argument")

    def forward(self, xs):
        out = xs[0].copy()
        for x in xs[1:]:
            out = out + x
        return out

    def backward(self, xs, fx, dEdf, i):
        return np.array(dEdf)

    def as_string(self, arg_names):
        return " + ".join(arg_names)


class Negate(Edge):

    def __init__(self, tail):
        super().__init__(tail)
        _check_arity(self, 1)

    def forward(self, xs):
        return -xs[0]

    def backward(self, xs, fx, dEdf, i):
        return -dEdf

    def as_string(self, arg_names):
        return f"-{arg_names[0]}"


class CwiseMultiply(Edge):

    def __init__(self, tail):
        super().__init__(tail)
        _check_arity(self, 2)

    def forward(self, xs):
        return xs[0] * xs[1]

    def backward(self, xs, fx, dEdf, i):
        return dEdf * xs[1 - i]

    def as_string(self, arg_names):
        return f"{arg_names[0]} \\cdot {arg_names[1]}"


class MatrixMultiply(Edge):
    """x0 is a matrix; x1 a vector or a matrix."""

    def __init__(self, tail):
        super().__init__(tail)
        _check_arity(self, 2)

    def forward(self, xs):
        return xs[0] @ xs[1]

    def backward(self, xs, fx, dEdf, i):
        if i == 0:
            if xs[1].ndim == 1:
                return np.outer(dEdf, xs[1])
            return dEdf @ xs[1].T
        return xs[0].T @ dEdf

    def as_string(self, arg_names):
        return f"{arg_names[0]} * {arg_names[1]}"


class Tanh(Edge):

    def __init__(self, tail):
        super().__init__(tail)
        _check_arity(self, 1)

    def forward(self, xs):
        return np.tanh(xs[0])

    def backward(self, xs, fx, dEdf, i):
        return dEdf * (1.0 - fx * fx)

    def as_string(self, arg_names):
        return f"tanh({arg_names[0]})"


class SquaredNorm(Edge):
    """Scalar objective ||x||^2, returned as a 1-element vector."""

    def __init__(self, tail):
        super().__init__(tail)
        _check_arity(self, 1)

    def forward(self, xs):
        return np.array([np.sum(xs[0] * xs[0])])

    def backward(self, xs, fx, dEdf, i):
        return 2.0 * xs[0] * float(dEdf.reshape(-1)[0])

    def as_string(self, arg_names):
        return f"|| {arg_names[0]} ||^2"
