# hypergrad/ops/inputs.py
"""
Constant inputs.

Both kinds have no tail, so backward is never asked of them. A "bound" input
keeps a reference to a caller-owned numpy buffer and re-reads it on every
forward call: the caller may overwrite the buffer in place between
``Hypergraph.forward()`` calls. The edge never writes through the reference,
and the caller must not replace or resize the buffer while the graph is alive.
"""
from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

from ..core.edge import Edge
from ..core.tensor import Dim, as_dim, as_tensor, DEFAULT_DTYPE


class ScalarInputEdge(Edge):
    """A scalar given either by value or by a bound 1-element buffer."""

    def __init__(self, s, dtype=DEFAULT_DTYPE):
        super().__init__()
        self.dtype = dtype
        if isinstance(s, np.ndarray):
            if s.size != 1:
                raise ValueError(f"bound scalar input needs a 1-element buffer, got shape {s.shape}")
            self.ps: Optional[np.ndarray] = s
            self.s = None
        elif isinstance(s, (int, float, np.number)):
            self.ps = None
            self.s = float(s)
        else:
            raise TypeError(f"scalar input must be a number or a numpy buffer, got {type(s)}")

    def current(self) -> float:
        return float(self.ps.reshape(-1)[0]) if self.ps is not None else self.s

    def forward(self, xs):
        return as_tensor(self.current(), dtype=self.dtype)

    def as_string(self, arg_names: Sequence[str]) -> str:
        return repr(self.current())


class InputEdge(Edge):
    """
    A tensor constant of fixed ``dim``.

    ``values`` is bound (not copied) when it is an ndarray, and copied once
    otherwise. Forward always returns a fresh copy reshaped to ``dim``, so a
    node's cached value never aliases the caller's buffer.
    """

    def __init__(self, dim, values, dtype=DEFAULT_DTYPE):
        super().__init__()
        self.dim: Dim = as_dim(dim)
        if not isinstance(values, np.ndarray):
            values = np.array(values, dtype=dtype)
        if values.size != int(np.prod(self.dim)):
            raise ValueError(
                f"input of dim {self.dim} needs {int(np.prod(self.dim))} values, "
                f"buffer has {values.size}"
            )
        self.pdata = values
        self.dtype = dtype

    def forward(self, xs):
        return np.array(self.pdata, dtype=self.dtype).reshape(self.dim)

    def as_string(self, arg_names: Sequence[str]) -> str:
        return f"constant({'x'.join(str(k) for k in self.dim)})"
