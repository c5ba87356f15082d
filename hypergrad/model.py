# hypergrad/model.py
"""
Parameter storage.

Parameters live outside any Hypergraph: a graph only holds edges that read
their current value during forward and push gradients back with
``accumulate_grad`` at the end of backward. The same storage can therefore be
referenced by many graphs, built one after another across training steps.
"""
from __future__ import annotations
from typing import List, Optional, Set
import numpy as np

from .core.tensor import Dim, as_dim, zeros

DEFAULT_INIT_SCALE = 0.1


def _uniform(rng: np.random.Generator, d: Dim, scale: float) -> np.ndarray:
    return rng.uniform(-scale, scale, size=d).astype(np.float64)


class Parameters:
    """
    A dense trainable tensor and its gradient accumulator.

    Attributes
    ----------
    dim : tuple
        Shape of ``values`` and ``g``.
    values : np.ndarray
        Current value; read (copied) by every ParameterEdge forward.
    g : np.ndarray
        Accumulated gradient, summed across backward passes until ``clear``.
    """

    def __init__(self, dim, values: Optional[np.ndarray] = None, *,
                 rng: Optional[np.random.Generator] = None,
                 scale: float = DEFAULT_INIT_SCALE):
        self.dim: Dim = as_dim(dim)
        if values is None:
            rng = rng or np.random.default_rng()
            values = _uniform(rng, self.dim, scale)
        values = np.asarray(values, dtype=np.float64)
        if values.size != int(np.prod(self.dim)):
            raise ValueError(
                f"Parameters of dim {self.dim} cannot hold {values.size} values"
            )
        self.values = values.reshape(self.dim).copy()
        self.g = zeros(self.dim)

    def size(self) -> int:
        return int(np.prod(self.dim))

    def accumulate_grad(self, d: np.ndarray) -> None:
        self.g += np.reshape(d, self.dim)

    def clear(self) -> None:
        self.g.fill(0.0)

    def __repr__(self):
        return f"Parameters(dim={self.dim})"


class LookupParameters:
    """
    A table of ``n`` trainable rows of shape ``dim`` (e.g. word embeddings).

    Only rows that received gradient since the last ``clear`` are listed in
    ``non_zero_grads``, so clearing touches just those rows.
    """

    def __init__(self, n: int, dim, values: Optional[np.ndarray] = None, *,
                 rng: Optional[np.random.Generator] = None,
                 scale: float = DEFAULT_INIT_SCALE):
        self.dim: Dim = as_dim(dim)
        if n <= 0:
            raise ValueError(f"LookupParameters needs at least one row, got n={n}")
        if values is None:
            rng = rng or np.random.default_rng()
            table = _uniform(rng, (n,) + self.dim, scale)
        else:
            table = np.asarray(values, dtype=np.float64)
            if table.shape[0] != n or table[0].size != int(np.prod(self.dim)):
                raise ValueError(
                    f"lookup table of shape {table.shape} does not match "
                    f"n={n}, dim={self.dim}"
                )
        self.values: List[np.ndarray] = [np.array(row, dtype=np.float64).reshape(self.dim)
                                         for row in table]
        self.grads: List[np.ndarray] = [zeros(self.dim) for _ in range(n)]
        self.non_zero_grads: Set[int] = set()

    def __len__(self):
        return len(self.values)

    def size(self) -> int:
        return len(self.values) * int(np.prod(self.dim))

    def row(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self.values):
            raise IndexError(f"lookup index {index} out of range [0, {len(self.values)})")
        return self.values[index]

    def accumulate_grad(self, index: int, d: np.ndarray) -> None:
        self.non_zero_grads.add(index)
        self.grads[index] += np.reshape(d, self.dim)

    def clear(self) -> None:
        for i in self.non_zero_grads:
            self.grads[i].fill(0.0)
        self.non_zero_grads.clear()

    def __repr__(self):
        return f"LookupParameters(n={len(self.values)}, dim={self.dim})"


class Model:
    """Owns the Parameters / LookupParameters referenced by graphs."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)
        self.params: List[Parameters] = []
        self.lookup_params: List[LookupParameters] = []

    def add_parameters(self, dim, values=None, scale: float = DEFAULT_INIT_SCALE) -> Parameters:
        p = Parameters(dim, values, rng=self.rng, scale=scale)
        self.params.append(p)
        return p

    def add_lookup_parameters(self, n: int, dim, values=None,
                              scale: float = DEFAULT_INIT_SCALE) -> LookupParameters:
        p = LookupParameters(n, dim, values, rng=self.rng, scale=scale)
        self.lookup_params.append(p)
        return p

    def parameters_list(self) -> List[Parameters]:
        return list(self.params)

    def lookup_parameters_list(self) -> List[LookupParameters]:
        return list(self.lookup_params)

    def reset_gradient(self) -> None:
        for p in self.params:
            p.clear()
        for p in self.lookup_params:
            p.clear()
