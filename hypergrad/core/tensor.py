# hypergrad/core/tensor.py
"""
Tensor buffer primitives.

Every value and gradient buffer in a Hypergraph is a plain ``numpy.ndarray``.
A ``Dim`` is just the shape tuple of such an array. The helpers below are the
only buffer operations the engine itself needs: zero-filled allocation, the
all-ones seed, and conversion of caller payloads.
"""
from __future__ import annotations
from typing import Any, Sequence, Tuple, Union
import numpy as np

Dim = Tuple[int, ...]
Tensor = np.ndarray

DEFAULT_DTYPE = np.float64


def as_dim(d: Union[int, Sequence[int]]) -> Dim:
    """Normalize an int or a sequence of ints to a shape tuple."""
    if isinstance(d, (int, np.integer)):
        return (int(d),)
    return tuple(int(k) for k in d)


def dim_of(t: Tensor) -> Dim:
    return tuple(np.shape(t))


def zeros(d, dtype=DEFAULT_DTYPE) -> Tensor:
    return np.zeros(as_dim(d), dtype=dtype)


def ones(d, dtype=DEFAULT_DTYPE) -> Tensor:
    return np.ones(as_dim(d), dtype=dtype)


def as_tensor(x: Any, dtype=DEFAULT_DTYPE) -> Tensor:
    """
    Convert a caller payload (scalar, list/tuple, ndarray) to a float tensor.

    Scalars become 1-element vectors, so that every node value has at least
    one axis and ``ones(dim_of(v))`` is a valid seed.
    """
    if not isinstance(x, (int, float, np.number, list, tuple, np.ndarray)):
        raise TypeError(
            f"tensor payload must be numeric (int, float, list, tuple, ndarray), "
            f"but got {type(x)}"
        )
    arr = np.array(x, dtype=dtype)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    return arr
