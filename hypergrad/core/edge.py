# hypergrad/core/edge.py
"""
Edge: the operator interface of a Hypergraph.

An edge maps the values of its ``tail`` nodes (ordered inputs) to the value of
its single ``head_node``. Reverse mode asks each edge for the vector-Jacobian
product of the head gradient with respect to one tail position at a time:

    dE/dx_i += backward(xs, fx, dEdf, i)

Edges that wrap trainable storage (parameters, lookup rows) additionally push
the head gradient into that storage via ``accumulate_grad`` once the reverse
sweep is done.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import numpy as np


class Edge(ABC):
    """
    Abstract base class for all operators.

    Attributes:
        tail (List[int]): Input VariableIndex values, in operand order
        head_node (int | None): VariableIndex of the produced node, set once by
            the Hypergraph when the edge is appended
    """

    def __init__(self, tail: Sequence[int] = ()):
        self.tail: List[int] = list(tail)
        self.head_node: Optional[int] = None

    def arity(self) -> int:
        return len(self.tail)

    @abstractmethod
    def forward(self, xs: Sequence[np.ndarray]) -> np.ndarray:
        """
        Compute the head value from the tail values.

        Args:
            xs: Current values of the tail nodes, in ``tail`` order

        Returns:
            New tensor; its shape must be stable for a given edge instance
        """

    def backward(self, xs: Sequence[np.ndarray], fx: np.ndarray,
                 dEdf: np.ndarray, i: int) -> np.ndarray:
        """
        Gradient contribution flowing into tail position ``i``.

        Args:
            xs: Tail values (same as passed to forward)
            fx: This edge's forward result
            dEdf: Accumulated gradient of the head node
            i: Tail position to differentiate with respect to

        Returns:
            Tensor shaped like ``xs[i]``
        """
        raise NotImplementedError(
            f"{type(self).__name__} has no inputs to differentiate"
        )

    def has_parameters(self) -> bool:
        """True if this edge takes part in the parameter-accumulation pass."""
        return False

    def accumulate_grad(self, g: np.ndarray) -> None:
        """Push ``g`` (the head node's final gradient) into external storage."""
        raise NotImplementedError(
            f"{type(self).__name__} does not wrap trainable parameters"
        )

    @abstractmethod
    def as_string(self, arg_names: Sequence[str]) -> str:
        """Operator + operand rendering used by diagnostics."""

    def __repr__(self):
        names = [f"v{t}" for t in self.tail]
        return f"{type(self).__name__}({self.as_string(names)!r}, head={self.head_node})"
