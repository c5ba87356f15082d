# hypergrad/core/node.py
from dataclasses import dataclass
from typing import Optional
import numpy as np

@dataclass
class Node:
    """
    One evaluated point of a Hypergraph.

    Attributes
    ----------
    in_edge : int
        Index (into ``Hypergraph.edges``) of the single edge producing this node.
    index : int
        This node's VariableIndex.
    value : np.ndarray | None
        Cached forward value; None until forward evaluation reaches the node.
    grad : np.ndarray | None
        dE/d(value) accumulator, same shape as ``value``. Zeroed when the value
        is computed and only ever incremented by backward afterwards.
    """
    in_edge: int
    index: int
    value: Optional[np.ndarray] = None
    grad: Optional[np.ndarray] = None

    def variable_name(self) -> str:
        return f"v{self.index}"

    @property
    def evaluated(self) -> bool:
        return self.value is not None
