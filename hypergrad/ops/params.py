# hypergrad/ops/params.py
"""
Edges that read trainable storage.

A parameter enters the graph as a nullary "function" returning the current
value of the storage. Nothing is snapshotted at construction time: each
forward call reads whatever the storage holds now, and backward hands the
head gradient back through ``accumulate_grad``.
"""
from __future__ import annotations
from typing import Optional, Sequence, Union
import numpy as np

from ..core.edge import Edge
from ..core.errors import NotEvaluatedError
from ..model import Parameters, LookupParameters


class ParameterEdge(Edge):

    def __init__(self, params: Parameters):
        super().__init__()
        self.params = params

    def forward(self, xs):
        return self.params.values.copy()

    def has_parameters(self) -> bool:
        return True

    def accumulate_grad(self, g: np.ndarray) -> None:
        self.params.accumulate_grad(g)

    def as_string(self, arg_names: Sequence[str]) -> str:
        return f"params({'x'.join(str(k) for k in self.params.dim)})"


class LookupEdge(Edge):
    """
    Selects one row of a LookupParameters table.

    Args:
        params: The lookup table
        index: Row number, either an ``int`` or a bound integer numpy buffer
            (1 element) that is re-read on every forward call
        trainable: When False (a "const" lookup, e.g. frozen embeddings) the
            edge is never registered for parameter accumulation. Its node is
            still differentiated like any other, the gradient is just not
            applied to the table.
    """

    def __init__(self, params: LookupParameters, index: Union[int, np.ndarray],
                 trainable: bool = True):
        super().__init__()
        self.params = params
        if isinstance(index, np.ndarray):
            if index.size != 1:
                raise ValueError(f"bound lookup index needs a 1-element buffer, got shape {index.shape}")
            self.pindex: Optional[np.ndarray] = index
            self.index = None
        elif isinstance(index, (int, np.integer)):
            self.pindex = None
            self.index = int(index)
        else:
            raise TypeError(f"lookup index must be an int or a numpy buffer, got {type(index)}")
        self.has_optimizable_parameters = trainable
        # row actually read by the latest forward; gradients go there
        self.evaluated_index: Optional[int] = None

    def current_index(self) -> int:
        return int(self.pindex.reshape(-1)[0]) if self.pindex is not None else self.index

    def forward(self, xs):
        self.evaluated_index = self.current_index()
        return self.params.row(self.evaluated_index).copy()

    def has_parameters(self) -> bool:
        return True

    def accumulate_grad(self, g: np.ndarray) -> None:
        if not self.has_optimizable_parameters:
            raise RuntimeError("const lookup edges do not accumulate gradients")
        if self.evaluated_index is None:
            raise NotEvaluatedError("lookup row has not been read by forward yet")
        self.params.accumulate_grad(self.evaluated_index, g)

    def as_string(self, arg_names: Sequence[str]) -> str:
        kind = "lookup_parameters" if self.has_optimizable_parameters else "const_lookup_parameters"
        dim = "x".join(str(k) for k in self.params.dim)
        return f"{kind}(|x|={len(self.params)} --> {dim})[{self.current_index()}]"
