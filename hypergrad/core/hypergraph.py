# hypergrad/core/hypergraph.py
"""
Hypergraph: an append-only computation graph with reverse-mode AD.

Every ``add_*`` call appends exactly one Node and the one Edge that produces
it, and returns the node's VariableIndex (0, 1, 2, ... in creation order).
An edge may only reference nodes that already exist, so index order is a
topological order and neither evaluation pass needs to sort anything.

Typical use
-----------
    hg = Hypergraph()
    p = hg.add_parameter(model_param)
    x = hg.add_input(x_buf)              # bound buffer, re-read on forward
    y = hg.add_function(Sum, [p, x])
    hg.forward()                         # -> value of the last node
    hg.backward()                        # -> model_param.g += dy/dp

Graphs may be grown between evaluations: ``incremental_forward`` only
computes the nodes appended since the previous call.
"""
from __future__ import annotations

import logging
import sys
from typing import Iterable, List, Optional, TextIO, Type

import numpy as np

from .config import GraphConfig
from .edge import Edge
from .errors import GraphStructureError, NotEvaluatedError
from .node import Node
from .tensor import as_tensor, dim_of, ones, zeros
from ..model import LookupParameters, Parameters
from ..ops.inputs import InputEdge, ScalarInputEdge
from ..ops.params import LookupEdge, ParameterEdge

logger = logging.getLogger(__name__)

VariableIndex = int


class Hypergraph:
    """
    Owns all nodes and edges of one computation.

    Attributes
    ----------
    nodes : List[Node]
        Node ``i`` has VariableIndex ``i``.
    edges : List[Edge]
        Every edge, in creation order.
    parameter_edges : List[Edge]
        The subset of ``edges`` whose gradients are pushed into parameter
        storage at the end of ``backward``.
    last_node_evaluated : int
        Forward cursor: nodes below this index hold a current value.
    """

    def __init__(self, config: Optional[GraphConfig] = None):
        self.config = config or GraphConfig.from_env()
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.parameter_edges: List[Edge] = []
        self.last_node_evaluated = 0

    def __len__(self):
        return len(self.nodes)

    # ------------------------------------------------------------------ #
    # construction
    # ------------------------------------------------------------------ #
    def _append(self, edge: Edge, register_parameters: bool = False) -> VariableIndex:
        new_node_index = len(self.nodes)
        if self.config.checked:
            for t in edge.tail:
                if not 0 <= t < new_node_index:
                    raise GraphStructureError(
                        f"{type(edge).__name__} references node {t}, "
                        f"but only nodes [0, {new_node_index}) exist"
                    )
        self.nodes.append(Node(in_edge=len(self.edges), index=new_node_index))
        self.edges.append(edge)
        edge.head_node = new_node_index
        if register_parameters:
            self.parameter_edges.append(edge)
        logger.debug("appended v%d = %s", new_node_index, type(edge).__name__)
        return new_node_index

    def add_input(self, x, dim=None) -> VariableIndex:
        """
        Add a constant input.

        Args:
            x: A Python number (scalar constant), a list/tuple (tensor constant,
               copied), or a numpy array. Arrays are *bound*: forward re-reads
               the caller's buffer every time, so in-place updates made
               between ``forward()`` calls are picked up.
            dim: Optional shape for the input; defaults to the payload's shape.

        Returns:
            VariableIndex of the new node
        """
        if isinstance(x, (int, float, np.number)) and dim is None:
            return self._append(ScalarInputEdge(x, dtype=self.config.dtype))
        if isinstance(x, np.ndarray):
            if dim is None and x.size == 1 and x.ndim <= 1:
                return self._append(ScalarInputEdge(x, dtype=self.config.dtype))
            return self._append(InputEdge(x.shape if dim is None else dim, x,
                                          dtype=self.config.dtype))
        if isinstance(x, (list, tuple, int, float, np.number)):
            values = as_tensor(x, dtype=self.config.dtype)
            return self._append(InputEdge(values.shape if dim is None else dim, values,
                                          dtype=self.config.dtype))
        raise TypeError(f"unsupported input payload {type(x)}")

    def add_parameter(self, p: Parameters) -> VariableIndex:
        return self._append(ParameterEdge(p), register_parameters=True)

    def add_lookup(self, p: LookupParameters, index) -> VariableIndex:
        """Add row ``index`` (int, or bound 1-element int buffer) of ``p``."""
        return self._append(LookupEdge(p, index), register_parameters=True)

    def add_const_lookup(self, p: LookupParameters, index) -> VariableIndex:
        """
        Like ``add_lookup`` but the row is frozen: its node still receives a
        gradient during backward, which is never pushed into ``p``.
        """
        return self._append(LookupEdge(p, index, trainable=False))

    def add_function(self, edge_type: Type[Edge], args: Iterable[VariableIndex],
                     **kwargs) -> VariableIndex:
        """
        Apply an operator: ``edge_type(list(args), **kwargs)`` produces the new node.

        The edge joins ``parameter_edges`` if it reports trainable parameters.
        """
        edge = edge_type(list(args), **kwargs)
        trainable = edge.has_parameters() and getattr(edge, "has_optimizable_parameters", True)
        return self._append(edge, register_parameters=trainable)

    # ------------------------------------------------------------------ #
    # accessors
    # ------------------------------------------------------------------ #
    def _node(self, i: VariableIndex) -> Node:
        if self.config.checked:
            if not 0 <= i < len(self.nodes):
                raise GraphStructureError(f"no node v{i} (graph has {len(self.nodes)} nodes)")
            if not (i < self.last_node_evaluated and self.nodes[i].evaluated):
                raise NotEvaluatedError(f"v{i} has not been evaluated yet")
        return self.nodes[i]

    def value(self, i: VariableIndex) -> np.ndarray:
        return self._node(i).value

    def gradient(self, i: VariableIndex) -> np.ndarray:
        return self._node(i).grad

    # ------------------------------------------------------------------ #
    # evaluation
    # ------------------------------------------------------------------ #
    def incremental_forward(self) -> np.ndarray:
        """
        Evaluate nodes ``[last_node_evaluated, len(nodes))`` in index order.

        Values computed by earlier calls are reused as they are. Each newly
        computed node gets a zeroed gradient of matching shape.

        Returns:
            Value of the last node in the graph
        """
        if not self.nodes:
            raise GraphStructureError("cannot evaluate an empty Hypergraph")
        start = self.last_node_evaluated
        while self.last_node_evaluated < len(self.nodes):
            node = self.nodes[self.last_node_evaluated]
            in_edge = self.edges[node.in_edge]
            xs = [self.nodes[t].value for t in in_edge.tail]
            node.value = in_edge.forward(xs)
            node.grad = zeros(dim_of(node.value), dtype=self.config.dtype)
            self.last_node_evaluated += 1
        if start < len(self.nodes):
            logger.debug("forward evaluated v%d..v%d", start, len(self.nodes) - 1)
        return self.nodes[-1].value

    def forward(self) -> np.ndarray:
        """Recompute the whole graph from scratch (bound inputs are re-read)."""
        self.last_node_evaluated = 0
        return self.incremental_forward()

    def backward(self) -> None:
        """
        Reverse sweep from the last node, then push gradients into parameters.

        The last node is taken to be the objective; its gradient is seeded
        with ones. Only nodes that depend on some parameter-reading edge are
        differentiated; constant subgraphs are skipped entirely.
        """
        if self.config.checked:
            if not self.nodes:
                raise GraphStructureError("cannot differentiate an empty Hypergraph")
            if self.last_node_evaluated < len(self.nodes):
                raise NotEvaluatedError(
                    f"backward() needs forward values up to v{len(self.nodes) - 1}, "
                    f"only {self.last_node_evaluated} node(s) evaluated"
                )

        # find constants to avoid doing extra work
        needs_derivative = [False] * len(self.nodes)
        for ni, node in enumerate(self.nodes):
            in_edge = self.edges[node.in_edge]
            is_variable = in_edge.has_parameters()
            for t in in_edge.tail:
                is_variable = is_variable or needs_derivative[t]
            needs_derivative[ni] = is_variable

        # dE/dE = 1
        last = self.nodes[-1]
        last.grad = ones(dim_of(last.value), dtype=self.config.dtype)

        # reverse topological order
        n_calls = 0
        for node in reversed(self.nodes):
            in_edge = self.edges[node.in_edge]
            if not in_edge.tail:
                continue
            xs = None
            for ti, t in enumerate(in_edge.tail):
                if not needs_derivative[t]:
                    continue
                if xs is None:
                    xs = [self.nodes[k].value for k in in_edge.tail]
                tail_node = self.nodes[t]
                tail_node.grad += in_edge.backward(xs, node.value, node.grad, ti)
                n_calls += 1
        logger.debug(
            "backward: %d/%d nodes need derivatives, %d backward calls",
            sum(needs_derivative), len(self.nodes), n_calls,
        )

        # parameters come into the graph as functions returning their current
        # value, so accumulating is just handing each one its head gradient
        for pedge in self.parameter_edges:
            pedge.accumulate_grad(self.nodes[pedge.head_node].grad)
        logger.debug("accumulated gradients into %d parameter edge(s)", len(self.parameter_edges))

    # ------------------------------------------------------------------ #
    # diagnostics
    # ------------------------------------------------------------------ #
    def print_graphviz(self, stream: Optional[TextIO] = None) -> None:
        """Write the graph in Graphviz dot syntax (stderr by default)."""
        out = stream if stream is not None else sys.stderr
        out.write("digraph G {\n  rankdir=LR;\n  nodesep=.05;\n")
        for nc, node in enumerate(self.nodes):
            in_edge = self.edges[node.in_edge]
            var_names = [self.nodes[t].variable_name() for t in in_edge.tail]
            label = f"{node.variable_name()} = {in_edge.as_string(var_names)}"
            label = label.replace('"', '\\"')
            out.write(f'  N{nc} [label="{label}"];\n')
        for edge in self.edges:
            for ni in edge.tail:
                out.write(f"  N{ni} -> N{edge.head_node};\n")
        out.write("}\n")
