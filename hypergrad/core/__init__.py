# hypergrad/core/__init__.py

"""
Core public API for the hypergrad package.

Exports:
    Hypergraph        : Append-only graph with forward / backward evaluation.
    Edge              : Abstract operator interface every edge implements.
    Node              : Cached value + gradient of one graph point.
    GraphConfig       : Immutable engine configuration.
    HypergraphError   : Base class of engine errors.
"""

from .tensor import Dim, Tensor, zeros, ones, as_tensor, dim_of
from .node import Node
from .edge import Edge
from .config import GraphConfig, DEFAULT_CONFIG
from .errors import HypergraphError, NotEvaluatedError, GraphStructureError
from .hypergraph import Hypergraph, VariableIndex
from .graph_utils import graph_stats, print_graph_summary, print_computation_graph

__all__ = [
    "Dim", "Tensor", "zeros", "ones", "as_tensor", "dim_of",
    "Node", "Edge",
    "GraphConfig", "DEFAULT_CONFIG",
    "HypergraphError", "NotEvaluatedError", "GraphStructureError",
    "Hypergraph", "VariableIndex",
    "graph_stats", "print_graph_summary", "print_computation_graph",
]
