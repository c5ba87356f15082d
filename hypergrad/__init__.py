# hypergrad/__init__.py
# Dynamically built hypergraphs with reverse-mode automatic differentiation

from .core import (
    Hypergraph,
    Edge,
    Node,
    GraphConfig,
    HypergraphError,
    NotEvaluatedError,
    GraphStructureError,
    print_graph_summary,
)
from .model import Model, Parameters, LookupParameters
from . import ops

__version__ = "0.1.0"

__all__ = [
    # Core
    'Hypergraph',
    'Edge',
    'Node',
    'GraphConfig',
    'HypergraphError',
    'NotEvaluatedError',
    'GraphStructureError',
    'print_graph_summary',
    # Parameter storage
    'Model',
    'Parameters',
    'LookupParameters',
    # Operators
    'ops',
]
