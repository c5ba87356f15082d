# hypergrad/core/errors.py
"""Exceptions raised for caller contract violations on a Hypergraph."""


class HypergraphError(Exception):
    """Base class for errors raised by the graph engine."""


class NotEvaluatedError(HypergraphError, RuntimeError):
    """A node value (or gradient) was requested before forward reached it."""


class GraphStructureError(HypergraphError, ValueError):
    """An edge references a node that does not exist, or the graph is empty."""
