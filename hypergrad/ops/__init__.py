# hypergrad/ops/__init__.py

from .inputs import ScalarInputEdge, InputEdge
from .params import ParameterEdge, LookupEdge
from .arithmetic import Sum, Negate, CwiseMultiply, MatrixMultiply, Tanh, SquaredNorm

__all__ = [
    "ScalarInputEdge", "InputEdge",
    "ParameterEdge", "LookupEdge",
    "Sum", "Negate", "CwiseMultiply", "MatrixMultiply", "Tanh", "SquaredNorm",
]
