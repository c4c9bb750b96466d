"""
Backend-agnostic contracts for gradnode: protocols, the Operation base class,
and the error taxonomy.
"""

from ._errors import (
    EmptyTensorError,
    MissingGradientError,
    ShapeError,
    UnsupportedRankError,
)
from ._module import IModule
from ._operation import Operation
from ._optimizers import IOptimizer
from ._parameter import IParameter
from ._tensor import ITensor

__all__ = [
    "EmptyTensorError",
    "IModule",
    "IOptimizer",
    "IParameter",
    "ITensor",
    "MissingGradientError",
    "Operation",
    "ShapeError",
    "UnsupportedRankError",
]
