"""
gradnode: a minimal reverse-mode automatic differentiation engine over
NumPy-backed n-dimensional tensors.

Build graphs by combining tensors with differentiable operations, then call
`backward()` on the result:

>>> import gradnode as gn
>>> a = gn.tensor([1.0, 2.0, 3.0]).with_grad()
>>> b = gn.tensor([4.0, 5.0, 6.0]).with_grad()
>>> gn.mean(a + b).backward()
>>> a.grad
array([0.33333334, 0.33333334, 0.33333334], dtype=float32)
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .domain import (
    EmptyTensorError,
    IModule,
    IOptimizer,
    IParameter,
    ITensor,
    MissingGradientError,
    Operation,
    ShapeError,
    UnsupportedRankError,
)
from .infrastructure import (
    SGD,
    Context,
    DataLoader,
    Dataset,
    GraphEngine,
    Linear,
    Module,
    Parameter,
    ReLU,
    Sequential,
    Tensor,
    TensorDataset,
    backward,
    count_parameters,
    mse_loss,
)
from .infrastructure.ops import (
    Add,
    MatMul,
    Mean,
    Multiply,
    ReLUOp,
    Reshape,
    add,
    broadcast_shapes,
    matmul,
    mean,
    multiply,
    relu,
    reshape,
    sum_to_shape,
)


def tensor(data: Any, *, requires_grad: bool = False) -> Tensor:
    """
    Create a leaf tensor from array-like data.
    """
    return Tensor(data, requires_grad=requires_grad)


def zeros(shape: Sequence[int]) -> Tensor:
    return Tensor.zeros(shape)


def ones(shape: Sequence[int]) -> Tensor:
    return Tensor.ones(shape)


def randn(
    shape: Sequence[int], *, std: Optional[float] = None, seed: Optional[int] = None
) -> Tensor:
    """
    Create a leaf tensor of small normal samples (see `Tensor.randn`).
    """
    if std is None:
        return Tensor.randn(shape, seed=seed)
    return Tensor.randn(shape, std=std, seed=seed)


def zeros_like(x: Tensor) -> Tensor:
    return x.zeros_like()


def ones_like(x: Tensor) -> Tensor:
    return x.ones_like()


def rand_like(x: Tensor, *, seed: Optional[int] = None) -> Tensor:
    return x.rand_like(seed=seed)


def stack(tensors: Sequence[Tensor], axis: int = 0) -> Tensor:
    """
    Stack equally shaped tensors into a new leaf one rank higher.
    """
    return Tensor.stack(tensors, axis=axis)


__version__ = "0.1.0"

__all__ = [
    "Add",
    "Context",
    "DataLoader",
    "Dataset",
    "EmptyTensorError",
    "GraphEngine",
    "IModule",
    "IOptimizer",
    "IParameter",
    "ITensor",
    "Linear",
    "MatMul",
    "Mean",
    "MissingGradientError",
    "Module",
    "Multiply",
    "Operation",
    "Parameter",
    "ReLU",
    "ReLUOp",
    "Reshape",
    "SGD",
    "Sequential",
    "ShapeError",
    "Tensor",
    "TensorDataset",
    "UnsupportedRankError",
    "add",
    "backward",
    "broadcast_shapes",
    "count_parameters",
    "matmul",
    "mean",
    "mse_loss",
    "multiply",
    "ones",
    "ones_like",
    "rand_like",
    "randn",
    "relu",
    "reshape",
    "stack",
    "sum_to_shape",
    "tensor",
    "zeros",
    "zeros_like",
]
