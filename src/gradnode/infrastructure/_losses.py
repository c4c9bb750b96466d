"""
Loss functions built from core operations.

Losses here are plain compositions of differentiable operations; they add no
backward rules of their own.
"""

from __future__ import annotations

from ..domain._errors import ShapeError
from .ops._mean import mean
from .ops._multiply import multiply
from .tensor._tensor import Tensor


def mse_loss(pred: Tensor, target: Tensor) -> Tensor:
    """
    Mean squared error between predictions and targets.

    Computes ``mean((pred - target) ** 2)`` as a rank-0 tensor.

    Parameters
    ----------
    pred : Tensor
        Predictions.
    target : Tensor
        Targets with exactly the shape of `pred`.

    Returns
    -------
    Tensor
        Scalar (rank-0) loss. Its gradient with respect to `pred` is
        ``2 * (pred - target) / pred.numel()``.

    Raises
    ------
    ShapeError
        If the shapes differ.
    """
    if pred.shape != target.shape:
        raise ShapeError(
            "mse_loss",
            f"pred shape {pred.shape} does not match target shape {target.shape}",
            pred.shape,
            target.shape,
        )
    diff = pred - target
    return mean(multiply(diff, diff))
