"""
Linear (fully-connected) layer implementation.

This module provides an infrastructure-level `Linear` layer. It is a trainable
`Module` that performs an affine projection of batch-major inputs:

    y = x @ W + b

Shape conventions
-----------------
- x : (batch, in_features) or (batch, channel, in_features)
- W : (in_features, out_features)
- b : (out_features,)  (optional; omitted if bias=False)
- y : (batch, out_features) or (batch, channel, out_features)

Autograd integration
--------------------
`forward()` is a composition of the `matmul` and `add` operations, so the
layer needs no backward rule of its own. The bias is broadcast over every
leading axis and its gradient is summed back by `add`'s inverse broadcast.
"""

from __future__ import annotations

from typing import Optional
import math

import numpy as np

from ..domain._errors import ShapeError
from ._module import Module
from ._parameter import Parameter
from .ops._add import add
from .ops._matmul import matmul
from .tensor._tensor import Tensor


class Linear(Module):
    """
    Fully-connected layer ``y = x @ W + b``.

    Parameters
    ----------
    in_features : int
        Size of the trailing input dimension.
    out_features : int
        Size of the trailing output dimension.
    bias : bool, optional
        Whether to learn an additive bias. Defaults to True.
    seed : Optional[int], optional
        Seed for parameter initialization. When None, fresh OS entropy is used.

    Raises
    ------
    ValueError
        If `in_features` or `out_features` is not positive.
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        *,
        bias: bool = True,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__()

        if in_features <= 0 or out_features <= 0:
            raise ValueError(
                "in_features and out_features must be positive, got "
                f"in_features={in_features}, out_features={out_features}"
            )

        self.in_features = int(in_features)
        self.out_features = int(out_features)

        self.weight = Parameter(np.zeros((self.in_features, self.out_features)))
        self.bias: Optional[Parameter] = (
            Parameter(np.zeros((self.out_features,))) if bias else None
        )

        self._reset_parameters(seed)

    def _reset_parameters(self, seed: Optional[int] = None) -> None:
        """
        Initialize weight and bias from ``U(-k, k)`` with ``k = 1/sqrt(in_features)``.
        """
        k = 1.0 / math.sqrt(float(self.in_features))
        rng = np.random.default_rng(seed)

        self.weight.copy_from_numpy(
            rng.uniform(-k, k, size=(self.in_features, self.out_features))
        )
        if self.bias is not None:
            self.bias.copy_from_numpy(rng.uniform(-k, k, size=(self.out_features,)))

    def forward(self, x: Tensor) -> Tensor:
        """
        Apply the affine transform.

        Parameters
        ----------
        x : Tensor
            Input of shape (batch, in_features) or
            (batch, channel, in_features).

        Returns
        -------
        Tensor
            Output with the trailing dimension replaced by `out_features`.

        Raises
        ------
        ShapeError
            If the trailing input dimension is not `in_features`.
        """
        if x.ndim >= 1 and x.shape[-1] != self.in_features:
            raise ShapeError(
                "linear",
                f"expected trailing dimension {self.in_features}, got input "
                f"shape {x.shape}",
                x.shape,
            )
        out = matmul(x, self.weight)
        if self.bias is not None:
            out = add(out, self.bias)
        return out

    def extra_repr(self) -> str:
        return (
            f"in_features={self.in_features}, out_features={self.out_features}, "
            f"bias={self.bias is not None}"
        )
