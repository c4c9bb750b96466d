"""
Rectified linear unit.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..tensor._tensor import Tensor
from ._base import TensorOperation


class ReLUOp(TensorOperation):
    """
    Elementwise ``max(x, 0)``.

    The gradient passes through where the input was strictly positive and is
    zero elsewhere, including at exactly 0.
    """

    name = "relu"
    arity = 1

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        (x,) = self._check_inputs(inputs)
        mask = x._data > 0
        self.ctx.saved_meta["mask"] = mask

        out = Tensor._from_numpy(np.where(mask, x._data, 0.0))
        return self._link(out, (x,))

    def backward(self, output: Tensor) -> list[np.ndarray]:
        g = self._grad_output(output)
        mask = self.ctx.saved_meta["mask"]
        return self._select_linked([g * mask.astype(g.dtype)])


def relu(x: Tensor) -> Tensor:
    """
    Apply the rectified linear unit elementwise.
    """
    return ReLUOp().forward((x,))
