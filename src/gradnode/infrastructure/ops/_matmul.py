"""
Matrix multiplication for rank-2 and batched rank-3 left operands.

Supported shapes
----------------
- ``[B, K] @ [K, N] -> [B, N]``
- ``[B, C, K] @ [K, N] -> [B, C, N]``

The right operand is always a rank-2 matrix shared by every row of the left
operand, so its gradient is contracted over every leading (batch/channel)
axis of the left operand.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import ShapeError, UnsupportedRankError
from ..tensor._tensor import Tensor
from ._base import TensorOperation


class MatMul(TensorOperation):
    """
    Contract the last axis of `a` with the first axis of `b`.

    Backward
    --------
    - ``grad_a = grad_out · bᵀ``, contracting the last axis of ``grad_out``.
    - ``grad_b = aᵀ · grad_out``, contracting every leading axis of `a` with
      the matching axis of ``grad_out``.
    """

    name = "matmul"
    arity = 2

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        a, b = self._check_inputs(inputs)
        if a.ndim not in (2, 3):
            raise UnsupportedRankError(self.name, "left operand", a.ndim, (2, 3))
        if b.ndim != 2:
            raise UnsupportedRankError(self.name, "right operand", b.ndim, (2,))
        if a.shape[-1] != b.shape[0]:
            raise ShapeError(
                self.name,
                f"inner dimensions differ: {a.shape} @ {b.shape}",
                a.shape,
                b.shape,
            )

        self.ctx.save_for_backward(a._data, b._data)

        out = np.tensordot(a._data, b._data, axes=([a.ndim - 1], [0]))
        return self._link(Tensor._from_numpy(out), (a, b))

    def backward(self, output: Tensor) -> list[np.ndarray]:
        g = self._grad_output(output)
        a, b = self.ctx.saved_arrays

        grad_a = np.tensordot(g, b.T, axes=([g.ndim - 1], [0]))

        batch_axes = list(range(a.ndim - 1))
        grad_b = np.tensordot(a, g, axes=(batch_axes, batch_axes))

        return self._select_linked([grad_a, grad_b])


def matmul(a: Tensor, b: Tensor) -> Tensor:
    """
    Multiply a rank-2 or rank-3 tensor by a rank-2 matrix.

    Raises
    ------
    UnsupportedRankError
        If `a` is not rank 2 or 3, or `b` is not rank 2.
    ShapeError
        If ``a.shape[-1] != b.shape[0]``.
    """
    return MatMul().forward((a, b))
