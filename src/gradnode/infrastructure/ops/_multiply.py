"""
Elementwise multiplication with broadcasting.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..tensor._tensor import Tensor
from ._base import TensorOperation
from ._broadcast import broadcast_shapes, sum_to_shape


class Multiply(TensorOperation):
    """
    Elementwise ``a * b`` under trailing-dimension broadcasting.

    The forward pass saves copies of both operand buffers. Backward multiplies
    the output gradient by the *other* operand's original values (broadcast to
    the output shape), then reduces the product to each operand's shape.
    """

    name = "multiply"
    arity = 2

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        a, b = self._check_inputs(inputs)
        broadcast_shapes(a.shape, b.shape, op=self.name)

        self.ctx.save_for_backward(a._data, b._data)

        out = Tensor._from_numpy(a._data * b._data)
        return self._link(out, (a, b))

    def backward(self, output: Tensor) -> list[np.ndarray]:
        g = self._grad_output(output)
        a, b = self.ctx.saved_arrays
        return self._select_linked(
            [
                sum_to_shape(g * b, a.shape),
                sum_to_shape(g * a, b.shape),
            ]
        )


def multiply(a: Tensor, b: Tensor) -> Tensor:
    """
    Multiply two tensors elementwise, broadcasting as needed.

    Raises
    ------
    ShapeError
        If the shapes are not broadcast-compatible.
    """
    return Multiply().forward((a, b))
