"""
Elementwise addition with broadcasting.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..tensor._tensor import Tensor
from ._base import TensorOperation
from ._broadcast import broadcast_shapes, sum_to_shape


class Add(TensorOperation):
    """
    Elementwise ``a + b`` under trailing-dimension broadcasting.

    Backward passes the output gradient through unchanged to each operand,
    reduced to that operand's shape with `sum_to_shape`.
    """

    name = "add"
    arity = 2

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        a, b = self._check_inputs(inputs)
        broadcast_shapes(a.shape, b.shape, op=self.name)

        self.ctx.saved_meta["a_shape"] = a.shape
        self.ctx.saved_meta["b_shape"] = b.shape

        out = Tensor._from_numpy(a._data + b._data)
        return self._link(out, (a, b))

    def backward(self, output: Tensor) -> list[np.ndarray]:
        g = self._grad_output(output)
        meta = self.ctx.saved_meta
        return self._select_linked(
            [
                sum_to_shape(g, meta["a_shape"]),
                sum_to_shape(g, meta["b_shape"]),
            ]
        )


def add(a: Tensor, b: Tensor) -> Tensor:
    """
    Add two tensors elementwise, broadcasting as needed.

    Raises
    ------
    ShapeError
        If the shapes are not broadcast-compatible.
    """
    return Add().forward((a, b))
