"""
Mean over all elements.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import EmptyTensorError
from ..tensor._tensor import Tensor
from ._base import TensorOperation


class Mean(TensorOperation):
    """
    Reduce a tensor to the rank-0 arithmetic mean of its elements.

    Backward spreads the scalar output gradient evenly: every input element
    receives ``grad_out / numel(input)``.
    """

    name = "mean"
    arity = 1

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        (x,) = self._check_inputs(inputs)
        n = x.numel()
        if n == 0:
            raise EmptyTensorError(self.name, x.shape)

        self.ctx.saved_meta["shape"] = x.shape
        self.ctx.saved_meta["numel"] = n

        out = Tensor._from_numpy(np.asarray(x._data.mean(dtype=np.float64)))
        return self._link(out, (x,))

    def backward(self, output: Tensor) -> list[np.ndarray]:
        g = self._grad_output(output)
        meta = self.ctx.saved_meta
        grad_x = np.full(
            meta["shape"], float(g.reshape(())) / meta["numel"], dtype=g.dtype
        )
        return self._select_linked([grad_x])


def mean(x: Tensor) -> Tensor:
    """
    Return the mean of all elements of `x` as a rank-0 tensor.

    Raises
    ------
    EmptyTensorError
        If `x` has zero elements.
    """
    return Mean().forward((x,))
