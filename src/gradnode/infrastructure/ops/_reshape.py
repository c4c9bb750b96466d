"""
Differentiable reshape.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import ShapeError
from ..tensor._tensor import Tensor
from ._base import TensorOperation


def _resolve_shape(src: tuple[int, ...], shape: Sequence[int]) -> tuple[int, ...]:
    """
    Resolve a requested shape (with at most one -1) against `src`.

    Raises
    ------
    ShapeError
        If the element counts differ, more than one dimension is -1, or a
        dimension is negative.
    """
    shape = tuple(int(d) for d in shape)
    numel = int(np.prod(src, dtype=np.int64))

    unknown = [i for i, d in enumerate(shape) if d == -1]
    if len(unknown) > 1:
        raise ShapeError("reshape", f"only one dimension can be -1, got {shape}", src)
    if any(d < -1 for d in shape):
        raise ShapeError("reshape", f"invalid dimension in {shape}", src)

    if unknown:
        known = int(np.prod([d for d in shape if d != -1], dtype=np.int64))
        if known == 0 or numel % known != 0:
            raise ShapeError(
                "reshape", f"cannot reshape {src} into {shape}", src, shape
            )
        shape = tuple(numel // known if d == -1 else d for d in shape)

    if int(np.prod(shape, dtype=np.int64)) != numel:
        raise ShapeError(
            "reshape",
            f"cannot reshape {src} ({numel} elements) into {shape}",
            src,
            shape,
        )
    return shape


class Reshape(TensorOperation):
    """
    Return the same elements under a new shape.

    Backward reshapes the output gradient back to the input's shape.
    """

    name = "reshape"
    arity = 1

    def __init__(self, shape: Sequence[int]) -> None:
        super().__init__()
        self.ctx.saved_meta["target"] = tuple(int(d) for d in shape)

    def forward(self, inputs: Sequence[Tensor]) -> Tensor:
        (x,) = self._check_inputs(inputs)
        new_shape = _resolve_shape(x.shape, self.ctx.saved_meta["target"])
        self.ctx.saved_meta["shape"] = x.shape

        out = Tensor._from_numpy(x._data.reshape(new_shape).copy())
        return self._link(out, (x,))

    def backward(self, output: Tensor) -> list[np.ndarray]:
        g = self._grad_output(output)
        return self._select_linked([g.reshape(self.ctx.saved_meta["shape"])])

    def __repr__(self) -> str:
        return f"Reshape({self.ctx.saved_meta['target']})"


def reshape(x: Tensor, shape: Sequence[int]) -> Tensor:
    """
    Reshape `x`, inferring at most one -1 dimension.

    Raises
    ------
    ShapeError
        If the element counts differ.
    """
    return Reshape(shape).forward((x,))
