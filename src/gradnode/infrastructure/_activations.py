"""
Module-based activation layers.

`ReLU` wraps the `relu` operation in a `Module` so it can be composed inside
containers such as `Sequential`. It holds no parameters.
"""

from .ops._relu import relu
from .tensor._tensor import Tensor
from ._module import Module


class ReLU(Module):
    """
    ReLU activation module.

    This layer applies the rectified linear unit elementwise:

        relu(x) = max(0, x)
    """

    def forward(self, x: Tensor) -> Tensor:
        return relu(x)
