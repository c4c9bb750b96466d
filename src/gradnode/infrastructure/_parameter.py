"""
Concrete trainable parameter implementation.

This module defines `Parameter`, an infrastructure-level implementation of the
domain contract `IParameter`. A `Parameter` is a leaf `Tensor` intended to be
optimized by training algorithms; it reuses the tensor's storage and gradient
buffer and differs only in defaulting to ``requires_grad=True``.

Design notes
------------
- `Parameter` subclasses `Tensor`, so it can be passed straight into any
  operation and receives gradients from the graph engine like any other leaf.
- The `requires_grad` flag enables freezing/unfreezing parameters without
  changing module structure.
"""

from __future__ import annotations

from typing import Any

from ..domain._parameter import IParameter
from .tensor._tensor import Tensor


class Parameter(Tensor, IParameter):
    """
    Trainable tensor wrapper.

    Parameters
    ----------
    data : Any
        Initial contents, copied into float32 storage.
    requires_grad : bool, optional
        Whether this parameter should accumulate gradients. Defaults to True.

    Notes
    -----
    `Parameter` exists to make trainable state explicit and to serve as the
    object type returned by `Module.parameters()` and consumed by optimizers.
    """

    def __init__(self, data: Any, *, requires_grad: bool = True) -> None:
        super().__init__(data, requires_grad=requires_grad)

    def __repr__(self) -> str:
        return "Parameter" + super().__repr__()[len("Tensor"):]
