"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters used
by optimization algorithms. A parameter is a leaf tensor node whose buffer is
updated in place between forward/backward passes.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IParameter(ITensor, Protocol):
    """
    Domain-level interface for trainable parameters.

    Optimizers rely on this interface to read gradients and write updated
    values back into the parameter's storage.

    Notes
    -----
    - Parameters are always leaves; they never carry a creator.
    - Parameters may be frozen by turning off `requires_grad`.
    """

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Overwrite the parameter's storage with `arr`.

        Parameters
        ----------
        arr : Any
            Buffer with exactly the parameter's shape.
        """
        ...

    def clear_gradient(self) -> None:
        """
        Clear the stored gradient (alias of `zero_grad`).
        """
        ...

    @property
    def grad(self) -> Optional[Any]:
        """
        Return a copy of the accumulated gradient, or None.
        """
        ...
