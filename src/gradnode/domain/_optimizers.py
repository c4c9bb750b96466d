"""
Domain-level optimizer contracts for gradnode.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations.

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers consume gradients already stored on parameters; how those
  gradients were produced (the graph engine) is outside this protocol.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    An optimizer holds a flat, ordered list of trainable parameters and
    updates them in place.
    """

    def step(self) -> None:
        """
        Apply one optimization step.

        Implementations should skip parameters whose gradient is None.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear gradients for all managed parameters.
        """
        ...

    @property
    def params(self) -> Iterable[object]:
        """
        Return the parameters managed by this optimizer.
        """
        ...
