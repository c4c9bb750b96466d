"""
Module interface definitions.

This module defines the domain-level interface for neural network modules
using structural typing.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ._parameter import IParameter
from ._tensor import ITensor


@runtime_checkable
class IModule(Protocol):
    """
    Domain-level interface for neural network modules.

    Any object implementing both `forward` and `parameters` is considered a
    valid module.
    """

    def forward(self, x: ITensor) -> ITensor:
        """
        Execute the forward computation of the module.

        Parameters
        ----------
        x : ITensor
            Input tensor to the module.

        Returns
        -------
        ITensor
            Output tensor produced by the module.
        """
        ...

    def parameters(self) -> Iterable[IParameter]:
        """
        Return the trainable parameters of the module.

        Returns
        -------
        Iterable[IParameter]
            An iterable over the module's trainable parameters, in
            registration order.
        """
        ...
