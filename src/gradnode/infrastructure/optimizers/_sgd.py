"""
Plain stochastic gradient descent over a flat list of parameters.

Updates are written through `Parameter.copy_from_numpy`, so a step never adds
nodes to a graph and every parameter stays a leaf.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .._parameter import Parameter


@dataclass(init=False)
class SGD:
    """
    Vanilla SGD: ``p <- p - lr * p.grad`` for every parameter with a gradient.

    Parameters
    ----------
    params : Iterable[Parameter]
        Parameters to update, in a fixed order. Generators are materialized.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.

    Notes
    -----
    Parameters whose gradient is ``None`` (not reached by the last backward
    pass) are left untouched.
    """

    params: list[Parameter] = field(default_factory=list)
    lr: float = 1e-3

    def __init__(self, params: Iterable[Parameter], *, lr: float = 1e-3) -> None:
        self.params = list(params)
        self.set_lr(lr)

    def set_lr(self, lr: float) -> None:
        """
        Change the learning rate between steps.

        Raises
        ------
        ValueError
            If ``lr <= 0``.
        """
        lr = float(lr)
        if lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {lr}")
        self.lr = lr

    def zero_grad(self) -> None:
        for p in self.params:
            p.zero_grad()

    def step(self) -> None:
        for p in self.params:
            g = p.grad
            if g is None:
                continue
            p.copy_from_numpy(p.to_numpy() - self.lr * g)
