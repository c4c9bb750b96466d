"""
Infrastructure module base class.

This module provides a concrete `Module` implementation that satisfies the
domain-level `IModule` protocol. It implements common conveniences used by
neural network layers, including:

- parameter registration and storage
- submodule registration and storage
- recursive parameter traversal (`parameters`, `named_parameters`)
- `__call__` forwarding to `forward` for ergonomic invocation
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Iterator, Optional

from ..domain._module import IModule
from ._parameter import Parameter


class Module(IModule):
    """
    Infrastructure base class for layers/modules.

    Subclasses typically create `Parameter` instances, assign them as
    attributes (which registers them), and implement `forward`.

    Attributes
    ----------
    _parameters : Dict[str, Parameter]
        Mapping from parameter name to parameter object for this module.
    _modules : Dict[str, Module]
        Mapping from child module name to child module object for this module.

    Notes
    -----
    - Parameters and submodules can be registered explicitly (`register_*`) or
      implicitly by assigning them as attributes, e.g.:
          self.weight = Parameter(...)
          self.block = Sequential(...)
    - `parameters()` yields a module's own parameters first, then recurses
      into children in registration order.
    """

    def __init__(self) -> None:
        # Use super().__setattr__ to avoid triggering our __setattr__ logic.
        super().__setattr__("_parameters", {})
        super().__setattr__("_modules", {})

    def __setattr__(self, name: str, value: Any) -> None:
        """
        Intercept attribute assignment to auto-register Parameters and child Modules.
        """
        if name in {"_parameters", "_modules"}:
            super().__setattr__(name, value)
            return

        # Assigning None unregisters a previously registered entry.
        if value is None:
            self._parameters.pop(name, None)
            self._modules.pop(name, None)
            super().__setattr__(name, value)
            return

        if isinstance(value, Parameter):
            self._parameters[name] = value
        elif isinstance(value, Module):
            self._modules[name] = value

        super().__setattr__(name, value)

    def register_parameter(self, name: str, param: Optional[Parameter]) -> None:
        """
        Register a parameter with this module.

        Parameters
        ----------
        name : str
            Name under which the parameter will be stored (e.g., "weight").
        param : Optional[Parameter]
            Parameter instance to register. If None, registration is skipped.
        """
        if param is None:
            return
        self._parameters[name] = param
        super().__setattr__(name, param)

    def register_module(self, name: str, module: Optional["Module"]) -> None:
        """
        Register a child module with this module.

        Parameters
        ----------
        name : str
            Name under which the module will be stored.
        module : Optional[Module]
            Child module to register. If None, registration is skipped.
        """
        if module is None:
            return
        self._modules[name] = module
        super().__setattr__(name, module)

    def parameters(self) -> Iterable[Parameter]:
        """
        Return an iterable over this module's parameters (recursive).
        """
        for p in self._parameters.values():
            yield p
        for m in self._modules.values():
            yield from m.parameters()

    def named_parameters(self, prefix: str = "") -> Iterator[tuple[str, Parameter]]:
        """
        Return an iterator over (name, parameter) pairs (recursive).

        Parameters
        ----------
        prefix : str
            Prefix to prepend to parameter names (used for recursion).

        Returns
        -------
        Iterator[tuple[str, Parameter]]
            Iterator yielding (fully_qualified_name, parameter).
        """
        base = prefix + "." if prefix else ""

        for name, p in self._parameters.items():
            yield (f"{base}{name}", p)

        for child_name, child in self._modules.items():
            yield from child.named_parameters(f"{base}{child_name}")

    def children(self) -> Iterator["Module"]:
        """
        Iterate over direct child modules in registration order.
        """
        return iter(self._modules.values())

    def zero_grad(self) -> None:
        """
        Clear the gradient of every parameter reachable from this module.
        """
        for p in self.parameters():
            p.zero_grad()

    def forward(self, x):
        """
        Execute the forward computation of the module.

        Subclasses must implement this.
        """
        raise NotImplementedError

    def __call__(self, x):
        return self.forward(x)

    def extra_repr(self) -> str:
        return ""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.extra_repr()})"


def count_parameters(module: Module) -> int:
    """
    Return the total number of scalar elements across a module's parameters.
    """
    return sum(p.numel() for p in module.parameters())

