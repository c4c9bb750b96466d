"""
Ordered layer container.

`Sequential(l1, l2, ..., ln)` computes ``ln(...l2(l1(x)))``. Layers are
registered as submodules under their position ("0", "1", ...), so
`parameters()` walks them in execution order.
"""

from typing import Iterator, List

from .._module import Module


class Sequential(Module):
    """
    Chain of modules applied one after another.

    Attributes
    ----------
    layers : List[Module]
        The layers in execution order. Extend it with `add`, not by mutating
        the list, so new layers are registered for parameter discovery.
    """

    def __init__(self, *layers: Module) -> None:
        super().__init__()
        self.layers: List[Module] = []
        for layer in layers:
            self.add(layer)

    def add(self, layer: Module) -> None:
        """
        Append `layer` and register it under its position.

        Raises
        ------
        TypeError
            If `layer` is not a `Module`.
        """
        if not isinstance(layer, Module):
            raise TypeError(f"Sequential.add expects a Module, got: {type(layer)}")
        self.register_module(str(len(self.layers)), layer)
        self.layers.append(layer)

    def forward(self, x):
        out = x
        for layer in self.layers:
            out = layer(out)
        return out

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.layers)

    def __getitem__(self, idx: int) -> Module:
        return self.layers[idx]

    def summary(self) -> str:
        """
        Describe the stack: one line per layer, then the parameter count.
        """
        lines = [f"{self.__class__.__name__}("]
        lines.extend(f"  ({i}): {layer!r}" for i, layer in enumerate(self.layers))
        lines.append(")")
        n = sum(p.numel() for p in self.parameters())
        lines.append(f"Trainable parameters: {n}")
        return "\n".join(lines)
