from ._constants import DEFAULT_DTYPE, DEFAULT_RANDN_STD, REPR_MAX_ELEMENTS
from ._tensor import Tensor
from ._tensor_context import Context

__all__ = [
    "Context",
    "DEFAULT_DTYPE",
    "DEFAULT_RANDN_STD",
    "REPR_MAX_ELEMENTS",
    "Tensor",
]
