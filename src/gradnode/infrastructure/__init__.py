"""
NumPy-backed implementations of the gradnode domain contracts.
"""

from ._activations import ReLU
from ._linear import Linear
from ._losses import mse_loss
from ._module import Module, count_parameters
from ._parameter import Parameter
from .autograd import GraphEngine, backward
from .data import DataLoader, Dataset, TensorDataset
from .models import Sequential
from .optimizers import SGD
from .tensor import Context, Tensor

__all__ = [
    "Context",
    "DataLoader",
    "Dataset",
    "GraphEngine",
    "Linear",
    "Module",
    "Parameter",
    "ReLU",
    "SGD",
    "Sequential",
    "Tensor",
    "TensorDataset",
    "backward",
    "count_parameters",
    "mse_loss",
]
