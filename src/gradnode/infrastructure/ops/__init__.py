from ._add import Add, add
from ._base import TensorOperation
from ._broadcast import broadcast_shapes, sum_to_shape
from ._matmul import MatMul, matmul
from ._mean import Mean, mean
from ._multiply import Multiply, multiply
from ._relu import ReLUOp, relu
from ._reshape import Reshape, reshape

__all__ = [
    "Add",
    "MatMul",
    "Mean",
    "Multiply",
    "ReLUOp",
    "Reshape",
    "TensorOperation",
    "add",
    "broadcast_shapes",
    "matmul",
    "mean",
    "multiply",
    "relu",
    "reshape",
    "sum_to_shape",
]
