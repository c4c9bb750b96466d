import unittest
import numpy as np

from gradnode.domain._errors import ShapeError
from gradnode.infrastructure.ops import Reshape, mean, multiply, reshape
from gradnode.infrastructure.tensor._tensor import Tensor


class TestReshapeOp(unittest.TestCase):
    def test_backward_reshapes_gradient_back(self):
        x0 = np.arange(6, dtype=np.float32).reshape(2, 3)
        x = Tensor(x0).with_grad()
        y = reshape(x, (3, 2))
        self.assertIsInstance(y.creator, Reshape)

        w = Tensor(np.arange(6, dtype=np.float32).reshape(3, 2))
        multiply(y, w).backward()

        self.assertEqual(x.grad.shape, (2, 3))
        np.testing.assert_array_equal(x.grad, w.to_numpy().reshape(2, 3))

    def test_output_does_not_alias_input(self):
        x = Tensor(np.zeros((2, 2)))
        y = reshape(x, (4,))
        x.copy_from_numpy(np.ones((2, 2)))
        np.testing.assert_array_equal(y.to_numpy(), np.zeros(4))

    def test_flatten_then_mean(self):
        x = Tensor(np.ones((2, 2, 2))).with_grad()
        mean(x.view(-1)).backward()
        np.testing.assert_allclose(x.grad, np.full((2, 2, 2), 1 / 8))

    def test_negative_dimension_rejected(self):
        with self.assertRaises(ShapeError):
            reshape(Tensor(np.zeros((4,))), (-2, -2))


if __name__ == "__main__":
    unittest.main()
