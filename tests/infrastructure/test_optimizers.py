import unittest
import numpy as np

from gradnode.infrastructure._parameter import Parameter
from gradnode.infrastructure.optimizers._sgd import SGD


def param_from_np(arr: np.ndarray) -> Parameter:
    return Parameter(np.asarray(arr, dtype=np.float32), requires_grad=True)


class TestSGD(unittest.TestCase):
    def test_step_updates_parameter(self):
        p = param_from_np(np.array([1.0, 2.0, 3.0], dtype=np.float32))
        p._set_grad(np.array([0.1, -0.2, 0.3], dtype=np.float32))

        opt = SGD([p], lr=0.5)
        opt.step()

        expected = np.array([1.0, 2.0, 3.0], dtype=np.float32) - 0.5 * np.array(
            [0.1, -0.2, 0.3], dtype=np.float32
        )
        np.testing.assert_allclose(p.to_numpy(), expected, rtol=1e-6, atol=1e-7)

    def test_step_skips_none_grad(self):
        p = param_from_np(np.array([1.0, 2.0], dtype=np.float32))
        p.zero_grad()

        opt = SGD([p], lr=0.1)
        before = p.to_numpy().copy()
        opt.step()
        np.testing.assert_allclose(p.to_numpy(), before, rtol=1e-6, atol=1e-7)

    def test_zero_grad_clears_grad(self):
        p = param_from_np(np.array([1.0], dtype=np.float32))
        p._set_grad(np.array([2.0], dtype=np.float32))

        opt = SGD([p], lr=0.1)
        opt.zero_grad()
        self.assertIsNone(p.grad)

    def test_set_lr_changes_next_step(self):
        p = param_from_np(np.array([1.0], dtype=np.float32))
        opt = SGD([p], lr=0.1)
        opt.set_lr(0.5)

        p._set_grad(np.array([2.0], dtype=np.float32))
        opt.step()
        np.testing.assert_allclose(p.to_numpy(), [0.0], atol=1e-7)

        with self.assertRaises(ValueError):
            opt.set_lr(-1.0)
        self.assertEqual(opt.lr, 0.5)

    def test_step_keeps_parameter_a_leaf(self):
        p = param_from_np(np.array([1.0], dtype=np.float32))
        p._set_grad(np.array([1.0], dtype=np.float32))
        SGD([p], lr=0.1).step()
        self.assertTrue(p.is_leaf)
        self.assertTrue(p.requires_grad)

    def test_accepts_generator_of_params(self):
        ps = [param_from_np(np.zeros((2,))) for _ in range(3)]
        opt = SGD((p for p in ps), lr=0.1)
        self.assertEqual(len(opt.params), 3)

    def test_invalid_hyperparams_raise(self):
        p = param_from_np(np.array([1.0], dtype=np.float32))
        with self.assertRaises(ValueError):
            _ = SGD([p], lr=0.0)
        with self.assertRaises(ValueError):
            _ = SGD([p], lr=-0.1)


if __name__ == "__main__":
    unittest.main()
