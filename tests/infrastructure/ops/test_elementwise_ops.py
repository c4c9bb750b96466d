import unittest
import numpy as np

from gradnode.domain._errors import EmptyTensorError, MissingGradientError, ShapeError
from gradnode.infrastructure.ops import Add, Multiply, ReLUOp, add, mean, multiply, relu
from gradnode.infrastructure.tensor._tensor import Tensor


def tensor_from_np(arr, *, requires_grad: bool = False) -> Tensor:
    t = Tensor(np.asarray(arr, dtype=np.float32))
    return t.with_grad() if requires_grad else t


class TestAdd(unittest.TestCase):
    def test_forward_with_broadcast(self):
        a = tensor_from_np([[1.0, 2.0], [3.0, 4.0]])
        b = tensor_from_np([5.0, 6.0])
        out = add(a, b)
        np.testing.assert_array_equal(out.to_numpy(), [[6.0, 8.0], [8.0, 10.0]])

    def test_forward_matches_numpy(self):
        rng = np.random.default_rng(0)
        x = rng.standard_normal((3, 1, 4)).astype(np.float32)
        y = rng.standard_normal((2, 4)).astype(np.float32)
        out = add(tensor_from_np(x), tensor_from_np(y))
        np.testing.assert_allclose(out.to_numpy(), x + y, rtol=1e-6)

    def test_grad_of_mean_of_sum(self):
        a = tensor_from_np([1.0, 2.0, 3.0], requires_grad=True)
        b = tensor_from_np([4.0, 5.0, 6.0], requires_grad=True)
        mean(add(a, b)).backward()
        np.testing.assert_allclose(a.grad, [1 / 3] * 3, rtol=1e-6)
        np.testing.assert_allclose(b.grad, [1 / 3] * 3, rtol=1e-6)

    def test_broadcast_gradient_is_fan_in_sum(self):
        rng = np.random.default_rng(1)
        batch = tensor_from_np(rng.standard_normal((2, 2, 3)), requires_grad=True)
        single = tensor_from_np(rng.standard_normal((2, 3)), requires_grad=True)

        mean(add(batch, single)).backward()

        self.assertEqual(single.grad.shape, (2, 3))
        np.testing.assert_allclose(single.grad, batch.grad.sum(axis=0), rtol=1e-6)
        np.testing.assert_allclose(single.grad, np.full((2, 3), 2 / 12), rtol=1e-6)

    def test_requires_grad_is_or_of_inputs(self):
        a = tensor_from_np([1.0])
        b = tensor_from_np([2.0])
        out = add(a, b)
        self.assertFalse(out.requires_grad)
        self.assertIsNone(out.creator)
        self.assertEqual(out.parents, ())

        b.with_grad()
        out = add(a, b)
        self.assertTrue(out.requires_grad)
        self.assertIsInstance(out.creator, Add)
        self.assertEqual(len(out.parents), 1)
        self.assertIs(out.parents[0], b)

    def test_backward_returns_only_linked_parent_grads(self):
        a = tensor_from_np([[1.0, 2.0]])
        b = tensor_from_np([3.0, 4.0], requires_grad=True)
        out = add(a, b)
        out._set_grad(np.ones((1, 2), dtype=np.float32))
        grads = out.creator.backward(out)
        self.assertEqual(len(grads), 1)
        self.assertEqual(grads[0].shape, (2,))

    def test_shape_mismatch_raises_before_linking(self):
        a = tensor_from_np(np.ones((2, 3)), requires_grad=True)
        b = tensor_from_np(np.ones((4,)), requires_grad=True)
        with self.assertRaises(ShapeError):
            add(a, b)
        np.testing.assert_array_equal(a.grad, np.zeros((2, 3)))
        self.assertTrue(a.is_leaf)

    def test_rejects_non_tensor_input(self):
        with self.assertRaises(TypeError):
            Add().forward((tensor_from_np([1.0]), [1.0]))

    def test_backward_without_grad_raises(self):
        a = tensor_from_np([1.0], requires_grad=True)
        out = add(a, a)
        with self.assertRaises(MissingGradientError):
            out.creator.backward(out)


class TestMultiply(unittest.TestCase):
    def test_forward_with_broadcast(self):
        a = tensor_from_np([[1.0, 2.0], [3.0, 4.0]])
        b = tensor_from_np([10.0, 100.0])
        out = multiply(a, b)
        np.testing.assert_array_equal(out.to_numpy(), [[10.0, 200.0], [30.0, 400.0]])

    def test_grads_use_other_operand(self):
        a = tensor_from_np([1.0, 2.0, 3.0], requires_grad=True)
        b = tensor_from_np([4.0, 5.0, 6.0], requires_grad=True)
        multiply(a, b).backward()
        np.testing.assert_allclose(a.grad, [4.0, 5.0, 6.0])
        np.testing.assert_allclose(b.grad, [1.0, 2.0, 3.0])

    def test_broadcast_grads_are_reduced(self):
        x = np.arange(6, dtype=np.float32).reshape(2, 3)
        w = np.array([1.0, 2.0, 3.0], dtype=np.float32)
        a = tensor_from_np(x, requires_grad=True)
        b = tensor_from_np(w, requires_grad=True)

        multiply(a, b).backward()

        np.testing.assert_allclose(a.grad, np.broadcast_to(w, (2, 3)))
        np.testing.assert_allclose(b.grad, x.sum(axis=0))

    def test_size_one_axis_is_reduced_with_keepdims(self):
        x = np.arange(6, dtype=np.float32).reshape(2, 3)
        col = np.array([[2.0], [3.0]], dtype=np.float32)
        a = tensor_from_np(x, requires_grad=True)
        c = tensor_from_np(col, requires_grad=True)

        multiply(a, c).backward()

        self.assertEqual(c.grad.shape, (2, 1))
        np.testing.assert_allclose(c.grad, x.sum(axis=1, keepdims=True))

    def test_scalar_multiply_grad(self):
        a = tensor_from_np([1.0, -2.0, 3.0], requires_grad=True)
        (a * 2.0).backward()
        np.testing.assert_allclose(a.grad, [2.0, 2.0, 2.0])

    def test_square_via_same_operand_twice(self):
        a = tensor_from_np([1.0, 2.0, 3.0], requires_grad=True)
        out = multiply(a, a)
        self.assertEqual(len(out.parents), 2)
        out.backward()
        np.testing.assert_allclose(a.grad, [2.0, 4.0, 6.0])

    def test_saved_operands_are_copies(self):
        a = tensor_from_np([1.0, 2.0], requires_grad=True)
        b = tensor_from_np([3.0, 4.0])
        out = multiply(a, b)
        b.copy_from_numpy([100.0, 100.0])
        out.backward()
        np.testing.assert_allclose(a.grad, [3.0, 4.0])

    def test_creator_type(self):
        a = tensor_from_np([1.0], requires_grad=True)
        self.assertIsInstance(multiply(a, a).creator, Multiply)

    def test_shape_mismatch_raises(self):
        with self.assertRaises(ShapeError):
            multiply(tensor_from_np(np.ones((3, 2))), tensor_from_np(np.ones((3,))))


class TestMean(unittest.TestCase):
    def test_forward_is_rank_zero(self):
        x = tensor_from_np([[1.0, 2.0], [3.0, 6.0]])
        out = mean(x)
        self.assertEqual(out.shape, ())
        self.assertAlmostEqual(out.item(), 3.0)

    def test_backward_distributes_evenly(self):
        x = tensor_from_np(np.ones((2, 5)), requires_grad=True)
        mean(x).backward()
        np.testing.assert_allclose(x.grad, np.full((2, 5), 0.1), rtol=1e-6)

    def test_backward_scales_with_seed(self):
        x = tensor_from_np(np.ones((4,)), requires_grad=True)
        mean(x).backward(np.array(8.0, dtype=np.float32))
        np.testing.assert_allclose(x.grad, [2.0, 2.0, 2.0, 2.0])

    def test_empty_raises(self):
        with self.assertRaises(EmptyTensorError):
            mean(Tensor.zeros((0, 3)))


class TestReLU(unittest.TestCase):
    def test_forward(self):
        x = tensor_from_np([-2.0, -0.5, 0.0, 0.5, 3.0])
        np.testing.assert_array_equal(relu(x).to_numpy(), [0.0, 0.0, 0.0, 0.5, 3.0])

    def test_backward_masks_non_positive_inputs(self):
        x = tensor_from_np([-2.0, 0.0, 1.0, 3.0], requires_grad=True)
        relu(x).backward()
        np.testing.assert_array_equal(x.grad, [0.0, 0.0, 1.0, 1.0])

    def test_preserves_requires_grad(self):
        self.assertFalse(relu(tensor_from_np([1.0])).requires_grad)
        out = relu(tensor_from_np([1.0], requires_grad=True))
        self.assertTrue(out.requires_grad)
        self.assertIsInstance(out.creator, ReLUOp)


if __name__ == "__main__":
    unittest.main()
