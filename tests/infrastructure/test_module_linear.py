import unittest
import numpy as np

from gradnode.domain._errors import ShapeError
from gradnode.infrastructure._activations import ReLU
from gradnode.infrastructure._linear import Linear
from gradnode.infrastructure._module import Module, count_parameters
from gradnode.infrastructure._parameter import Parameter
from gradnode.infrastructure.models._sequential import Sequential
from gradnode.infrastructure.ops import mean
from gradnode.infrastructure.tensor._tensor import Tensor


def tensor_from_np(arr, *, requires_grad: bool = False) -> Tensor:
    t = Tensor(np.asarray(arr, dtype=np.float32))
    return t.with_grad() if requires_grad else t


class _Block(Module):
    def __init__(self) -> None:
        super().__init__()
        self.scale = Parameter([2.0])
        self.inner = Linear(2, 2, seed=0)

    def forward(self, x):
        return self.inner(x) * self.scale


class TestModuleRegistration(unittest.TestCase):
    def test_attribute_assignment_registers(self):
        block = _Block()
        names = [n for n, _ in block.named_parameters()]
        self.assertEqual(names, ["scale", "inner.weight", "inner.bias"])
        self.assertEqual(len(list(block.parameters())), 3)

    def test_assigning_none_unregisters(self):
        block = _Block()
        block.scale = None
        names = [n for n, _ in block.named_parameters()]
        self.assertEqual(names, ["inner.weight", "inner.bias"])

    def test_explicit_registration(self):
        m = Module()
        m.register_parameter("w", Parameter([1.0, 2.0]))
        m.register_parameter("skip", None)
        m.register_module("child", Linear(1, 1, seed=0))
        self.assertEqual(
            [n for n, _ in m.named_parameters()], ["w", "child.weight", "child.bias"]
        )
        self.assertEqual(count_parameters(m), 4)

    def test_zero_grad_clears_all(self):
        block = _Block()
        out = block(tensor_from_np([[1.0, 1.0]]))
        mean(out).backward()
        self.assertTrue(all(p.grad is not None for p in block.parameters()))
        block.zero_grad()
        self.assertTrue(all(p.grad is None for p in block.parameters()))

    def test_base_forward_not_implemented(self):
        with self.assertRaises(NotImplementedError):
            Module()(tensor_from_np([1.0]))


class TestParameter(unittest.TestCase):
    def test_defaults_to_requires_grad_leaf(self):
        p = Parameter(np.zeros((2, 2)))
        self.assertTrue(p.requires_grad)
        self.assertTrue(p.is_leaf)
        self.assertIsNone(p.grad)
        self.assertIsInstance(p, Tensor)

    def test_can_be_frozen(self):
        p = Parameter([1.0], requires_grad=False)
        self.assertFalse(p.requires_grad)

    def test_repr_names_parameter(self):
        self.assertTrue(repr(Parameter([1.0])).startswith("Parameter("))


class TestLinear(unittest.TestCase):
    def test_parameter_shapes_and_init_range(self):
        layer = Linear(4, 3, seed=0)
        self.assertEqual(layer.weight.shape, (4, 3))
        self.assertEqual(layer.bias.shape, (3,))
        k = 1.0 / np.sqrt(4.0)
        self.assertTrue(np.all(np.abs(layer.weight.to_numpy()) <= k))
        self.assertTrue(np.all(np.abs(layer.bias.to_numpy()) <= k))

    def test_seeded_init_is_reproducible(self):
        a = Linear(3, 2, seed=7)
        b = Linear(3, 2, seed=7)
        np.testing.assert_array_equal(a.weight.to_numpy(), b.weight.to_numpy())

    def test_no_bias(self):
        layer = Linear(3, 2, bias=False, seed=0)
        self.assertIsNone(layer.bias)
        self.assertEqual(len(list(layer.parameters())), 1)

    def test_forward_rank2(self):
        layer = Linear(2, 3, seed=0)
        x = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
        out = layer(tensor_from_np(x))
        expected = x @ layer.weight.to_numpy() + layer.bias.to_numpy()
        self.assertEqual(out.shape, (2, 3))
        np.testing.assert_allclose(out.to_numpy(), expected, rtol=1e-6)

    def test_forward_rank3(self):
        layer = Linear(4, 2, seed=0)
        x = np.random.default_rng(0).standard_normal((2, 3, 4)).astype(np.float32)
        out = layer(tensor_from_np(x))
        self.assertEqual(out.shape, (2, 3, 2))
        expected = x @ layer.weight.to_numpy() + layer.bias.to_numpy()
        np.testing.assert_allclose(out.to_numpy(), expected, rtol=1e-5, atol=1e-6)

    def test_backward_grads(self):
        layer = Linear(2, 3, seed=0)
        x = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
        xt = tensor_from_np(x, requires_grad=True)
        layer(xt).backward()

        np.testing.assert_allclose(layer.weight.grad, x.T @ np.ones((2, 3)))
        np.testing.assert_allclose(layer.bias.grad, [2.0, 2.0, 2.0])
        np.testing.assert_allclose(
            xt.grad, np.ones((2, 3)) @ layer.weight.to_numpy().T, rtol=1e-6
        )

    def test_wrong_feature_dim_raises(self):
        layer = Linear(3, 2, seed=0)
        with self.assertRaises(ShapeError):
            layer(tensor_from_np(np.ones((2, 4))))

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            Linear(0, 2)


class TestSequential(unittest.TestCase):
    def test_forward_applies_layers_in_order(self):
        l1 = Linear(2, 4, seed=0)
        l2 = Linear(4, 1, seed=1)
        model = Sequential(l1, ReLU(), l2)

        x = tensor_from_np([[1.0, -1.0]])
        expected = l2(ReLU()(l1(x)))
        np.testing.assert_allclose(model(x).to_numpy(), expected.to_numpy())

    def test_container_protocol(self):
        l1 = Linear(2, 2, seed=0)
        relu = ReLU()
        model = Sequential(l1, relu)
        self.assertEqual(len(model), 2)
        self.assertIs(model[0], l1)
        self.assertIs(model[1], relu)
        self.assertEqual(list(model), [l1, relu])
        self.assertEqual(model.layers, [l1, relu])

    def test_parameters_in_layer_order(self):
        l1 = Linear(2, 2, seed=0)
        l2 = Linear(2, 1, seed=1)
        model = Sequential(l1, ReLU(), l2)
        params = list(model.parameters())
        self.assertEqual(len(params), 4)
        self.assertIs(params[0], l1.weight)
        self.assertIs(params[3], l2.bias)
        self.assertEqual(
            [n for n, _ in model.named_parameters()],
            ["0.weight", "0.bias", "2.weight", "2.bias"],
        )

    def test_add_validation(self):
        model = Sequential()
        with self.assertRaises(TypeError):
            model.add("not a module")  # type: ignore[arg-type]
        model.add(ReLU())
        model.add(Linear(2, 1, seed=0))
        self.assertEqual(len(model), 2)
        self.assertEqual(
            [n for n, _ in model.named_parameters()], ["1.weight", "1.bias"]
        )

    def test_summary(self):
        model = Sequential(Linear(2, 3, seed=0), ReLU())
        text = model.summary()
        self.assertIn("(0): Linear(in_features=2, out_features=3, bias=True)", text)
        self.assertIn("(1): ReLU()", text)
        self.assertIn("Trainable parameters: 9", text)


if __name__ == "__main__":
    unittest.main()
