import unittest

import numpy as np

from tinyai import ShapeMismatchError, TensorIndexError, Variable
from tinyai.infrastructure import functions as F


class TestFunctionForwardValues(unittest.TestCase):
    def setUp(self):
        self.x_np = np.array([[1.0, -2.0, 3.0], [0.5, 4.0, -1.0]])
        self.x = Variable(self.x_np)

    def test_reductions(self):
        np.testing.assert_allclose(F.sum(self.x, axis=0).value.to_numpy(), self.x_np.sum(axis=0))
        np.testing.assert_allclose(F.mean(self.x).value.to_numpy(), self.x_np.mean())
        np.testing.assert_allclose(F.var(self.x, axis=1).value.to_numpy(), self.x_np.var(axis=1))
        np.testing.assert_allclose(
            F.max(self.x, axis=1, keepdims=True).value.to_numpy(), [[3.0], [4.0]]
        )

    def test_activations(self):
        np.testing.assert_allclose(F.relu(self.x).value.to_numpy(), np.maximum(self.x_np, 0))
        np.testing.assert_allclose(F.tanh(self.x).value.to_numpy(), np.tanh(self.x_np))
        probs = F.softmax(self.x, axis=1).value.to_numpy()
        np.testing.assert_allclose(probs.sum(axis=1), [1.0, 1.0])

    def test_slice_range(self):
        out = F.slice_range(self.x, 1, 0, 2)
        np.testing.assert_allclose(out.value.to_numpy(), self.x_np[:, :2])

    def test_pow_rejects_variable_exponent(self):
        with self.assertRaises(TypeError):
            F.pow(self.x, Variable(2.0))

    def test_shape_errors_surface_unchanged(self):
        with self.assertRaises(ShapeMismatchError):
            F.add(self.x, Variable(np.ones(4)))
        with self.assertRaises(ShapeMismatchError):
            F.matmul(self.x, Variable(np.ones((2, 2))))
        with self.assertRaises(ShapeMismatchError):
            F.reshape(self.x, (4, 2))
        with self.assertRaises(TensorIndexError):
            F.sum(self.x, axis=2)

    def test_failed_forward_records_nothing(self):
        y = Variable(np.ones(4))
        with self.assertRaises(ShapeMismatchError):
            self.x + y
        self.x.sum().backward()
        self.assertIsNone(y.grad)


if __name__ == "__main__":
    unittest.main()


class TestFunctionExports(unittest.TestCase):
    def test_all_names_resolve(self):
        self.assertEqual(len(F.__all__), 46)
        for name in F.__all__:
            self.assertTrue(callable(getattr(F, name)), name)
        self.assertIn("Softmax", F.__all__)
        self.assertIn("slice_range", F.__all__)
