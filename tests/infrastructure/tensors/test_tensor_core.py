import unittest

import numpy as np

from tinyai import Config, ShapeMismatchError, Tensor, using_config


class TestTensorConstruction(unittest.TestCase):
    def test_from_nested_list(self):
        t = Tensor([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.dtype, Config.dtype)
        np.testing.assert_allclose(t.to_numpy(), [[1, 2, 3], [4, 5, 6]])

    def test_from_scalar_is_rank_zero(self):
        t = Tensor(2.5)
        self.assertEqual(t.shape, ())
        self.assertEqual(t.item(), 2.5)

    def test_explicit_shape(self):
        t = Tensor([1, 2, 3, 4, 5, 6], shape=(3, 2))
        self.assertEqual(t.shape, (3, 2))
        np.testing.assert_allclose(t.to_numpy()[2], [5, 6])

    def test_explicit_shape_size_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor([1, 2, 3], shape=(2, 2))

    def test_zero_sized_dimension_rejected(self):
        with self.assertRaises(ValueError):
            Tensor(np.zeros((2, 0)))

    def test_integer_dtype_rejected(self):
        with self.assertRaises(TypeError):
            Tensor([1, 2], dtype=np.int32)

    def test_input_is_copied(self):
        arr = np.ones((2, 2))
        t = Tensor(arr)
        arr[0, 0] = 7.0
        self.assertEqual(t.to_numpy()[0, 0], 1.0)

    def test_data_view_is_read_only(self):
        t = Tensor([1.0, 2.0])
        with self.assertRaises(ValueError):
            t.data[0] = 5.0

    def test_to_numpy_returns_copy(self):
        t = Tensor([1.0, 2.0])
        out = t.to_numpy()
        out[0] = 9.0
        self.assertEqual(t.tolist(), [1.0, 2.0])

    def test_item_requires_single_element(self):
        self.assertEqual(Tensor([[3.0]]).item(), 3.0)
        with self.assertRaises(ValueError):
            Tensor([1.0, 2.0]).item()

    def test_dtype_override_via_config(self):
        with using_config("dtype", np.float32):
            t = Tensor([1.0, 2.0])
        self.assertEqual(t.dtype, np.float32)
        self.assertEqual(Tensor([1.0]).dtype, Config.dtype)

    def test_repr_mentions_shape(self):
        self.assertIn("shape=(2,)", repr(Tensor([1.0, 2.0])))

    def test_numpy_interop(self):
        t = Tensor([[1.0, 2.0]])
        np.testing.assert_allclose(np.asarray(t), [[1.0, 2.0]])


class TestTensorFactories(unittest.TestCase):
    def test_zeros_ones_full(self):
        np.testing.assert_allclose(Tensor.zeros((2, 3)).to_numpy(), np.zeros((2, 3)))
        np.testing.assert_allclose(Tensor.ones(4).to_numpy(), np.ones(4))
        np.testing.assert_allclose(Tensor.full((2,), 7.0).to_numpy(), [7.0, 7.0])

    def test_like_factories(self):
        base = Tensor(np.arange(6.0).reshape(2, 3))
        self.assertEqual(Tensor.zeros_like(base).shape, (2, 3))
        np.testing.assert_allclose(Tensor.ones_like(base).to_numpy(), np.ones((2, 3)))

    def test_random_factories_respect_rng(self):
        a = Tensor.randn((3, 3), rng=np.random.default_rng(1))
        b = Tensor.randn((3, 3), rng=np.random.default_rng(1))
        self.assertTrue(a.allclose(b))
        u = Tensor.rand((100,), rng=np.random.default_rng(2)).to_numpy()
        self.assertTrue(np.all((u >= 0.0) & (u < 1.0)))

    def test_from_numpy_keeps_float_dtype(self):
        t = Tensor.from_numpy(np.ones(3, dtype=np.float32))
        self.assertEqual(t.dtype, np.float32)
        self.assertEqual(Tensor.from_numpy(np.arange(3)).dtype, Config.dtype)


class TestTensorElementwise(unittest.TestCase):
    def test_same_shape_ops(self):
        a = Tensor([1.0, 2.0, 3.0])
        b = Tensor([4.0, 5.0, 6.0])
        np.testing.assert_allclose((a + b).to_numpy(), [5, 7, 9])
        np.testing.assert_allclose((a - b).to_numpy(), [-3, -3, -3])
        np.testing.assert_allclose((a * b).to_numpy(), [4, 10, 18])
        np.testing.assert_allclose((b / a).to_numpy(), [4, 2.5, 2])
        np.testing.assert_allclose((a**2).to_numpy(), [1, 4, 9])
        np.testing.assert_allclose((-a).to_numpy(), [-1, -2, -3])

    def test_scalar_promotion_both_sides(self):
        a = Tensor([1.0, 2.0])
        np.testing.assert_allclose((a + 1).to_numpy(), [2, 3])
        np.testing.assert_allclose((1 - a).to_numpy(), [0, -1])
        np.testing.assert_allclose((2 / a).to_numpy(), [2, 1])
        np.testing.assert_allclose((3 * a).to_numpy(), [3, 6])

    def test_broadcast_column_by_row(self):
        col = Tensor([[1.0], [2.0], [3.0]])
        row = Tensor([[10.0, 20.0, 30.0, 40.0]])
        out = col + row
        self.assertEqual(out.shape, (3, 4))
        np.testing.assert_allclose(out.to_numpy(), np.array([[1], [2], [3]]) + np.array([[10, 20, 30, 40]]))

    def test_broadcast_symmetry_for_commutative_ops(self):
        rng = np.random.default_rng(0)
        a = Tensor(rng.standard_normal((2, 1, 3)))
        b = Tensor(rng.standard_normal((4, 1)))
        self.assertTrue((a + b).allclose(b + a))
        self.assertTrue((a * b).allclose(b * a))

    def test_incompatible_shapes_raise(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((2, 3))) + Tensor(np.ones((4,)))

    def test_operands_not_mutated(self):
        a = Tensor([1.0, 2.0])
        b = Tensor([3.0, 4.0])
        _ = a * b + a
        self.assertEqual(a.tolist(), [1.0, 2.0])
        self.assertEqual(b.tolist(), [3.0, 4.0])

    def test_ndarray_on_left_defers_to_tensor(self):
        out = np.array([1.0, 2.0]) + Tensor([1.0, 1.0])
        self.assertIsInstance(out, Tensor)
        np.testing.assert_allclose(out.to_numpy(), [2.0, 3.0])

    def test_allclose_requires_same_shape(self):
        self.assertFalse(Tensor([[1.0, 2.0]]).allclose(Tensor([1.0, 2.0])))
        self.assertTrue(Tensor([1.0, 2.0]).allclose([1.0, 2.0 + 1e-10]))


class TestTensorUnary(unittest.TestCase):
    def test_elementwise_maps(self):
        x = np.array([0.5, 1.0, 2.0])
        t = Tensor(x)
        np.testing.assert_allclose(t.exp().to_numpy(), np.exp(x))
        np.testing.assert_allclose(t.log().to_numpy(), np.log(x))
        np.testing.assert_allclose(t.sqrt().to_numpy(), np.sqrt(x))
        np.testing.assert_allclose(t.tanh().to_numpy(), np.tanh(x))
        np.testing.assert_allclose(t.square().to_numpy(), x * x)

    def test_sigmoid_and_relu(self):
        x = np.array([-30.0, -1.0, 0.0, 1.0, 30.0])
        t = Tensor(x)
        np.testing.assert_allclose(t.sigmoid().to_numpy(), 1.0 / (1.0 + np.exp(-x)), atol=1e-12)
        np.testing.assert_allclose(t.relu().to_numpy(), [0, 0, 0, 1, 30])
        np.testing.assert_allclose(t.abs().to_numpy(), np.abs(x))

    def test_softmax_rows_sum_to_one_and_is_stable(self):
        t = Tensor([[1000.0, 1001.0, 1002.0], [0.0, 0.0, 0.0]])
        out = t.softmax(axis=-1).to_numpy()
        self.assertTrue(np.all(np.isfinite(out)))
        np.testing.assert_allclose(out.sum(axis=1), [1.0, 1.0])
        np.testing.assert_allclose(out[1], [1 / 3, 1 / 3, 1 / 3])

    def test_map_rejects_shape_change(self):
        with self.assertRaises(ValueError):
            Tensor([1.0, 2.0]).map(lambda a: a.sum())


if __name__ == "__main__":
    unittest.main()
