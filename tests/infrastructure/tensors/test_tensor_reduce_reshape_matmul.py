import unittest

import numpy as np

from tinyai import ShapeMismatchError, Tensor, TensorIndexError


def _arange(*shape):
    return Tensor(np.arange(float(np.prod(shape))).reshape(shape))


class TestTensorReduction(unittest.TestCase):
    def setUp(self):
        self.x_np = np.arange(24.0).reshape(2, 3, 4)
        self.x = Tensor(self.x_np)

    def test_full_reduction_is_rank_zero(self):
        s = self.x.sum()
        self.assertEqual(s.shape, ())
        self.assertAlmostEqual(s.item(), self.x_np.sum())

    def test_full_reduction_keepdims(self):
        self.assertEqual(self.x.sum(keepdims=True).shape, (1, 1, 1))

    def test_axis_reductions_match_numpy(self):
        for op, ref in (("sum", np.sum), ("mean", np.mean), ("var", np.var), ("max", np.max)):
            for axis in (0, 1, 2, -1):
                out = self.x.reduce(op, axis=axis)
                np.testing.assert_allclose(out.to_numpy(), ref(self.x_np, axis=axis), err_msg=op)

    def test_keepdims_duality(self):
        kept = self.x.mean(axis=1, keepdims=True)
        dropped = self.x.mean(axis=1)
        self.assertEqual(kept.shape, (2, 1, 4))
        self.assertEqual(dropped.shape, (2, 4))
        self.assertTrue(kept.reshape(2, 4).allclose(dropped))

    def test_negative_axis_equivalent(self):
        self.assertTrue(self.x.sum(axis=-1).allclose(self.x.sum(axis=2)))

    def test_variance_is_population(self):
        t = Tensor([1.0, 2.0, 3.0, 4.0])
        self.assertAlmostEqual(t.var().item(), 1.25)

    def test_axis_out_of_range(self):
        with self.assertRaises(TensorIndexError):
            self.x.sum(axis=3)
        with self.assertRaises(IndexError):
            self.x.max(axis=-4)

    def test_unknown_reducer(self):
        with self.assertRaises(ValueError):
            self.x.reduce("median")


class TestTensorShapeTransforms(unittest.TestCase):
    def test_reshape_forms(self):
        x = _arange(2, 3)
        self.assertEqual(x.reshape(3, 2).shape, (3, 2))
        self.assertEqual(x.reshape((6,)).shape, (6,))
        np.testing.assert_allclose(x.reshape(6).to_numpy(), np.arange(6.0))

    def test_reshape_size_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            _arange(2, 3).reshape(4, 2)

    def test_broadcast_to_and_sum_to(self):
        col = Tensor([[1.0], [2.0], [3.0]])
        wide = col.broadcast_to((3, 4))
        self.assertEqual(wide.shape, (3, 4))
        back = wide.sum_to((3, 1))
        np.testing.assert_allclose(back.to_numpy(), [[4.0], [8.0], [12.0]])

    def test_sum_to_drops_leading_axes(self):
        x = Tensor(np.ones((2, 3, 4)))
        np.testing.assert_allclose(x.sum_to((4,)).to_numpy(), np.full(4, 6.0))
        np.testing.assert_allclose(x.sum_to((3, 1)).to_numpy(), np.full((3, 1), 8.0))

    def test_broadcast_to_invalid(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((3, 4))).broadcast_to((3, 1))

    def test_sum_to_invalid(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((3, 4))).sum_to((2, 4))

    def test_transpose_swaps_last_two_axes(self):
        x = _arange(2, 3, 4)
        self.assertEqual(x.transpose().shape, (2, 4, 3))
        np.testing.assert_allclose(x.T.to_numpy(), np.swapaxes(x.to_numpy(), -1, -2))
        v = Tensor([1.0, 2.0])
        self.assertTrue(v.transpose().allclose(v))

    def test_slice_range_and_clamping(self):
        x = _arange(4, 5)
        np.testing.assert_allclose(x.slice_range(1, 1, 3).to_numpy(), x.to_numpy()[:, 1:3])
        np.testing.assert_allclose(x.slice_range(0, -2, 100).to_numpy(), x.to_numpy()[2:])

    def test_slice_range_empty(self):
        with self.assertRaises(TensorIndexError):
            _arange(4, 5).slice_range(1, 3, 3)

    def test_pad_range_is_adjoint_of_slice(self):
        piece = Tensor(np.ones((4, 2)))
        out = piece.pad_range((4, 5), axis=1, start=2)
        expected = np.zeros((4, 5))
        expected[:, 2:4] = 1.0
        np.testing.assert_allclose(out.to_numpy(), expected)

    def test_pad_range_does_not_fit(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((4, 2))).pad_range((4, 5), axis=1, start=4)
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((3, 2))).pad_range((4, 5), axis=1, start=0)


class TestTensorMatmul(unittest.TestCase):
    def test_matrix_product(self):
        a = np.arange(6.0).reshape(2, 3)
        b = np.arange(12.0).reshape(3, 4)
        out = Tensor(a) @ Tensor(b)
        self.assertEqual(out.shape, (2, 4))
        np.testing.assert_allclose(out.to_numpy(), a @ b)

    def test_batched_against_matrix(self):
        a = np.random.default_rng(0).standard_normal((5, 2, 3))
        b = np.random.default_rng(1).standard_normal((3, 4))
        out = Tensor(a).matmul(Tensor(b))
        self.assertEqual(out.shape, (5, 2, 4))
        np.testing.assert_allclose(out.to_numpy(), a @ b)

    def test_inner_dimension_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((2, 3))) @ Tensor(np.ones((4, 2)))

    def test_rank_too_small(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones(3)).matmul(Tensor(np.ones((3, 2))))

    def test_batch_dims_must_broadcast(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor(np.ones((2, 2, 3))).matmul(Tensor(np.ones((3, 3, 4))))


if __name__ == "__main__":
    unittest.main()
