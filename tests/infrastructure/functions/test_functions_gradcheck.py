import unittest

import numpy as np

from tinyai import Variable, gradcheck, numerical_grad
from tinyai.infrastructure import functions as F


def _rand(*shape, seed=0, low=-1.0, high=1.0):
    return np.random.default_rng(seed).uniform(low, high, size=shape)


class TestNumericalGrad(unittest.TestCase):
    def test_matches_closed_form(self):
        x = np.array([0.5, -1.5, 2.0])
        g = numerical_grad(lambda v: v * v * v, [x])
        np.testing.assert_allclose(g, 3 * x**2, rtol=1e-6)

    def test_gradcheck_detects_wrong_rule(self):
        class _BadSquare(F.Mul):
            def backward(self, grad_out):
                a, b = self.ctx.saved_tensors
                return grad_out * b * 3.0, grad_out * a

        def bad(v):
            return _BadSquare()(v, v)

        self.assertFalse(gradcheck(bad, [_rand(3)], raise_exception=False))
        with self.assertRaises(AssertionError):
            gradcheck(bad, [_rand(3)])


class TestArithmeticGradients(unittest.TestCase):
    def test_add_sub_mul_div_same_shape(self):
        a, b = _rand(2, 3, seed=1), _rand(2, 3, seed=2, low=0.5, high=2.0)
        for fn in (F.add, F.sub, F.mul, F.div):
            self.assertTrue(gradcheck(fn, [a, b]), fn.__name__)

    def test_broadcasting_binary_ops(self):
        a = _rand(3, 1, seed=3)
        b = _rand(1, 4, seed=4, low=0.5, high=2.0)
        c = _rand(4, seed=5, low=0.5, high=2.0)
        for fn in (F.add, F.sub, F.mul, F.div):
            self.assertTrue(gradcheck(fn, [a, b]), fn.__name__)
            self.assertTrue(gradcheck(fn, [a, c]), fn.__name__)

    def test_neg_and_pow(self):
        x = _rand(2, 2, seed=6, low=0.5, high=2.0)
        self.assertTrue(gradcheck(F.neg, [x]))
        self.assertTrue(gradcheck(lambda v: F.pow(v, 3), [x]))
        self.assertTrue(gradcheck(lambda v: F.pow(v, 0.5), [x]))
        self.assertTrue(gradcheck(lambda v: v**-2.0, [x]))


class TestMatrixGradients(unittest.TestCase):
    def test_matmul(self):
        self.assertTrue(gradcheck(F.matmul, [_rand(2, 3, seed=7), _rand(3, 4, seed=8)]))

    def test_batched_matmul_with_shared_matrix(self):
        self.assertTrue(gradcheck(F.matmul, [_rand(2, 2, 3, seed=9), _rand(3, 2, seed=10)]))

    def test_transpose_reshape(self):
        x = _rand(2, 3, seed=11)
        self.assertTrue(gradcheck(F.transpose, [x]))
        self.assertTrue(gradcheck(lambda v: F.reshape(v, (3, 2)), [x]))
        self.assertTrue(gradcheck(lambda v: F.reshape(v, (6,)) * F.reshape(v, (6,)), [x]))

    def test_broadcast_to_and_sum_to(self):
        self.assertTrue(gradcheck(lambda v: F.broadcast_to(v, (2, 3, 4)), [_rand(3, 1, seed=12)]))
        self.assertTrue(gradcheck(lambda v: F.sum_to(v, (3, 1)), [_rand(2, 3, 4, seed=13)]))

    def test_slice_range(self):
        x = _rand(4, 5, seed=14)
        self.assertTrue(gradcheck(lambda v: F.slice_range(v, 1, 1, 4), [x]))
        self.assertTrue(gradcheck(lambda v: F.slice_range(v, 0, -2, 10), [x]))


class TestReductionGradients(unittest.TestCase):
    def setUp(self):
        self.x = _rand(2, 3, 4, seed=15)

    def test_sum_mean_var_all_axes(self):
        for fn in (F.sum, F.mean, F.var):
            for axis in (None, 0, 1, -1):
                for keepdims in (False, True):
                    ok = gradcheck(lambda v: fn(v, axis=axis, keepdims=keepdims), [self.x])
                    self.assertTrue(ok, f"{fn.__name__} axis={axis} keepdims={keepdims}")

    def test_max_distinct_values(self):
        # a permutation keeps every maximum unique, away from ties
        x = np.random.default_rng(16).permutation(24).reshape(2, 3, 4).astype(float)
        for axis in (None, 0, 2):
            self.assertTrue(gradcheck(lambda v: F.max(v, axis=axis), [x]))

    def test_max_ties_split_gradient(self):
        x = Variable(np.array([1.0, 3.0, 3.0]))
        F.max(x).backward()
        np.testing.assert_allclose(x.grad.to_numpy(), [0.0, 0.5, 0.5])


class TestUnaryGradients(unittest.TestCase):
    def test_smooth_unary(self):
        x = _rand(3, 4, seed=17)
        for fn in (F.exp, F.sigmoid, F.tanh):
            self.assertTrue(gradcheck(fn, [x]), fn.__name__)

    def test_positive_domain_unary(self):
        x = _rand(3, 4, seed=18, low=0.5, high=3.0)
        for fn in (F.log, F.sqrt):
            self.assertTrue(gradcheck(fn, [x]), fn.__name__)

    def test_relu_away_from_kink(self):
        x = np.array([[-1.0, 0.5], [2.0, -0.3]])
        self.assertTrue(gradcheck(F.relu, [x]))

    def test_softmax(self):
        x = _rand(3, 4, seed=19)
        self.assertTrue(gradcheck(F.softmax, [x]))
        self.assertTrue(gradcheck(lambda v: F.softmax(v, axis=0), [x]))


class TestComposedGradients(unittest.TestCase):
    def test_two_layer_expression(self):
        def net(x, w1, w2):
            h = F.tanh(F.matmul(x, w1))
            return F.mean(F.softmax(F.matmul(h, w2)) * h.sum(axis=1, keepdims=True))

        inputs = [_rand(4, 3, seed=20), _rand(3, 5, seed=21), _rand(5, 2, seed=22)]
        self.assertTrue(gradcheck(net, inputs))

    def test_layernorm_like(self):
        def norm(x):
            mu = x.mean(axis=-1, keepdims=True)
            return (x - mu) / (x.var(axis=-1, keepdims=True) + 1e-5).sqrt()

        self.assertTrue(gradcheck(norm, [_rand(2, 5, seed=23)]))


if __name__ == "__main__":
    unittest.main()
