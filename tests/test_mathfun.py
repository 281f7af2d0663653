import numpy as np
import pytest

from kinfer.mathfun import (
    cos_ps,
    exp_ps,
    log_ps,
    pow_ps,
    sin_ps,
    sincos_ps,
    tan_ps,
    tanh_ps,
)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def test_log_matches_numpy(rng):
    x = rng.uniform(1e-3, 1e4, size=500).astype(np.float32)
    result = log_ps(x)
    assert result.dtype == np.float32
    np.testing.assert_allclose(result, np.log(x), rtol=1e-6, atol=1e-6)


def test_log_of_one_is_zero():
    assert abs(float(log_ps(1.0))) < 1e-7


def test_log_is_nan_for_non_positive():
    result = log_ps(np.array([0.0, -1.0, -100.0], dtype=np.float32))
    assert np.isnan(result).all()


def test_exp_matches_numpy(rng):
    x = rng.uniform(-80, 80, size=500).astype(np.float32)
    np.testing.assert_allclose(exp_ps(x), np.exp(x), rtol=2e-6)


def test_exp_clamps_large_arguments():
    assert exp_ps(1000.0) == exp_ps(np.float32(88.3762626647949))
    assert exp_ps(-1000.0) == exp_ps(np.float32(-88.3762626647949))
    assert float(exp_ps(-1000.0)) < 1e-37


def test_exp_log_round_trip(rng):
    x = rng.uniform(0.01, 100, size=200).astype(np.float32)
    np.testing.assert_allclose(exp_ps(log_ps(x)), x, rtol=1e-5)


def test_tanh_matches_numpy(rng):
    x = rng.uniform(-12, 12, size=500).astype(np.float32)
    np.testing.assert_allclose(tanh_ps(x), np.tanh(x), atol=1e-5)


def test_tanh_is_odd(rng):
    x = rng.uniform(0, 8, size=100).astype(np.float32)
    np.testing.assert_array_equal(tanh_ps(-x), -tanh_ps(x))


def test_sin_and_cos_match_numpy(rng):
    x = rng.uniform(-100, 100, size=500).astype(np.float32)
    np.testing.assert_allclose(sin_ps(x), np.sin(x), atol=2e-6)
    np.testing.assert_allclose(cos_ps(x), np.cos(x), atol=2e-6)


def test_sin_of_float_pi_is_the_documented_residue():
    value = float(sin_ps(np.float32(np.pi)))
    assert abs(value) == pytest.approx(8.74e-8, rel=1e-2)


def test_sincos_agrees_with_separate_functions(rng):
    x = rng.uniform(-50, 50, size=300).astype(np.float32)
    s, c = sincos_ps(x)
    np.testing.assert_allclose(s, sin_ps(x), atol=1e-7)
    np.testing.assert_allclose(c, cos_ps(x), atol=1e-7)
    np.testing.assert_allclose(s * s + c * c, 1.0, atol=1e-5)


def test_tan_matches_numpy(rng):
    x = rng.uniform(-1.2, 1.2, size=300).astype(np.float32)
    np.testing.assert_allclose(tan_ps(x), np.tan(x), rtol=1e-5, atol=1e-6)


def test_pow_matches_numpy(rng):
    a = rng.uniform(0.5, 4, size=200).astype(np.float32)
    b = rng.uniform(-3, 3, size=200).astype(np.float32)
    np.testing.assert_allclose(pow_ps(a, b), np.power(a, b), rtol=1e-5)


def test_pow_broadcasts_scalar_exponent():
    a = np.array([2.0, 3.0, 4.0], dtype=np.float32)
    result = pow_ps(a, 2.0)
    assert result.shape == (3,)
    np.testing.assert_allclose(result, a * a, rtol=1e-5)


def test_shape_is_preserved_and_scalars_stay_scalar():
    grid = np.linspace(0.1, 2.0, 12, dtype=np.float32).reshape(3, 4)
    assert exp_ps(grid).shape == (3, 4)
    assert np.ndim(sin_ps(0.5)) == 0
    assert sin_ps(0.0) == 0.0