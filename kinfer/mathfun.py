"""Vectorised single-precision approximations of elementary functions.

All functions take a float32-compatible scalar or array and return float32
results of the same shape (a numpy scalar for scalar input). The
approximations are the cephes polynomial ones and reproduce their behaviour:
arguments are clamped, not checked, and ``log_ps`` yields NaN for ``x <= 0``.
"""

from __future__ import annotations

import numpy as np

_F = np.float32

_ONE = _F(1.0)
_HALF = _F(0.5)
_MIN_NORM_POS = np.array([0x00800000], dtype=np.uint32).view(np.float32)[0]
_INV_MANT_MASK = np.uint32(~0x7F800000 & 0xFFFFFFFF)
_SIGN_MASK = np.uint32(0x80000000)
_INV_SIGN_MASK = np.uint32(0x7FFFFFFF)
_HALF_BITS = np.array([0.5], dtype=np.float32).view(np.uint32)[0]

_SQRTHF = _F(0.707106781186547524)
_LOG_P = tuple(
    _F(v)
    for v in (
        7.0376836292e-2,
        -1.1514610310e-1,
        1.1676998740e-1,
        -1.2420140846e-1,
        1.4249322787e-1,
        -1.6668057665e-1,
        2.0000714765e-1,
        -2.4999993993e-1,
        3.3333331174e-1,
    )
)
_LOG_Q1 = _F(-2.12194440e-4)
_LOG_Q2 = _F(0.693359375)

_EXP_HI = _F(88.3762626647949)
_EXP_LO = _F(-88.3762626647949)
_LOG2EF = _F(1.44269504088896341)
_EXP_C1 = _F(0.693359375)
_EXP_C2 = _F(-2.12194440e-4)
_EXP_P = tuple(
    _F(v)
    for v in (
        1.9875691500e-4,
        1.3981999507e-3,
        8.3334519073e-3,
        4.1665795894e-2,
        1.6666665459e-1,
        5.0000001201e-1,
    )
)

_TANH_HI = _F(9.0)
_TANH_LO = _F(-9.0)
_TANH_P = tuple(
    _F(v)
    for v in (
        -2.76076847742355e-16,
        2.00018790482477e-13,
        -8.60467152213735e-11,
        5.12229709037114e-08,
        1.48572235717979e-05,
        6.37261928875436e-04,
        4.89352455891786e-03,
        1.19825839466702e-06,
        1.18534705686654e-04,
        2.26843463243900e-03,
    )
)

_DP1 = _F(-0.78515625)
_DP2 = _F(-2.4187564849853515625e-4)
_DP3 = _F(-3.77489497744594108e-8)
_SINCOF = (_F(-1.9515295891e-4), _F(8.3321608736e-3), _F(-1.6666654611e-1))
_COSCOF = (_F(2.443315711809948e-005), _F(-1.388731625493765e-003),
           _F(4.166664568298827e-002))
_FOPI = _F(1.27323954473516)

_TAN_EPS = _F(1e-8)


def _prepare(x) -> tuple[np.ndarray, tuple[int, ...]]:
    arr = np.array(x, dtype=np.float32)
    return arr.reshape(-1), arr.shape


def _finish(result: np.ndarray, shape: tuple[int, ...]):
    return result.astype(np.float32, copy=False).reshape(shape)[()]


def _bits(a: np.ndarray) -> np.ndarray:
    return a.view(np.uint32)


def _from_bits(b: np.ndarray) -> np.ndarray:
    return b.astype(np.uint32).view(np.float32)


def _sse_max(a, b):
    # Same semantics as the packed max instruction: a > b ? a : b.
    return np.where(a > b, a, b).astype(np.float32)


def _sse_min(a, b):
    return np.where(a < b, a, b).astype(np.float32)


def _log(x: np.ndarray) -> np.ndarray:
    invalid = x <= 0
    x = _sse_max(x, _MIN_NORM_POS)
    exponent = (_bits(x) >> np.uint32(23)).astype(np.int32)
    x = _from_bits((_bits(x) & _INV_MANT_MASK) | _HALF_BITS)
    e = (exponent - 0x7F).astype(np.float32) + _ONE

    mask = x < _SQRTHF
    tmp = np.where(mask, x, _F(0)).astype(np.float32)
    x = x - _ONE
    e = e - np.where(mask, _ONE, _F(0)).astype(np.float32)
    x = x + tmp

    z = x * x
    y = np.full_like(x, _LOG_P[0])
    for coefficient in _LOG_P[1:]:
        y = y * x + coefficient
    y = y * x
    y = y * z
    y = e * _LOG_Q1 + y
    y = y - z * _HALF
    x = x + y
    x = e * _LOG_Q2 + x
    return np.where(invalid, np.float32(np.nan), x).astype(np.float32)


def _exp(x: np.ndarray) -> np.ndarray:
    x = _sse_min(x, _EXP_HI)
    x = _sse_max(x, _EXP_LO)

    fx = x * _LOG2EF + _HALF
    tmp = fx.astype(np.int32).astype(np.float32)
    fx = tmp - np.where(tmp > fx, _ONE, _F(0)).astype(np.float32)

    x = x - fx * _EXP_C1
    x = x - fx * _EXP_C2
    z = x * x

    y = np.full_like(x, _EXP_P[0])
    for coefficient in _EXP_P[1:]:
        y = y * x + coefficient
    y = y * z + x
    y = y + _ONE

    exponent = (fx.astype(np.int32) + np.int32(0x7F)).astype(np.uint32)
    pow2n = _from_bits(exponent << np.uint32(23))
    return (y * pow2n).astype(np.float32)


def _reduce(x: np.ndarray):
    """Range reduction shared by the trigonometric functions."""
    y = x * _FOPI
    j = y.astype(np.int32)
    j = (j + np.int32(1)) & np.int32(~1)
    y = j.astype(np.float32)
    x = y * _DP1 + x
    x = y * _DP2 + x
    x = y * _DP3 + x
    return x, j


def _polynomials(x: np.ndarray):
    z = x * x
    y = np.full_like(x, _COSCOF[0])
    y = y * z + _COSCOF[1]
    y = y * z + _COSCOF[2]
    y = y * z
    y = y * z
    y = y - z * _HALF
    y = y + _ONE

    y2 = np.full_like(x, _SINCOF[0])
    y2 = y2 * z + _SINCOF[1]
    y2 = y2 * z + _SINCOF[2]
    y2 = y2 * z
    y2 = y2 * x + x
    return y, y2


def _swap_sign(j: np.ndarray) -> np.ndarray:
    return (j & np.int32(4)).astype(np.uint32) << np.uint32(29)


def _cos_sign(j: np.ndarray) -> np.ndarray:
    return (~(j - np.int32(2)) & np.int32(4)).astype(np.uint32) << np.uint32(29)


def _apply_sign(values: np.ndarray, sign: np.ndarray) -> np.ndarray:
    return _from_bits(_bits(values.astype(np.float32)) ^ sign)


def _sincos(x: np.ndarray):
    sign_sin = _bits(x) & _SIGN_MASK
    x = _from_bits(_bits(x) & _INV_SIGN_MASK)
    x, j = _reduce(x)
    sign_sin = sign_sin ^ _swap_sign(j)
    sign_cos = _cos_sign(j)
    poly_mask = (j & np.int32(2)) == 0
    y, y2 = _polynomials(x)
    sin_values = np.where(poly_mask, y2, y)
    cos_values = np.where(poly_mask, y, y2)
    return _apply_sign(sin_values, sign_sin), _apply_sign(cos_values, sign_cos)


def log_ps(x):
    """Natural logarithm; NaN for ``x <= 0``."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        return _finish(_log(arr), shape)


def exp_ps(x):
    """Exponential, with the argument clamped to about +-88.376."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        return _finish(_exp(arr), shape)


def tanh_ps(x):
    """Rational approximation of tanh, with the argument clamped to [-9, 9]."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        value = _sse_max(_TANH_LO, arr)
        value = _sse_min(_TANH_HI, value)
        squared = value * value

        p = squared * _TANH_P[0] + _TANH_P[1]
        for coefficient in _TANH_P[2:7]:
            p = p * squared + coefficient
        p = p * value

        q = squared * _TANH_P[7] + _TANH_P[8]
        q = q * squared + _TANH_P[9]
        q = q * squared + _TANH_P[6]
        return _finish(p / q, shape)


def sin_ps(x):
    """Sine; precise for ``|x| < 8192``."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        sign = _bits(arr) & _SIGN_MASK
        reduced, j = _reduce(_from_bits(_bits(arr) & _INV_SIGN_MASK))
        sign = sign ^ _swap_sign(j)
        poly_mask = (j & np.int32(2)) == 0
        y, y2 = _polynomials(reduced)
        return _finish(_apply_sign(np.where(poly_mask, y2, y), sign), shape)


def cos_ps(x):
    """Cosine; precise for ``|x| < 8192``."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        reduced, j = _reduce(_from_bits(_bits(arr) & _INV_SIGN_MASK))
        sign = _cos_sign(j)
        poly_mask = ((j - np.int32(2)) & np.int32(2)) == 0
        y, y2 = _polynomials(reduced)
        return _finish(_apply_sign(np.where(poly_mask, y2, y), sign), shape)


def sincos_ps(x):
    """Sine and cosine of ``x`` computed together, as a pair."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        s, c = _sincos(arr)
        return _finish(s, shape), _finish(c, shape)


def tan_ps(x):
    """Tangent; a cosine of exactly zero is nudged by 1e-8."""
    arr, shape = _prepare(x)
    with np.errstate(all="ignore"):
        s, c = _sincos(arr)
        c = (c + np.where(c == 0, _TAN_EPS, _F(0))).astype(np.float32)
        return _finish(s / c, shape)


def pow_ps(a, b):
    """``a`` raised to ``b`` as ``exp(b * log(a))``."""
    base, shape_a = _prepare(a)
    power, shape_b = _prepare(b)
    shape = np.broadcast_shapes(shape_a, shape_b)
    base = np.broadcast_to(base.reshape(shape_a), shape).reshape(-1)
    power = np.broadcast_to(power.reshape(shape_b), shape).reshape(-1)
    with np.errstate(all="ignore"):
        return _finish(_exp(power * _log(base)), shape)