"""
Vectorised Black-Scholes pricing and Greeks.

All public functions accept scalars or NumPy arrays and broadcast. They use
the same normal CDF approximation and the same expiry convention as the
scalar functions, so batch results match single-option results.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

from greeks_calc.analytics.normal import (
    CDF_DENSITY_SCALE,
    CDF_P,
    INV_SQRT_2PI,
    tail_polynomial,
)
from greeks_calc.errors import InvalidInputError
from greeks_calc.types import OptionType


def norm_cdf_vec(x: ArrayLike) -> NDArray[np.float64]:
    """Array version of norm_cdf (Abramowitz-Stegun approximation)."""
    x = np.asarray(x, dtype=float)
    t = 1.0 / (1.0 + CDF_P * np.abs(x))
    tail = CDF_DENSITY_SCALE * np.exp(-x * x / 2.0) * tail_polynomial(t)
    return np.where(x > 0, 1.0 - tail, tail)


def norm_pdf_vec(x: ArrayLike) -> NDArray[np.float64]:
    """Array version of norm_pdf."""
    x = np.asarray(x, dtype=float)
    return np.exp(-0.5 * x * x) * INV_SQRT_2PI


def _is_call(option_type) -> NDArray[np.bool_]:
    """Boolean mask, True where the option is a call."""
    kinds = np.asarray(option_type, dtype=object)
    mask = [OptionType.parse(k) is OptionType.CALL for k in kinds.flat]
    return np.array(mask, dtype=bool).reshape(kinds.shape)


def _prepare(option_type, S0, K, r, sigma, T):
    """Broadcast inputs, validate them and substitute safe values on expired rows."""
    is_call = _is_call(option_type)
    is_call, S0, K, r, sigma, T = np.broadcast_arrays(
        is_call, *(np.asarray(x, dtype=float) for x in (S0, K, r, sigma, T))
    )

    for name, values in (("S0", S0), ("K", K), ("r", r), ("T", T)):
        if not np.all(np.isfinite(values)):
            raise InvalidInputError(f"{name} must contain only finite numbers")
    if np.any(S0 <= 0):
        raise InvalidInputError("Spot price S0 must be positive")
    if np.any(K <= 0):
        raise InvalidInputError("Strike K must be positive")

    live = T > 0
    if np.any(live & ~np.isfinite(sigma)):
        raise InvalidInputError("sigma must contain only finite numbers for unexpired options")
    if np.any(live & ~(sigma > 0)):
        raise InvalidInputError("Volatility sigma must be positive for unexpired options")

    # Placeholders keep d1/d2 finite on expired rows; those rows are overwritten
    T_safe = np.where(live, T, 1.0)
    sigma_safe = np.where(live, sigma, 1.0)
    sqrt_T = np.sqrt(T_safe)
    d1 = (np.log(S0 / K) + (r + 0.5 * sigma_safe * sigma_safe) * T_safe) / (
        sigma_safe * sqrt_T
    )
    d2 = d1 - sigma_safe * sqrt_T
    return is_call, S0, K, r, sigma_safe, T_safe, live, sqrt_T, d1, d2


def bs_price_vec(option_type, S0, K, r, sigma, T) -> NDArray[np.float64]:
    """
    Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.
    option_type may be a single value or an array of 'call'/'put' strings
    or OptionType members.

    Returns
    -------
    np.ndarray
        Option prices, intrinsic value where T <= 0
    """
    is_call, S0, K, r, _, T_safe, live, _, d1, d2 = _prepare(option_type, S0, K, r, sigma, T)
    discount = np.exp(-r * T_safe)

    call_px = S0 * norm_cdf_vec(d1) - K * discount * norm_cdf_vec(d2)
    put_px = K * discount * norm_cdf_vec(-d2) - S0 * norm_cdf_vec(-d1)
    intrinsic = np.where(is_call, np.maximum(S0 - K, 0.0), np.maximum(K - S0, 0.0))

    return np.where(live, np.where(is_call, call_px, put_px), intrinsic)


def bs_greeks_vec(option_type, S0, K, r, sigma, T) -> dict[str, NDArray[np.float64]]:
    """
    Vectorised Black-Scholes Greeks.

    Returns
    -------
    dict[str, np.ndarray]
        Keys delta, gamma, theta, vega, rho with the scalar conventions:
        theta per year, vega and rho per one percentage point. Expired rows
        carry the exercise-indicator delta and zero for the rest.
    """
    is_call, S0, K, r, sigma, T, live, sqrt_T, d1, d2 = _prepare(
        option_type, S0, K, r, sigma, T
    )
    discount = np.exp(-r * T)
    pdf_d1 = norm_pdf_vec(d1)
    cdf_d1 = norm_cdf_vec(d1)

    gamma = pdf_d1 / (S0 * sigma * sqrt_T)
    vega = S0 * sqrt_T * pdf_d1 / 100.0
    decay = -(S0 * pdf_d1 * sigma) / (2.0 * sqrt_T)

    delta = np.where(is_call, cdf_d1, cdf_d1 - 1.0)
    theta = np.where(
        is_call,
        decay - r * K * discount * norm_cdf_vec(d2),
        decay + r * K * discount * norm_cdf_vec(-d2),
    )
    rho = np.where(
        is_call,
        K * T * discount * norm_cdf_vec(d2) / 100.0,
        -K * T * discount * norm_cdf_vec(-d2) / 100.0,
    )

    expired_delta = np.where(
        is_call, np.where(S0 > K, 1.0, 0.0), np.where(S0 < K, -1.0, 0.0)
    )
    zero = np.zeros_like(gamma)

    return {
        "delta": np.where(live, delta, expired_delta),
        "gamma": np.where(live, gamma, zero),
        "theta": np.where(live, theta, zero),
        "vega": np.where(live, vega, zero),
        "rho": np.where(live, rho, zero),
    }
