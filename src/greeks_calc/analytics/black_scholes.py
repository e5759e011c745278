"""
Black-Scholes analytical pricing formulas for European options.
"""

import math

from greeks_calc.analytics.normal import norm_cdf
from greeks_calc.errors import InvalidInputError
from greeks_calc.types import OptionType


def check_finite(**values: float) -> None:
    """Raise InvalidInputError if any named value is NaN or infinite."""
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value}")


def _check_positive(S0: float, K: float) -> None:
    if S0 <= 0:
        raise InvalidInputError(f"Spot price S0 must be positive, got {S0}")
    if K <= 0:
        raise InvalidInputError(f"Strike K must be positive, got {K}")


def d1(S0: float, K: float, r: float, sigma: float, T: float) -> float:
    """
    Compute the Black-Scholes d1 term.

    d1 = (ln(S/K) + (r + σ²/2)T) / (σ√T)

    Raises
    ------
    InvalidInputError
        If any input is NaN or infinite, or S0, K, sigma or T is not
        strictly positive
    """
    check_finite(S0=S0, K=K, r=r, sigma=sigma, T=T)
    _check_positive(S0, K)
    if sigma <= 0:
        raise InvalidInputError(f"Volatility sigma must be positive, got {sigma}")
    if T <= 0:
        raise InvalidInputError(f"Time to maturity T must be positive, got {T}")
    return (math.log(S0 / K) + (r + 0.5 * sigma * sigma) * T) / (sigma * math.sqrt(T))


def d2(S0: float, K: float, r: float, sigma: float, T: float) -> float:
    """Compute the Black-Scholes d2 term, d1 - σ√T."""
    return d1(S0, K, r, sigma, T) - sigma * math.sqrt(T)


def intrinsic_value(option_type: OptionType | str, S0: float, K: float) -> float:
    """Payoff of immediate exercise: max(S-K, 0) for a call, max(K-S, 0) for a put."""
    if OptionType.parse(option_type) is OptionType.CALL:
        return max(S0 - K, 0.0)
    return max(K - S0, 0.0)


def bs_price(
    option_type: OptionType | str, S0: float, K: float, r: float, sigma: float, T: float
) -> float:
    """
    Compute European option price using Black-Scholes formula.

    Parameters
    ----------
    option_type : OptionType | str
        Call or put
    S0 : float
        Spot price (must be > 0)
    K : float
        Strike price (must be > 0)
    r : float
        Risk-free interest rate (annualized decimal)
    sigma : float
        Volatility (annualized decimal, must be > 0 unless expired)
    T : float
        Time to maturity in years

    Returns
    -------
    float
        Option price

    Notes
    -----
    T <= 0 is treated as expiry and returns the intrinsic value with no
    dependence on sigma or r.
    """
    option_type = OptionType.parse(option_type)
    check_finite(S0=S0, K=K, r=r, T=T)
    _check_positive(S0, K)

    if T <= 0:
        return intrinsic_value(option_type, S0, K)

    d1_val = d1(S0, K, r, sigma, T)
    d2_val = d1_val - sigma * math.sqrt(T)
    discount = math.exp(-r * T)

    if option_type is OptionType.CALL:
        return S0 * norm_cdf(d1_val) - K * discount * norm_cdf(d2_val)
    return K * discount * norm_cdf(-d2_val) - S0 * norm_cdf(-d1_val)
