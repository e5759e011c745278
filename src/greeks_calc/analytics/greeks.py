"""
Closed-form Black-Scholes Greeks.

Units follow the usual desk conventions: theta is per year, vega and rho
are per one percentage point move in volatility and rate respectively.
"""

import math

from greeks_calc.analytics.black_scholes import check_finite, d1
from greeks_calc.analytics.normal import norm_cdf, norm_pdf
from greeks_calc.errors import InvalidInputError
from greeks_calc.types import GreeksResult, OptionType

_PERCENT = 100.0


def _validate(S0: float, K: float, r: float, T: float) -> None:
    check_finite(S0=S0, K=K, r=r, T=T)
    if S0 <= 0 or K <= 0:
        raise InvalidInputError("S0 and K must be positive")


def bs_delta(
    option_type: OptionType | str, S0: float, K: float, r: float, sigma: float, T: float
) -> float:
    """
    Delta = ∂V/∂S.

    Call delta is N(d1), put delta is N(d1) - 1. At expiry delta is the
    exercise indicator: 1 for an in-the-money call, -1 for an in-the-money
    put, 0 otherwise.
    """
    option_type = OptionType.parse(option_type)
    _validate(S0, K, r, T)

    if T <= 0:
        if option_type is OptionType.CALL:
            return 1.0 if S0 > K else 0.0
        return -1.0 if S0 < K else 0.0

    n_d1 = norm_cdf(d1(S0, K, r, sigma, T))
    return n_d1 if option_type is OptionType.CALL else n_d1 - 1.0


def bs_gamma(S0: float, K: float, r: float, sigma: float, T: float) -> float:
    """
    Gamma = ∂²V/∂S² (same for calls and puts).

    Gamma = φ(d1) / (S σ √T), zero at expiry.
    """
    _validate(S0, K, r, T)
    if T <= 0:
        return 0.0
    return norm_pdf(d1(S0, K, r, sigma, T)) / (S0 * sigma * math.sqrt(T))


def bs_theta(
    option_type: OptionType | str, S0: float, K: float, r: float, sigma: float, T: float
) -> float:
    """
    Theta per year.

    For call: -[S φ(d1) σ/(2√T)] - r K exp(-rT) N(d2)
    For put:  -[S φ(d1) σ/(2√T)] + r K exp(-rT) N(-d2)
    """
    option_type = OptionType.parse(option_type)
    _validate(S0, K, r, T)
    if T <= 0:
        return 0.0

    sqrt_T = math.sqrt(T)
    d1_val = d1(S0, K, r, sigma, T)
    d2_val = d1_val - sigma * sqrt_T
    decay = -(S0 * norm_pdf(d1_val) * sigma) / (2.0 * sqrt_T)
    carry = r * K * math.exp(-r * T)

    if option_type is OptionType.CALL:
        return decay - carry * norm_cdf(d2_val)
    return decay + carry * norm_cdf(-d2_val)


def bs_vega(S0: float, K: float, r: float, sigma: float, T: float) -> float:
    """Vega per one vol point: S √T φ(d1) / 100 (same for calls and puts)."""
    _validate(S0, K, r, T)
    if T <= 0:
        return 0.0
    sqrt_T = math.sqrt(T)
    return S0 * sqrt_T * norm_pdf(d1(S0, K, r, sigma, T)) / _PERCENT


def bs_rho(
    option_type: OptionType | str, S0: float, K: float, r: float, sigma: float, T: float
) -> float:
    """
    Rho per one rate point.

    For call: K T exp(-rT) N(d2) / 100
    For put: -K T exp(-rT) N(-d2) / 100
    """
    option_type = OptionType.parse(option_type)
    _validate(S0, K, r, T)
    if T <= 0:
        return 0.0

    d2_val = d1(S0, K, r, sigma, T) - sigma * math.sqrt(T)
    scaled = K * T * math.exp(-r * T) / _PERCENT

    if option_type is OptionType.CALL:
        return scaled * norm_cdf(d2_val)
    return -scaled * norm_cdf(-d2_val)


def bs_greeks(
    option_type: OptionType | str, S0: float, K: float, r: float, sigma: float, T: float
) -> GreeksResult:
    """
    Compute all five Greeks from a single d1/d2 evaluation.

    Parameters
    ----------
    option_type : OptionType | str
        Call or put
    S0 : float
        Spot price (must be > 0)
    K : float
        Strike price (must be > 0)
    r : float
        Risk-free interest rate
    sigma : float
        Volatility (must be > 0 unless expired)
    T : float
        Time to maturity in years

    Returns
    -------
    GreeksResult
        Delta, gamma, theta (per year), vega and rho (per 1%)

    Raises
    ------
    InvalidInputError
        If an input is NaN or infinite, S0 or K is non-positive, or sigma
        is non-positive while T > 0
    """
    option_type = OptionType.parse(option_type)
    _validate(S0, K, r, T)

    # Expired: payoff is a kink, only the exercise indicator survives
    if T <= 0:
        return GreeksResult(
            delta=bs_delta(option_type, S0, K, r, sigma, T),
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=0.0,
        )

    sqrt_T = math.sqrt(T)
    d1_val = d1(S0, K, r, sigma, T)
    d2_val = d1_val - sigma * sqrt_T
    pdf_d1 = norm_pdf(d1_val)
    discount = math.exp(-r * T)

    gamma = pdf_d1 / (S0 * sigma * sqrt_T)
    vega = S0 * sqrt_T * pdf_d1 / _PERCENT
    decay = -(S0 * pdf_d1 * sigma) / (2.0 * sqrt_T)

    if option_type is OptionType.CALL:
        delta = norm_cdf(d1_val)
        theta = decay - r * K * discount * norm_cdf(d2_val)
        rho = K * T * discount * norm_cdf(d2_val) / _PERCENT
    else:
        delta = norm_cdf(d1_val) - 1.0
        theta = decay + r * K * discount * norm_cdf(-d2_val)
        rho = -K * T * discount * norm_cdf(-d2_val) / _PERCENT

    return GreeksResult(delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)
