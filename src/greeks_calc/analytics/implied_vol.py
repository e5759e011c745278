"""
Implied volatility solver for European options.

Uses plain bisection over the Black-Scholes price, which is monotonically
increasing in volatility for T > 0.
"""

import math

from greeks_calc.analytics.black_scholes import bs_price, check_finite
from greeks_calc.config import validate_solver_settings
from greeks_calc.errors import InvalidInputError
from greeks_calc.types import ImpliedVolResult, OptionType


def arbitrage_floor(
    option_type: OptionType | str, S0: float, K: float, r: float, T: float
) -> float:
    """
    Lowest no-arbitrage price of a European option.

    Call: max(S0 - K*exp(-rT), 0)
    Put:  max(K*exp(-rT) - S0, 0)
    """
    discount = math.exp(-r * T)
    if OptionType.parse(option_type) is OptionType.CALL:
        return max(S0 - K * discount, 0.0)
    return max(K * discount - S0, 0.0)


def solve_implied_vol(
    option_type: OptionType | str,
    price: float,
    S0: float,
    K: float,
    r: float,
    T: float,
    *,
    tol: float = 1e-4,
    max_iter: int = 100,
    sigma_low: float = 0.001,
    sigma_high: float = 5.0,
) -> ImpliedVolResult | None:
    """
    Solve for σ such that BS(S0, K, r, σ, T, type) = price.

    Parameters
    ----------
    option_type : OptionType | str
        Call or put
    price : float
        Observed market price of the option
    S0 : float
        Current spot price (must be > 0)
    K : float
        Strike price (must be > 0)
    r : float
        Risk-free interest rate (annualized)
    T : float
        Time to maturity in years (must be > 0)
    tol : float, optional
        Absolute price tolerance for early exit (default: 1e-4)
    max_iter : int, optional
        Maximum number of bisection steps (default: 100)
    sigma_low : float, optional
        Lower bound of the volatility bracket (default: 0.001)
    sigma_high : float, optional
        Upper bound of the volatility bracket (default: 5.0)

    Returns
    -------
    ImpliedVolResult | None
        None if the price is below the arbitrage floor. Otherwise the
        solved volatility; when max_iter is exhausted the final bracket
        midpoint is returned with converged=False.

    Raises
    ------
    InvalidInputError
        If an input is NaN or infinite, S0, K or T is not positive, or
        the solver settings are invalid
    """
    option_type = OptionType.parse(option_type)
    check_finite(price=price, S0=S0, K=K, r=r, T=T)
    if S0 <= 0:
        raise InvalidInputError(f"Spot price S0 must be positive, got {S0}")
    if K <= 0:
        raise InvalidInputError(f"Strike K must be positive, got {K}")
    if T <= 0:
        raise InvalidInputError(f"Time to maturity T must be positive, got {T}")
    validate_solver_settings(tol, max_iter, sigma_low, sigma_high)

    if price < arbitrage_floor(option_type, S0, K, r, T):
        return None

    sigma_l = sigma_low
    sigma_h = sigma_high

    for iteration in range(1, max_iter + 1):
        sigma_mid = 0.5 * (sigma_l + sigma_h)
        error = bs_price(option_type, S0, K, r, sigma_mid, T) - price

        if abs(error) < tol:
            return ImpliedVolResult(volatility=sigma_mid, iterations=iteration, converged=True)

        if error > 0:
            # BS price too high, reduce sigma
            sigma_h = sigma_mid
        else:
            sigma_l = sigma_mid

    return ImpliedVolResult(
        volatility=0.5 * (sigma_l + sigma_h), iterations=max_iter, converged=False
    )


def implied_vol(
    option_type: OptionType | str,
    price: float,
    S0: float,
    K: float,
    r: float,
    T: float,
    *,
    tol: float = 1e-4,
    max_iter: int = 100,
    sigma_low: float = 0.001,
    sigma_high: float = 5.0,
) -> float | None:
    """
    Compute implied volatility using bisection method.

    Same contract as solve_implied_vol but returns only the volatility:
    None when the price is below the arbitrage floor, otherwise the solved
    (or best-effort) volatility.
    """
    result = solve_implied_vol(
        option_type,
        price,
        S0,
        K,
        r,
        T,
        tol=tol,
        max_iter=max_iter,
        sigma_low=sigma_low,
        sigma_high=sigma_high,
    )
    return None if result is None else result.volatility
