"""
Single-option pricing in the two calculator modes.

Pricing mode takes a volatility and returns price and Greeks. Implied
volatility mode solves the volatility from a market price first and then
prices at the solved value.
"""

from greeks_calc.analytics.black_scholes import bs_price
from greeks_calc.analytics.greeks import bs_greeks
from greeks_calc.analytics.implied_vol import solve_implied_vol
from greeks_calc.config import SolverConfig
from greeks_calc.errors import InvalidInputError
from greeks_calc.types import OptionSpec, OptionType, PricingResult


def price_option(spec: OptionSpec) -> PricingResult:
    """
    Price an option and compute its Greeks at spec.volatility.

    Parameters
    ----------
    spec : OptionSpec
        Option inputs; volatility must be set

    Returns
    -------
    PricingResult
        Price and Greeks

    Raises
    ------
    InvalidInputError
        If spec carries no volatility
    """
    if spec.volatility is None:
        raise InvalidInputError("Volatility is required for pricing")

    args = (
        spec.option_type,
        spec.spot,
        spec.strike,
        spec.rate,
        spec.volatility,
        spec.time_to_expiry,
    )
    return PricingResult(spec=spec, price=bs_price(*args), greeks=bs_greeks(*args))


def price_from_market(
    option_type: OptionType | str,
    market_price: float,
    S0: float,
    K: float,
    r: float,
    T: float,
    config: SolverConfig | None = None,
) -> PricingResult | None:
    """
    Solve implied volatility from a market price, then price at it.

    Parameters
    ----------
    option_type : OptionType | str
        Call or put
    market_price : float
        Observed option price
    S0, K, r, T : float
        Spot, strike, rate and time to expiry in years (T > 0)
    config : SolverConfig | None
        Bisection settings; defaults to SolverConfig()

    Returns
    -------
    PricingResult | None
        None when the market price is below the arbitrage floor. Otherwise
        the result at the solved volatility, with implied_vol, converged and
        iterations populated.
    """
    config = config or SolverConfig()
    solved = solve_implied_vol(
        option_type,
        market_price,
        S0,
        K,
        r,
        T,
        tol=config.tolerance,
        max_iter=config.max_iterations,
        sigma_low=config.sigma_low,
        sigma_high=config.sigma_high,
    )
    if solved is None:
        return None

    spec = OptionSpec(
        option_type=option_type,
        spot=S0,
        strike=K,
        rate=r,
        volatility=solved.volatility,
        time_to_expiry=T,
    )
    priced = price_option(spec)
    return PricingResult(
        spec=spec,
        price=priced.price,
        greeks=priced.greeks,
        implied_vol=solved.volatility,
        converged=solved.converged,
        iterations=solved.iterations,
    )
