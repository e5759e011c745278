"""
Black-Scholes Options Greeks Calculator

Prices European options, computes their Greeks and recovers implied
volatility from market prices, for single options and CSV batches.
"""

from greeks_calc._version import __version__

# Analytics
from greeks_calc.analytics.black_scholes import bs_price
from greeks_calc.analytics.greeks import bs_greeks
from greeks_calc.analytics.implied_vol import implied_vol, solve_implied_vol
from greeks_calc.analytics.normal import norm_cdf, norm_pdf

# Configuration and errors
from greeks_calc.config import SolverConfig
from greeks_calc.errors import InvalidInputError

# Orchestration
from greeks_calc.pricing import price_from_market, price_option
from greeks_calc.types import (
    GreeksResult,
    ImpliedVolResult,
    OptionSpec,
    OptionType,
    PricingResult,
)

__all__ = [
    # Version
    "__version__",
    # Types
    "GreeksResult",
    "ImpliedVolResult",
    "OptionSpec",
    "OptionType",
    "PricingResult",
    # Analytics
    "bs_greeks",
    "bs_price",
    "implied_vol",
    "norm_cdf",
    "norm_pdf",
    "solve_implied_vol",
    # Pricing
    "price_from_market",
    "price_option",
    # Configuration
    "InvalidInputError",
    "SolverConfig",
]
