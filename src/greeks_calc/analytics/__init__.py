"""
Analytics module for Black-Scholes pricing, Greeks and implied volatility.

Provides the scalar reference formulas and their NumPy batch versions.
"""

from greeks_calc.analytics.black_scholes import bs_price, d1, d2, intrinsic_value
from greeks_calc.analytics.greeks import (
    bs_delta,
    bs_gamma,
    bs_greeks,
    bs_rho,
    bs_theta,
    bs_vega,
)
from greeks_calc.analytics.implied_vol import arbitrage_floor, implied_vol, solve_implied_vol
from greeks_calc.analytics.normal import norm_cdf, norm_pdf
from greeks_calc.analytics.vectorized import (
    bs_greeks_vec,
    bs_price_vec,
    norm_cdf_vec,
    norm_pdf_vec,
)

__all__ = [
    "arbitrage_floor",
    "bs_delta",
    "bs_gamma",
    "bs_greeks",
    "bs_greeks_vec",
    "bs_price",
    "bs_price_vec",
    "bs_rho",
    "bs_theta",
    "bs_vega",
    "d1",
    "d2",
    "implied_vol",
    "intrinsic_value",
    "norm_cdf",
    "norm_cdf_vec",
    "norm_pdf",
    "norm_pdf_vec",
    "solve_implied_vol",
]
