"""
Standard normal distribution functions used by the Black-Scholes formulas.
"""

import math

INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)

# Abramowitz & Stegun 26.2.17
CDF_P = 0.2316419
CDF_COEFFICIENTS = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)
CDF_DENSITY_SCALE = 0.3989423


def tail_polynomial(t):
    """
    Evaluate b1 t + b2 t² + b3 t³ + b4 t⁴ + b5 t⁵ by Horner's rule.

    Only arithmetic is used, so t may be a float or a NumPy array. Both
    the scalar and the array CDF go through this function.
    """
    b1, b2, b3, b4, b5 = CDF_COEFFICIENTS
    return t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))


def norm_cdf(x: float) -> float:
    """
    Cumulative distribution function for standard normal distribution.

    Uses the Abramowitz-Stegun rational polynomial approximation
    (absolute error about 1e-7 with the seven-digit CDF_COEFFICIENTS).

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        CDF value at x: P(Z <= x) where Z ~ N(0,1)

    Notes
    -----
    The polynomial is evaluated on |x| and the result reflected for
    positive x, so norm_cdf(-x) == 1 - norm_cdf(x) for every x != 0.
    """
    t = 1.0 / (1.0 + CDF_P * abs(x))
    tail = CDF_DENSITY_SCALE * math.exp(-x * x / 2.0) * tail_polynomial(t)
    return 1.0 - tail if x > 0 else tail


def norm_pdf(x: float) -> float:
    """
    Probability density function for standard normal distribution.

    Parameters
    ----------
    x : float
        Input value

    Returns
    -------
    float
        PDF value at x: φ(x) = exp(-x²/2)/√(2π)
    """
    return math.exp(-0.5 * x * x) * INV_SQRT_2PI
