"""
Configuration for the implied volatility solver and unit conventions.
"""

import math
from dataclasses import dataclass

from greeks_calc.errors import InvalidInputError

DAYS_PER_YEAR = 365.0


def days_to_years(days: float) -> float:
    """Convert a day count to years (ACT/365)."""
    return days / DAYS_PER_YEAR


@dataclass(frozen=True)
class SolverConfig:
    """
    Bisection settings for the implied volatility solver.

    Attributes
    ----------
    tolerance : float
        Absolute price difference accepted as a solution
    max_iterations : int
        Cap on pricing evaluations before the bracket midpoint is returned
    sigma_low : float
        Lower end of the initial volatility bracket
    sigma_high : float
        Upper end of the initial volatility bracket
    """

    tolerance: float = 1e-4
    max_iterations: int = 100
    sigma_low: float = 0.001
    sigma_high: float = 5.0

    def __post_init__(self):
        validate_solver_settings(
            self.tolerance, self.max_iterations, self.sigma_low, self.sigma_high
        )


def validate_solver_settings(
    tolerance: float, max_iterations: int, sigma_low: float, sigma_high: float
) -> None:
    """Raise InvalidInputError for settings the bisection cannot run with."""
    if not 0 < tolerance < math.inf:
        raise InvalidInputError(f"tolerance must be positive and finite, got {tolerance}")
    if max_iterations < 0:
        raise InvalidInputError(f"max_iterations must be non-negative, got {max_iterations}")
    if not 0 < sigma_low < sigma_high < math.inf:
        raise InvalidInputError(
            f"volatility bracket must satisfy 0 < sigma_low < sigma_high < inf, "
            f"got [{sigma_low}, {sigma_high}]"
        )
