"""
Value types shared by the pricing engine, the batch runner and the CLI.

Every record here is immutable and lives for a single calculation.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from greeks_calc.config import DAYS_PER_YEAR
from greeks_calc.errors import InvalidInputError


class OptionType(str, Enum):
    """European option payoff direction."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: "OptionType | str") -> "OptionType":
        """
        Normalise an option type given as enum member or string.

        Parameters
        ----------
        value : OptionType | str
            Enum member, or one of 'call', 'c', 'put', 'p' (case-insensitive)

        Returns
        -------
        OptionType
            Matching enum member

        Raises
        ------
        InvalidInputError
            If the value names neither a call nor a put
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("call", "c"):
                return cls.CALL
            if key in ("put", "p"):
                return cls.PUT
        raise InvalidInputError(f"option_type must be 'call' or 'put', got {value!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OptionSpec:
    """
    Inputs describing a single European option.

    Attributes
    ----------
    option_type : OptionType
        Call or put
    spot : float
        Current underlying price S (must be > 0)
    strike : float
        Strike price K (must be > 0)
    rate : float
        Continuously compounded risk-free rate r, as a decimal
    volatility : float | None
        Annualised volatility sigma as a decimal. None until solved in
        implied volatility mode.
    time_to_expiry : float
        Time to expiry T in years (0 means expired)
    """

    option_type: OptionType
    spot: float
    strike: float
    rate: float
    volatility: float | None
    time_to_expiry: float

    def __post_init__(self):
        object.__setattr__(self, "option_type", OptionType.parse(self.option_type))
        for name in ("spot", "strike", "rate", "volatility", "time_to_expiry"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise InvalidInputError(f"{name} must be a finite number, got {value}")
        if self.spot <= 0:
            raise InvalidInputError(f"Spot price must be positive, got {self.spot}")
        if self.strike <= 0:
            raise InvalidInputError(f"Strike must be positive, got {self.strike}")
        if self.time_to_expiry < 0:
            raise InvalidInputError(
                f"Time to expiry must be non-negative, got {self.time_to_expiry}"
            )
        if self.volatility is not None and self.volatility <= 0:
            raise InvalidInputError(f"Volatility must be positive, got {self.volatility}")

    @property
    def expiry_days(self) -> float:
        """Time to expiry expressed in days."""
        return self.time_to_expiry * DAYS_PER_YEAR

    def with_volatility(self, volatility: float) -> "OptionSpec":
        """Return a copy of this spec carrying the given volatility."""
        return replace(self, volatility=volatility)

    def to_dict(self) -> dict[str, Any]:
        return {
            "option_type": self.option_type.value,
            "spot": self.spot,
            "strike": self.strike,
            "rate": self.rate,
            "volatility": self.volatility,
            "time_to_expiry": self.time_to_expiry,
        }


@dataclass(frozen=True)
class GreeksResult:
    """
    Black-Scholes sensitivities of one option.

    Attributes
    ----------
    delta : float
        dV/dS
    gamma : float
        d2V/dS2 (identical for calls and puts)
    theta : float
        Time decay per year; divide by 365 for a per-day figure
    vega : float
        Price change per one percentage point move in volatility
    rho : float
        Price change per one percentage point move in the rate
    """

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    @property
    def theta_per_day(self) -> float:
        return self.theta / DAYS_PER_YEAR

    def to_dict(self) -> dict[str, float]:
        return {
            "delta": self.delta,
            "gamma": self.gamma,
            "theta": self.theta,
            "vega": self.vega,
            "rho": self.rho,
        }

    def __repr__(self) -> str:
        return (
            f"GreeksResult(delta={self.delta:.6f}, gamma={self.gamma:.6f}, "
            f"theta={self.theta:.6f}, vega={self.vega:.6f}, rho={self.rho:.6f})"
        )


@dataclass(frozen=True)
class ImpliedVolResult:
    """
    Outcome of the bisection implied volatility solver.

    Attributes
    ----------
    volatility : float
        Solved volatility, or the final bracket midpoint if the iteration
        cap was reached first
    iterations : int
        Number of pricing evaluations performed
    converged : bool
        True if the price tolerance was met before the iteration cap
    """

    volatility: float
    iterations: int
    converged: bool


@dataclass(frozen=True)
class PricingResult:
    """
    Price and Greeks of one option, with the solved volatility in IV mode.

    Attributes
    ----------
    spec : OptionSpec
        Inputs the result was computed from (volatility always set)
    price : float
        Black-Scholes price
    greeks : GreeksResult
        Sensitivities at spec.volatility
    implied_vol : float | None
        Solved volatility when the result came from a market price
    converged : bool | None
        Solver convergence flag (IV mode only)
    iterations : int | None
        Solver iteration count (IV mode only)
    """

    spec: OptionSpec
    price: float
    greeks: GreeksResult
    implied_vol: float | None = None
    converged: bool | None = None
    iterations: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "spec": self.spec.to_dict(),
            "price": self.price,
            "greeks": self.greeks.to_dict(),
            "implied_vol": self.implied_vol,
            "converged": self.converged,
            "iterations": self.iterations,
        }
