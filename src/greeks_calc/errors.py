"""
Exception types raised by the pricing engine.
"""


class InvalidInputError(ValueError):
    """
    Raised when pricing inputs cannot produce a finite result.

    Covers non-positive spot or strike, non-positive volatility on a live
    option, non-positive time fed to d1/d2 or to the implied volatility
    solver, unknown option types and malformed batch values.
    """
