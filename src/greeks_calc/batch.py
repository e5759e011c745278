"""
Batch (portfolio) evaluation of options read from CSV.

Each CSV row is an independent option. Rows with a volatility are priced
directly; rows with a market price are solved for implied volatility
first. A row that fails validation is reported with its error and does not
stop the rest of the batch.
"""

import csv
import math
from dataclasses import dataclass
from typing import TextIO

import numpy as np

from greeks_calc.analytics.vectorized import bs_greeks_vec, bs_price_vec
from greeks_calc.config import SolverConfig, days_to_years
from greeks_calc.errors import InvalidInputError
from greeks_calc.pricing import price_from_market, price_option
from greeks_calc.types import GreeksResult, OptionSpec, PricingResult

# Accepted header names for each field, first match wins
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "type": ("type", "option_type"),
    "spot": ("spot", "s"),
    "strike": ("strike", "k"),
    "vol": ("vol", "sigma", "volatility"),
    "rate": ("rate", "r"),
    "expiry": ("expiry", "days", "t"),
    "price": ("price", "market_price"),
    "qty": ("qty", "quantity"),
}

TABLE_HEADERS = [
    "Type", "Spot", "Strike", "Vol", "Rate", "Expiry(d)",
    "Price", "Delta", "Gamma", "Theta/d", "Vega", "Rho",
]


@dataclass(frozen=True)
class BatchRow:
    """
    One parsed CSV row.

    Attributes
    ----------
    line : int
        1-based line number in the CSV input (header is line 1)
    spec : OptionSpec
        Option inputs; volatility is None for implied volatility rows
    expiry_days : float
        Time to expiry as given, in days
    market_price : float | None
        Observed price for implied volatility rows
    quantity : float
        Position size used for portfolio totals
    """

    line: int
    spec: OptionSpec
    expiry_days: float
    market_price: float | None = None
    quantity: float = 1.0

    @property
    def solves_vol(self) -> bool:
        return self.market_price is not None


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one batch row: a pricing result or an error message."""

    line: int
    row: BatchRow | None
    result: PricingResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def _lookup(record: dict[str, str], field: str) -> str | None:
    for name in COLUMN_ALIASES[field]:
        value = record.get(name)
        if value is not None and value != "":
            return value
    return None


def _to_float(value: str | None, field: str, line: int) -> float:
    if value is None:
        raise InvalidInputError(f"line {line}: missing '{field}'")
    try:
        number = float(value)
    except ValueError:
        raise InvalidInputError(f"line {line}: '{field}' is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise InvalidInputError(f"line {line}: '{field}' must be a finite number: {value!r}")
    return number


def read_batch_csv(stream: TextIO) -> list[tuple[int, dict[str, str]]]:
    """
    Read CSV records with normalised (trimmed, lower-case) column names.

    Parameters
    ----------
    stream : TextIO
        CSV text with a header row

    Returns
    -------
    list[tuple[int, dict[str, str]]]
        (line number, record) pairs; blank lines are skipped
    """
    reader = csv.reader(stream)
    header = next(reader, None)
    if header is None:
        return []
    columns = [name.strip().lower() for name in header]

    records = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        record = {
            column: value.strip() for column, value in zip(columns, values)
        }
        records.append((reader.line_num, record))
    return records


def parse_batch_row(record: dict[str, str], line: int) -> BatchRow:
    """
    Build a BatchRow from one normalised CSV record.

    Expiry is read in days and converted to years with ACT/365. A row needs
    either a volatility or a market price; when both are present the market
    price wins and the row is solved for implied volatility.

    Raises
    ------
    InvalidInputError
        If a required column is missing or a value is malformed
    """
    option_type = _lookup(record, "type") or "call"
    spot = _to_float(_lookup(record, "spot"), "spot", line)
    strike = _to_float(_lookup(record, "strike"), "strike", line)
    rate = _to_float(_lookup(record, "rate"), "rate", line)
    days = _to_float(_lookup(record, "expiry"), "expiry", line)

    raw_price = _lookup(record, "price")
    raw_vol = _lookup(record, "vol")
    raw_qty = _lookup(record, "qty")

    market_price = _to_float(raw_price, "price", line) if raw_price is not None else None
    if market_price is None and raw_vol is None:
        raise InvalidInputError(f"line {line}: either 'vol' or 'price' is required")
    volatility = _to_float(raw_vol, "vol", line) if market_price is None else None
    quantity = _to_float(raw_qty, "qty", line) if raw_qty is not None else 1.0

    try:
        spec = OptionSpec(
            option_type=option_type,
            spot=spot,
            strike=strike,
            rate=rate,
            volatility=volatility,
            time_to_expiry=days_to_years(days),
        )
    except InvalidInputError as e:
        raise InvalidInputError(f"line {line}: {e}") from None

    return BatchRow(
        line=line, spec=spec, expiry_days=days, market_price=market_price, quantity=quantity
    )


def _price_rows_vectorized(rows: list[BatchRow]) -> list[PricingResult]:
    if not rows:
        return []
    kinds = [row.spec.option_type for row in rows]
    S0 = np.array([row.spec.spot for row in rows])
    K = np.array([row.spec.strike for row in rows])
    r = np.array([row.spec.rate for row in rows])
    sigma = np.array([row.spec.volatility for row in rows], dtype=float)
    T = np.array([row.spec.time_to_expiry for row in rows])

    prices = bs_price_vec(kinds, S0, K, r, sigma, T)
    greeks = bs_greeks_vec(kinds, S0, K, r, sigma, T)

    return [
        PricingResult(
            spec=row.spec,
            price=float(prices[i]),
            greeks=GreeksResult(**{name: float(values[i]) for name, values in greeks.items()}),
        )
        for i, row in enumerate(rows)
    ]


def _solve_row(row: BatchRow, config: SolverConfig) -> BatchResult:
    spec = row.spec
    if spec.time_to_expiry <= 0:
        return BatchResult(
            line=row.line,
            row=row,
            error=f"line {row.line}: implied volatility needs time to expiry > 0",
        )
    priced = price_from_market(
        spec.option_type,
        row.market_price,
        spec.spot,
        spec.strike,
        spec.rate,
        spec.time_to_expiry,
        config,
    )
    if priced is None:
        return BatchResult(
            line=row.line, row=row, error=f"line {row.line}: price is below the arbitrage floor"
        )
    return BatchResult(line=row.line, row=row, result=priced)


def run_batch(
    records: list[tuple[int, dict[str, str]]],
    config: SolverConfig | None = None,
    vectorized: bool = True,
) -> list[BatchResult]:
    """
    Evaluate every record of a batch.

    Parameters
    ----------
    records : list[tuple[int, dict[str, str]]]
        Output of read_batch_csv
    config : SolverConfig | None
        Solver settings for implied volatility rows
    vectorized : bool
        Price volatility rows with the NumPy engine (True) or one by one
        with the scalar engine (False); results are the same

    Returns
    -------
    list[BatchResult]
        One entry per record, in input order
    """
    config = config or SolverConfig()
    outcomes: dict[int, BatchResult] = {}
    to_price: list[tuple[int, BatchRow]] = []

    for index, (line, record) in enumerate(records):
        try:
            row = parse_batch_row(record, line)
        except InvalidInputError as e:
            outcomes[index] = BatchResult(line=line, row=None, error=str(e))
            continue

        if row.solves_vol:
            outcomes[index] = _solve_row(row, config)
        elif vectorized:
            to_price.append((index, row))
        else:
            outcomes[index] = BatchResult(line=line, row=row, result=price_option(row.spec))

    if to_price:
        rows = [row for _, row in to_price]
        for (index, row), priced in zip(to_price, _price_rows_vectorized(rows)):
            outcomes[index] = BatchResult(line=row.line, row=row, result=priced)

    return [outcomes[i] for i in range(len(records))]


def portfolio_totals(results: list[BatchResult]) -> dict[str, float]:
    """
    Quantity-weighted totals over the successfully priced rows.

    Returns
    -------
    dict[str, float]
        positions (row count), value, delta, gamma, theta, vega, rho
    """
    priced = [b for b in results if b.ok]
    if not priced:
        return dict.fromkeys(("positions", "value", "delta", "gamma", "theta", "vega", "rho"), 0.0)

    qty = np.array([b.row.quantity for b in priced])
    columns = np.array(
        [
            [
                b.result.price,
                b.result.greeks.delta,
                b.result.greeks.gamma,
                b.result.greeks.theta,
                b.result.greeks.vega,
                b.result.greeks.rho,
            ]
            for b in priced
        ]
    )
    value, delta, gamma, theta, vega, rho = (qty @ columns).tolist()
    return {
        "positions": float(len(priced)),
        "value": value,
        "delta": delta,
        "gamma": gamma,
        "theta": theta,
        "vega": vega,
        "rho": rho,
    }


def format_batch_table(results: list[BatchResult]) -> str:
    """
    Render batch results as a tab-separated table.

    Theta is shown per day. Rows that failed are listed after the table.
    """
    lines = ["\t".join(TABLE_HEADERS), "-" * 80]
    errors = []

    for b in results:
        if not b.ok:
            errors.append(f"  {b.error}")
            continue
        spec = b.result.spec
        greeks = b.result.greeks
        lines.append(
            "\t".join(
                [
                    spec.option_type.value,
                    f"{spec.spot:.2f}",
                    f"{spec.strike:.2f}",
                    f"{spec.volatility * 100:.1f}%",
                    f"{spec.rate * 100:.2f}%",
                    f"{b.row.expiry_days:.0f}",
                    f"{b.result.price:.4f}",
                    f"{greeks.delta:.4f}",
                    f"{greeks.gamma:.4f}",
                    f"{greeks.theta_per_day:.4f}",
                    f"{greeks.vega:.4f}",
                    f"{greeks.rho:.4f}",
                ]
            )
        )

    if errors:
        lines.append("")
        lines.append("Skipped rows:")
        lines.extend(errors)
    return "\n".join(lines)
