#!/usr/bin/env python
"""
Command-line interface for the Black-Scholes options Greeks calculator.

This module provides the main CLI entrypoint for the greeks-calc command.

Example usage:
    greeks-calc --type call --spot 150 --strike 155 --vol 0.25 --rate 0.05 --expiry 30
    greeks-calc --iv --type call --spot 150 --strike 155 --price 3.50 --rate 0.05 --expiry 30
    cat options.csv | greeks-calc --batch
"""

import argparse
import csv
import sys
from pathlib import Path

from greeks_calc.batch import format_batch_table, portfolio_totals, read_batch_csv, run_batch
from greeks_calc.config import SolverConfig, days_to_years
from greeks_calc.io import save_results
from greeks_calc.pricing import price_from_market, price_option
from greeks_calc.types import OptionSpec, OptionType, PricingResult

EPILOG = """\
examples:
  Price a call option:
    greeks-calc --type call --spot 150 --strike 155 --vol 0.25 --rate 0.05 --expiry 30

  Calculate implied volatility:
    greeks-calc --iv --type call --spot 150 --strike 155 --price 3.50 --rate 0.05 --expiry 30

  Batch processing (CSV with header type,spot,strike,vol,rate,expiry):
    cat options.csv | greeks-calc --batch
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="greeks-calc",
        description="Black-Scholes Options Greeks Calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )

    # Option parameters
    parser.add_argument(
        "--type",
        dest="option_type",
        type=str.lower,
        choices=[t.value for t in OptionType],
        help="Option type: call or put",
    )
    parser.add_argument("--spot", type=float, help="Spot price (current underlying price)")
    parser.add_argument("--strike", type=float, help="Strike price")
    parser.add_argument("--vol", type=float, help="Volatility (annual, decimal: 0.25 = 25%%)")
    parser.add_argument("--rate", type=float, help="Risk-free rate (annual, decimal: 0.05 = 5%%)")
    parser.add_argument("--expiry", type=float, help="Time to expiry in days")

    # Implied volatility
    parser.add_argument("--iv", action="store_true", help="Calculate implied volatility")
    parser.add_argument("--price", type=float, help="Market price (for IV calculation)")
    parser.add_argument(
        "--tol",
        type=float,
        default=SolverConfig.tolerance,
        help="IV solver price tolerance (default: %(default)s)",
    )
    parser.add_argument(
        "--max-iter",
        dest="max_iter",
        type=int,
        default=SolverConfig.max_iterations,
        help="IV solver iteration cap (default: %(default)s)",
    )

    # Batch
    parser.add_argument(
        "--batch",
        nargs="?",
        const="-",
        default=None,
        metavar="FILE",
        help="Batch mode: read CSV from FILE, or from stdin if omitted",
    )
    parser.add_argument(
        "--scalar",
        action="store_true",
        help="Batch mode: price rows one at a time instead of vectorised",
    )

    # Output
    parser.add_argument(
        "--json",
        dest="json_dir",
        type=Path,
        default=None,
        metavar="DIR",
        help="Also save results.json and summary.txt to DIR",
    )

    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    return build_parser().parse_args(args)


def display_results(result: PricingResult) -> None:
    """Print the input parameters, price and Greeks of one option."""
    spec = result.spec
    greeks = result.greeks

    print("\n" + "=" * 60)
    print("BLACK-SCHOLES OPTIONS CALCULATOR")
    print("=" * 60)
    print("\nInput Parameters:")
    print(f"  Option Type:      {spec.option_type.value.upper()}")
    print(f"  Spot Price:       ${spec.spot:.2f}")
    print(f"  Strike Price:     ${spec.strike:.2f}")
    print(f"  Risk-Free Rate:   {spec.rate * 100:.2f}%")
    print(f"  Volatility:       {spec.volatility * 100:.2f}%")
    print(
        f"  Time to Expiry:   {spec.expiry_days:.0f} days ({spec.time_to_expiry:.4f} years)"
    )

    if result.implied_vol is not None:
        print(f"\n  Implied Vol:      {result.implied_vol * 100:.2f}%")
        if not result.converged:
            print(
                f"  Note: solver stopped after {result.iterations} iterations "
                "without meeting the price tolerance (best estimate shown)"
            )

    print("\n" + "-" * 60)
    print("RESULTS:")
    print("-" * 60)
    print(f"  Option Price:     ${result.price:.4f}")
    print("\nGreeks:")
    print(f"  Delta:            {greeks.delta:.4f}")
    print(f"  Gamma:            {greeks.gamma:.4f}")
    print(
        f"  Theta:            {greeks.theta:.4f} (per year) / "
        f"{greeks.theta_per_day:.4f} (per day)"
    )
    print(f"  Vega:             {greeks.vega:.4f} (per 1% vol change)")
    print(f"  Rho:              {greeks.rho:.4f} (per 1% rate change)")
    print("=" * 60 + "\n")


def run_batch_mode(parsed: argparse.Namespace, config: SolverConfig) -> int:
    """Price every row of a CSV batch and print the table."""
    if parsed.batch == "-":
        records = read_batch_csv(sys.stdin)
    else:
        with open(parsed.batch, newline="", encoding="utf-8") as f:
            records = read_batch_csv(f)

    results = run_batch(records, config=config, vectorized=not parsed.scalar)

    print("\n" + "=" * 80)
    print("BATCH BLACK-SCHOLES CALCULATION")
    print("=" * 80 + "\n")
    print(format_batch_table(results))

    totals = portfolio_totals(results)
    print("\n" + "-" * 80)
    print(f"Portfolio ({totals['positions']:.0f} positions, quantity weighted):")
    print(f"  Value:  {totals['value']:.4f}")
    print(f"  Delta:  {totals['delta']:.4f}")
    print(f"  Gamma:  {totals['gamma']:.4f}")
    print(f"  Theta:  {totals['theta']:.4f} (per year)")
    print(f"  Vega:   {totals['vega']:.4f}")
    print(f"  Rho:    {totals['rho']:.4f}")
    print("=" * 80)

    if parsed.json_dir is not None:
        save_results(results, parsed.json_dir, "batch")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        Exit code (0 for success, non-zero for errors).
    """
    argv = sys.argv[1:] if args is None else args
    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    parsed = parser.parse_args(argv)

    try:
        config = SolverConfig(tolerance=parsed.tol, max_iterations=parsed.max_iter)

        if parsed.batch is not None:
            return run_batch_mode(parsed, config)

        missing = [
            flag
            for flag, value in (
                ("--type", parsed.option_type),
                ("--spot", parsed.spot),
                ("--strike", parsed.strike),
                ("--rate", parsed.rate),
                ("--expiry", parsed.expiry),
            )
            if value is None
        ]
        if missing:
            print(f"Error: Missing required parameters: {', '.join(missing)}")
            return 1

        T = days_to_years(parsed.expiry)

        # Implied volatility mode
        if parsed.iv or parsed.price is not None:
            if parsed.price is None:
                print("Error: --price required for IV calculation")
                return 1

            result = price_from_market(
                parsed.option_type,
                parsed.price,
                parsed.spot,
                parsed.strike,
                parsed.rate,
                T,
                config,
            )
            if result is None:
                print(
                    "Error: Could not calculate implied volatility "
                    "(price is below the arbitrage floor)"
                )
                return 1
        else:
            if parsed.vol is None:
                print("Error: --vol required for pricing")
                return 1
            spec = OptionSpec(
                option_type=parsed.option_type,
                spot=parsed.spot,
                strike=parsed.strike,
                rate=parsed.rate,
                volatility=parsed.vol,
                time_to_expiry=T,
            )
            result = price_option(spec)

    except (ValueError, OSError, csv.Error) as e:
        print(f"Error: {e}")
        return 1

    display_results(result)
    if parsed.json_dir is not None:
        save_results([result], parsed.json_dir, "single")
    return 0


if __name__ == "__main__":
    sys.exit(main())
