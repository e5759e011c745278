"""
I/O utilities for saving and loading pricing results.
"""

import json
import platform
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np

from greeks_calc._version import __version__
from greeks_calc.batch import BatchResult, portfolio_totals
from greeks_calc.types import PricingResult


def create_metadata() -> dict[str, Any]:
    """Describe the environment the results were produced in."""
    return {
        "timestamp": datetime.now().isoformat(),
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}."
        f"{sys.version_info.micro}",
        "numpy_version": np.__version__,
        "os_platform": platform.platform(),
        "greeks_calc_version": __version__,
    }


def _entry(item: PricingResult | BatchResult) -> dict[str, Any]:
    if isinstance(item, BatchResult):
        data: dict[str, Any] = {"line": item.line, "error": item.error}
        if item.result is not None:
            data.update(item.result.to_dict())
        if item.row is not None:
            data["quantity"] = item.row.quantity
            data["market_price"] = item.row.market_price
        return data
    return item.to_dict()


def save_results(
    results: list[PricingResult] | list[BatchResult],
    out_dir: Path,
    run_name: str,
) -> None:
    """
    Save pricing results to JSON and summary text files.

    Creates:
    - results.json: Full machine-readable results
    - summary.txt: Human-readable table summary

    Parameters
    ----------
    results : list[PricingResult] | list[BatchResult]
        Single-option results or batch results
    out_dir : Path
        Output directory
    run_name : str
        Name of the run for headers
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    batch = [r for r in results if isinstance(r, BatchResult)]
    json_path = out_dir / "results.json"
    json_data: dict[str, Any] = {
        "run_name": run_name,
        "n_results": len(results),
        "metadata": create_metadata(),
        "results": [_entry(r) for r in results],
    }
    if batch:
        json_data["portfolio"] = portfolio_totals(batch)

    with open(json_path, "w") as f:
        json.dump(json_data, f, indent=2)

    priced = [
        (r.result if isinstance(r, BatchResult) else r)
        for r in results
        if not isinstance(r, BatchResult) or r.ok
    ]

    summary_path = out_dir / "summary.txt"
    with open(summary_path, "w") as f:
        f.write("=" * 100 + "\n")
        f.write(f"Run: {run_name}\n")
        f.write("=" * 100 + "\n")
        f.write(f"\nTotal rows: {len(results)}  Priced: {len(priced)}\n")

        meta = json_data["metadata"]
        f.write("\nMetadata:\n")
        f.write(f"  Timestamp:      {meta['timestamp']}\n")
        f.write(f"  Python:         {meta['python_version']}\n")
        f.write(f"  NumPy:          {meta['numpy_version']}\n")
        f.write(f"  Platform:       {meta['os_platform']}\n")

        f.write("\n" + "-" * 100 + "\n")
        f.write(f"{'Type':<6} {'Spot':>10} {'Strike':>10} {'Vol':>8} {'Price':>12} "
                f"{'Delta':>9} {'Gamma':>9} {'Theta/yr':>11} {'Vega':>9} {'Rho':>9}\n")
        f.write("-" * 100 + "\n")

        for p in priced:
            g = p.greeks
            f.write(f"{p.spec.option_type.value:<6} {p.spec.spot:>10.2f} {p.spec.strike:>10.2f} "
                    f"{p.spec.volatility:>8.4f} {p.price:>12.6f} {g.delta:>9.4f} "
                    f"{g.gamma:>9.4f} {g.theta:>11.4f} {g.vega:>9.4f} {g.rho:>9.4f}\n")

        f.write("-" * 100 + "\n")

        if batch:
            totals = json_data["portfolio"]
            f.write("\nPortfolio Totals (quantity weighted):\n")
            for key in ("value", "delta", "gamma", "theta", "vega", "rho"):
                f.write(f"  {key.capitalize():<8} {totals[key]:>14.6f}\n")

    print(f"\n✓ Results saved to {out_dir}")
    print(f"  - {json_path.name}")
    print(f"  - {summary_path.name}")


def load_results(results_dir: Path) -> dict:
    """
    Load pricing results from JSON file.

    Parameters
    ----------
    results_dir : Path
        Directory containing results.json

    Returns
    -------
    dict
        Loaded results data
    """
    json_path = results_dir / "results.json"
    with open(json_path) as f:
        return json.load(f)
