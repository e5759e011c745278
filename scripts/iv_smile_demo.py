#!/usr/bin/env python
"""
Implied volatility smile demonstration.

Prices calls and puts across strikes with a synthetic smile, then recovers
the volatility of each quote with the bisection solver. Optionally plots
the smile if matplotlib is available.
"""

import sys
from pathlib import Path

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from greeks_calc.analytics.black_scholes import bs_price
from greeks_calc.analytics.greeks import bs_greeks
from greeks_calc.analytics.implied_vol import solve_implied_vol


def main():
    """Run IV smile demonstration."""
    # Parameters
    S0 = 150.0
    r = 0.05
    T = 30 / 365

    # Volatility smile parameters
    base_vol = 0.25  # ATM volatility
    skew = -0.20
    curvature = 0.60

    strikes = [120, 130, 140, 145, 150, 155, 160, 170, 180]

    print("=" * 100)
    print("Implied Volatility Smile Demonstration")
    print("=" * 100)
    print(f"\nParameters: S0={S0}, r={r}, T={T:.4f} (30 days)")
    print(f"Volatility model: σ(K) = {base_vol} + {skew}*(K/S0 - 1) + {curvature}*(K/S0 - 1)²")
    print("OTM quotes: puts below spot, calls at and above spot")
    print("\n" + "-" * 100)
    print(f"{'Strike':<8} {'Type':<6} {'True Vol':<10} {'Market Px':<12} "
          f"{'Implied Vol':<12} {'Iter':<6} {'Delta':<9} {'Vega':<9} {'Abs Error':<10}")
    print("-" * 100)

    results = []
    for K in strikes:
        option_type = "put" if K < S0 else "call"
        deviation = K / S0 - 1.0
        true_sigma = base_vol + skew * deviation + curvature * deviation**2

        # Generate "market price" using true volatility
        market_price = bs_price(option_type, S0, K, r, true_sigma, T)

        solved = solve_implied_vol(option_type, market_price, S0, K, r, T, tol=1e-8)
        if solved is None:
            print(f"{K:<8} {option_type:<6} {true_sigma:<10.4f} {market_price:<12.6f} "
                  "below arbitrage floor")
            continue

        greeks = bs_greeks(option_type, S0, K, r, solved.volatility, T)
        error = abs(solved.volatility - true_sigma)
        results.append((K, true_sigma, solved.volatility, error))

        print(f"{K:<8} {option_type:<6} {true_sigma:<10.4f} {market_price:<12.6f} "
              f"{solved.volatility:<12.6f} {solved.iterations:<6} {greeks.delta:<9.4f} "
              f"{greeks.vega:<9.4f} {error:<10.2e}")

    print("-" * 100)

    # Summary statistics
    if results:
        errors = [row[3] for row in results]
        print("\nRecovery Statistics:")
        print(f"  Maximum error:  {max(errors):.2e}")
        print(f"  Average error:  {sum(errors) / len(errors):.2e}")
        print(f"  All errors < 1e-4: {'✓' if all(e < 1e-4 for e in errors) else '✗'}")

    # Optional plotting
    try:
        import matplotlib.pyplot as plt

        print("\n" + "=" * 100)
        print("Generating plot...")
        print("=" * 100)

        strikes_list = [row[0] for row in results]
        true_vols = [row[1] for row in results]
        implied_vols = [row[2] for row in results]

        plt.figure(figsize=(10, 6))
        plt.plot(strikes_list, true_vols, 'b-o', label='True Volatility', linewidth=2)
        plt.plot(strikes_list, implied_vols, 'r--s', label='Implied Volatility', linewidth=2)
        plt.axvline(S0, color='gray', linestyle=':', alpha=0.7, label=f'ATM (S0={S0})')
        plt.xlabel('Strike Price (K)', fontsize=12)
        plt.ylabel('Volatility', fontsize=12)
        plt.title('Volatility Smile: True vs Bisection Implied Volatility', fontsize=14)
        plt.legend(fontsize=10)
        plt.grid(True, alpha=0.3)
        plt.tight_layout()

        plots_dir = Path(__file__).parent.parent / "plots"
        plots_dir.mkdir(exist_ok=True)
        output_path = plots_dir / "iv_smile.png"
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        print(f"\nPlot saved to: {output_path}")
        print("=" * 100)

    except ImportError:
        print("\n" + "=" * 100)
        print("Note: matplotlib not available - skipping plot generation")
        print("Install with: pip install options-greeks-calc[plot]")
        print("=" * 100)


if __name__ == "__main__":
    main()
