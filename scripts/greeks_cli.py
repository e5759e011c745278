#!/usr/bin/env python
"""
Run the options Greeks calculator from a source checkout.

This is a thin wrapper around greeks_calc.cli. Prefer the installed
'greeks-calc' command or 'python -m greeks_calc.cli'.

Example usage:
    python scripts/greeks_cli.py --type put --spot 150 --strike 145 --vol 0.25 \
        --rate 0.05 --expiry 30
    python scripts/greeks_cli.py --batch portfolio.csv --json results/
"""

import sys
from pathlib import Path

# Add parent directory to path to allow running without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from greeks_calc.cli import main

if __name__ == "__main__":
    sys.exit(main())
