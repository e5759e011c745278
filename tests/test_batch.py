"""
Tests for CSV batch evaluation and portfolio aggregation.
"""

import io
import math

import pytest

from greeks_calc.analytics.black_scholes import bs_price
from greeks_calc.batch import (
    format_batch_table,
    parse_batch_row,
    portfolio_totals,
    read_batch_csv,
    run_batch,
)
from greeks_calc.config import SolverConfig
from greeks_calc.errors import InvalidInputError
from greeks_calc.types import OptionType

PORTFOLIO_CSV = """\
type,spot,strike,vol,rate,expiry,qty
call,150,155,0.25,0.05,30,2
put,150,145,0.25,0.05,30,-1
"""


def _run(text, **kwargs):
    return run_batch(read_batch_csv(io.StringIO(text)), **kwargs)


class TestReadCsv:
    def test_line_numbers_and_blank_lines(self):
        text = (
            "type,spot,strike,vol,rate,expiry\n"
            "call,100,100,0.2,0.05,30\n"
            "\n"
            "  ,  \n"
            "put,100,100,0.2,0.05,30\n"
        )
        records = read_batch_csv(io.StringIO(text))
        assert [line for line, _ in records] == [2, 5]
        assert records[1][1]["type"] == "put"

    def test_header_normalised(self):
        records = read_batch_csv(io.StringIO(" Type , SPOT \n call , 100 \n"))
        assert records == [(2, {"type": "call", "spot": "100"})]

    def test_empty_input(self):
        assert read_batch_csv(io.StringIO("")) == []


class TestParseRow:
    def test_aliases(self):
        record = {
            "option_type": "P",
            "s": "100",
            "k": "95",
            "sigma": "0.3",
            "r": "0.02",
            "days": "73",
            "quantity": "5",
        }
        row = parse_batch_row(record, 7)
        assert row.line == 7
        assert row.spec.option_type is OptionType.PUT
        assert row.spec.volatility == 0.3
        assert row.spec.time_to_expiry == pytest.approx(0.2)
        assert row.expiry_days == 73.0
        assert row.quantity == 5.0
        assert not row.solves_vol

    def test_type_defaults_to_call(self):
        record = {"spot": "100", "strike": "100", "vol": "0.2", "rate": "0.05", "expiry": "30"}
        assert parse_batch_row(record, 2).spec.option_type is OptionType.CALL

    def test_market_price_wins_over_vol(self):
        record = {
            "type": "call",
            "spot": "100",
            "strike": "100",
            "vol": "0.2",
            "rate": "0.05",
            "expiry": "30",
            "market_price": "2.5",
        }
        row = parse_batch_row(record, 3)
        assert row.solves_vol
        assert row.market_price == 2.5
        assert row.spec.volatility is None

    @pytest.mark.parametrize(
        "record,match",
        [
            (
                {"spot": "100", "vol": "0.2", "rate": "0.05", "expiry": "30"},
                "line 4: missing 'strike'",
            ),
            (
                {"spot": "abc", "strike": "100", "vol": "0.2", "rate": "0.05", "expiry": "30"},
                "line 4: 'spot' is not a number",
            ),
            (
                {"spot": "100", "strike": "100", "rate": "0.05", "expiry": "30"},
                "either 'vol' or 'price' is required",
            ),
            (
                {"spot": "100", "strike": "100", "vol": "0", "rate": "0.05", "expiry": "30"},
                "line 4: Volatility must be positive",
            ),
            (
                {"type": "fwd", "spot": "1", "strike": "1", "vol": "1", "rate": "0", "expiry": "1"},
                "line 4: option_type must be",
            ),
        ],
    )
    def test_invalid_rows(self, record, match):
        with pytest.raises(InvalidInputError, match=match):
            parse_batch_row(record, 4)


class TestRunBatch:
    def test_prices_rows_in_order(self):
        results = _run(PORTFOLIO_CSV)
        assert [b.line for b in results] == [2, 3]
        assert all(b.ok for b in results)
        assert results[0].result.price == pytest.approx(2.511858, abs=1e-4)
        assert results[1].result.price == pytest.approx(1.988749, abs=1e-4)
        assert results[1].result.greeks.delta == pytest.approx(-0.285636, abs=1e-4)

    def test_vectorized_matches_scalar(self):
        text = PORTFOLIO_CSV + "call,120,100,0.2,0.05,0,1\nput,80,100,0.4,-0.01,400,3\n"
        fast = _run(text)
        slow = _run(text, vectorized=False)
        for a, b in zip(fast, slow):
            assert a.result.price == pytest.approx(b.result.price, rel=1e-12, abs=1e-12)
            for name, value in b.result.greeks.to_dict().items():
                assert getattr(a.result.greeks, name) == pytest.approx(value, rel=1e-12, abs=1e-12)

    def test_bad_row_does_not_stop_batch(self):
        text = (
            "type,spot,strike,vol,rate,expiry\n"
            "call,100,100,0.2,0.05,30\n"
            "call,-100,100,0.2,0.05,30\n"
            "put,100,100,0.2,0.05,30\n"
        )
        results = _run(text)
        assert [b.ok for b in results] == [True, False, True]
        assert results[1].line == 3
        assert results[1].row is None
        assert "Spot price must be positive" in results[1].error

    def test_implied_vol_rows(self):
        market = bs_price("put", 100, 105, 0.03, 0.35, 0.5)
        text = (
            "type,spot,strike,rate,expiry,price\n"
            f"put,100,105,0.03,182.5,{market!r}\n"
            "put,100,120,0.05,365,0.5\n"
            "call,100,100,0.05,0,3.0\n"
        )
        solved, below, expired = _run(text)

        assert solved.ok
        assert solved.result.converged
        assert abs(solved.result.implied_vol - 0.35) < 0.0005
        assert solved.result.spec.volatility == solved.result.implied_vol

        assert not below.ok
        assert below.error == "line 3: price is below the arbitrage floor"
        assert not expired.ok
        assert "time to expiry" in expired.error

    def test_solver_settings_are_used(self):
        market = bs_price("call", 100, 100, 0.05, 0.3, 1.0)
        text = f"type,spot,strike,rate,expiry,price\ncall,100,100,0.05,365,{market!r}\n"
        (row,) = _run(text, config=SolverConfig(tolerance=1e-12, max_iterations=4))
        assert row.result.iterations == 4
        assert row.result.converged is False


class TestPortfolio:
    def test_quantity_weighted_totals(self):
        totals = portfolio_totals(_run(PORTFOLIO_CSV))
        assert totals["positions"] == 2.0
        assert totals["value"] == pytest.approx(2 * 2.511858 - 1.988749, abs=1e-4)
        assert totals["delta"] == pytest.approx(2 * 0.357810 + 0.285636, abs=1e-4)
        assert totals["gamma"] == pytest.approx(2 * 0.034725 - 0.031612, abs=1e-4)
        assert totals["theta"] == pytest.approx(2 * -26.974041 + 19.985693, abs=1e-3)
        assert totals["vega"] == pytest.approx(2 * 0.160544 - 0.146153, abs=1e-4)
        assert totals["rho"] == pytest.approx(2 * 0.042049 + 0.036850, abs=1e-4)

    def test_failed_rows_excluded(self):
        text = PORTFOLIO_CSV + "call,0,100,0.2,0.05,30,100\n"
        assert portfolio_totals(_run(text))["positions"] == 2.0

    def test_nothing_priced(self):
        totals = portfolio_totals([])
        assert totals == {
            "positions": 0.0,
            "value": 0.0,
            "delta": 0.0,
            "gamma": 0.0,
            "theta": 0.0,
            "vega": 0.0,
            "rho": 0.0,
        }


class TestTable:
    def test_layout(self):
        lines = format_batch_table(_run(PORTFOLIO_CSV)).splitlines()
        assert lines[0].split("\t") == [
            "Type", "Spot", "Strike", "Vol", "Rate", "Expiry(d)",
            "Price", "Delta", "Gamma", "Theta/d", "Vega", "Rho",
        ]
        assert lines[2] == (
            "call\t150.00\t155.00\t25.0%\t5.00%\t30\t"
            "2.5119\t0.3578\t0.0347\t-0.0739\t0.1605\t0.0420"
        )
        assert lines[3].startswith("put\t150.00\t145.00\t25.0%")
        assert "Skipped rows:" not in lines

    def test_skipped_rows_listed(self):
        text = PORTFOLIO_CSV + "call,150,155,,0.05,30,1\n"
        table = format_batch_table(_run(text))
        assert "Skipped rows:" in table
        assert "  line 4: either 'vol' or 'price' is required" in table


class TestNonFiniteCells:
    @pytest.mark.parametrize("cell", ["nan", "NaN", "inf", "-inf", "Infinity"])
    def test_rejected_when_parsed(self, cell):
        record = {"spot": cell, "strike": "100", "vol": "0.2", "rate": "0.05", "expiry": "30"}
        with pytest.raises(InvalidInputError, match="line 6: 'spot' must be a finite number"):
            parse_batch_row(record, 6)

    def test_nan_row_is_skipped_and_totals_stay_finite(self):
        text = (
            PORTFOLIO_CSV
            + "call,nan,100,0.2,0.05,30,1\n"
            + "put,100,100,0.2,0.05,30,inf\n"
            + "call,100,100,nan,0.05,30,1\n"
        )
        results = _run(text)
        assert [b.ok for b in results] == [True, True, False, False, False]

        totals = portfolio_totals(results)
        assert totals["positions"] == 2.0
        assert all(math.isfinite(value) for value in totals.values())

        table = format_batch_table(results)
        assert "Skipped rows:" in table
        assert "  line 4: 'spot' must be a finite number: 'nan'" in table
        assert "  line 5: 'qty' must be a finite number: 'inf'" in table
        assert "  line 6: 'vol' must be a finite number: 'nan'" in table

    def test_nan_market_price_is_skipped(self):
        text = "type,spot,strike,rate,expiry,price\ncall,100,100,0.05,30,nan\n"
        (row,) = _run(text)
        assert not row.ok
        assert row.error == "line 2: 'price' must be a finite number: 'nan'"
