"""End-to-end tests: CSV text in, realized trades and metrics out."""
from __future__ import annotations

import pandas as pd
import pytest

from trade_analyzer import (
    analyze_text,
    analyze_file,
    EmptyInputError,
    MissingColumnsError,
    NoValidRowsError,
)
from trade_analyzer.config import LONG_CLOSE, SHORT_COVER


class TestTradebook:
    def test_demo_tradebook(self, demo_tradebook):
        result = analyze_text(demo_tradebook)
        assert result.mode == "tradebook"
        assert [t.symbol for t in result.trades] == [
            "NIFTY23OCT19500CE", "BANKNIFTY23OCT44000PE", "RELIANCE",
        ]
        assert [t.pnl for t in result.trades] == pytest.approx([1000, 600, 1000])
        assert [t.close_type for t in result.trades] == [LONG_CLOSE, LONG_CLOSE, SHORT_COVER]
        assert [t.id for t in result.trades] == [1, 2, 3]
        assert result.open_positions == {}
        assert result.rows_read == 7
        assert result.rows_dropped == 0

        m = result.metrics
        assert m.total_trades == 3
        assert m.win_rate == pytest.approx(100)
        assert m.net_profit == pytest.approx(2600)
        assert m.profit_factor == pytest.approx(2600)
        assert m.max_drawdown == 0
        assert m.green_days == 3
        assert m.avg_trades_per_day == pytest.approx(1)

    def test_nifty_round_trip(self):
        text = (
            "symbol,trade_type,quantity,price,order_execution_time\n"
            "NIFTY24JAN21500CE,buy,50,100,2024-01-15T09:15:30\n"
            "NIFTY24JAN21500CE,sell,50,120,2024-01-15T09:45:00\n"
        )
        result = analyze_text(text)
        assert len(result.trades) == 1
        assert result.trades[0].pnl == pytest.approx(1000)
        assert result.trades[0].close_type == LONG_CLOSE

    def test_partial_fills_of_one_order_consolidate(self):
        text = (
            "symbol,trade_type,quantity,price,order_execution_time,order_id\n"
            "BANKNIFTY,buy,15,300,2023-10-02T10:00:00,2001\n"
            "BANKNIFTY,buy,15,280,2023-10-02T10:00:05,2001\n"
            "BANKNIFTY,sell,30,310,2023-10-02T11:00:00,2002\n"
        )
        result = analyze_text(text)
        assert len(result.trades) == 1
        trade = result.trades[0]
        assert trade.quantity == 30
        assert trade.open_price == pytest.approx(290)
        assert trade.pnl == pytest.approx((310 - 290) * 30)

    def test_consolidated_order_keeps_first_fill_time(self):
        # the late partial fill must not push the buy after the sell
        text = (
            "symbol,trade_type,quantity,price,order_execution_time,order_id\n"
            "NIFTY,buy,10,100,2024-01-15T09:00:00,1\n"
            "NIFTY,sell,10,110,2024-01-15T09:30:00,2\n"
            "NIFTY,buy,10,100,2024-01-15T10:00:00,1\n"
        )
        result = analyze_text(text)
        assert len(result.trades) == 1
        assert result.trades[0].quantity == 10
        assert result.open_positions["NIFTY"].signed_quantity == 10

    def test_open_position_reported(self):
        text = (
            "symbol,side,qty,price,date\n"
            "TATASTEEL,buy,100,135,2024-01-16\n"
        )
        result = analyze_text(text)
        assert result.trades == []
        assert result.metrics.total_trades == 0
        assert result.open_positions["TATASTEEL"].signed_quantity == 100
        assert result.open_positions["TATASTEEL"].avg_price == 135

    def test_bad_rows_filtered(self):
        text = (
            "symbol,trade_type,quantity,price,order_execution_time\n"
            "NIFTY,buy,50,100,2024-01-15T09:15:30\n"
            "NIFTY,buy,0,100,2024-01-15T09:16:00\n"
            "NIFTY,buy,abc,100,2024-01-15T09:17:00\n"
            "NIFTY,sell\n"
            "NIFTY,sell,50,\"₹120.00\",2024-01-15T09:45:00\n"
        )
        result = analyze_text(text)
        assert result.rows_dropped == 3
        assert result.trades[0].pnl == pytest.approx(1000)

    def test_stray_quote_drops_only_its_row(self):
        text = (
            "symbol,trade_type,quantity,price,order_execution_time\n"
            "NIFTY,buy,50,\"100,2024-01-15T09:00:00\n"
            "NIFTY,buy,50,100,2024-01-15T09:15:30\n"
            "NIFTY,sell,50,120,2024-01-15T09:45:00\n"
        )
        result = analyze_text(text)
        assert result.rows_read == 3
        assert result.rows_dropped == 1
        assert len(result.trades) == 1
        assert result.trades[0].pnl == pytest.approx(1000)

    def test_bad_timestamp_policy(self, fixed_now):
        text = (
            "symbol,trade_type,quantity,price,order_execution_time\n"
            "NIFTY,sell,50,120,sometime\n"
            "NIFTY,buy,50,100,2024-01-15T09:15:30\n"
        )
        stamped = analyze_text(text, now=fixed_now)
        assert stamped.trades[0].timestamp == fixed_now
        assert stamped.trades[0].close_type == LONG_CLOSE

        dropped = analyze_text(text, on_bad_timestamp="drop", now=fixed_now)
        assert dropped.trades == []
        assert dropped.rows_dropped == 1


class TestPnLReport:
    def test_pre_aggregated_rows(self, pnl_report):
        result = analyze_text(pnl_report)
        assert result.mode == "pnl"
        assert [t.symbol for t in result.trades] == ["NIFTY", "BANKNIFTY"]
        assert [t.pnl for t in result.trades] == [2000.5, -1250.0]
        assert result.rows_dropped == 2
        assert result.open_positions == {}

        m = result.metrics
        assert m.wins == 1
        assert m.losses == 1
        assert m.profit_factor == pytest.approx(2000.5 / 1250)
        assert m.max_drawdown == pytest.approx(1250)
        assert m.start_date == pd.Timestamp("2024-01-15")

    def test_all_zero_pnl_is_fatal(self):
        with pytest.raises(NoValidRowsError):
            analyze_text("date,pnl\n2024-01-15,0\n2024-01-16,-\n")


class TestErrors:
    @pytest.mark.parametrize("text", ["", "\n\n", "symbol,side,qty,price\n", "symbol,side\n   \n"])
    def test_empty_input(self, text):
        with pytest.raises(EmptyInputError):
            analyze_text(text)

    def test_missing_price_column(self):
        with pytest.raises(MissingColumnsError) as exc:
            analyze_text("symbol,trade_type,quantity\nNIFTY,buy,10\n")
        assert exc.value.missing == ("price",)

    def test_unknown_shape(self):
        with pytest.raises(MissingColumnsError):
            analyze_text("foo,bar\n1,2\n")

    def test_no_valid_fills(self):
        with pytest.raises(NoValidRowsError):
            analyze_text("symbol,trade_type,quantity,price\nNIFTY,buy,0,100\nNIFTY,sell,x,100\n")


class TestAnalyzeFile:
    def test_reads_utf8_with_bom(self, tmp_path, demo_tradebook):
        path = tmp_path / "tradebook.csv"
        path.write_text("\ufeff" + demo_tradebook, encoding="utf-8")
        result = analyze_file(path)
        assert result.metrics.total_trades == 3
