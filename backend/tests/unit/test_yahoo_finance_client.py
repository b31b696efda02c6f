"""Unit tests for YahooFinanceClient (mocked yfinance)."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pandas as pd
import pytest

from integrations.exceptions import ProviderConnectionError, ProviderDataError
from integrations.yahoo_finance_client import YahooFinanceClient


@pytest.fixture
def client():
    return YahooFinanceClient()


def _make_df(data: dict, dates: list[str]) -> pd.DataFrame:
    """Build a DataFrame with DatetimeIndex, mimicking yfinance output."""
    index = pd.DatetimeIndex(dates)
    return pd.DataFrame(data, index=index)


def _quote_frame(closes: dict[str, list[float]], dates: list[str]) -> pd.DataFrame:
    """Build a (metric, symbol) MultiIndex frame like a multi-ticker download."""
    data = {}
    for symbol, values in closes.items():
        data[("Close", symbol)] = values
        data[("Adj Close", symbol)] = values
    frame = pd.DataFrame(data, index=pd.DatetimeIndex(dates))
    frame.columns = pd.MultiIndex.from_tuples(frame.columns)
    return frame


class TestGetPriceHistory:
    def test_prefers_adjusted_close(self, client):
        df = _make_df(
            {"Adj Close": [99.5, 100.25], "Close": [100.0, 101.0]},
            ["2024-01-15", "2024-01-16"],
        )
        with patch("yfinance.download", return_value=df) as mock_dl:
            result = client.get_price_history("CBA.AX", date(2024, 1, 1))

        assert [pr.close_price for pr in result] == [Decimal("99.5"), Decimal("100.25")]
        assert result[0].price_date == date(2024, 1, 15)
        assert result[0].source == "yahoo"
        kwargs = mock_dl.call_args.kwargs
        assert kwargs["tickers"] == "CBA.AX"
        assert kwargs["start"] == "2024-01-01"
        assert kwargs["interval"] == "1d"

    def test_falls_back_to_close(self, client):
        df = _make_df({"Close": [150.25]}, ["2024-01-15"])
        with patch("yfinance.download", return_value=df):
            result = client.get_price_history("CBA.AX", date(2024, 1, 1))

        assert result[0].close_price == Decimal("150.25")

    def test_multiindex_columns(self, client):
        cols = pd.MultiIndex.from_tuples([("Adj Close", "BHP.AX"), ("Close", "BHP.AX")])
        df = pd.DataFrame([[45.5, 46.0]], index=pd.DatetimeIndex(["2024-01-15"]), columns=cols)
        with patch("yfinance.download", return_value=df):
            result = client.get_price_history("BHP.AX", date(2024, 1, 1))

        assert result[0].close_price == Decimal("45.5")

    def test_nan_rows_dropped(self, client):
        df = _make_df({"Close": [10.0, float("nan"), 12.0]}, ["2024-01-15", "2024-01-16", "2024-01-17"])
        with patch("yfinance.download", return_value=df):
            result = client.get_price_history("CBA.AX", date(2024, 1, 1))

        assert [pr.price_date for pr in result] == [date(2024, 1, 15), date(2024, 1, 17)]

    def test_empty_frame_raises_data_error(self, client):
        with patch("yfinance.download", return_value=pd.DataFrame()):
            with pytest.raises(ProviderDataError):
                client.get_price_history("FAKE.AX", date(2024, 1, 1))

    def test_download_exception_raises_connection_error(self, client):
        with patch("yfinance.download", side_effect=RuntimeError("network down")):
            with pytest.raises(ProviderConnectionError, match="network down"):
                client.get_price_history("CBA.AX", date(2024, 1, 1))


class TestGetQuotes:
    def test_single_download_for_whole_batch(self, client):
        df = _quote_frame(
            {"CBA.AX": [99.0, 100.0, 110.0], "BHP.AX": [45.0, 44.0, 46.2], "WES.AX": [60.0, 61.0, 61.0]},
            ["2024-01-15", "2024-01-16", "2024-01-17"],
        )
        with patch("yfinance.download", return_value=df) as mock_dl:
            result = client.get_quotes(["CBA.AX", "BHP.AX", "WES.AX"])

        mock_dl.assert_called_once()
        kwargs = mock_dl.call_args.kwargs
        assert kwargs["tickers"] == ["CBA.AX", "BHP.AX", "WES.AX"]
        assert kwargs["period"] == "5d"
        assert kwargs["interval"] == "1d"
        assert set(result) == {"CBA.AX", "BHP.AX", "WES.AX"}

        quote = result["CBA.AX"]
        assert quote.price == Decimal("110")
        assert quote.previous_close == Decimal("100")
        assert quote.change_percent == Decimal("10")
        assert result["BHP.AX"].price == Decimal("46.2")
        assert result["BHP.AX"].previous_close == Decimal("44")
        assert result["WES.AX"].change_percent == Decimal("0")

    def test_trailing_nan_uses_last_available_close(self, client):
        df = _quote_frame(
            {"CBA.AX": [100.0, 105.0, float("nan")], "BHP.AX": [40.0, 41.0, 42.0]},
            ["2024-01-15", "2024-01-16", "2024-01-17"],
        )
        with patch("yfinance.download", return_value=df):
            quote = client.get_quotes(["CBA.AX", "BHP.AX"])["CBA.AX"]

        assert quote.price == Decimal("105")
        assert quote.previous_close == Decimal("100")

    def test_single_close_has_no_previous_close(self, client):
        df = _quote_frame({"CBA.AX": [110.0]}, ["2024-01-17"])
        with patch("yfinance.download", return_value=df):
            quote = client.get_quotes(["CBA.AX"])["CBA.AX"]

        assert quote.price == Decimal("110")
        assert quote.previous_close is None
        assert quote.change_percent is None

    def test_flat_columns_for_one_symbol(self, client):
        df = _make_df({"Close": [100.0, 101.0]}, ["2024-01-16", "2024-01-17"])
        with patch("yfinance.download", return_value=df):
            quote = client.get_quotes(["CBA.AX"])["CBA.AX"]

        assert quote.price == Decimal("101")
        assert quote.previous_close == Decimal("100")

    def test_symbol_without_closes_left_out(self, client):
        df = _quote_frame(
            {"CBA.AX": [1.0, 1.0], "XXX.AX": [float("nan"), float("nan")]},
            ["2024-01-16", "2024-01-17"],
        )
        with patch("yfinance.download", return_value=df):
            result = client.get_quotes(["CBA.AX", "XXX.AX", "YYY.AX"])

        assert list(result) == ["CBA.AX"]

    def test_batch_failure_returns_empty(self, client):
        with patch("yfinance.download", side_effect=RuntimeError("boom")):
            assert client.get_quotes(["CBA.AX"]) == {}

    def test_empty_frame_returns_empty(self, client):
        with patch("yfinance.download", return_value=pd.DataFrame()):
            assert client.get_quotes(["CBA.AX"]) == {}

    def test_empty_symbols(self, client):
        with patch("yfinance.download") as mock_dl:
            assert client.get_quotes([]) == {}
        mock_dl.assert_not_called()


class TestGetCompanyName:
    def test_prefers_long_name(self, client):
        ticker = SimpleNamespace(info={"longName": "Commonwealth Bank of Australia", "shortName": "CBA"})
        with patch("yfinance.Ticker", return_value=ticker):
            assert client.get_company_name("CBA.AX") == "Commonwealth Bank of Australia"

    def test_failure_returns_none(self, client):
        with patch("yfinance.Ticker", side_effect=RuntimeError("boom")):
            assert client.get_company_name("CBA.AX") is None
