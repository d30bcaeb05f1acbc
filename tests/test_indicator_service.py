"""Tests for the indicator service readings and derived labels."""

from __future__ import annotations

import asyncio

import pytest

from tradesignals.core.config import settings
from tradesignals.services.indicators import IndicatorService
from tradesignals.services.indicators.interface import (
    BandPosition,
    IndicatorReadings,
    Trend,
    Zone,
)


class TestIndicatorService:
    def test_periods_default_from_settings(self):
        service = IndicatorService()
        assert (service.fast_period, service.slow_period) == (settings.fast_period, settings.slow_period)

    def test_custom_periods(self, series_factory):
        series = series_factory("UP", [float(p) for p in range(1, 21)])
        readings = IndicatorService(fast_period=2, slow_period=4).compute(series)
        assert readings.sma_fast == pytest.approx(19.5)
        assert readings.sma_slow == pytest.approx(18.5)

    def test_short_series_has_no_opinion(self, indicator_service, sma_scenario_series):
        readings = indicator_service.compute(sma_scenario_series)

        assert readings.current_price == 115.0
        assert readings.sma_fast == pytest.approx(110.2)
        assert readings.sma_slow == pytest.approx(106.6)
        assert readings.rsi is None
        assert readings.macd_histogram is None
        assert readings.bb_upper is None
        assert readings.stoch_k is None
        assert readings.rsi_zone is None
        assert readings.bollinger_position is None
        assert readings.stochastic_zone is None

    def test_bearish_reversal_readings(self, indicator_service, top_series):
        readings = asyncio.run(indicator_service.execute(top_series))

        assert readings.symbol == "TOP"
        assert readings.rsi == pytest.approx(54.5455, abs=1e-3)
        assert readings.sma_fast == pytest.approx(105.5)
        assert readings.sma_slow == pytest.approx(106.75)
        assert readings.macd_histogram == pytest.approx(-0.335094, abs=1e-5)
        assert readings.stoch_k == pytest.approx(6.25)
        assert readings.stoch_d == pytest.approx(29.8611, abs=1e-3)

        assert readings.rsi_zone == Zone.NEUTRAL
        assert readings.sma_trend == Trend.BEARISH
        assert readings.ema_trend == Trend.BEARISH
        assert readings.macd_trend == Trend.BEARISH
        assert readings.bollinger_position == BandPosition.WITHIN
        assert readings.stochastic_zone == Zone.NEUTRAL

    def test_health(self, indicator_service):
        assert asyncio.run(indicator_service.health_check()) is True


class TestReadingLabels:
    def test_rsi_zones(self):
        assert IndicatorReadings("X", 1.0, rsi=29.9).rsi_zone == Zone.OVERSOLD
        assert IndicatorReadings("X", 1.0, rsi=70.1).rsi_zone == Zone.OVERBOUGHT
        assert IndicatorReadings("X", 1.0, rsi=30.0).rsi_zone == Zone.NEUTRAL

    def test_equal_averages_are_neutral(self):
        readings = IndicatorReadings("X", 1.0, sma_fast=2.0, sma_slow=2.0)
        assert readings.sma_trend == Trend.NEUTRAL

    def test_band_position(self):
        below = IndicatorReadings("X", 89.0, bb_upper=110.0, bb_middle=100.0, bb_lower=90.0)
        above = IndicatorReadings("X", 111.0, bb_upper=110.0, bb_middle=100.0, bb_lower=90.0)
        assert below.bollinger_position == BandPosition.BELOW_LOWER
        assert above.bollinger_position == BandPosition.ABOVE_UPPER

    def test_stochastic_needs_both_lines(self):
        assert IndicatorReadings("X", 1.0, stoch_k=10.0, stoch_d=15.0).stochastic_zone == Zone.OVERSOLD
        assert IndicatorReadings("X", 1.0, stoch_k=10.0, stoch_d=30.0).stochastic_zone == Zone.NEUTRAL
        assert IndicatorReadings("X", 1.0, stoch_k=85.0, stoch_d=90.0).stochastic_zone == Zone.OVERBOUGHT

    def test_to_dict(self):
        data = IndicatorReadings("X", 1.5, rsi=40.0).to_dict()
        assert data["symbol"] == "X"
        assert data["rsi"] == 40.0
        assert data["macd_histogram"] is None
