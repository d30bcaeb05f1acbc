"""Tests for the pure indicator functions."""

from __future__ import annotations

import math

import numpy as np
import pytest

from tradesignals.services.indicators.calculations import (
    bollinger_bands,
    ema,
    last_value,
    macd,
    rsi,
    sma,
    stochastic,
)

from conftest import RISING_PRICES, SMA_SCENARIO


class TestSMA:
    def test_window_equal_to_length_gives_single_mean(self):
        result = sma([2.0, 4.0, 6.0, 8.0], 4)
        assert len(result) == 1
        assert result[0] == pytest.approx(5.0)

    def test_window_longer_than_data_is_empty(self):
        assert len(sma([1.0, 2.0, 3.0], 4)) == 0

    def test_known_scenario(self):
        result = sma(SMA_SCENARIO, 5)
        assert len(result) == 6
        assert result[0] == pytest.approx(103.0)
        assert result[-1] == pytest.approx(110.2)

    def test_accepts_numpy_input(self):
        result = sma(np.array([1.0, 2.0, 3.0]), 2)
        assert result.tolist() == pytest.approx([1.5, 2.5])


class TestEMA:
    def test_seeded_with_first_value(self):
        result = ema([1.0, 2.0, 3.0, 4.0, 5.0], 3)
        assert result.tolist() == pytest.approx([1.0, 1.5, 2.25, 3.125, 4.0625])

    def test_length_matches_input(self):
        assert len(ema(SMA_SCENARIO, 20)) == len(SMA_SCENARIO)

    def test_empty_input(self):
        assert len(ema([], 5)) == 0


class TestRSI:
    def test_known_value(self):
        prices = [10, 11, 10.5, 11.5, 11, 12, 11.5, 12.5, 12, 13, 12.5, 13.5, 13, 14, 13.5]
        result = rsi(prices, 14)
        assert len(result) == 1
        assert result[0] == pytest.approx(200 / 3)

    def test_length_is_prices_minus_period(self):
        assert len(rsi(RISING_PRICES, 14)) == len(RISING_PRICES) - 14

    def test_monotonic_rise_is_exactly_100(self):
        result = rsi(RISING_PRICES, 14)
        assert all(value == 100.0 for value in result)

    def test_monotonic_fall_is_zero(self):
        result = rsi(list(reversed(RISING_PRICES)), 14)
        assert result[-1] == pytest.approx(0.0)

    def test_too_short_is_empty(self):
        assert len(rsi(RISING_PRICES[:14], 14)) == 0

    def test_bounded(self):
        rng = np.random.default_rng(7)
        prices = 100 + np.cumsum(rng.normal(0, 1, 200))
        result = rsi(prices, 14)
        assert np.all(result >= 0) and np.all(result <= 100)


class TestMACD:
    def test_empty_below_slow_period(self):
        result = macd(RISING_PRICES[:25])
        assert len(result.macd) == 0
        assert len(result.signal) == 0
        assert len(result.histogram) == 0

    def test_line_starts_at_slow_period_index(self):
        prices = RISING_PRICES[:30]
        result = macd(prices)
        assert len(result.macd) == 5

        fast = ema(prices, 12)
        slow = ema(prices, 26)
        assert result.macd[0] == pytest.approx(fast[25] - slow[25])
        assert result.macd[-1] == pytest.approx(fast[-1] - slow[-1])

    def test_histogram_is_line_minus_signal(self):
        result = macd(RISING_PRICES)
        assert result.histogram.tolist() == pytest.approx((result.macd - result.signal).tolist())

    def test_flat_series_is_zero(self):
        result = macd([50.0] * 40)
        assert np.allclose(result.macd, 0.0)
        assert np.allclose(result.histogram, 0.0)


class TestBollingerBands:
    def test_population_standard_deviation(self):
        prices = [float(p) for p in range(1, 21)]
        result = bollinger_bands(prices, 20, 2.0)
        sd = math.sqrt(33.25)  # population variance of 1..20
        assert len(result.middle) == 1
        assert result.middle[0] == pytest.approx(10.5)
        assert result.upper[0] == pytest.approx(10.5 + 2 * sd)
        assert result.lower[0] == pytest.approx(10.5 - 2 * sd)

    def test_flat_series_collapses_bands(self):
        result = bollinger_bands([7.0] * 25)
        assert np.allclose(result.upper, result.lower)
        assert np.allclose(result.middle, 7.0)

    def test_too_short_is_empty(self):
        result = bollinger_bands(SMA_SCENARIO)
        assert len(result.upper) == len(result.middle) == len(result.lower) == 0


class TestStochastic:
    def test_rising_closes_at_the_high(self):
        result = stochastic(RISING_PRICES[:20], 14, 3)
        assert len(result.k) == 7
        assert len(result.d) == 5
        assert np.allclose(result.k, 100.0)
        assert np.allclose(result.d, 100.0)

    def test_flat_window_is_fifty(self):
        result = stochastic([3.0] * 14)
        assert result.k.tolist() == [50.0]
        assert len(result.d) == 0

    def test_too_short_is_empty(self):
        result = stochastic(SMA_SCENARIO)
        assert len(result.k) == 0
        assert len(result.d) == 0


class TestLastValue:
    def test_empty(self):
        assert last_value(np.array([])) is None

    def test_returns_float(self):
        value = last_value(np.array([1.0, 2.5]))
        assert value == 2.5
        assert isinstance(value, float)
