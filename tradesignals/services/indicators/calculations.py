"""
Technical Indicator Calculations

Pure NumPy implementations of technical indicators.
NO LLM INVOLVEMENT - All math is deterministic.

Every function returns an array aligned to a suffix of the input: the first
``window - 1`` positions are omitted, never padded. A window longer than the
data yields an empty array.
"""

from typing import NamedTuple, Optional, Sequence, Union

import numpy as np

PriceInput = Union[Sequence[float], np.ndarray]


class MACDResult(NamedTuple):
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


class BollingerResult(NamedTuple):
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


class StochasticResult(NamedTuple):
    k: np.ndarray
    d: np.ndarray


def _as_array(data: PriceInput) -> np.ndarray:
    return np.asarray(data, dtype=float)


def _empty() -> np.ndarray:
    return np.array([], dtype=float)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: PriceInput, period: int) -> np.ndarray:
    """Simple Moving Average."""
    values = _as_array(data)
    if period < 1 or len(values) < period:
        return _empty()

    result = np.empty(len(values) - period + 1)
    for i in range(period - 1, len(values)):
        result[i - period + 1] = np.mean(values[i - period + 1 : i + 1])
    return result


def ema(data: PriceInput, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the first value rather than an SMA of the first window, so
    the output has the same length as the input. Early values lean toward
    ``data[0]``.
    """
    values = _as_array(data)
    if len(values) == 0:
        return _empty()

    multiplier = 2 / (period + 1)
    result = np.empty(len(values))
    result[0] = values[0]
    for i in range(1, len(values)):
        result[i] = (values[i] - result[i - 1]) * multiplier + result[i - 1]
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: PriceInput, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index.

    Plain average of gains and losses over each trailing window of
    ``period`` changes. A window without losses is exactly 100.
    """
    values = _as_array(closes)
    if len(values) < period + 1:
        return _empty()

    deltas = np.diff(values)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    result = np.empty(len(deltas) - period + 1)
    for i in range(period - 1, len(deltas)):
        avg_gain = np.mean(gains[i - period + 1 : i + 1])
        avg_loss = np.mean(losses[i - period + 1 : i + 1])

        if avg_loss == 0:
            result[i - period + 1] = 100.0
        else:
            rs = avg_gain / avg_loss
            result[i - period + 1] = 100 - (100 / (1 + rs))

    return result


def macd(
    closes: PriceInput,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    MACD (Moving Average Convergence Divergence).

    Both EMAs run over the full series and are compared on the same index.
    The line starts where the slow window is first complete.
    """
    values = _as_array(closes)
    if len(values) < slow_period:
        return MACDResult(_empty(), _empty(), _empty())

    fast_ema = ema(values, fast_period)
    slow_ema = ema(values, slow_period)

    macd_line = fast_ema[slow_period - 1 :] - slow_ema[slow_period - 1 :]
    signal_line = ema(macd_line, signal_period)
    histogram = macd_line - signal_line

    return MACDResult(macd_line, signal_line, histogram)


def stochastic(
    closes: PriceInput,
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticResult:
    """
    Stochastic Oscillator over closing prices.

    %K is 50 when the window is flat. %D is the SMA of %K.
    """
    values = _as_array(closes)
    if len(values) < k_period:
        return StochasticResult(_empty(), _empty())

    k = np.empty(len(values) - k_period + 1)
    for i in range(k_period - 1, len(values)):
        window = values[i - k_period + 1 : i + 1]
        highest_high = np.max(window)
        lowest_low = np.min(window)

        if highest_high == lowest_low:
            k[i - k_period + 1] = 50.0
        else:
            k[i - k_period + 1] = ((values[i] - lowest_low) / (highest_high - lowest_low)) * 100

    d = sma(k, d_period)

    return StochasticResult(k, d)


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: PriceInput, period: int = 20, std_dev: float = 2.0
) -> BollingerResult:
    """Bollinger Bands with population standard deviation."""
    values = _as_array(closes)
    middle = sma(values, period)
    if len(middle) == 0:
        return BollingerResult(_empty(), _empty(), _empty())

    std = np.empty(len(middle))
    for i in range(period - 1, len(values)):
        std[i - period + 1] = np.std(values[i - period + 1 : i + 1])

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return BollingerResult(upper, middle, lower)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def last_value(arr: np.ndarray) -> Optional[float]:
    """Latest value of an indicator series, None when it is empty."""
    if len(arr) == 0:
        return None
    value = float(arr[-1])
    return None if np.isnan(value) else value
