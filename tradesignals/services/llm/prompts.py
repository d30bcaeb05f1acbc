"""
LLM Prompt Templates

Prompts for the signal reasoning and market insights layers.

CRITICAL RULES (enforced in all prompts):
- LLM does NO math - all numbers come from indicator data
- Answer is one of BUY / SELL / HOLD with a numeric confidence
- Never claim certainty or guarantee profits
"""

from typing import Optional

from tradesignals.schemas.market import PriceSeries
from tradesignals.services.indicators.interface import IndicatorReadings


# =============================================================================
# SIGNAL REASONING PROMPTS
# =============================================================================

CRYPTO_SYSTEM_PROMPT = """You are a professional cryptocurrency trading analyst with 20+ years experience.
Analyze the technical indicators and provide a precise trading signal: BUY, SELL, or HOLD with confidence level (80-99%).
Focus on high-probability opportunities for beginners. Be extremely accurate and conservative.
All indicator values are pre-calculated. Do not recalculate them."""

CRYPTO_USER_PROMPT_TEMPLATE = """Analyze {name} ({symbol}):
- RSI: {rsi} ({rsi_zone})
- EMA Trend: {ema_trend}
- MACD: {macd_trend}
- Bollinger Bands: {bollinger_position}
- Stochastic: {stochastic_zone}
- Current Price: {current_price}
- 24h Change: {change_24h}

Provide signal in format: SIGNAL: BUY/SELL/HOLD, CONFIDENCE: XX%
If possible respond as JSON: {{"signal": "BUY" | "SELL" | "HOLD", "confidence": <number>}}"""

FOREX_SYSTEM_PROMPT = """You are an expert forex trader providing precise trading signals based on technical analysis.
All indicator values are pre-calculated. Do not recalculate them."""

FOREX_USER_PROMPT_TEMPLATE = """You are a professional {market} trader and technical analyst. Based on the following technical indicators for {symbol}, provide a trading signal and confidence level.

Indicators:
- RSI: {rsi} ({rsi_zone})
- SMA {fast}/{slow} Crossover: {sma_trend}
- EMA {fast}/{slow} Crossover: {ema_trend}
- MACD: {macd_trend}
- Bollinger Bands: Price is {bollinger_position}
- Stochastic: {stochastic_zone} ({stoch_k}/{stoch_d})

Based on these indicators, what is your trading signal? Respond with ONLY: SIGNAL: BUY/SELL/HOLD, CONFIDENCE: X (where X is a number from 0 to 100 representing your confidence in the signal).
If possible respond as JSON: {{"signal": "BUY" | "SELL" | "HOLD", "confidence": <number>}}"""


# =============================================================================
# INSIGHTS PROMPTS
# =============================================================================

INSIGHTS_SYSTEM_PROMPT = "You are an expert market analyst providing trading insights."

INSIGHTS_USER_PROMPT_TEMPLATE = """You are an expert market analyst. Based on the following current market data, provide a concise market insights summary (2-3 paragraphs) including:
- Overall market sentiment
- Key trends in crypto and forex
- Potential opportunities or risks
- Brief advice for traders

Crypto Data (top {crypto_count} by market cap):
{crypto_lines}

Forex Data (major rates against USD):
{forex_lines}

Provide insights in a professional, informative tone. This is not financial advice."""


# =============================================================================
# FORMATTERS
# =============================================================================


def _fmt(value: Optional[float], digits: int = 2) -> str:
    if value is None:
        return "n/a"
    return f"{value:.{digits}f}"


def _label(value) -> str:
    if value is None:
        return "unknown"
    return value.value


def format_crypto_prompt(series: PriceSeries, readings: IndicatorReadings) -> str:
    """Format the crypto reasoning prompt with indicator data."""
    return CRYPTO_USER_PROMPT_TEMPLATE.format(
        name=series.name or series.symbol,
        symbol=series.symbol,
        rsi=_fmt(readings.rsi),
        rsi_zone=_label(readings.rsi_zone),
        ema_trend=_label(readings.ema_trend),
        macd_trend=_label(readings.macd_trend),
        bollinger_position=_label(readings.bollinger_position),
        stochastic_zone=_label(readings.stochastic_zone),
        current_price=readings.current_price,
        change_24h=f"{series.change_24h:.2f}%" if series.change_24h is not None else "n/a",
    )


def format_forex_prompt(
    series: PriceSeries,
    readings: IndicatorReadings,
    fast: int,
    slow: int,
    market: str = "forex",
) -> str:
    """Format the forex (or generic instrument) reasoning prompt."""
    return FOREX_USER_PROMPT_TEMPLATE.format(
        market=market,
        symbol=series.symbol,
        fast=fast,
        slow=slow,
        rsi=_fmt(readings.rsi),
        rsi_zone=_label(readings.rsi_zone),
        sma_trend=_label(readings.sma_trend),
        ema_trend=_label(readings.ema_trend),
        macd_trend=_label(readings.macd_trend),
        bollinger_position=_label(readings.bollinger_position),
        stochastic_zone=_label(readings.stochastic_zone),
        stoch_k=_fmt(readings.stoch_k),
        stoch_d=_fmt(readings.stoch_d),
    )


def format_insights_prompt(coins: list[dict], forex_rates: dict[str, float]) -> str:
    """
    Format the insights prompt.

    Args:
        coins: dicts with name, symbol, current_price, price_change_percentage_24h
        forex_rates: currency code -> units per USD
    """
    crypto_lines = "\n".join(
        f"{c['name']} ({c['symbol'].upper()}): ${c['current_price']}, "
        f"24h change: {_fmt(c.get('price_change_percentage_24h'))}%"
        for c in coins
    ) or "No crypto data available"
    forex_lines = "\n".join(
        f"{code}: {rate}" for code, rate in forex_rates.items()
    ) or "No forex data available"

    return INSIGHTS_USER_PROMPT_TEMPLATE.format(
        crypto_count=len(coins),
        crypto_lines=crypto_lines,
        forex_lines=forex_lines,
    )
