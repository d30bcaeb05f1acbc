"""
Forex Data Adapter

Daily FX history from Yahoo Finance ("EURUSD=X"), current USD-based rates
from ExchangeRate-API, and a synthetic history built from current rates
for pairs Yahoo cannot serve.
"""

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import aiohttp
import numpy as np
import yfinance as yf
from pydantic import ValidationError as PydanticValidationError

from tradesignals.core.config import settings
from tradesignals.schemas.market import ExchangeRates, PriceSeries
from tradesignals.services.base import ExternalAPIError, ValidationError

logger = logging.getLogger(__name__)


MAJOR_PAIRS = [
    "EURUSD", "GBPUSD", "USDJPY", "AUDUSD", "USDCAD", "USDCHF", "NZDUSD",
    "EURJPY", "GBPJPY", "EURGBP", "AUDJPY", "CADJPY", "CHFJPY", "NZDJPY",
    "GBPAUD", "EURAUD", "GBPCAD", "EURCAD", "GBPNZD", "EURNZD", "AUDCAD",
    "AUDCHF", "AUDNZD", "CADCHF", "NZDCHF",
]

PAIR_PATTERN = re.compile(r"^[A-Z]{6}$")


def normalize_pair(pair: str) -> str:
    """Upper-case a pair like "eur/usd" to "EURUSD"."""
    normalized = pair.replace("/", "").replace("-", "").strip().upper()
    if not PAIR_PATTERN.match(normalized):
        raise ValidationError("ForexAdapter", f"Invalid currency pair: {pair!r}", {"pair": pair})
    return normalized


def get_yahoo_fx_symbol(pair: str) -> str:
    """Yahoo Finance ticker for a currency pair."""
    return f"{pair}=X"


def _fetch_yahoo_closes(pair: str, days: int) -> list[tuple[datetime, float]]:
    ticker = yf.Ticker(get_yahoo_fx_symbol(pair))
    hist = ticker.history(period="6mo", interval="1d")
    if hist.empty:
        return []

    rows = []
    for idx, row in hist.tail(days).iterrows():
        ts = idx.to_pydatetime()
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        rows.append((ts, float(row["Close"])))
    return rows


async def fetch_yahoo_history(pair: str, days: Optional[int] = None) -> Optional[PriceSeries]:
    """
    Daily closes for a pair from Yahoo Finance.

    Returns None when Yahoo has no usable data. yfinance is blocking and
    runs in the default executor.
    """
    days = days or settings.forex_history_days

    try:
        loop = asyncio.get_running_loop()
        rows = await loop.run_in_executor(None, _fetch_yahoo_closes, pair, days)
    except Exception as e:
        logger.warning(f"Yahoo Finance history failed for {pair}: {e}")
        return None

    if not rows:
        logger.warning(f"No Yahoo Finance data returned for {pair}")
        return None

    try:
        return PriceSeries(
            symbol=pair,
            timestamps=[ts for ts, _ in rows],
            prices=[price for _, price in rows],
        )
    except PydanticValidationError as e:
        logger.warning(f"Discarding Yahoo Finance history for {pair}: {e.error_count()} validation errors")
        return None


class ExchangeRateAdapter:
    """ExchangeRate-API client. Uses the v6 endpoint when a key is configured."""

    def __init__(self, api_key: Optional[str] = None, timeout_seconds: Optional[float] = None):
        self.api_key = api_key if api_key is not None else settings.exchangerate_api_key
        self.timeout_seconds = timeout_seconds or settings.market_data_timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def url(self) -> str:
        if self.api_key:
            return f"{settings.exchangerate_base_url}/{self.api_key}/latest/USD"
        return settings.exchangerate_public_url

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_rates(self) -> ExchangeRates:
        """Latest USD-based rates."""
        session = await self._ensure_session()
        try:
            async with session.get(self.url) as resp:
                if resp.status != 200:
                    raise ExternalAPIError(
                        "ExchangeRateAPI",
                        f"latest/USD returned status {resp.status}",
                        {"status": resp.status},
                    )
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExternalAPIError("ExchangeRateAPI", f"latest/USD request failed: {e}")
        except ValueError as e:
            raise ExternalAPIError("ExchangeRateAPI", f"latest/USD returned a non-JSON body: {e}")

        try:
            rates = ExchangeRates.model_validate(data)
        except PydanticValidationError as e:
            raise ExternalAPIError(
                "ExchangeRateAPI",
                "latest/USD payload failed validation",
                {"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            )
        if not rates.usd_rates:
            raise ExternalAPIError("ExchangeRateAPI", "Response contained no rates")
        return rates


def synthesize_histories(
    rates: ExchangeRates,
    pairs: list[str],
    days: Optional[int] = None,
    seed: Optional[int] = None,
    end: Optional[datetime] = None,
) -> dict[str, PriceSeries]:
    """
    Build daily histories from current rates.

    Each currency's USD rate follows ``rate * (1 + sin(i/15) * 0.02 + noise)``
    with uniform noise in +/-0.5%, where ``i`` counts days back from today.
    Pairs are crossed from the same currency paths, so they stay mutually
    consistent. Pairs with an unknown currency are left out.

    This is not market data. It only keeps the pipeline running when no
    real history is available.
    """
    days = days or settings.forex_history_days
    rng = np.random.default_rng(seed if seed is not None else settings.forex_synthetic_seed)
    end = (end or datetime.now(timezone.utc)).replace(hour=0, minute=0, second=0, microsecond=0)

    usd_rates = rates.usd_rates
    currencies = sorted({p[:3] for p in pairs} | {p[3:] for p in pairs})
    steps_back = np.arange(days - 1, -1, -1)

    paths: dict[str, np.ndarray] = {"USD": np.ones(days)}
    for currency in currencies:
        if currency == "USD" or currency not in usd_rates:
            continue
        variation = np.sin(steps_back / 15) * 0.02 + (rng.random(days) - 0.5) * 0.01
        paths[currency] = usd_rates[currency] * (1 + variation)

    timestamps = [end - timedelta(days=int(i)) for i in steps_back]

    histories = {}
    for pair in pairs:
        base, quote = pair[:3], pair[3:]
        if base not in paths or quote not in paths:
            logger.warning(f"No rate for {pair}, cannot synthesize history")
            continue
        prices = paths[quote] / paths[base]
        histories[pair] = PriceSeries(
            symbol=pair,
            timestamps=timestamps,
            prices=prices.tolist(),
        )
    return histories
