"""
CoinGecko Data Adapter

Fetches crypto market rows (with 7-day hourly sparkline) and simple prices.
Free API, no key needed.
"""

import asyncio
import logging
from typing import Optional

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from tradesignals.core.config import settings
from tradesignals.schemas.market import CoinMarketRecord, PriceSeries
from tradesignals.services.base import ExternalAPIError, ValidationError

logger = logging.getLogger(__name__)


def record_to_series(record: CoinMarketRecord) -> Optional[PriceSeries]:
    """
    Map a CoinGecko market row to a PriceSeries.

    Returns None when the row has no usable sparkline or its symbol does
    not form a valid instrument identifier.
    """
    prices = record.sparkline_prices
    if not prices:
        return None

    try:
        return PriceSeries(
            symbol=record.symbol,
            prices=prices,
            name=record.name,
            change_24h=record.price_change_percentage_24h,
            quote_price=record.live_price,
        )
    except PydanticValidationError as e:
        logger.warning(f"Dropping CoinGecko row {record.id}: {e.error_count()} validation errors")
        return None


class CoinGeckoAdapter:
    """Async CoinGecko client over a shared aiohttp session."""

    def __init__(self, base_url: Optional[str] = None, timeout_seconds: Optional[float] = None):
        self.base_url = (base_url or settings.coingecko_base_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.market_data_timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, path: str, params: dict):
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        try:
            async with session.get(url, params=params) as resp:
                if resp.status != 200:
                    text = await resp.text()
                    raise ExternalAPIError(
                        "CoinGecko",
                        f"{path} returned status {resp.status}",
                        {"status": resp.status, "body": text[:500]},
                    )
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExternalAPIError("CoinGecko", f"{path} request failed: {e}")
        except ValueError as e:
            raise ExternalAPIError("CoinGecko", f"{path} returned a non-JSON body: {e}")

    async def fetch_markets(
        self, per_page: Optional[int] = None, sparkline: bool = True
    ) -> list[CoinMarketRecord]:
        """Top coins by market cap."""
        params = {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": per_page or settings.coingecko_per_page,
            "page": 1,
            "sparkline": "true" if sparkline else "false",
            "price_change_percentage": "24h",
        }
        logger.info(f"Fetching {params['per_page']} coins from CoinGecko...")
        data = await self._get_json("/coins/markets", params)

        if not isinstance(data, list):
            raise ExternalAPIError("CoinGecko", "Unexpected /coins/markets payload")

        records = []
        for row in data:
            try:
                records.append(CoinMarketRecord.model_validate(row))
            except PydanticValidationError:
                logger.debug(f"Skipping malformed CoinGecko row: {row.get('id') if isinstance(row, dict) else row}")
        return records

    async def fetch_price(self, coin_id: str) -> float:
        """USD price of one coin via /simple/price."""
        coin_id = coin_id.strip().lower()
        if not coin_id:
            raise ValidationError("CoinGecko", "Coin id must not be empty")

        data = await self._get_json("/simple/price", {"ids": coin_id, "vs_currencies": "usd"})
        if not isinstance(data, dict):
            raise ExternalAPIError("CoinGecko", "Unexpected /simple/price payload")

        entry = data.get(coin_id)
        price = entry.get("usd") if isinstance(entry, dict) else None
        if not price:
            raise ValidationError("CoinGecko", f"Price not found for {coin_id}", {"coin_id": coin_id})
        if not isinstance(price, (int, float)) or price <= 0:
            raise ExternalAPIError("CoinGecko", f"Unusable price for {coin_id}: {price!r}")
        return float(price)
