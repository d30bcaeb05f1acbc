"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "TradeSignals Pro Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    frontend_url: str = "http://localhost:3000"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Market data providers
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_per_page: int = 200
    exchangerate_api_key: Optional[str] = None
    exchangerate_base_url: str = "https://v6.exchangerate-api.com/v6"
    exchangerate_public_url: str = "https://api.exchangerate-api.com/v4/latest/USD"
    forex_source: str = "yahoo"  # Options: yahoo, synthetic
    forex_history_days: int = 50
    forex_synthetic_seed: Optional[int] = None
    market_data_timeout_seconds: float = 15.0

    # LLM Providers
    llm_primary_provider: str = "a0"  # Options: a0, openai, anthropic, gemini
    a0_llm_url: str = "https://api.a0.dev/ai/llm"
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    llm_reasoning_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 20.0
    llm_max_tokens: int = 512

    # Signal generation
    signal_strategy: str = "reasoning"  # Options: reasoning, rules
    max_concurrency: int = 5
    min_price_points: int = 50

    # Rule-based scoring
    fast_period: int = 5
    slow_period: int = 10
    buy_threshold: float = 4.0
    sell_threshold: float = -4.0
    rsi_extreme_weight: float = 2.0
    rsi_bias_weight: float = 1.0
    sma_cross_weight: float = 1.5
    ema_cross_weight: float = 1.0
    macd_weight: float = 1.5
    bollinger_weight: float = 2.0
    stochastic_weight: float = 1.5

    # Reasoning confidence policy (clamp ranges per market)
    crypto_confidence_min: float = 80.0
    crypto_confidence_max: float = 99.0
    forex_confidence_min: float = 0.0
    forex_confidence_max: float = 100.0

    # Risk levels
    take_profit_percent: float = 5.0
    stop_loss_percent: float = 2.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
