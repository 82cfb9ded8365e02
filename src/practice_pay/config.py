"""Configuration management for the practice pay engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str

    # Reconciliation thresholds
    w2_discrepancy_threshold: Decimal = Decimal("0.30")
    paid_up_tolerance: Decimal = Decimal("0.01")

    # Reporting
    outstanding_insight_threshold: Decimal = Decimal("100")
    forecast_lookback_days: int = 90

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            w2_discrepancy_threshold=Decimal(os.getenv("W2_DISCREPANCY_THRESHOLD", "0.30")),
            paid_up_tolerance=Decimal(os.getenv("PAID_UP_TOLERANCE", "0.01")),
            outstanding_insight_threshold=Decimal(
                os.getenv("OUTSTANDING_INSIGHT_THRESHOLD", "100")
            ),
            forecast_lookback_days=int(os.getenv("FORECAST_LOOKBACK_DAYS", "90")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


settings = get_settings()
