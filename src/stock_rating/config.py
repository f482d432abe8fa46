"""Runtime settings for indicator parameters and logging."""

import logging
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """
    Immutable analysis settings.

    Only parameters that do not appear in indicator field names are tunable;
    rsi_14, atr_14, sma_20/50/200, ema_20/50 and price_change_1d/5d/20d keep
    the periods their names promise.
    """

    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    bollinger_period: int = 20
    bollinger_num_std: float = 2.0
    volume_period: int = 20
    week_52_window: int = 252
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        periods = {
            "macd_fast": self.macd_fast,
            "macd_slow": self.macd_slow,
            "macd_signal": self.macd_signal,
            "bollinger_period": self.bollinger_period,
            "volume_period": self.volume_period,
            "week_52_window": self.week_52_window,
        }
        for name, value in periods.items():
            if value < 1:
                raise ValueError(f"Invalid {name} '{value}'. Must be a positive integer")

        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"Invalid MACD settings: fast ({self.macd_fast}) must be below slow ({self.macd_slow})"
            )
        if self.bollinger_num_std < 0:
            raise ValueError(f"Invalid bollinger_num_std '{self.bollinger_num_std}'. Must be >= 0")

        # Normalize log level: uppercase, strip whitespace
        object.__setattr__(self, "log_level", self.log_level.upper().strip())

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, falling back to INFO for unknown names."""
        level = getattr(logging, self.log_level, logging.INFO)
        return level if isinstance(level, int) else logging.INFO


DEFAULT_SETTINGS = Settings()


def load_settings() -> Settings:
    """Build settings from the environment (LOG_LEVEL)."""
    return Settings(log_level=os.environ.get("LOG_LEVEL", "INFO"))
