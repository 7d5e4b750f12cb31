"""Runtime settings read once from the environment."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Mapping

FEATURE_PREFIX = "PAPERTRADE_ENABLE_"

_MODE_ALIASES = {
    "simulated": "simulated",
    "mock": "simulated",
    "live": "live",
    "real": "live",
}


class Mode(str, enum.Enum):
    SIMULATED = "simulated"
    LIVE = "live"


@dataclass(frozen=True, slots=True)
class Settings:
    """Mode selection, feature flags and endpoint configuration.

    Decided once at construction; providers and dispatchers built from a
    Settings instance keep that mode for their whole lifetime.
    """

    mode: Mode = Mode.SIMULATED
    features: frozenset[str] = field(default_factory=frozenset)
    polymarket_api_url: str = "https://clob.polymarket.com"
    polymarket_api_key: str = ""
    news_api_url: str = "https://newsapi.org/v2"
    news_api_key: str = ""
    update_interval: float = 5.0  # seconds between simulated subscription updates
    rate_limit_calls: int = 100
    rate_limit_window_ms: float = 60_000.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        - PAPERTRADE_MODE: simulated|mock (default) or live|real
        - PAPERTRADE_ENABLE_<FLAG>=true turns on feature flag <flag>
        - POLYMARKET_API_URL / POLYMARKET_API_KEY, NEWS_API_URL / NEWS_API_KEY
        - PAPERTRADE_UPDATE_INTERVAL, PAPERTRADE_RATE_LIMIT_CALLS,
          PAPERTRADE_RATE_LIMIT_WINDOW_MS
        """
        env = os.environ if environ is None else environ

        raw_mode = env.get("PAPERTRADE_MODE", "").strip().lower() or "simulated"
        if raw_mode not in _MODE_ALIASES:
            raise ValueError(f"Unknown PAPERTRADE_MODE: {raw_mode!r}")

        features = frozenset(
            key[len(FEATURE_PREFIX):].lower()
            for key, value in env.items()
            if key.startswith(FEATURE_PREFIX) and value.strip().lower() == "true"
        )

        defaults = cls()
        return cls(
            mode=Mode(_MODE_ALIASES[raw_mode]),
            features=features,
            polymarket_api_url=env.get("POLYMARKET_API_URL", "").strip() or defaults.polymarket_api_url,
            polymarket_api_key=env.get("POLYMARKET_API_KEY", "").strip(),
            news_api_url=env.get("NEWS_API_URL", "").strip() or defaults.news_api_url,
            news_api_key=env.get("NEWS_API_KEY", "").strip(),
            update_interval=float(env.get("PAPERTRADE_UPDATE_INTERVAL") or defaults.update_interval),
            rate_limit_calls=int(env.get("PAPERTRADE_RATE_LIMIT_CALLS") or defaults.rate_limit_calls),
            rate_limit_window_ms=float(
                env.get("PAPERTRADE_RATE_LIMIT_WINDOW_MS") or defaults.rate_limit_window_ms
            ),
        )

    @property
    def is_live(self) -> bool:
        return self.mode is Mode.LIVE

    def is_feature_enabled(self, name: str) -> bool:
        return name.lower() in self.features

    def describe(self) -> dict:
        """Summary of the active configuration, safe to show to a client (no keys)."""
        return {
            "mode": self.mode.value,
            "polymarket_enabled": bool(self.polymarket_api_key),
            "news_enabled": bool(self.news_api_key),
            "features": sorted(self.features),
        }
