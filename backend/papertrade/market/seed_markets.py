"""Seed catalog and lookup tables for the simulated market data source."""

from datetime import date

# Simulated catalog. Each entry carries the market's static fields plus the
# parameters of its history trend, expressed in odds (percentage points):
#   kind:      "sin" | "cos" | "linear"
#   base:      level the trend oscillates around (or starts from, for linear)
#   amplitude: oscillation height (sin/cos) or per-day slope (linear)
#   period:    divisor applied to the day index inside sin/cos
#   noise:     upper bound of the non-negative uniform noise added per point
SEED_MARKETS: list[dict] = [
    {
        "id": "1",
        "title": "Will there be a US recession in 2025?",
        "category": "Economics",
        "odds": 34.0,
        "change_24h": -2.3,
        "volume": 2_400_000.0,
        "resolve_date": date(2025, 12, 31),
        "description": "Market resolves YES if NBER declares recession starting in 2025",
        "trend": {"kind": "sin", "base": 36.0, "amplitude": 8.0, "period": 5.0, "noise": 4.0},
    },
    {
        "id": "2",
        "title": "Elon Musk to leave Trump administration in 2025?",
        "category": "Politics",
        "odds": 67.0,
        "change_24h": 5.2,
        "volume": 1_800_000.0,
        "resolve_date": date(2025, 12, 31),
        "description": "Market resolves YES if Musk officially leaves any government position",
        "trend": {"kind": "cos", "base": 62.0, "amplitude": 10.0, "period": 4.0, "noise": 3.0},
    },
    {
        "id": "3",
        "title": "Fed to cut rates in June 2025?",
        "category": "Economics",
        "odds": 78.0,
        "change_24h": 1.1,
        "volume": 3_200_000.0,
        "resolve_date": date(2025, 6, 18),
        "description": "Market resolves YES if Fed cuts rates by any amount in June FOMC meeting",
        "trend": {"kind": "sin", "base": 76.0, "amplitude": 6.0, "period": 3.0, "noise": 4.0},
    },
    {
        "id": "4",
        "title": "Bitcoin to reach $150k in 2025?",
        "category": "Crypto/Regulation",
        "odds": 23.0,
        "change_24h": -8.7,
        "volume": 5_600_000.0,
        "resolve_date": date(2025, 12, 31),
        "description": "Market resolves YES if BTC hits $150,000 at any point during 2025",
        "trend": {"kind": "linear", "base": 31.0, "amplitude": -0.3, "period": 1.0, "noise": 5.0},
    },
    {
        "id": "5",
        "title": "AI to pass medical licensing exam?",
        "category": "Technology",
        "odds": 89.0,
        "change_24h": 12.4,
        "volume": 1_200_000.0,
        "resolve_date": date(2025, 9, 30),
        "description": "Market resolves YES if AI system passes USMLE Step 1 with >95% score",
        "trend": {"kind": "linear", "base": 77.0, "amplitude": 0.4, "period": 1.0, "noise": 3.0},
    },
    {
        "id": "6",
        "title": "UEFA Champions League winner 2025?",
        "category": "Sports",
        "odds": 19.0,
        "change_24h": -1.5,
        "volume": 4_500_000.0,
        "resolve_date": date(2025, 5, 31),
        "description": "Market for Manchester City to win Champions League 2024-25",
        "trend": {"kind": "sin", "base": 20.5, "amplitude": -3.0, "period": 5.0, "noise": 2.0},
    },
    {
        "id": "7",
        "title": "Netflix subscriber milestone?",
        "category": "Culture",
        "odds": 72.0,
        "change_24h": 2.8,
        "volume": 1_600_000.0,
        "resolve_date": date(2025, 12, 31),
        "description": "Market resolves YES if Netflix reaches 300M subscribers in 2025",
        "trend": {"kind": "sin", "base": 69.0, "amplitude": 5.0, "period": 4.0, "noise": 3.0},
    },
    {
        "id": "8",
        "title": "Apple to acquire major AI company?",
        "category": "Technology",
        "odds": 56.0,
        "change_24h": 3.2,
        "volume": 2_100_000.0,
        "resolve_date": date(2025, 12, 31),
        "description": "Market resolves YES if Apple acquires AI company worth >$10B",
        "trend": {"kind": "cos", "base": 53.0, "amplitude": 8.0, "period": 4.0, "noise": 4.0},
    },
]

# Foreign category -> display category. Anything else maps to DEFAULT_CATEGORY.
CATEGORY_MAP: dict[str, str] = {
    "politics": "Politics",
    "economics": "Economics",
    "technology": "Technology",
    "crypto": "Crypto/Regulation",
    "sports": "Sports",
    "entertainment": "Culture",
}

DEFAULT_CATEGORY = "Other"

# History timeframe -> number of days
TIMEFRAME_DAYS: dict[str, int] = {
    "24h": 1,
    "7d": 7,
    "30d": 30,
    "all": 90,
}

# Simulated news feed; minutes_ago is relative to the time of the request
MOCK_NEWS: list[dict] = [
    {
        "id": "1",
        "headline": "Fed Chair Signals More Aggressive Rate Cuts",
        "summary": "Jerome Powell hints at 50bp cut in upcoming meeting, citing economic concerns",
        "minutes_ago": 15,
        "source": "Reuters",
        "category": "Economics",
    },
    {
        "id": "2",
        "headline": "Bitcoin ETF Sees Record Inflows",
        "summary": "$2.1B flows into Bitcoin ETFs in single day, institutional demand surging",
        "minutes_ago": 45,
        "source": "Bloomberg",
        "category": "Crypto",
    },
]
