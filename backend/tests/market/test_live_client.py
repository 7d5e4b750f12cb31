"""Tests for LiveMarketDataProvider (fake transport)."""

from datetime import date

import pytest

from papertrade.errors import NotFoundError, RateLimitExceeded, UpstreamError, ValidationError
from papertrade.market.live_client import LiveMarketDataProvider, normalize_category, parse_history_point, parse_market
from papertrade.market.rate_limiter import RateLimiter


def _record(market_id="0xabc", **overrides):
    record = {
        "id": market_id,
        "question": "Will it rain in London tomorrow?",
        "category": "politics",
        "outcomePrices": ["0.42", "0.58"],
        "change24h": 1.5,
        "volume": 12500,
        "endDate": "2025-12-31T00:00:00Z",
        "description": "Resolves YES if it rains.",
    }
    record.update(overrides)
    return record


class TestNormalization:
    """Unit tests for foreign schema mapping."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("politics", "Politics"),
            ("Crypto", "Crypto/Regulation"),
            ("entertainment", "Culture"),
            ("weather", "Other"),
            (None, "Other"),
            (42, "Other"),
        ],
    )
    def test_category_lookup(self, raw, expected):
        """Unmapped categories fall back to 'Other'."""
        assert normalize_category(raw) == expected

    def test_probability_converted_to_percentage(self):
        """Test that the first outcome price becomes the odds."""
        market = parse_market(_record())
        assert market.odds == pytest.approx(42.0)
        assert market.title == "Will it rain in London tomorrow?"
        assert market.category == "Politics"
        assert market.resolve_date == date(2025, 12, 31)
        assert market.history == ()

    def test_outcome_prices_as_json_string(self):
        """Test that JSON-encoded outcomePrices is accepted."""
        market = parse_market(_record(outcomePrices='["0.7", "0.3"]'))
        assert market.odds == pytest.approx(70.0)

    def test_missing_prices_default_to_even_odds(self):
        """Test that a market without prices gets 50% odds."""
        record = _record()
        del record["outcomePrices"]
        assert parse_market(record).odds == 50.0

    @pytest.mark.parametrize("prices", [["1.7", "0.3"], ["-0.1", "1.1"], ["nan", "0.5"]])
    def test_out_of_range_price_rejected(self, prices):
        """Prices outside [0, 1] never become odds outside [0, 100]."""
        with pytest.raises(ValueError):
            parse_market(_record(outcomePrices=prices))

    def test_history_point_price_out_of_range(self):
        """Test that a negative history price is rejected."""
        with pytest.raises(ValueError):
            parse_history_point({"timestamp": 1700000000, "price": -0.4})

    def test_history_point_iso_timestamp(self):
        """Test that ISO-8601 timestamps are accepted."""
        point = parse_history_point({"timestamp": "2024-02-10T12:00:00Z", "price": 0.25})
        assert point.date == date(2024, 2, 10)
        assert point.odds == pytest.approx(25.0)


@pytest.mark.asyncio
class TestLiveMarketDataProvider:
    """Unit tests for the live provider with a fake transport."""

    async def test_get_markets(self, make_transport, clock):
        """Test that markets are fetched and normalized."""
        transport = make_transport(markets=[_record("1"), _record("2", category="sports")])
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))

        markets = await provider.get_markets()
        assert [m.id for m in markets] == ["1", "2"]
        assert markets[1].category == "Sports"

    async def test_get_markets_unwraps_envelope(self, make_transport, clock):
        """Test that a {"data": [...]} envelope is unwrapped."""
        transport = make_transport(markets={"data": [_record("1")], "next_cursor": "LTE="})
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        assert len(await provider.get_markets()) == 1

    async def test_malformed_market_skipped(self, make_transport, clock):
        """Test that malformed list entries are skipped gracefully."""
        bad = {"question": "no id"}
        transport = make_transport(markets=[_record("1"), bad, "junk"])
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        assert [m.id for m in await provider.get_markets()] == ["1"]

    async def test_out_of_range_market_skipped(self, make_transport, clock):
        """Test that a market priced outside [0, 1] is skipped like any malformed row."""
        transport = make_transport(markets=[_record("1"), _record("2", outcomePrices=["1.7", "0.3"])])
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))

        markets = await provider.get_markets()

        assert [m.id for m in markets] == ["1"]
        assert all(0 <= m.odds <= 100 for m in markets)

    async def test_non_list_payload_is_upstream_error(self, make_transport, clock):
        """Test that an unexpected payload shape is not returned silently."""
        transport = make_transport(markets={"error": "oops"})
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        with pytest.raises(UpstreamError):
            await provider.get_markets()

    async def test_get_market_details(self, make_transport, clock):
        """Test a single-market fetch."""
        transport = make_transport(details={"7": _record("7")})
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        market = await provider.get_market_details("7")
        assert market.id == "7"
        assert transport.calls == [("details", "7")]

    async def test_get_market_details_4xx_is_not_found(self, make_transport, clock):
        """Test that a transport 4xx maps to NotFoundError."""
        provider = LiveMarketDataProvider(make_transport(), RateLimiter(clock=clock))
        with pytest.raises(NotFoundError):
            await provider.get_market_details("missing")

    async def test_get_market_details_5xx_is_upstream_error(self, make_transport, clock):
        """Test that a server error propagates as UpstreamError."""
        transport = make_transport(error=UpstreamError(503, "unavailable"))
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        with pytest.raises(UpstreamError) as exc_info:
            await provider.get_market_details("1")
        assert exc_info.value.status == 503

    async def test_get_market_details_network_error(self, make_transport, clock):
        """Test that a network fault (no status) propagates as UpstreamError."""
        transport = make_transport(error=UpstreamError(None, "connection refused"))
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        with pytest.raises(UpstreamError) as exc_info:
            await provider.get_market_details("1")
        assert exc_info.value.status is None

    async def test_get_market_details_malformed(self, make_transport, clock):
        """Test that a malformed details payload raises instead of returning junk."""
        transport = make_transport(details={"1": {"question": "no id"}})
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        with pytest.raises(UpstreamError):
            await provider.get_market_details("1")

    async def test_get_market_history(self, make_transport, clock):
        """Test that price points are mapped to percentage odds, oldest first."""
        transport = make_transport(
            history=[
                {"timestamp": 1707667200000, "price": 0.55},  # ms
                {"t": 1707580800, "p": 0.5},  # seconds
            ]
        )
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))

        history = await provider.get_market_history("1", "7d")
        assert [p.date for p in history] == [date(2024, 2, 10), date(2024, 2, 11)]
        assert history[0].odds == pytest.approx(50.0)
        assert history[1].odds == pytest.approx(55.0)
        assert transport.calls == [("history", "1", "7d")]

    async def test_get_market_history_out_of_range_is_upstream_error(self, make_transport, clock):
        """Test that a history point priced outside [0, 1] fails the whole call."""
        transport = make_transport(history=[{"t": 1707580800, "p": 0.5}, {"t": 1707667200, "p": 1.4}])
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        with pytest.raises(UpstreamError):
            await provider.get_market_history("1", "7d")

    async def test_get_market_history_invalid_timeframe(self, make_transport, clock):
        """An unknown timeframe is rejected before any call is spent."""
        limiter = RateLimiter(clock=clock)
        transport = make_transport()
        provider = LiveMarketDataProvider(transport, limiter)
        with pytest.raises(ValidationError):
            await provider.get_market_history("1", "decade")
        assert transport.calls == []
        assert limiter.recorded_calls("polymarket") == 0

    async def test_get_news(self, make_transport, clock):
        """Test news mapping without severity classification."""
        news = {
            "articles": [
                {
                    "url": "https://example.com/a",
                    "title": "Fed holds rates",
                    "description": "No change this month",
                    "publishedAt": "2025-06-18T18:00:00Z",
                    "source": {"name": "Reuters"},
                },
                {"title": "missing url"},
            ]
        }
        transport = make_transport(news=news)
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))

        items = await provider.get_news("economics")
        assert len(items) == 1
        assert items[0].id == "https://example.com/a"
        assert items[0].source == "Reuters"
        assert items[0].category == "economics"
        assert transport.calls == [("news", "economics")]

    async def test_rate_limit_blocks_before_transport(self, make_transport, clock):
        """RateLimitExceeded is raised before any transport call is made."""
        transport = make_transport(markets=[_record("1")])
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock), max_calls=2, window_ms=60_000)

        await provider.get_markets()
        await provider.get_markets()
        with pytest.raises(RateLimitExceeded):
            await provider.get_markets()
        assert len(transport.calls) == 2

        clock.advance(61)
        await provider.get_markets()  # Window has slid past the earlier calls
        assert len(transport.calls) == 3

    async def test_news_limited_separately(self, make_transport, clock):
        """Market and news calls are counted against different resources."""
        transport = make_transport(markets=[_record("1")])
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock), max_calls=1, window_ms=60_000)

        await provider.get_markets()
        await provider.get_news()  # Should not raise

    async def test_no_fallback_to_simulated_data(self, make_transport, clock):
        """Live failures surface; no simulated data is substituted."""
        transport = make_transport(error=UpstreamError(500, "boom"))
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        with pytest.raises(UpstreamError):
            await provider.get_markets()

    async def test_close_closes_transport(self, make_transport, clock):
        """Test that close() releases the transport."""
        transport = make_transport()
        provider = LiveMarketDataProvider(transport, RateLimiter(clock=clock))
        await provider.close()
        assert transport.closed
