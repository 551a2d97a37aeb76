from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from recap.errors import TickerFetchError
from recap.models import MarketSnapshot, NO_NEWS_HEADLINE, to_price


def _positive(value):
    # providers report 0 for fields they do not know
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def weekly_range(series, quote):
    """
    Weekly high/low: max/min of the daily series when it has values,
    otherwise the quote's own high/low, otherwise None.
    """
    highs = [h for h in (_positive(v) for v in series.get("highs") or []) if h is not None]
    lows = [l for l in (_positive(v) for v in series.get("lows") or []) if l is not None]
    high = max(highs) if highs else _positive(quote.get("high"))
    low = min(lows) if lows else _positive(quote.get("low"))
    return to_price(high), to_price(low)


def top_headlines(news, limit):
    items = []
    for item in news or []:
        headline = (item.get("headline") or "").strip()
        if headline:
            items.append((item.get("datetime") or 0, headline))
    items.sort(key=lambda item: item[0], reverse=True)
    headlines = tuple(headline for _, headline in items[:limit])
    return headlines or (NO_NEWS_HEADLINE,)


class MarketDataClient:
    """
    Builds one MarketSnapshot per ticker from three independent provider reads.

    The quote, daily series and news reads for a single ticker run in parallel;
    if any of them fails the ticker fails as a whole with TickerFetchError.
    """

    def __init__(self, provider, lookback_days=7, headlines_per_digest=1, now=None):
        self.provider = provider
        self.lookback_days = lookback_days
        self.headlines_per_digest = headlines_per_digest
        self._now = now or (lambda: datetime.now(timezone.utc))

    def window(self):
        end = self._now()
        return end - timedelta(days=self.lookback_days), end

    def fetch_snapshot(self, ticker):
        start, end = self.window()
        reads = {
            "quote": (self.provider.get_quote, (ticker,)),
            "daily_series": (self.provider.get_daily_series, (ticker, start, end)),
            "news": (self.provider.get_news, (ticker, start, end)),
        }
        results = {}
        with ThreadPoolExecutor(max_workers=len(reads)) as pool:
            futures = {name: pool.submit(fn, *args) for name, (fn, args) in reads.items()}
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as e:
                    raise TickerFetchError(ticker, name, e) from e

        quote = results["quote"] or {}
        high, low = weekly_range(results["daily_series"] or {}, quote)
        return MarketSnapshot(
            ticker=ticker,
            close_price=to_price(_positive(quote.get("close"))),
            weekly_high=high,
            weekly_low=low,
            headlines=top_headlines(results["news"], self.headlines_per_digest),
        )
